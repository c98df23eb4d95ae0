"""
MySQL family dialects: MySQL, MariaDB and Infobright.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from .base import QuoteStyle
from .composition import DialectChain, DialectOverlay
from .generic import (
    GENERIC_CHAIN,
    isnull_order_by_nulls,
    parse_boolean,
    split_embedded_flags,
)
from .refinement import SecondaryEngine
from .types import Datatype

if TYPE_CHECKING:
    from .descriptor import DialectDescriptor


def quote_string_literal(dialect: "DialectDescriptor", value: str) -> str:
    # backslash is an escape character inside MySQL string literals
    return "'" + value.replace("'", "''").replace("\\", "\\\\") + "'"


def quote_boolean_literal(dialect: "DialectDescriptor", text: str) -> str:
    stripped = text.strip()
    if stripped in ("1", "0"):
        return stripped
    return "TRUE" if parse_boolean(stripped) else "FALSE"


def regular_expression(dialect: "DialectDescriptor", source: str, pattern: str) -> str | None:
    split = split_embedded_flags(pattern)
    if split is None:
        return None
    flags, body = split
    if "i" in flags:
        return f"{source} IS NOT NULL AND UPPER({source}) REGEXP {dialect.quote_string_literal(body.upper())}"
    return f"{source} IS NOT NULL AND {source} REGEXP {dialect.quote_string_literal(body)}"


def hints_after_from(dialect: "DialectDescriptor", hints: Mapping[str, str]) -> str:
    forced_index = hints.get("force_index")
    if not forced_index:
        return ""
    return f" FORCE INDEX ({dialect.quote_identifier(forced_index)})"


def plain_order_by(
    dialect: "DialectDescriptor", expression: str, ascending: bool, collate_nulls_last: bool
) -> str:
    return f"{expression} {'ASC' if ascending else 'DESC'}"


_COLUMN_TYPES = {
    Datatype.STRING: "VARCHAR({length})",
    Datatype.INTEGER: "INT",
    Datatype.SMALLINT: "SMALLINT",
    Datatype.BIGINT: "BIGINT",
    Datatype.BOOLEAN: "BOOLEAN",
    Datatype.FLOAT: "DOUBLE",
    Datatype.REAL: "DOUBLE",
    Datatype.DOUBLE: "DOUBLE",
    Datatype.TIMESTAMP: "DATETIME",
}


def column_type(dialect: "DialectDescriptor", datatype: Datatype) -> str:
    # SIGNED and CHAR are CAST targets only; tables need real column types
    return _COLUMN_TYPES.get(datatype) or GENERIC_CHAIN.cast_type(datatype)


def _mysql_version_flags(version: tuple[int, ...]) -> dict[str, Any]:
    # unknown versions are treated as current servers
    modern = not version
    from_query = modern or version >= (4,)
    return {
        "allows_from_query": from_query,
        "requires_alias_for_from_query": from_query,
        "requires_order_by_alias": modern or version >= (5, 7),
        "supports_percentile_disc": modern or version >= (8, 0),
        "supports_percentile_cont": modern or version >= (8, 0),
    }


MYSQL_OVERLAY = DialectOverlay(
    name="mysql",
    flags={
        "quote_style": QuoteStyle.BACKTICK,
        "allows_compound_count_distinct": True,
        "requires_having_alias": True,
        "supports_multi_value_in_expr": True,
        "allows_regex_in_where": True,
        "supports_list_agg": True,
        "inline_empty_from_clause": " FROM DUAL",
    },
    version_flags=_mysql_version_flags,
    hooks={
        "quote_string_literal": quote_string_literal,
        "quote_boolean_literal": quote_boolean_literal,
        "order_by_nulls": isnull_order_by_nulls,
        "regular_expression": regular_expression,
        "hints_after_from": hints_after_from,
        "column_type": column_type,
    },
    cast_types={
        Datatype.STRING: "CHAR({length})",
        Datatype.INTEGER: "SIGNED",
        Datatype.SMALLINT: "SIGNED",
        Datatype.BIGINT: "SIGNED",
        Datatype.BOOLEAN: "SIGNED",
        Datatype.FLOAT: "DECIMAL(65, 30)",
        Datatype.REAL: "DECIMAL(65, 30)",
        Datatype.DOUBLE: "DECIMAL(65, 30)",
        Datatype.TIMESTAMP: "DATETIME",
    },
    secondary_engines=(
        SecondaryEngine(
            marker="brighthouse",
            product_name="MySQL (Infobright)",
            tag="infobright",
            query="SHOW ENGINES",
            metadata_key="engines",
        ),
    ),
    description="MySQL 4.0+",
)

MARIADB_OVERLAY = DialectOverlay(name="mariadb", description="MariaDB")

INFOBRIGHT_OVERLAY = DialectOverlay(
    name="infobright",
    flags={
        "allows_compound_count_distinct": False,
        "supports_group_by_expressions": False,
        "requires_group_by_alias": True,
        "allows_order_by_alias": False,
        # Infobright cannot order by expressions, so forcing aliases gives the right effect
        "requires_order_by_alias": True,
        "supports_multi_value_in_expr": False,
    },
    hooks={"order_by_nulls": plain_order_by},
    description="Infobright analytic engine on MySQL",
)

MYSQL_CHAIN: DialectChain = GENERIC_CHAIN.extend(MYSQL_OVERLAY)
MARIADB_CHAIN: DialectChain = MYSQL_CHAIN.extend(MARIADB_OVERLAY)
INFOBRIGHT_CHAIN: DialectChain = MYSQL_CHAIN.extend(INFOBRIGHT_OVERLAY)
