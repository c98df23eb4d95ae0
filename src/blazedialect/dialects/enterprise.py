"""
Commercial and legacy servers: Oracle, SQL Server, DB2, Informix, Sybase, Ingres,
Vectorwise, Access, InterBase, Neoview, NuoDB and OpenSearch SQL.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .base import QuoteStyle
from .composition import DialectChain, DialectOverlay
from .generic import (
    GENERIC_CHAIN,
    ansi_order_by_nulls,
    parse_boolean,
    parse_date,
    parse_time,
    parse_timestamp,
    single_quote,
    split_embedded_flags,
)
from .types import ColumnDescription, Datatype, LogicalType, SqlType

if TYPE_CHECKING:
    from .descriptor import DialectDescriptor

# Oracle reports FLOAT columns with this scale
_ORACLE_FLOAT_SCALE = -127
_ORACLE_EPOCH_DATE = "1970-01-01"


# ---------------------------------------------------------------------- #
# Oracle
# ---------------------------------------------------------------------- #
def oracle_regular_expression(
    dialect: "DialectDescriptor", source: str, pattern: str
) -> str | None:
    split = split_embedded_flags(pattern)
    if split is None:
        return None
    flags, body = split
    # REGEXP_LIKE understands c, i and m only
    mapped = "".join(flag for flag in flags if flag in "cim")
    return (
        f"{source} IS NOT NULL AND REGEXP_LIKE({source}, "
        f"{dialect.quote_string_literal(body)}, {dialect.quote_string_literal(mapped)})"
    )


def oracle_order_by_nulls(
    dialect: "DialectDescriptor", expression: str, ascending: bool, collate_nulls_last: bool
) -> str:
    return ansi_order_by_nulls(expression, ascending, collate_nulls_last)


def oracle_time_literal(dialect: "DialectDescriptor", text: str) -> str:
    # no TIME type; a time of day is a timestamp on the epoch date
    return f"TIMESTAMP '{_ORACLE_EPOCH_DATE} {parse_time(text).isoformat()}'"


def oracle_numeric(column: ColumnDescription) -> LogicalType:
    precision, scale = column.precision, column.scale
    if scale == _ORACLE_FLOAT_SCALE and precision != 0:
        return LogicalType.DOUBLE
    if (
        column.type_code == SqlType.NUMERIC
        and scale in (0, _ORACLE_FLOAT_SCALE)
        and precision == 0
        and column.name.startswith("m")
    ):
        # grouping-set queries loosen measure columns; keep them exact
        return LogicalType.OBJECT
    if scale == _ORACLE_FLOAT_SCALE and precision == 0:
        return LogicalType.INTEGER
    if scale == 0 and precision in (0, 38):
        # NUMBER(38, 0) is the conventional integer of unspecified width
        return LogicalType.INTEGER
    if scale == 0 and precision <= 9:
        return LogicalType.INTEGER
    return LogicalType.DOUBLE


# ---------------------------------------------------------------------- #
# SQL Server
# ---------------------------------------------------------------------- #
def mssql_boolean_literal(dialect: "DialectDescriptor", text: str) -> str:
    stripped = text.strip()
    parse_boolean(stripped, allow_digits=True)
    return single_quote(stripped)


def mssql_date_literal(dialect: "DialectDescriptor", text: str) -> str:
    return f"CONVERT(DATE, '{parse_date(text).strftime('%Y%m%d')}', 112)"


def mssql_timestamp_literal(dialect: "DialectDescriptor", text: str) -> str:
    value = parse_timestamp(text).isoformat(sep=" ")
    return f"CONVERT(datetime, '{value}', 120)"


# ---------------------------------------------------------------------- #
# Access
# ---------------------------------------------------------------------- #
def access_upper(dialect: "DialectDescriptor", expression: str) -> str:
    return f"UCASE({expression})"


def access_if_then_else(
    dialect: "DialectDescriptor", condition: str, then_expression: str, else_expression: str
) -> str:
    return f"IIF({condition},{then_expression},{else_expression})"


def access_order_by_nulls(
    dialect: "DialectDescriptor", expression: str, ascending: bool, collate_nulls_last: bool
) -> str:
    first, second = (1, 0) if collate_nulls_last else (0, 1)
    direction = "ASC" if ascending else "DESC"
    return f"Iif({expression} IS NULL, {first}, {second}), {expression} {direction}"


def access_date_literal(dialect: "DialectDescriptor", text: str) -> str:
    value = parse_date(text)
    return f"#{value.month}/{value.day}/{value.year}#"


# ---------------------------------------------------------------------- #
# Sybase and NuoDB
# ---------------------------------------------------------------------- #
def sybase_date_literal(dialect: "DialectDescriptor", text: str) -> str:
    """
    Date literal from either a date or a full timestamp string.
    """
    date_part = text.strip().replace("T", " ").split(" ")[0]
    return single_quote(parse_date(date_part).isoformat())


def nuodb_date_literal(dialect: "DialectDescriptor", text: str) -> str:
    return f"DATE({single_quote(parse_date(text).isoformat())})"


ORACLE_OVERLAY = DialectOverlay(
    name="oracle",
    flags={
        "allows_as": False,
        "supports_grouping_sets": True,
        "allows_join_on": False,
        "allows_regex_in_where": True,
        "supports_nulls_last": True,
        "inline_from_clause": " FROM dual",
        "max_column_name_length": 30,
    },
    hooks={
        "regular_expression": oracle_regular_expression,
        "order_by_nulls": oracle_order_by_nulls,
        "quote_time_literal": oracle_time_literal,
    },
    type_overrides={SqlType.NUMERIC: oracle_numeric, SqlType.DECIMAL: oracle_numeric},
    cast_types={
        Datatype.STRING: "VARCHAR2({length})",
        Datatype.NUMERIC: "NUMBER({precision}, {scale})",
        Datatype.DECIMAL: "NUMBER({precision}, {scale})",
        Datatype.INTEGER: "NUMBER(10)",
        Datatype.SMALLINT: "NUMBER(5)",
        Datatype.BIGINT: "NUMBER(19)",
        Datatype.BOOLEAN: "NUMBER(1)",
        Datatype.TIME: "TIMESTAMP",
    },
    description="Oracle Database",
)

MSSQL_OVERLAY = DialectOverlay(
    name="mssql",
    flags={
        "quote_style": QuoteStyle.BRACKET,
        "requires_alias_for_from_query": True,
        "requires_union_order_by_ordinal": False,
        "supports_percentile_disc": True,
        "supports_percentile_cont": True,
        "supports_list_agg": True,
    },
    hooks={
        "quote_boolean_literal": mssql_boolean_literal,
        "quote_date_literal": mssql_date_literal,
        "quote_timestamp_literal": mssql_timestamp_literal,
    },
    cast_types={
        Datatype.BOOLEAN: "BIT",
        Datatype.FLOAT: "FLOAT",
        Datatype.REAL: "FLOAT",
        Datatype.DOUBLE: "FLOAT",
        Datatype.TIMESTAMP: "DATETIME2",
    },
    description="Microsoft SQL Server",
)

DB2_OVERLAY = DialectOverlay(
    name="db2",
    flags={"supports_values_list": True},
    cast_types={Datatype.FLOAT: "DOUBLE", Datatype.REAL: "DOUBLE", Datatype.DOUBLE: "DOUBLE"},
    description="IBM DB2",
)

DB2_OLD_AS400_OVERLAY = DialectOverlay(
    name="db2_old_as400",
    flags={
        "allows_from_query": False,
        "allows_field_as": False,
    },
    description="IBM DB2 on older AS/400 systems",
)

INFORMIX_OVERLAY = DialectOverlay(
    name="informix",
    flags={"inline_from_clause": " FROM systables WHERE tabid = 1"},
    description="IBM Informix",
)

SYBASE_OVERLAY = DialectOverlay(
    name="sybase",
    hooks={"quote_date_literal": sybase_date_literal},
    description="Sybase",
)

INGRES_OVERLAY = DialectOverlay(
    name="ingres",
    flags={"requires_order_by_alias": True},
    description="Ingres",
)

VECTORWISE_OVERLAY = DialectOverlay(
    name="vectorwise",
    flags={
        "requires_having_alias": True,
        "requires_alias_for_from_query": True,
        "requires_union_order_by_ordinal": False,
    },
    description="Actian Vectorwise",
)

ACCESS_OVERLAY = DialectOverlay(
    name="access",
    flags={
        "allows_count_distinct": False,
        "allows_multiple_count_distinct": False,
        "allows_count_distinct_with_other_aggs": False,
        "requires_union_order_by_expr_in_select": True,
    },
    hooks={
        "wrap_upper": access_upper,
        "if_then_else": access_if_then_else,
        "order_by_nulls": access_order_by_nulls,
        "quote_date_literal": access_date_literal,
    },
    cast_types={
        Datatype.STRING: "TEXT({length})",
        Datatype.BOOLEAN: "YESNO",
        Datatype.DOUBLE: "DOUBLE",
        Datatype.FLOAT: "DOUBLE",
        Datatype.REAL: "DOUBLE",
        Datatype.TIMESTAMP: "DATETIME",
    },
    description="Microsoft Access",
)

INTERBASE_OVERLAY = DialectOverlay(
    name="interbase",
    flags={"inline_from_clause": " FROM RDB$DATABASE"},
    description="InterBase",
)

NEOVIEW_OVERLAY = DialectOverlay(
    name="neoview",
    flags={
        "supports_nulls_last": True,
        "requires_order_by_alias": True,
        "requires_alias_for_from_query": True,
        "allows_ddl": False,
        "supports_group_by_expressions": False,
        "supports_values_list": True,
        "inline_cast_strings": True,
    },
    description="HP Neoview",
)

NUODB_OVERLAY = DialectOverlay(
    name="nuodb",
    flags={"inline_from_clause": " FROM DUAL"},
    hooks={"quote_date_literal": nuodb_date_literal},
    description="NuoDB",
)

OPENSEARCH_OVERLAY = DialectOverlay(
    name="opensearch",
    flags={"supports_nulls_last": True},
    description="OpenSearch SQL",
)

ORACLE_CHAIN: DialectChain = GENERIC_CHAIN.extend(ORACLE_OVERLAY)
MSSQL_CHAIN: DialectChain = GENERIC_CHAIN.extend(MSSQL_OVERLAY)
DB2_CHAIN: DialectChain = GENERIC_CHAIN.extend(DB2_OVERLAY)
DB2_OLD_AS400_CHAIN: DialectChain = DB2_CHAIN.extend(DB2_OLD_AS400_OVERLAY)
INFORMIX_CHAIN: DialectChain = GENERIC_CHAIN.extend(INFORMIX_OVERLAY)
SYBASE_CHAIN: DialectChain = GENERIC_CHAIN.extend(SYBASE_OVERLAY)
INGRES_CHAIN: DialectChain = GENERIC_CHAIN.extend(INGRES_OVERLAY)
VECTORWISE_CHAIN: DialectChain = INGRES_CHAIN.extend(VECTORWISE_OVERLAY)
ACCESS_CHAIN: DialectChain = GENERIC_CHAIN.extend(ACCESS_OVERLAY)
INTERBASE_CHAIN: DialectChain = GENERIC_CHAIN.extend(INTERBASE_OVERLAY)
NEOVIEW_CHAIN: DialectChain = GENERIC_CHAIN.extend(NEOVIEW_OVERLAY)
NUODB_CHAIN: DialectChain = GENERIC_CHAIN.extend(NUODB_OVERLAY)
OPENSEARCH_CHAIN: DialectChain = GENERIC_CHAIN.extend(OPENSEARCH_OVERLAY)
