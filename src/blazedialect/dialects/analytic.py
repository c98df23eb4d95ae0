"""
Analytic and warehouse engines: LucidDB, SQLstream, MonetDB, Vertica, Teradata,
Snowflake, Google BigQuery, ClickHouse and Pentaho data services.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from . import mysql
from .base import QuoteStyle
from .composition import DialectChain, DialectOverlay
from .generic import GENERIC_CHAIN, backslash_string_literal, quote_identifier, split_embedded_flags
from .types import ColumnDescription, Datatype, LogicalType, SqlType

if TYPE_CHECKING:
    from .descriptor import DialectDescriptor

_BIGQUERY_IDENTIFIER_RE = re.compile(r"[^A-Za-z0-9_.`]")


def double_needs_exponent(dialect: "DialectDescriptor", value: Any, text: str) -> bool:
    # an approximate literal without exponent is read as DECIMAL
    return isinstance(value, float) and "e" not in text.lower()


def monetdb_numeric(column: ColumnDescription) -> LogicalType | None:
    # aggregated decimals come back without precision and scale
    if column.scale == 0 and column.precision == 0:
        return LogicalType.DOUBLE
    return None


def vertica_numeric(column: ColumnDescription) -> LogicalType:
    if column.scale == 0 and column.precision <= 9:
        return LogicalType.INTEGER
    if column.scale == 0 and column.precision <= 19:
        return LogicalType.LONG
    return LogicalType.DOUBLE


def snowflake_numeric(column: ColumnDescription) -> LogicalType | None:
    if column.scale != 0:
        return LogicalType.NUMERIC
    return None


def bigquery_identifier(dialect: "DialectDescriptor", name: str) -> str:
    # BigQuery rejects spaces and punctuation in column names and aliases
    cleaned = _BIGQUERY_IDENTIFIER_RE.sub("", name.replace(" ", "_"))
    return quote_identifier(dialect, cleaned)


def _flagged_match(
    dialect: "DialectDescriptor",
    function: str,
    subject: str,
    pattern: str,
    flag_map: dict[str, str],
) -> str | None:
    """
    ``FUNCTION(subject, 'body'[, 'flags'])`` with embedded flags translated by ``flag_map``.
    """
    split = split_embedded_flags(pattern)
    if split is None:
        return None
    flags, body = split
    mapped = "".join(flag_map[flag] for flag in flags if flag in flag_map)
    arguments = [subject, dialect.quote_string_literal(body)]
    if mapped:
        arguments.append(dialect.quote_string_literal(mapped))
    return f"{function}({', '.join(arguments)})"


def vertica_regular_expression(
    dialect: "DialectDescriptor", source: str, pattern: str
) -> str | None:
    flag_map = {"c": "c", "i": "i", "m": "m", "x": "x", "s": "n"}
    return _flagged_match(dialect, "REGEXP_LIKE", f"CAST({source} AS VARCHAR)", pattern, flag_map)


def snowflake_regular_expression(
    dialect: "DialectDescriptor", source: str, pattern: str
) -> str | None:
    flag_map = {"c": "c", "i": "i", "m": "m", "s": "s"}
    return _flagged_match(dialect, "RLIKE", source, pattern, flag_map)


def bigquery_regular_expression(
    dialect: "DialectDescriptor", source: str, pattern: str
) -> str | None:
    split = split_embedded_flags(pattern)
    if split is None:
        return None
    flags, body = split
    if flags:
        body = f"(?{flags}){body}"
    text = f"cast({source} as string)"
    return f"{text} is not null and REGEXP_CONTAINS({text}, r{dialect.quote_string_literal(body)})"


def _monetdb_version_flags(version: tuple[int, ...]) -> dict[str, Any]:
    # COUNT(DISTINCT) is unreliable before 11.5.7
    return {"allows_count_distinct": not version or version >= (11, 5, 7)}


LUCIDDB_OVERLAY = DialectOverlay(
    name="luciddb",
    flags={
        "allows_multiple_distinct_sql_measures": False,
        "supports_unlimited_value_list": True,
        "supports_multi_value_in_expr": True,
        "supports_values_list": True,
    },
    hooks={"needs_exponent": double_needs_exponent},
    description="LucidDB",
)

SQLSTREAM_OVERLAY = DialectOverlay(name="sqlstream", description="SQLstream")

MONETDB_OVERLAY = DialectOverlay(
    name="monetdb",
    flags={
        "allows_multiple_distinct_sql_measures": False,
        "allows_count_distinct_with_other_aggs": False,
        "allows_multiple_count_distinct": False,
        "requires_alias_for_from_query": True,
        "allows_compound_count_distinct": False,
        "supports_group_by_expressions": False,
    },
    version_flags=_monetdb_version_flags,
    hooks={"quote_string_literal": mysql.quote_string_literal},
    type_overrides={
        SqlType.NUMERIC: monetdb_numeric,
        SqlType.DECIMAL: monetdb_numeric,
        SqlType.BOOLEAN: LogicalType.OBJECT,
    },
    description="MonetDB",
)

VERTICA_OVERLAY = DialectOverlay(
    name="vertica",
    flags={
        "requires_alias_for_from_query": True,
        "allows_from_query": True,
        "allows_multiple_count_distinct": False,
        "allows_count_distinct_with_other_aggs": False,
        "supports_multi_value_in_expr": True,
        "allows_regex_in_where": True,
    },
    hooks={"regular_expression": vertica_regular_expression},
    type_overrides={
        SqlType.SMALLINT: LogicalType.LONG,
        SqlType.TINYINT: LogicalType.LONG,
        SqlType.INTEGER: LogicalType.LONG,
        SqlType.BIGINT: LogicalType.LONG,
        SqlType.BOOLEAN: LogicalType.INTEGER,
        SqlType.DOUBLE: LogicalType.DOUBLE,
        SqlType.FLOAT: LogicalType.DOUBLE,
        SqlType.NUMERIC: vertica_numeric,
        SqlType.DECIMAL: vertica_numeric,
    },
    description="Vertica",
)

TERADATA_OVERLAY = DialectOverlay(
    name="teradata",
    flags={
        "requires_alias_for_from_query": True,
        "supports_grouping_sets": True,
        "requires_union_order_by_ordinal": True,
        # a SELECT inside UNION must reference a table
        "inline_from_clause": " FROM (SELECT 1 a) z",
        "inline_cast_strings": True,
        "max_column_name_length": 30,
    },
    cast_types={Datatype.FLOAT: "FLOAT", Datatype.REAL: "FLOAT", Datatype.DOUBLE: "FLOAT"},
    description="Teradata",
)

SNOWFLAKE_OVERLAY = DialectOverlay(
    name="snowflake",
    flags={
        "allows_order_by_alias": True,
        "allows_select_not_in_group_by": False,
        "allows_regex_in_where": True,
    },
    hooks={
        "quote_string_literal": mysql.quote_string_literal,
        "regular_expression": snowflake_regular_expression,
    },
    type_overrides={SqlType.NUMERIC: snowflake_numeric, SqlType.DECIMAL: snowflake_numeric},
    description="Snowflake",
)

BIGQUERY_OVERLAY = DialectOverlay(
    name="googlebigquery",
    flags={
        "quote_style": QuoteStyle.BACKTICK,
        "allows_order_by_alias": True,
        "allows_as": True,
        "allows_ddl": False,
        "allows_regex_in_where": True,
        "max_column_name_length": 300,
    },
    hooks={
        "quote_identifier": bigquery_identifier,
        "quote_string_literal": backslash_string_literal,
        "regular_expression": bigquery_regular_expression,
    },
    cast_types={
        Datatype.STRING: "STRING",
        Datatype.INTEGER: "INT64",
        Datatype.SMALLINT: "INT64",
        Datatype.BIGINT: "INT64",
        Datatype.NUMERIC: "NUMERIC",
        Datatype.DECIMAL: "NUMERIC",
        Datatype.FLOAT: "FLOAT64",
        Datatype.REAL: "FLOAT64",
        Datatype.DOUBLE: "FLOAT64",
        Datatype.BOOLEAN: "BOOL",
    },
    description="Google BigQuery",
)

CLICKHOUSE_OVERLAY = DialectOverlay(
    name="clickhouse",
    flags={
        "requires_drillthrough_max_rows_in_limit": True,
        "supports_list_agg": True,
    },
    hooks={"quote_string_literal": backslash_string_literal},
    cast_types={
        Datatype.STRING: "String",
        Datatype.INTEGER: "Int32",
        Datatype.SMALLINT: "Int16",
        Datatype.BIGINT: "Int64",
        Datatype.FLOAT: "Float64",
        Datatype.REAL: "Float64",
        Datatype.DOUBLE: "Float64",
        Datatype.BOOLEAN: "Bool",
        Datatype.DATE: "Date",
        Datatype.TIMESTAMP: "DateTime",
    },
    description="ClickHouse",
)

PDI_OVERLAY = DialectOverlay(
    name="pdi",
    type_overrides={SqlType.DECIMAL: LogicalType.OBJECT},
    description="Pentaho Data Integration data service",
)

LUCIDDB_CHAIN: DialectChain = GENERIC_CHAIN.extend(LUCIDDB_OVERLAY)
SQLSTREAM_CHAIN: DialectChain = LUCIDDB_CHAIN.extend(SQLSTREAM_OVERLAY)
MONETDB_CHAIN: DialectChain = GENERIC_CHAIN.extend(MONETDB_OVERLAY)
VERTICA_CHAIN: DialectChain = GENERIC_CHAIN.extend(VERTICA_OVERLAY)
TERADATA_CHAIN: DialectChain = GENERIC_CHAIN.extend(TERADATA_OVERLAY)
SNOWFLAKE_CHAIN: DialectChain = GENERIC_CHAIN.extend(SNOWFLAKE_OVERLAY)
BIGQUERY_CHAIN: DialectChain = GENERIC_CHAIN.extend(BIGQUERY_OVERLAY)
CLICKHOUSE_CHAIN: DialectChain = GENERIC_CHAIN.extend(CLICKHOUSE_OVERLAY)
PDI_CHAIN: DialectChain = GENERIC_CHAIN.extend(PDI_OVERLAY)
