"""
PostgreSQL family dialects: PostgreSQL, Greenplum, Netezza and Redshift.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .composition import DialectChain, DialectOverlay
from .generic import GENERIC_CHAIN, split_embedded_flags
from .refinement import SecondaryEngine
from .types import ColumnDescription, LogicalType, SqlType

if TYPE_CHECKING:
    from .descriptor import DialectDescriptor


def regular_expression(dialect: "DialectDescriptor", source: str, pattern: str) -> str | None:
    split = split_embedded_flags(pattern)
    if split is None:
        return None
    flags, body = split
    if flags:
        body = f"(?{flags}){body}"
    text = f"cast({source} as text)"
    return f"{text} is not null and {text} ~ {dialect.quote_string_literal(body)}"


def measure_numeric(column: ColumnDescription) -> LogicalType | None:
    # unconstrained NUMERIC measure columns may hold values wider than a double
    if column.scale == 0 and column.precision == 0 and column.name.startswith("m"):
        return LogicalType.OBJECT
    return None


def netezza_numeric(column: ColumnDescription) -> LogicalType | None:
    if column.type_code == SqlType.NUMERIC:
        return LogicalType.DOUBLE
    if column.scale == 0 and column.precision == 38:
        return LogicalType.DOUBLE
    return None


def _postgres_version_flags(version: tuple[int, ...]) -> dict[str, Any]:
    return {"supports_nulls_last": not version or version >= (8, 3)}


def _greenplum_version_flags(version: tuple[int, ...]) -> dict[str, Any]:
    return {"allows_regex_in_where": not version or version >= (3, 2)}


POSTGRES_OVERLAY = DialectOverlay(
    name="postgres",
    flags={
        "requires_alias_for_from_query": True,
        "allows_regex_in_where": True,
        "supports_values_list": True,
        "supports_percentile_disc": True,
        "supports_percentile_cont": True,
        "supports_list_agg": True,
        "max_column_name_length": 63,
    },
    version_flags=_postgres_version_flags,
    hooks={"regular_expression": regular_expression},
    type_overrides={SqlType.NUMERIC: measure_numeric},
    secondary_engines=(
        SecondaryEngine(
            marker="greenplum",
            product_name="Greenplum",
            tag="greenplum",
            query="SELECT version()",
            metadata_key="version_banner",
        ),
        SecondaryEngine(
            marker="redshift",
            product_name="Redshift",
            tag="redshift",
            query="SELECT version()",
            metadata_key="version_banner",
        ),
    ),
    description="PostgreSQL",
)

GREENPLUM_OVERLAY = DialectOverlay(
    name="greenplum",
    flags={
        "supports_grouping_sets": True,
        "requires_group_by_alias": True,
        "allows_inner_distinct": False,
    },
    version_flags=_greenplum_version_flags,
    description="Greenplum",
)

NETEZZA_OVERLAY = DialectOverlay(
    name="netezza",
    flags={
        "allows_regex_in_where": False,
        "supports_values_list": False,
        "supports_percentile_disc": False,
        "supports_percentile_cont": False,
        "supports_list_agg": False,
        "max_column_name_length": 128,
    },
    type_overrides={SqlType.NUMERIC: netezza_numeric, SqlType.DECIMAL: netezza_numeric},
    description="IBM Netezza",
)

REDSHIFT_OVERLAY = DialectOverlay(
    name="redshift",
    flags={
        "supports_values_list": False,
        "supports_percentile_disc": False,
        "max_column_name_length": 127,
    },
    description="Amazon Redshift",
)

POSTGRES_CHAIN: DialectChain = GENERIC_CHAIN.extend(POSTGRES_OVERLAY)
GREENPLUM_CHAIN: DialectChain = POSTGRES_CHAIN.extend(GREENPLUM_OVERLAY)
NETEZZA_CHAIN: DialectChain = POSTGRES_CHAIN.extend(NETEZZA_OVERLAY)
REDSHIFT_CHAIN: DialectChain = POSTGRES_CHAIN.extend(REDSHIFT_OVERLAY)
