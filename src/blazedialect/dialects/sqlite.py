"""
Embedded and in-process engines: SQLite, H2, HSQLDB and Apache Derby.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .composition import DialectChain, DialectOverlay
from .generic import GENERIC_CHAIN, plain_date_literal, plain_time_literal, plain_timestamp_literal
from .types import Datatype

if TYPE_CHECKING:
    from .descriptor import DialectDescriptor


def delete_all_rows(dialect: "DialectDescriptor", qualified_name: str) -> str:
    return f"DELETE FROM {qualified_name}"


def _sqlite_version_flags(version: tuple[int, ...]) -> dict[str, Any]:
    return {"supports_nulls_last": not version or version >= (3, 30)}


SQLITE_OVERLAY = DialectOverlay(
    name="sqlite",
    flags={
        # VALUES works in FROM but cannot be given column names
        "supports_values_list": False,
        "supports_multi_value_in_expr": True,
        "supports_parallel_loading": False,
    },
    version_flags=_sqlite_version_flags,
    hooks={
        "quote_date_literal": plain_date_literal,
        "quote_time_literal": plain_time_literal,
        "quote_timestamp_literal": plain_timestamp_literal,
        "truncate_statement": delete_all_rows,
    },
    cast_types={
        Datatype.BOOLEAN: "INTEGER",
        Datatype.DATE: "TEXT",
        Datatype.TIME: "TEXT",
        Datatype.TIMESTAMP: "TEXT",
    },
    description="SQLite 3",
)

H2_OVERLAY = DialectOverlay(
    name="h2",
    flags={
        "supports_values_list": True,
        "supports_nulls_last": True,
        "supports_percentile_disc": True,
        "supports_percentile_cont": True,
        "supports_list_agg": True,
    },
    description="H2",
)

HSQLDB_OVERLAY = DialectOverlay(
    name="hsqldb",
    flags={"supports_values_list": True},
    hooks={"quote_date_literal": plain_date_literal},
    description="HyperSQL",
)

DERBY_OVERLAY = DialectOverlay(
    name="derby",
    flags={
        "supports_values_list": True,
        "allows_multiple_count_distinct": False,
        "supports_batch_operations": False,
    },
    description="Apache Derby",
)

SQLITE_CHAIN: DialectChain = GENERIC_CHAIN.extend(SQLITE_OVERLAY)
H2_CHAIN: DialectChain = GENERIC_CHAIN.extend(H2_OVERLAY)
HSQLDB_CHAIN: DialectChain = GENERIC_CHAIN.extend(HSQLDB_OVERLAY)
DERBY_CHAIN: DialectChain = GENERIC_CHAIN.extend(DERBY_OVERLAY)
