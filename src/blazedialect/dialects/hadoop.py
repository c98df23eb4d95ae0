"""
Hadoop SQL engines: Apache Hive and Apache Impala.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import mysql
from .base import QuoteStyle
from .composition import DialectChain, DialectOverlay
from .generic import (
    GENERIC_CHAIN,
    backslash_string_literal,
    isnull_order_by_nulls,
    order_by_nulls,
    parse_timestamp,
    plain_date_literal,
)
from .types import Datatype

if TYPE_CHECKING:
    from .descriptor import DialectDescriptor


def quote_timestamp_literal(dialect: "DialectDescriptor", text: str) -> str:
    value = parse_timestamp(text).isoformat(sep=" ")
    return f"cast({dialect.quote_string_literal(value)} as timestamp)"


HIVE_OVERLAY = DialectOverlay(
    name="hive",
    flags={
        "quote_style": QuoteStyle.BACKTICK,
        "allows_compound_count_distinct": True,
        "requires_alias_for_from_query": True,
        "requires_order_by_alias": True,
        "allows_order_by_alias": True,
        "requires_group_by_alias": False,
        "requires_union_order_by_expr_in_select": False,
        "requires_union_order_by_ordinal": False,
        "allows_as": False,
        "allows_join_on": False,
        "supports_parallel_loading": False,
        "supports_batch_operations": False,
    },
    hooks={
        "quote_string_literal": backslash_string_literal,
        "quote_date_literal": plain_date_literal,
        "quote_timestamp_literal": quote_timestamp_literal,
        "order_by_nulls": isnull_order_by_nulls,
    },
    cast_types={
        Datatype.STRING: "STRING",
        Datatype.INTEGER: "INT",
        Datatype.FLOAT: "DOUBLE",
        Datatype.REAL: "DOUBLE",
        Datatype.DOUBLE: "DOUBLE",
    },
    description="Apache Hive",
)

IMPALA_OVERLAY = DialectOverlay(
    name="impala",
    flags={
        "allows_multiple_count_distinct": False,
        "allows_compound_count_distinct": True,
        "requires_order_by_alias": False,
        "requires_alias_for_from_query": True,
        "supports_group_by_expressions": False,
        "allows_select_not_in_group_by": False,
        "allows_join_on": False,
        "allows_regex_in_where": True,
        "allows_ddl": True,
        "supports_nulls_last": True,
    },
    hooks={
        "order_by_nulls": order_by_nulls,
        "regular_expression": mysql.regular_expression,
    },
    description="Apache Impala",
)

HIVE_CHAIN: DialectChain = GENERIC_CHAIN.extend(HIVE_OVERLAY)
IMPALA_CHAIN: DialectChain = HIVE_CHAIN.extend(IMPALA_OVERLAY)
