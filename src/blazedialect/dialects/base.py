"""
Capability records and connection identities shared by every dialect.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping


class QuoteStyle(str, enum.Enum):
    """Identifier quoting convention."""

    DOUBLE = "double"
    BACKTICK = "backtick"
    BRACKET = "bracket"
    NONE = "none"

    @property
    def delimiters(self) -> tuple[str, str]:
        return _QUOTE_DELIMITERS[self]


_QUOTE_DELIMITERS = {
    QuoteStyle.DOUBLE: ('"', '"'),
    QuoteStyle.BACKTICK: ("`", "`"),
    QuoteStyle.BRACKET: ("[", "]"),
    QuoteStyle.NONE: ("", ""),
}

_VERSION_RE = re.compile(r"\d+(?:\.\d+)*")


def parse_version(version: str | None) -> tuple[int, ...]:
    """
    Extract the first dotted number of a version string: ``"5.7.33-log"`` -> ``(5, 7, 33)``.
    """

    if not version:
        return ()
    match = _VERSION_RE.search(version)
    if match is None:
        return ()
    return tuple(int(part) for part in match.group(0).split("."))


@dataclass(frozen=True)
class ConnectionIdentity:
    """
    What a connection reports about the database product behind it.

    ``metadata`` is an optional read-only snapshot of richer facts gathered by
    the caller (for example ``{"engines": [...], "version_banner": "..."}``).
    """

    product_name: str
    product_version: str = ""
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))

    def version_tuple(self) -> tuple[int, ...]:
        return parse_version(self.product_version)


@dataclass(frozen=True)
class AggregateCapabilities:
    count_distinct: bool
    multiple_count_distinct: bool
    compound_count_distinct: bool
    count_distinct_with_other_aggs: bool
    multiple_distinct_sql_measures: bool
    inner_distinct: bool
    grouping_sets: bool
    group_by_expressions: bool
    percentile_disc: bool
    percentile_cont: bool
    list_agg: bool


@dataclass(frozen=True)
class JoinCapabilities:
    join_on: bool
    from_query: bool
    requires_alias_for_from_query: bool
    table_as: bool
    field_as: bool


@dataclass(frozen=True)
class OrderByCapabilities:
    requires_order_by_alias: bool
    allows_order_by_alias: bool
    requires_union_order_by_ordinal: bool
    requires_union_order_by_expr_in_select: bool
    nulls_last: bool


@dataclass(frozen=True)
class DialectCapabilities:
    """
    Feature flags describing what SQL a backend accepts.

    The defaults describe standard SQL; dialect overlays only record departures.
    """

    requires_alias_for_from_query: bool = False
    allows_as: bool = True
    allows_field_as: bool = True
    allows_from_query: bool = True
    allows_join_on: bool = True
    allows_count_distinct: bool = True
    allows_multiple_count_distinct: bool = True
    allows_compound_count_distinct: bool = False
    allows_count_distinct_with_other_aggs: bool = True
    allows_multiple_distinct_sql_measures: bool = True
    allows_inner_distinct: bool = True
    supports_group_by_expressions: bool = True
    supports_grouping_sets: bool = False
    requires_group_by_alias: bool = False
    allows_select_not_in_group_by: bool = False
    requires_order_by_alias: bool = False
    allows_order_by_alias: bool = True
    requires_union_order_by_ordinal: bool = True
    requires_union_order_by_expr_in_select: bool = True
    requires_having_alias: bool = False
    supports_nulls_last: bool = False
    supports_unlimited_value_list: bool = False
    supports_multi_value_in_expr: bool = False
    supports_values_list: bool = False
    allows_ddl: bool = True
    allows_regex_in_where: bool = False
    allows_dialect_sharing: bool = True
    requires_drillthrough_max_rows_in_limit: bool = False
    supports_percentile_disc: bool = False
    supports_percentile_cont: bool = False
    supports_list_agg: bool = False
    supports_parallel_loading: bool = True
    supports_batch_operations: bool = True
    max_column_name_length: int = 128
    quote_style: QuoteStyle = QuoteStyle.DOUBLE
    inline_from_clause: str | None = None
    inline_empty_from_clause: str | None = None
    inline_cast_strings: bool = False

    @property
    def aggregates(self) -> AggregateCapabilities:
        return AggregateCapabilities(
            count_distinct=self.allows_count_distinct,
            multiple_count_distinct=self.allows_multiple_count_distinct,
            compound_count_distinct=self.allows_compound_count_distinct,
            count_distinct_with_other_aggs=self.allows_count_distinct_with_other_aggs,
            multiple_distinct_sql_measures=self.allows_multiple_distinct_sql_measures,
            inner_distinct=self.allows_inner_distinct,
            grouping_sets=self.supports_grouping_sets,
            group_by_expressions=self.supports_group_by_expressions,
            percentile_disc=self.supports_percentile_disc,
            percentile_cont=self.supports_percentile_cont,
            list_agg=self.supports_list_agg,
        )

    @property
    def joins(self) -> JoinCapabilities:
        return JoinCapabilities(
            join_on=self.allows_join_on,
            from_query=self.allows_from_query,
            requires_alias_for_from_query=self.requires_alias_for_from_query,
            table_as=self.allows_as,
            field_as=self.allows_field_as,
        )

    @property
    def ordering(self) -> OrderByCapabilities:
        return OrderByCapabilities(
            requires_order_by_alias=self.requires_order_by_alias,
            allows_order_by_alias=self.allows_order_by_alias,
            requires_union_order_by_ordinal=self.requires_union_order_by_ordinal,
            requires_union_order_by_expr_in_select=self.requires_union_order_by_expr_in_select,
            nulls_last=self.supports_nulls_last,
        )


ROOT_CAPABILITIES = DialectCapabilities()


def _expected_types(default: Any) -> tuple[type, ...]:
    if isinstance(default, bool):
        return (bool,)
    if isinstance(default, enum.Enum):
        return (type(default),)
    if isinstance(default, int):
        return (int,)
    # only the optional text flags default to None
    return (str, type(None))


FLAG_TYPES: Mapping[str, tuple[type, ...]] = MappingProxyType(
    {spec.name: _expected_types(spec.default) for spec in fields(DialectCapabilities)}
)


def flag_type_error(name: str, value: Any) -> str | None:
    """
    Describe why ``value`` cannot be stored in flag ``name``; ``None`` when it can.
    """

    expected = FLAG_TYPES.get(name)
    if expected is None:
        return "unknown capability flag"
    if isinstance(value, bool) and bool not in expected:
        return f"expected {_describe(expected)}, got bool"
    if not isinstance(value, expected):
        return f"expected {_describe(expected)}, got {type(value).__name__}"
    return None


def _describe(expected: tuple[type, ...]) -> str:
    return " or ".join("None" if kind is type(None) else kind.__name__ for kind in expected)
