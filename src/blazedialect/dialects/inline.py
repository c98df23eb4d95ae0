"""
Inline value tables: literal, connection-independent mini-tables embedded in SQL.

Two strategies are supported. Dialects with ``supports_values_list`` get the
native row-list form::

    SELECT * FROM (VALUES (1, 'a'), (2, 'b')) AS "t" ("id", "name")

everyone else gets a union of single-row selects with explicit casts::

    SELECT CAST(1 AS INTEGER) AS "id", CAST('a' AS VARCHAR(1)) AS "name"
    UNION ALL SELECT CAST(2 AS INTEGER), CAST('b' AS VARCHAR(1))

An empty batch renders the same shape with one typed all-NULL row filtered out
by ``WHERE 1 = 0``.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from .errors import SchemaMismatchError
from .types import Datatype

if TYPE_CHECKING:
    from .descriptor import DialectDescriptor

MAX_DECIMAL_PRECISION = 38
EMPTY_RESULT_FILTER = " WHERE 1 = 0"


@dataclass(frozen=True)
class InlineValueTable:
    """
    Column names, their declared types, and rows of literal values (``None`` is NULL).
    """

    column_names: tuple[str, ...]
    column_types: tuple[Datatype, ...]
    rows: tuple[tuple[str | None, ...], ...]

    def __post_init__(self) -> None:
        if not self.column_names:
            raise SchemaMismatchError("An inline table needs at least one column")
        if len(self.column_names) != len(self.column_types):
            raise SchemaMismatchError(
                f"Got {len(self.column_names)} column names but {len(self.column_types)} column types"
            )
        if len(set(self.column_names)) != len(self.column_names):
            raise SchemaMismatchError(f"Duplicate column names in {list(self.column_names)}")
        width = len(self.column_names)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise SchemaMismatchError(f"Row {index} has {len(row)} values, expected {width}")

    @classmethod
    def of(
        cls,
        column_names: Sequence[str],
        column_types: Sequence[Datatype | str],
        rows: Iterable[Sequence[Any]],
    ) -> "InlineValueTable":
        return cls(
            column_names=tuple(str(name) for name in column_names),
            column_types=tuple(Datatype.parse(kind) for kind in column_types),
            rows=tuple(
                tuple(None if value is None else str(value) for value in row) for row in rows
            ),
        )

    def column_values(self, index: int) -> list[str]:
        return [row[index] for row in self.rows if row[index] is not None]


def column_cast_type(dialect: "DialectDescriptor", datatype: Datatype, values: Sequence[str]) -> str:
    """
    SQL type used to cast one column, sized from the values it has to hold.
    """

    template = dialect.chain.cast_type(datatype)
    length = max([1, *(len(value) for value in values)])
    precision, scale = _decimal_shape(values) if datatype.is_numeric else (1, 0)
    return template.format(length=length, precision=precision, scale=scale)


def _decimal_shape(values: Sequence[str]) -> tuple[int, int]:
    integer_digits, scale = 1, 0
    for value in values:
        sign, digits, exponent = Decimal(value.strip()).as_tuple()
        if not isinstance(exponent, int):
            continue
        scale = max(scale, -exponent)
        integer_digits = max(integer_digits, len(digits) + exponent)
    integer_digits = min(integer_digits, MAX_DECIMAL_PRECISION)
    scale = min(scale, MAX_DECIMAL_PRECISION - integer_digits)
    return integer_digits + scale, scale


def generate_inline(
    dialect: "DialectDescriptor",
    table: InlineValueTable,
    *,
    order_by: Sequence[str] | None = None,
    as_derived_table: bool = False,
    alias: str = "t",
) -> str:
    """
    Render ``table`` for ``dialect``; see the module docstring for the shapes.

    ``order_by`` names columns of ``table``. ``as_derived_table`` wraps the result in
    parentheses so it can sit in a FROM clause, adding ``alias`` where required.
    """

    caps = dialect.capabilities
    literals = [
        [dialect.quote(value, datatype) for value, datatype in zip(row, table.column_types)]
        for row in table.rows
    ]
    cast_types = [
        column_cast_type(dialect, datatype, table.column_values(index))
        for index, datatype in enumerate(table.column_types)
    ]

    if not table.rows:
        sql = _empty_select(dialect, table, cast_types, alias)
        is_union = False
    elif caps.supports_values_list:
        sql = _values_list(dialect, table, literals, cast_types, alias)
        is_union = False
    else:
        sql = _union_of_selects(dialect, table, literals, cast_types)
        is_union = len(table.rows) > 1

    if order_by:
        sql += _order_by_clause(dialect, table, order_by, positional=is_union)

    if as_derived_table:
        sql = f"({sql})"
        if caps.requires_alias_for_from_query:
            sql += _alias_clause(dialect, alias, caps.allows_as)
    return sql


def _alias_clause(dialect: "DialectDescriptor", name: str, allows_as: bool) -> str:
    keyword = " AS " if allows_as else " "
    return f"{keyword}{dialect.quote_identifier(name)}"


def _empty_filter(from_clause: str) -> str:
    # a FROM clause that already filters (Informix's systables) gets an extra conjunct
    return " AND 1 = 0" if " WHERE " in from_clause.upper() else EMPTY_RESULT_FILTER


def _empty_select(
    dialect: "DialectDescriptor",
    table: InlineValueTable,
    cast_types: Sequence[str],
    alias: str,
) -> str:
    caps = dialect.capabilities
    if caps.supports_values_list:
        null_row = tuple(None for _ in table.column_names)
        placeholder = InlineValueTable(table.column_names, table.column_types, (null_row,))
        literals = [["NULL"] * len(null_row)]
        return _values_list(dialect, placeholder, literals, cast_types, alias) + EMPTY_RESULT_FILTER
    columns = ", ".join(
        dialect.cast_expression("NULL", cast_type)
        + _alias_clause(dialect, name, caps.allows_field_as)
        for name, cast_type in zip(table.column_names, cast_types)
    )
    from_clause = caps.inline_from_clause or caps.inline_empty_from_clause or ""
    return f"SELECT {columns}{from_clause}{_empty_filter(from_clause)}"


def _values_list(
    dialect: "DialectDescriptor",
    table: InlineValueTable,
    literals: Sequence[Sequence[str]],
    cast_types: Sequence[str],
    alias: str,
) -> str:
    caps = dialect.capabilities
    rows = []
    for row, values in zip(table.rows, literals):
        items = []
        for value, literal, datatype, cast_type in zip(row, values, table.column_types, cast_types):
            if value is None or (caps.inline_cast_strings and datatype is Datatype.STRING):
                literal = dialect.cast_expression(literal, cast_type)
            items.append(literal)
        rows.append(f"({', '.join(items)})")
    columns = ", ".join(dialect.quote_identifier(name) for name in table.column_names)
    return (
        f"SELECT * FROM (VALUES {', '.join(rows)})"
        f"{_alias_clause(dialect, alias, caps.allows_as)} ({columns})"
    )


def _union_of_selects(
    dialect: "DialectDescriptor",
    table: InlineValueTable,
    literals: Sequence[Sequence[str]],
    cast_types: Sequence[str],
) -> str:
    caps = dialect.capabilities
    from_clause = caps.inline_from_clause or ""
    selects = []
    for position, values in enumerate(literals):
        items = []
        for name, literal, cast_type in zip(table.column_names, values, cast_types):
            item = dialect.cast_expression(literal, cast_type)
            if position == 0:
                item += _alias_clause(dialect, name, caps.allows_field_as)
            items.append(item)
        selects.append(f"SELECT {', '.join(items)}{from_clause}")
    return " UNION ALL ".join(selects)


def _order_by_clause(
    dialect: "DialectDescriptor",
    table: InlineValueTable,
    order_by: Sequence[str],
    *,
    positional: bool,
) -> str:
    items = []
    for name in order_by:
        if name not in table.column_names:
            raise SchemaMismatchError(f"Cannot order by unknown column {name!r}")
        if positional and dialect.capabilities.requires_union_order_by_ordinal:
            items.append(str(table.column_names.index(name) + 1))
        else:
            items.append(dialect.quote_identifier(name))
    return " ORDER BY " + ", ".join(items)
