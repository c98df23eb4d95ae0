"""
Standard SQL behaviour: the root overlay every dialect chain starts from.

Hooks take the descriptor they run for as first argument so that overrides can
consult its capabilities and call other hooks.
"""

from __future__ import annotations

import datetime
import re
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Mapping

from .composition import DialectChain, DialectOverlay
from .errors import LiteralFormatError
from .types import Datatype

if TYPE_CHECKING:
    from .descriptor import DialectDescriptor

GENERIC_TAG = "generic"

_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_EMBEDDED_FLAGS_RE = re.compile(r"^\(\?([a-zA-Z]+)\)")


# ---------------------------------------------------------------------- #
# Identifiers and literals
# ---------------------------------------------------------------------- #
def quote_identifier(dialect: "DialectDescriptor", name: str) -> str:
    opening, closing = dialect.capabilities.quote_style.delimiters
    if not opening:
        return name
    return f"{opening}{name.replace(closing, closing * 2)}{closing}"


def single_quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def quote_string_literal(dialect: "DialectDescriptor", value: str) -> str:
    return single_quote(value)


def backslash_string_literal(dialect: "DialectDescriptor", value: str) -> str:
    """
    Literal for engines where backslash escapes and a doubled quote is not recognised.
    """
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def parse_numeric(text: str, datatype: Datatype = Datatype.NUMERIC) -> Any:
    """
    Validate a numeric literal and return its Python value (``float`` for approximate
    types, ``int`` or ``Decimal`` otherwise).
    """

    stripped = text.strip()
    if not _NUMERIC_RE.match(stripped):
        raise LiteralFormatError(f"Illegal {datatype.name} literal: {text!r}")
    if datatype.is_approximate:
        return float(stripped)
    try:
        value = Decimal(stripped)
    except InvalidOperation as exc:
        raise LiteralFormatError(f"Illegal {datatype.name} literal: {text!r}") from exc
    if datatype in (Datatype.INTEGER, Datatype.BIGINT, Datatype.SMALLINT):
        if value != value.to_integral_value():
            raise LiteralFormatError(f"Illegal {datatype.name} literal: {text!r}")
        return int(value)
    return value


def quote_numeric_literal(dialect: "DialectDescriptor", text: str, datatype: Datatype) -> str:
    value = parse_numeric(text, datatype)
    rendered = text.strip()
    if dialect.needs_exponent(value, rendered):
        rendered += "E0"
    return rendered


def needs_exponent(dialect: "DialectDescriptor", value: Any, text: str) -> bool:
    return False


def parse_boolean(text: str, *, allow_digits: bool = False) -> bool:
    normalized = text.strip().upper()
    if normalized == "TRUE" or (allow_digits and normalized == "1"):
        return True
    if normalized == "FALSE" or (allow_digits and normalized == "0"):
        return False
    raise LiteralFormatError(f"Illegal BOOLEAN literal: {text}")


def quote_boolean_literal(dialect: "DialectDescriptor", text: str) -> str:
    return "TRUE" if parse_boolean(text) else "FALSE"


def parse_date(text: str) -> datetime.date:
    try:
        return datetime.date.fromisoformat(text.strip())
    except ValueError as exc:
        raise LiteralFormatError(f"Illegal DATE literal: {text}") from exc


def parse_time(text: str) -> datetime.time:
    try:
        return datetime.time.fromisoformat(text.strip())
    except ValueError as exc:
        raise LiteralFormatError(f"Illegal TIME literal: {text}") from exc


def parse_timestamp(text: str) -> datetime.datetime:
    try:
        return datetime.datetime.fromisoformat(text.strip())
    except ValueError as exc:
        raise LiteralFormatError(f"Illegal TIMESTAMP literal: {text}") from exc


def quote_date_literal(dialect: "DialectDescriptor", text: str) -> str:
    return f"DATE {single_quote(parse_date(text).isoformat())}"


def quote_time_literal(dialect: "DialectDescriptor", text: str) -> str:
    return f"TIME {single_quote(parse_time(text).isoformat())}"


def quote_timestamp_literal(dialect: "DialectDescriptor", text: str) -> str:
    return f"TIMESTAMP {single_quote(parse_timestamp(text).isoformat(sep=' '))}"


def plain_date_literal(dialect: "DialectDescriptor", text: str) -> str:
    return dialect.quote_string_literal(parse_date(text).isoformat())


def plain_time_literal(dialect: "DialectDescriptor", text: str) -> str:
    return dialect.quote_string_literal(parse_time(text).isoformat())


def plain_timestamp_literal(dialect: "DialectDescriptor", text: str) -> str:
    return dialect.quote_string_literal(parse_timestamp(text).isoformat(sep=" "))


def cast_expression(dialect: "DialectDescriptor", expression: str, type_name: str) -> str:
    return f"CAST({expression} AS {type_name})"


# ---------------------------------------------------------------------- #
# Expressions
# ---------------------------------------------------------------------- #
def order_by_nulls(
    dialect: "DialectDescriptor",
    expression: str,
    ascending: bool,
    collate_nulls_last: bool,
) -> str:
    direction = "ASC" if ascending else "DESC"
    if dialect.capabilities.supports_nulls_last:
        return ansi_order_by_nulls(expression, ascending, collate_nulls_last)
    first, second = (1, 0) if collate_nulls_last else (0, 1)
    return (
        f"CASE WHEN {expression} IS NULL THEN {first} ELSE {second} END, "
        f"{expression} {direction}"
    )


def ansi_order_by_nulls(expression: str, ascending: bool, collate_nulls_last: bool) -> str:
    direction = "ASC" if ascending else "DESC"
    nulls = "LAST" if collate_nulls_last else "FIRST"
    return f"{expression} {direction} NULLS {nulls}"


def isnull_order_by_nulls(
    dialect: "DialectDescriptor",
    expression: str,
    ascending: bool,
    collate_nulls_last: bool,
) -> str:
    """
    Ordering for engines that sort NULL as the smallest value.
    """
    if collate_nulls_last:
        if ascending:
            return f"ISNULL({expression}) ASC, {expression} ASC"
        return f"{expression} DESC"
    if ascending:
        return f"{expression} ASC"
    return f"ISNULL({expression}) DESC, {expression} DESC"


def regular_expression(dialect: "DialectDescriptor", source: str, pattern: str) -> str | None:
    return None


def split_embedded_flags(pattern: str) -> tuple[str, str] | None:
    """
    Validate ``pattern`` and split a leading ``(?flags)`` group off it.

    Returns ``None`` for patterns that do not compile.
    """
    try:
        re.compile(pattern)
    except re.error:
        return None
    match = _EMBEDDED_FLAGS_RE.match(pattern)
    if match is None:
        return "", pattern
    # unicode-case has no SQL counterpart
    return match.group(1).replace("u", ""), pattern[match.end():]


def wrap_upper(dialect: "DialectDescriptor", expression: str) -> str:
    return f"UPPER({expression})"


def if_then_else(
    dialect: "DialectDescriptor", condition: str, then_expression: str, else_expression: str
) -> str:
    return f"CASE WHEN {condition} THEN {then_expression} ELSE {else_expression} END"


def hints_after_from(dialect: "DialectDescriptor", hints: Mapping[str, str]) -> str:
    return ""


def truncate_statement(dialect: "DialectDescriptor", qualified_name: str) -> str:
    return f"TRUNCATE TABLE {qualified_name}"


def column_type(dialect: "DialectDescriptor", datatype: Datatype) -> str:
    # CAST targets double as column types unless an overlay says otherwise
    return dialect.chain.cast_type(datatype)


ROOT_OVERLAY = DialectOverlay(
    name=GENERIC_TAG,
    hooks={
        "quote_identifier": quote_identifier,
        "quote_string_literal": quote_string_literal,
        "quote_numeric_literal": quote_numeric_literal,
        "needs_exponent": needs_exponent,
        "quote_boolean_literal": quote_boolean_literal,
        "quote_date_literal": quote_date_literal,
        "quote_time_literal": quote_time_literal,
        "quote_timestamp_literal": quote_timestamp_literal,
        "cast_expression": cast_expression,
        "order_by_nulls": order_by_nulls,
        "regular_expression": regular_expression,
        "wrap_upper": wrap_upper,
        "if_then_else": if_then_else,
        "hints_after_from": hints_after_from,
        "truncate_statement": truncate_statement,
        "column_type": column_type,
    },
    cast_types={
        Datatype.STRING: "VARCHAR({length})",
        Datatype.NUMERIC: "DECIMAL({precision}, {scale})",
        Datatype.DECIMAL: "DECIMAL({precision}, {scale})",
        Datatype.INTEGER: "INTEGER",
        Datatype.SMALLINT: "SMALLINT",
        Datatype.BIGINT: "BIGINT",
        Datatype.FLOAT: "DOUBLE PRECISION",
        Datatype.REAL: "DOUBLE PRECISION",
        Datatype.DOUBLE: "DOUBLE PRECISION",
        Datatype.BOOLEAN: "BOOLEAN",
        Datatype.DATE: "DATE",
        Datatype.TIME: "TIME",
        Datatype.TIMESTAMP: "TIMESTAMP",
    },
    description="Standard SQL",
)

GENERIC_CHAIN = DialectChain([ROOT_OVERLAY])
