"""
Metadata probes and result-set descriptions over DB-API connections.
"""

from __future__ import annotations

import datetime
import decimal
from typing import Any, Mapping, Sequence

from ..dialects.errors import DialectConnectionError, SchemaMismatchError
from ..dialects.types import ColumnDescription, SqlType
from ..utils import get_logger, time_call
from ..utils.performance import resolve_slow_probe_ms


def _is_closed(connection: Any) -> bool:
    # psycopg exposes ``closed``; PyMySQL and mysqlclient expose ``open``
    if getattr(connection, "closed", False):
        return True
    return getattr(connection, "open", True) is False


def _row_text(row: Any) -> str:
    if isinstance(row, (tuple, list)):
        return " ".join(str(value) for value in row if value is not None)
    return str(row)


class DbApiProbe:
    """
    ``MetadataProbe`` running read-only queries on a DB-API connection.

    Every row is flattened to one string; driver failures surface as
    ``DialectConnectionError`` and are never retried.
    """

    def __init__(self, connection: Any, *, label: str = "dbapi", slow_probe_ms: int | None = None) -> None:
        self.connection = connection
        self.label = label
        self.logger = get_logger(f"introspection.{label}")
        self.slow_probe_ms = resolve_slow_probe_ms(default=100, override=slow_probe_ms)

    def fetch_strings(self, sql: str) -> Sequence[str]:
        if _is_closed(self.connection):
            raise DialectConnectionError(f"{self.label} connection is closed; cannot run {sql!r}")
        try:
            cursor = self.connection.cursor()
        except Exception as exc:
            raise DialectConnectionError(f"Failed to open a {self.label} cursor.") from exc
        try:
            with time_call(
                f"{self.label}.probe",
                self.logger,
                sql=sql,
                threshold_ms=self.slow_probe_ms,
            ):
                cursor.execute(sql)
                rows = cursor.fetchall()
        except Exception as exc:
            raise DialectConnectionError(f"Metadata probe {sql!r} failed on {self.label}.") from exc
        finally:
            close = getattr(cursor, "close", None)
            if close is not None:
                close()
        return [_row_text(row) for row in rows]


# Python value types seen in fetched rows, for drivers that report no type codes
_VALUE_TYPES: tuple[tuple[type, SqlType], ...] = (
    (bool, SqlType.BOOLEAN),
    (int, SqlType.BIGINT),
    (float, SqlType.DOUBLE),
    (decimal.Decimal, SqlType.DECIMAL),
    (str, SqlType.VARCHAR),
    (bytes, SqlType.VARBINARY),
    (datetime.datetime, SqlType.TIMESTAMP),
    (datetime.date, SqlType.DATE),
    (datetime.time, SqlType.TIME),
)


def _value_type(value: Any) -> SqlType:
    for kind, code in _VALUE_TYPES:
        if isinstance(value, kind):
            return code
    return SqlType.OTHER


def translate_description(
    description: Sequence[Sequence[Any]] | None,
    type_codes: Mapping[Any, SqlType],
    *,
    sample_row: Sequence[Any] | None = None,
) -> tuple[ColumnDescription, ...]:
    """
    Convert a driver's ``cursor.description`` into ``ColumnDescription`` items.

    Driver-native type codes are looked up in ``type_codes``; codes missing from it
    become ``SqlType.OTHER``. A ``None`` code is inferred from ``sample_row`` when
    one is given.
    """

    if not description:
        raise SchemaMismatchError("Cursor has no result-set description")
    if sample_row is not None and len(sample_row) != len(description):
        raise SchemaMismatchError(
            f"Sample row has {len(sample_row)} values for {len(description)} columns"
        )
    columns = []
    for index, entry in enumerate(description):
        raw = ColumnDescription.from_dbapi(entry)
        native = entry[1]
        if native is None:
            code = _value_type(sample_row[index]) if sample_row is not None else SqlType.OTHER
        else:
            code = type_codes.get(native, SqlType.OTHER)
        columns.append(ColumnDescription(raw.name, int(code), raw.precision, raw.scale))
    return tuple(columns)
