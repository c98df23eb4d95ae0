"""
Identity reader for psycopg (3) connections.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..dialects.base import ConnectionIdentity
from ..dialects.errors import DialectConnectionError
from ..dialects.types import ColumnDescription, SqlType
from .base import translate_description

PRODUCT_NAME = "PostgreSQL"

# built-in type OIDs (pg_type.oid)
TYPE_OIDS = {
    16: SqlType.BOOLEAN,
    17: SqlType.VARBINARY,
    18: SqlType.CHAR,
    19: SqlType.VARCHAR,
    20: SqlType.BIGINT,
    21: SqlType.SMALLINT,
    23: SqlType.INTEGER,
    25: SqlType.VARCHAR,
    26: SqlType.BIGINT,
    114: SqlType.OTHER,
    700: SqlType.REAL,
    701: SqlType.DOUBLE,
    1042: SqlType.CHAR,
    1043: SqlType.VARCHAR,
    1082: SqlType.DATE,
    1083: SqlType.TIME,
    1114: SqlType.TIMESTAMP,
    1184: SqlType.TIMESTAMP_WITH_TIMEZONE,
    1266: SqlType.TIME_WITH_TIMEZONE,
    1560: SqlType.BIT,
    1700: SqlType.NUMERIC,
}


def _load_driver():
    try:
        import psycopg

        return psycopg
    except ImportError:
        return None


def accepts(connection: Any) -> bool:
    driver = _load_driver()
    return driver is not None and isinstance(connection, driver.Connection)


def format_server_version(number: int) -> str:
    """
    ``150004`` -> ``"15.4"``; releases before 10 use three parts (``90624`` -> ``"9.6.24"``).
    """

    major = number // 10000
    if major >= 10:
        return f"{major}.{number % 10000}"
    return f"{major}.{(number // 100) % 100}.{number % 100}"


def read_identity(connection: Any) -> ConnectionIdentity:
    try:
        info = connection.info
        reported = info.parameter_status("server_version")
        version = reported or format_server_version(int(info.server_version))
    except Exception as exc:
        raise DialectConnectionError("Failed to read the PostgreSQL server version.") from exc
    return ConnectionIdentity(PRODUCT_NAME, version)


def describe_columns(
    description: Sequence[Sequence[Any]], sample_row: Sequence[Any] | None = None
) -> tuple[ColumnDescription, ...]:
    """
    Columns of a psycopg ``cursor.description``; type codes there are type OIDs.
    """

    return translate_description(description, TYPE_OIDS, sample_row=sample_row)
