"""
Identity reader for PyMySQL and mysqlclient connections.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..dialects.base import ConnectionIdentity
from ..dialects.errors import DialectConnectionError
from ..dialects.types import ColumnDescription, SqlType
from .base import translate_description

PRODUCT_NAME = "MySQL"

# MySQL protocol field types (pymysql.constants.FIELD_TYPE, MySQLdb.constants.FIELD_TYPE)
FIELD_TYPES = {
    0: SqlType.DECIMAL,
    1: SqlType.TINYINT,
    2: SqlType.SMALLINT,
    3: SqlType.INTEGER,
    4: SqlType.REAL,
    5: SqlType.DOUBLE,
    6: SqlType.NULL,
    7: SqlType.TIMESTAMP,
    8: SqlType.BIGINT,
    9: SqlType.INTEGER,
    10: SqlType.DATE,
    11: SqlType.TIME,
    12: SqlType.TIMESTAMP,
    13: SqlType.SMALLINT,
    14: SqlType.DATE,
    15: SqlType.VARCHAR,
    16: SqlType.BIT,
    245: SqlType.LONGVARCHAR,
    246: SqlType.DECIMAL,
    247: SqlType.CHAR,
    248: SqlType.CHAR,
    # TEXT columns share the BLOB codes; the charset is not in the description
    249: SqlType.LONGVARBINARY,
    250: SqlType.LONGVARBINARY,
    251: SqlType.LONGVARBINARY,
    252: SqlType.LONGVARBINARY,
    253: SqlType.VARCHAR,
    254: SqlType.CHAR,
    255: SqlType.OTHER,
}


def _load_drivers() -> list[Any]:
    drivers = []
    try:
        import pymysql  # type: ignore[import-untyped]

        drivers.append(pymysql)
    except ImportError:
        pass
    try:
        import MySQLdb

        drivers.append(MySQLdb)
    except ImportError:
        pass
    return drivers


def accepts(connection: Any) -> bool:
    return any(isinstance(connection, driver.connections.Connection) for driver in _load_drivers())


def read_identity(connection: Any) -> ConnectionIdentity:
    try:
        version = connection.get_server_info()
    except Exception as exc:
        raise DialectConnectionError("Failed to read the MySQL server version.") from exc
    if isinstance(version, bytes):
        version = version.decode("utf-8", errors="replace")
    # MariaDB reports itself as MySQL with a "-MariaDB" version suffix
    return ConnectionIdentity(PRODUCT_NAME, str(version))


def describe_columns(
    description: Sequence[Sequence[Any]], sample_row: Sequence[Any] | None = None
) -> tuple[ColumnDescription, ...]:
    return translate_description(description, FIELD_TYPES, sample_row=sample_row)
