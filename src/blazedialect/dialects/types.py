"""
Type vocabularies shared by dialects: ANSI/JDBC column type codes, the engine's
logical value types, and the column types accepted by inline value tables.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from .errors import SchemaMismatchError


class SqlType(enum.IntEnum):
    """
    Column type codes as reported in result-set metadata (JDBC ``java.sql.Types`` numbering).
    """

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    NCLOB = 2011
    BOOLEAN = 16
    ROWID = -8
    SQLXML = 2009
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014

    @classmethod
    def coerce(cls, value: Any) -> int:
        """
        Normalize a type code: ints pass through (unknown ones included), names are
        looked up case-insensitively, anything else is ``OTHER``.
        """

        if isinstance(value, bool) or value is None:
            return int(cls.OTHER)
        if isinstance(value, int):
            return int(value)
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return int(member)
        return int(cls.OTHER)


class LogicalType(str, enum.Enum):
    """Value categories understood by the engine."""

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    NUMERIC = "numeric"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    OBJECT = "object"


class Datatype(str, enum.Enum):
    """Declared column types of an inline value table."""

    STRING = "String"
    NUMERIC = "Numeric"
    INTEGER = "Integer"
    DECIMAL = "Decimal"
    FLOAT = "Float"
    REAL = "Real"
    BIGINT = "BigInt"
    SMALLINT = "SmallInt"
    DOUBLE = "Double"
    BOOLEAN = "Boolean"
    DATE = "Date"
    TIME = "Time"
    TIMESTAMP = "Timestamp"

    @classmethod
    def parse(cls, value: "Datatype | str") -> "Datatype":
        if isinstance(value, Datatype):
            return value
        key = str(value).strip().upper()
        if key in _DATATYPE_ALIASES:
            return _DATATYPE_ALIASES[key]
        member = cls.__members__.get(key)
        if member is None:
            raise SchemaMismatchError(f"Unknown inline column type {value!r}")
        return member

    @property
    def is_numeric(self) -> bool:
        return self in _NUMERIC_DATATYPES

    @property
    def is_approximate(self) -> bool:
        return self in (Datatype.FLOAT, Datatype.REAL, Datatype.DOUBLE)

    @property
    def is_temporal(self) -> bool:
        return self in (Datatype.DATE, Datatype.TIME, Datatype.TIMESTAMP)


_DATATYPE_ALIASES = {
    "VARCHAR": Datatype.STRING,
    "CHAR": Datatype.STRING,
    "TEXT": Datatype.STRING,
    "INT": Datatype.INTEGER,
    "BOOL": Datatype.BOOLEAN,
    "DATETIME": Datatype.TIMESTAMP,
}

_NUMERIC_DATATYPES = frozenset(
    {
        Datatype.NUMERIC,
        Datatype.INTEGER,
        Datatype.DECIMAL,
        Datatype.FLOAT,
        Datatype.REAL,
        Datatype.BIGINT,
        Datatype.SMALLINT,
        Datatype.DOUBLE,
    }
)


@dataclass(frozen=True)
class ColumnDescription:
    """
    One column of result-set metadata.
    """

    name: str
    type_code: int
    precision: int = 0
    scale: int = 0

    @classmethod
    def from_dbapi(cls, entry: Sequence[Any]) -> "ColumnDescription":
        """
        Build from a DB-API ``cursor.description`` item
        ``(name, type_code, display_size, internal_size, precision, scale, null_ok)``.

        ``type_code`` must already be a ``SqlType`` code; driver-native codes are
        translated by ``blazedialect.introspection.describe_columns``.
        """

        if len(entry) < 2:
            raise SchemaMismatchError(f"Malformed column description {entry!r}")
        precision = entry[4] if len(entry) > 4 else None
        scale = entry[5] if len(entry) > 5 else None
        return cls(
            name=str(entry[0]),
            type_code=SqlType.coerce(entry[1]),
            precision=int(precision or 0),
            scale=int(scale or 0),
        )


def coerce_columns(columns: Sequence[Any]) -> tuple[ColumnDescription, ...]:
    return tuple(
        column if isinstance(column, ColumnDescription) else ColumnDescription.from_dbapi(column)
        for column in columns
    )


_DEFAULT_TYPES: Mapping[int, LogicalType] = {
    SqlType.BIT: LogicalType.BOOLEAN,
    SqlType.BOOLEAN: LogicalType.BOOLEAN,
    SqlType.TINYINT: LogicalType.INTEGER,
    SqlType.SMALLINT: LogicalType.INTEGER,
    SqlType.INTEGER: LogicalType.INTEGER,
    SqlType.BIGINT: LogicalType.LONG,
    SqlType.FLOAT: LogicalType.DOUBLE,
    SqlType.REAL: LogicalType.DOUBLE,
    SqlType.DOUBLE: LogicalType.DOUBLE,
    SqlType.CHAR: LogicalType.STRING,
    SqlType.VARCHAR: LogicalType.STRING,
    SqlType.LONGVARCHAR: LogicalType.STRING,
    SqlType.NCHAR: LogicalType.STRING,
    SqlType.NVARCHAR: LogicalType.STRING,
    SqlType.LONGNVARCHAR: LogicalType.STRING,
    SqlType.CLOB: LogicalType.STRING,
    SqlType.NCLOB: LogicalType.STRING,
    SqlType.DATE: LogicalType.DATE,
    SqlType.TIME: LogicalType.TIME,
    SqlType.TIME_WITH_TIMEZONE: LogicalType.TIME,
    SqlType.TIMESTAMP: LogicalType.TIMESTAMP,
    SqlType.TIMESTAMP_WITH_TIMEZONE: LogicalType.TIMESTAMP,
}


def default_logical_type(column: ColumnDescription) -> LogicalType:
    """
    Standard mapping used when no dialect overlay patches the column's type code.

    Exact numerics with no scale become INTEGER or LONG when their precision fits.
    """

    if column.type_code in (SqlType.NUMERIC, SqlType.DECIMAL):
        if column.scale == 0 and 0 < column.precision <= 9:
            return LogicalType.INTEGER
        if column.scale == 0 and 9 < column.precision <= 18:
            return LogicalType.LONG
        return LogicalType.NUMERIC
    return _DEFAULT_TYPES.get(column.type_code, LogicalType.OBJECT)
