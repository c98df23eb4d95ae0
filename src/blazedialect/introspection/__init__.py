"""
Connection introspection: identity readers, metadata probes and result-set
descriptions per driver.
"""

from __future__ import annotations

from typing import Any, Sequence

from ..dialects.base import ConnectionIdentity
from ..dialects.errors import DialectConfigurationError
from ..dialects.types import ColumnDescription
from . import mysql, postgres, sqlite
from .base import DbApiProbe, translate_description

_READERS = (
    ("sqlite", sqlite),
    ("postgres", postgres),
    ("mysql", mysql),
)


def _reader_for(connection: Any) -> tuple[str, Any]:
    for label, reader in _READERS:
        if reader.accepts(connection):
            return label, reader
    raise DialectConfigurationError(
        f"Cannot read a database identity from {type(connection).__name__}; "
        "supported drivers are sqlite3, psycopg, PyMySQL and mysqlclient."
    )


def describe_connection(
    connection: Any, *, slow_probe_ms: int | None = None
) -> tuple[ConnectionIdentity, DbApiProbe]:
    """
    Identity of ``connection`` plus a probe bound to it.
    """

    label, reader = _reader_for(connection)
    identity = reader.read_identity(connection)
    return identity, DbApiProbe(connection, label=label, slow_probe_ms=slow_probe_ms)


def describe_columns(
    connection: Any,
    description: Sequence[Sequence[Any]],
    *,
    sample_row: Sequence[Any] | None = None,
) -> tuple[ColumnDescription, ...]:
    """
    ``cursor.description`` of a query run on ``connection``, with the driver's type
    codes translated to ``SqlType`` codes so it can be handed to ``map_type``.
    """

    _, reader = _reader_for(connection)
    return reader.describe_columns(description, sample_row=sample_row)


__all__ = ["DbApiProbe", "describe_columns", "describe_connection", "translate_description"]
