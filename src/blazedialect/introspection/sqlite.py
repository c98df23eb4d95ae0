"""
Identity reader for the standard-library sqlite3 driver.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Sequence

from ..dialects.base import ConnectionIdentity
from ..dialects.types import ColumnDescription
from .base import translate_description

PRODUCT_NAME = "SQLite"


def accepts(connection: Any) -> bool:
    return isinstance(connection, sqlite3.Connection)


def read_identity(connection: Any) -> ConnectionIdentity:
    return ConnectionIdentity(PRODUCT_NAME, sqlite3.sqlite_version)


def describe_columns(
    description: Sequence[Sequence[Any]], sample_row: Sequence[Any] | None = None
) -> tuple[ColumnDescription, ...]:
    # sqlite3 leaves every type code as None; only fetched values tell the types apart
    return translate_description(description, {}, sample_row=sample_row)
