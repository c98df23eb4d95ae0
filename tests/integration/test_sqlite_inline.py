import sqlite3
from decimal import Decimal

import pytest

from blazedialect.registry import default_registry


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def dialect(connection):
    return default_registry().resolve_connection(connection)


def fetch(connection, sql):
    return connection.execute(sql).fetchall()


def test_inline_rows_execute(connection, dialect):
    sql = dialect.generate_inline(
        ["id", "name", "price", "day", "active"],
        ["Integer", "String", "Decimal", "Date", "Boolean"],
        [
            [1, "it's", Decimal("1.25"), "2024-03-05", "true"],
            [2, None, "10.5", None, "false"],
        ],
        order_by=["id"],
    )
    rows = fetch(connection, sql)
    assert rows == [(1, "it's", 1.25, "2024-03-05", 1), (2, None, 10.5, None, 0)]


def test_inline_order_by_ordinal(connection, dialect):
    sql = dialect.generate_inline(["id", "name"], ["Integer", "String"], [[1, "b"], [2, "a"]], order_by=["name"])
    assert sql.endswith("ORDER BY 2")
    assert fetch(connection, sql) == [(2, "a"), (1, "b")]


def test_empty_batch_has_columns_but_no_rows(connection, dialect):
    sql = dialect.generate_inline(["id", "name"], ["Integer", "String"], [])
    cursor = connection.execute(sql)
    assert cursor.fetchall() == []
    assert [column[0] for column in cursor.description] == ["id", "name"]


def test_derived_table_joins(connection, dialect):
    connection.execute('CREATE TABLE "orders" ("id" INTEGER, "status" TEXT)')
    connection.executemany('INSERT INTO "orders" VALUES (?, ?)', [(1, "new"), (2, "paid"), (3, "new")])
    lookup = dialect.generate_inline(
        ["status", "label"], ["String", "String"], [["new", "Open"], ["paid", "Closed"]], as_derived_table=True
    )
    sql = (
        f'SELECT o."id", l."label" FROM "orders" o JOIN {lookup} l '
        'ON l."status" = o."status" ORDER BY o."id"'
    )
    assert fetch(connection, sql) == [(1, "Open"), (2, "Closed"), (3, "Open")]


def test_literals_round_trip_through_sqlite(connection, dialect):
    sql = "SELECT {}, {}, {}".format(
        dialect.quote_string_literal("O'Brien"),
        dialect.quote("42", "Integer"),
        dialect.quote_date_literal("1999-12-31"),
    )
    assert fetch(connection, sql) == [("O'Brien", 42, "1999-12-31")]
