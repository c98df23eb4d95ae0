import logging
import sqlite3
from types import SimpleNamespace

import pytest

from blazedialect.dialects import (
    DialectConfigurationError,
    DialectConnectionError,
    LogicalType,
    SchemaMismatchError,
    SqlType,
)
from blazedialect.introspection import DbApiProbe, describe_columns, describe_connection
from blazedialect.introspection import mysql as mysql_reader
from blazedialect.introspection import postgres as postgres_reader
from blazedialect.registry import default_registry


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []
        self.closed = False

    def execute(self, sql):
        self.executed.append(sql)

    def fetchall(self):
        return self.rows

    def close(self):
        self.closed = True


class FakePgConnection:
    closed = False

    def __init__(self, rows=(), reported=None, server_version=150004):
        self.rows = list(rows)
        self.info = SimpleNamespace(
            parameter_status=lambda name: reported,
            server_version=server_version,
        )
        self.cursors = []

    def cursor(self):
        cursor = FakeCursor(self.rows)
        self.cursors.append(cursor)
        return cursor


class FakeMySQLConnection:
    open = True

    def __init__(self, version, rows=()):
        self.version = version
        self.rows = list(rows)

    def get_server_info(self):
        return self.version

    def cursor(self):
        return FakeCursor(self.rows)


class FakeMySQLdbConnection:
    open = True

    def __init__(self, version):
        self.version = version

    def get_server_info(self):
        return self.version


@pytest.fixture
def fake_drivers(monkeypatch):
    monkeypatch.setattr(postgres_reader, "_load_driver", lambda: SimpleNamespace(Connection=FakePgConnection))
    monkeypatch.setattr(
        mysql_reader,
        "_load_drivers",
        lambda: [
            SimpleNamespace(connections=SimpleNamespace(Connection=FakeMySQLConnection)),
            SimpleNamespace(connections=SimpleNamespace(Connection=FakeMySQLdbConnection)),
        ],
    )


def test_sqlite_identity_and_probe():
    connection = sqlite3.connect(":memory:")
    identity, probe = describe_connection(connection)
    assert identity.product_name == "SQLite"
    assert identity.product_version == sqlite3.sqlite_version
    assert probe.fetch_strings("SELECT 1, NULL, 'x'") == ["1 x"]
    connection.close()


def test_resolve_live_sqlite_connection():
    connection = sqlite3.connect(":memory:")
    descriptor = default_registry().resolve_connection(connection)
    assert descriptor.identity_tag == "sqlite"
    connection.close()


def test_closed_connection_raises():
    connection = sqlite3.connect(":memory:")
    probe = DbApiProbe(connection, label="sqlite")
    connection.close()
    with pytest.raises(DialectConnectionError):
        probe.fetch_strings("SELECT 1")


def test_failing_probe_keeps_driver_error():
    connection = sqlite3.connect(":memory:")
    probe = DbApiProbe(connection, label="sqlite")
    with pytest.raises(DialectConnectionError) as exc:
        probe.fetch_strings("SELECT * FROM missing_table")
    assert isinstance(exc.value.__cause__, sqlite3.OperationalError)
    connection.close()


def test_closed_flag_is_checked_before_querying():
    connection = FakePgConnection()
    connection.closed = True
    with pytest.raises(DialectConnectionError):
        DbApiProbe(connection, label="postgres").fetch_strings("SELECT version()")
    assert connection.cursors == []


def test_psycopg_connection(fake_drivers):
    connection = FakePgConnection(rows=[("PostgreSQL 15.4 on x86_64-pc-linux-gnu",)])
    descriptor = default_registry().resolve_connection(connection)
    assert descriptor.identity.product_version == "15.4"
    assert descriptor.effective_tag == "postgres"
    assert connection.cursors[0].executed == ["SELECT version()"]
    assert connection.cursors[0].closed


def test_psycopg_reported_version_wins(fake_drivers):
    identity, _ = describe_connection(FakePgConnection(reported="16.2 (Debian 16.2-1)"))
    assert identity.product_version == "16.2 (Debian 16.2-1)"


def test_redshift_detected_through_live_probe(fake_drivers):
    connection = FakePgConnection(rows=[("PostgreSQL 8.0.2 on i686-pc-linux-gnu, Redshift 1.0.54",)])
    descriptor = default_registry().resolve_connection(connection)
    assert descriptor.effective_tag == "redshift"


def test_pymysql_mariadb_connection(fake_drivers):
    connection = FakeMySQLConnection(b"10.6.12-MariaDB", rows=[("InnoDB", "DEFAULT")])
    descriptor = default_registry().resolve_connection(connection)
    assert descriptor.identity.product_version == "10.6.12-MariaDB"
    assert descriptor.identity_tag == "mariadb"


def test_mysqlclient_connection_accepted_beside_pymysql(fake_drivers):
    identity, probe = describe_connection(FakeMySQLdbConnection("8.0.36"))
    assert identity.product_name == "MySQL"
    assert identity.product_version == "8.0.36"
    assert probe.label == "mysql"


def test_mysql_reader_without_drivers(monkeypatch):
    monkeypatch.setattr(mysql_reader, "_load_drivers", lambda: [])
    assert not mysql_reader.accepts(FakeMySQLConnection("8.0"))


def test_pymysql_field_types_are_translated(fake_drivers):
    description = [
        ("id", 3, None, 11, 11, 0, False),
        ("name", 253, None, 80, 80, 0, True),
        ("price", 246, None, 12, 10, 2, True),
        ("created", 12, None, 19, 19, 0, True),
    ]
    columns = describe_columns(FakeMySQLConnection("8.0"), description)
    assert [column.type_code for column in columns] == [
        SqlType.INTEGER,
        SqlType.VARCHAR,
        SqlType.DECIMAL,
        SqlType.TIMESTAMP,
    ]
    mysql = default_registry().resolve_tag("mysql")
    assert [mysql.map_type(columns, index) for index in range(4)] == [
        LogicalType.INTEGER,
        LogicalType.STRING,
        LogicalType.NUMERIC,
        LogicalType.TIMESTAMP,
    ]


def test_psycopg_type_oids_are_translated(fake_drivers):
    description = [
        ("id", 23, None, 4, None, None, None),
        ("name", 1043, None, -1, None, None, None),
        ("flag", 16, None, 1, None, None, None),
        ("shape", 600, None, 16, None, None, None),
    ]
    columns = describe_columns(FakePgConnection(), description)
    assert [column.type_code for column in columns] == [
        SqlType.INTEGER,
        SqlType.VARCHAR,
        SqlType.BOOLEAN,
        SqlType.OTHER,
    ]
    postgres = default_registry().resolve_tag("postgres")
    assert postgres.map_type(columns, 1) == LogicalType.STRING
    assert postgres.map_type(columns, 3) == LogicalType.OBJECT


def test_sqlite_types_come_from_fetched_values():
    connection = sqlite3.connect(":memory:")
    cursor = connection.execute("SELECT 1, 'a', 2.5, NULL")
    row = cursor.fetchone()
    columns = describe_columns(connection, cursor.description, sample_row=row)
    assert [column.type_code for column in columns] == [
        SqlType.BIGINT,
        SqlType.VARCHAR,
        SqlType.DOUBLE,
        SqlType.OTHER,
    ]
    assert describe_columns(connection, cursor.description)[0].type_code == SqlType.OTHER
    with pytest.raises(SchemaMismatchError):
        describe_columns(connection, cursor.description, sample_row=(1,))
    connection.close()


def test_describe_columns_needs_a_description():
    connection = sqlite3.connect(":memory:")
    with pytest.raises(SchemaMismatchError):
        describe_columns(connection, None)
    connection.close()


def test_unsupported_connection_object(fake_drivers):
    with pytest.raises(DialectConfigurationError):
        describe_connection(object())


@pytest.mark.parametrize(
    "number, expected",
    [(150004, "15.4"), (90624, "9.6.24"), (100001, "10.1")],
)
def test_format_server_version(number, expected):
    assert postgres_reader.format_server_version(number) == expected


def test_slow_probe_threshold_from_env(monkeypatch, caplog):
    monkeypatch.setenv("BLAZE_SLOW_PROBE_MS", "0")
    connection = sqlite3.connect(":memory:")
    probe = DbApiProbe(connection, label="sqlite")
    assert probe.slow_probe_ms == 0
    caplog.set_level(logging.DEBUG, logger="blazedialect.introspection.sqlite")
    probe.fetch_strings("SELECT 1")
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert any("sqlite.probe took" in record.getMessage() for record in warnings)
    connection.close()


def test_explicit_threshold_beats_env(monkeypatch):
    monkeypatch.setenv("BLAZE_SLOW_PROBE_MS", "0")
    probe = DbApiProbe(sqlite3.connect(":memory:"), slow_probe_ms=250)
    assert probe.slow_probe_ms == 250


def test_invalid_slow_probe_env(monkeypatch):
    monkeypatch.setenv("BLAZE_SLOW_PROBE_MS", "fast")
    with pytest.raises(DialectConfigurationError):
        DbApiProbe(sqlite3.connect(":memory:"))
