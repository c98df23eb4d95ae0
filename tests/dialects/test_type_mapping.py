import pytest

from blazedialect.dialects import (
    ColumnDescription,
    ConnectionIdentity,
    LogicalType,
    SchemaMismatchError,
    SqlType,
)
from blazedialect.registry import default_registry


def dialect(tag, product=None, version=""):
    return default_registry().resolve_tag(tag, ConnectionIdentity(product or tag, version))


def column(type_code, precision=0, scale=0, name="c"):
    return ColumnDescription(name=name, type_code=type_code, precision=precision, scale=scale)


def map_one(tag, col):
    return dialect(tag).map_type([col], 0)


def test_standard_mapping_sizes_exact_numerics():
    assert map_one("sqlite", column(SqlType.NUMERIC, 5)) == LogicalType.INTEGER
    assert map_one("sqlite", column(SqlType.NUMERIC, 12)) == LogicalType.LONG
    assert map_one("sqlite", column(SqlType.NUMERIC, 20)) == LogicalType.NUMERIC
    assert map_one("sqlite", column(SqlType.DECIMAL, 10, 2)) == LogicalType.NUMERIC
    assert map_one("sqlite", column(SqlType.VARCHAR)) == LogicalType.STRING
    assert map_one("sqlite", column(9999)) == LogicalType.OBJECT


def test_pdi_keeps_decimals_as_objects():
    assert map_one("pdi", column(SqlType.DECIMAL, 10, 2)) == LogicalType.OBJECT
    assert map_one("pdi", column(SqlType.NUMERIC, 5)) == LogicalType.INTEGER


def test_vertica_sizes_numerics_by_precision():
    assert map_one("vertica", column(SqlType.NUMERIC, 9)) == LogicalType.INTEGER
    assert map_one("vertica", column(SqlType.NUMERIC, 18)) == LogicalType.LONG
    assert map_one("vertica", column(SqlType.NUMERIC, 5, 2)) == LogicalType.DOUBLE
    assert map_one("vertica", column(SqlType.SMALLINT)) == LogicalType.LONG
    assert map_one("vertica", column(SqlType.BOOLEAN)) == LogicalType.INTEGER


def test_monetdb_unsized_numerics_are_doubles():
    assert map_one("monetdb", column(SqlType.NUMERIC)) == LogicalType.DOUBLE
    assert map_one("monetdb", column(SqlType.NUMERIC, 10, 2)) == LogicalType.NUMERIC
    assert map_one("monetdb", column(SqlType.BOOLEAN)) == LogicalType.OBJECT


def test_oracle_number_shapes():
    assert map_one("oracle", column(SqlType.NUMERIC, 126, -127)) == LogicalType.DOUBLE
    assert map_one("oracle", column(SqlType.NUMERIC, 0, -127, name="m1")) == LogicalType.OBJECT
    assert map_one("oracle", column(SqlType.NUMERIC, 0, -127, name="c1")) == LogicalType.INTEGER
    assert map_one("oracle", column(SqlType.NUMERIC, 38)) == LogicalType.INTEGER
    assert map_one("oracle", column(SqlType.DECIMAL, 12, 2)) == LogicalType.DOUBLE


def test_postgres_unconstrained_measure_numerics():
    assert map_one("postgres", column(SqlType.NUMERIC, name="m1")) == LogicalType.OBJECT
    assert map_one("postgres", column(SqlType.NUMERIC, name="amount")) == LogicalType.NUMERIC
    assert map_one("postgres", column(SqlType.NUMERIC, name="M1")) == LogicalType.NUMERIC
    assert map_one("postgres", column(SqlType.NUMERIC, 5)) == LogicalType.INTEGER


def test_netezza_rule_beats_inherited_postgres_rule():
    assert map_one("netezza", column(SqlType.NUMERIC, name="m1")) == LogicalType.DOUBLE
    assert map_one("netezza", column(SqlType.DECIMAL, 38)) == LogicalType.DOUBLE
    assert map_one("netezza", column(SqlType.DECIMAL, 10, 2)) == LogicalType.NUMERIC


def test_snowflake_scaled_numerics():
    assert map_one("snowflake", column(SqlType.NUMERIC, 10, 2)) == LogicalType.NUMERIC
    assert map_one("snowflake", column(SqlType.NUMERIC, 10)) == LogicalType.LONG


def test_dbapi_description_tuples_are_accepted():
    description = [
        ("id", "integer", None, None, None, None, False),
        ("total", "decimal", None, None, 10, 0, True),
    ]
    assert dialect("sqlite").map_type(description, 0) == LogicalType.INTEGER
    assert dialect("sqlite").map_type(description, 1) == LogicalType.LONG


def test_column_index_out_of_range():
    with pytest.raises(SchemaMismatchError):
        dialect("sqlite").map_type([column(SqlType.INTEGER)], 1)
    with pytest.raises(SchemaMismatchError):
        dialect("sqlite").map_type([("lonely",)], 0)


def test_type_rule_source():
    assert dialect("netezza").type_rule_source(SqlType.NUMERIC) == "netezza"
    assert dialect("netezza").type_rule_source(SqlType.VARCHAR) == "generic"
    assert dialect("postgres").type_rule_source(SqlType.NUMERIC) == "postgres"
