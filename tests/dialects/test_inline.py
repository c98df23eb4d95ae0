import pytest

from blazedialect.dialects import (
    ConnectionIdentity,
    DialectDescriptor,
    DialectOverlay,
    GENERIC_CHAIN,
    InlineValueTable,
    SchemaMismatchError,
)
from blazedialect.registry import default_registry

NAMES = ["id", "name"]
TYPES = ["Integer", "String"]
ROWS = [[1, "a"], [2, "b"]]


def dialect(tag, product=None, version=""):
    return default_registry().resolve_tag(tag, ConnectionIdentity(product or tag, version))


def generic():
    return DialectDescriptor.create("generic", GENERIC_CHAIN, ConnectionIdentity("Generic"))


def test_native_values_list():
    sql = dialect("postgres").generate_inline(NAMES, TYPES, ROWS)
    assert sql == """SELECT * FROM (VALUES (1, 'a'), (2, 'b')) AS "t" ("id", "name")"""


def test_union_of_selects():
    sql = generic().generate_inline(NAMES, TYPES, ROWS)
    assert sql == (
        """SELECT CAST(1 AS INTEGER) AS "id", CAST('a' AS VARCHAR(1)) AS "name" """
        """UNION ALL SELECT CAST(2 AS INTEGER), CAST('b' AS VARCHAR(1))"""
    )


def test_union_with_per_row_from_clause():
    sql = dialect("oracle").generate_inline(NAMES, TYPES, ROWS)
    assert sql == (
        """SELECT CAST(1 AS NUMBER(10)) AS "id", CAST('a' AS VARCHAR2(1)) AS "name" FROM dual """
        """UNION ALL SELECT CAST(2 AS NUMBER(10)), CAST('b' AS VARCHAR2(1)) FROM dual"""
    )


def test_values_list_casts_nulls_and_optionally_strings():
    assert dialect("postgres").generate_inline(["n"], ["String"], [["ab"], [None]]) == (
        """SELECT * FROM (VALUES ('ab'), (CAST(NULL AS VARCHAR(2)))) AS "t" ("n")"""
    )
    assert dialect("neoview").generate_inline(["n"], ["String"], [["ab"]]) == (
        """SELECT * FROM (VALUES (CAST('ab' AS VARCHAR(2)))) AS "t" ("n")"""
    )


def test_empty_batch_yields_typed_empty_result():
    assert generic().generate_inline(NAMES, TYPES, []) == (
        """SELECT CAST(NULL AS INTEGER) AS "id", CAST(NULL AS VARCHAR(1)) AS "name" WHERE 1 = 0"""
    )
    assert dialect("mysql").generate_inline(NAMES, TYPES, []) == (
        "SELECT CAST(NULL AS SIGNED) AS `id`, CAST(NULL AS CHAR(1)) AS `name` FROM DUAL WHERE 1 = 0"
    )


@pytest.mark.parametrize("tag", ["db2", "derby", "hsqldb", "h2"])
def test_empty_batch_keeps_values_list_shape(tag):
    assert dialect(tag).generate_inline(NAMES, TYPES, []) == (
        """SELECT * FROM (VALUES (CAST(NULL AS INTEGER), CAST(NULL AS VARCHAR(1)))) """
        """AS "t" ("id", "name") WHERE 1 = 0"""
    )


def test_empty_values_list_as_derived_table():
    sql = dialect("postgres").generate_inline(["n"], ["Integer"], [], as_derived_table=True, alias="v")
    assert sql == """(SELECT * FROM (VALUES (CAST(NULL AS INTEGER))) AS "v" ("n") WHERE 1 = 0) AS "v\""""


def test_informix_selects_from_systables():
    sql = dialect("informix").generate_inline(["id"], ["Integer"], [[1], [2]])
    assert sql == (
        'SELECT CAST(1 AS INTEGER) AS "id" FROM systables WHERE tabid = 1 '
        "UNION ALL SELECT CAST(2 AS INTEGER) FROM systables WHERE tabid = 1"
    )
    assert dialect("informix").generate_inline(["id"], ["Integer"], []) == (
        'SELECT CAST(NULL AS INTEGER) AS "id" FROM systables WHERE tabid = 1 AND 1 = 0'
    )


def test_interbase_selects_from_rdb_database():
    assert dialect("interbase").generate_inline(["id"], ["Integer"], [[1]]) == (
        'SELECT CAST(1 AS INTEGER) AS "id" FROM RDB$DATABASE'
    )
    assert dialect("interbase").generate_inline(["id"], ["Integer"], []) == (
        'SELECT CAST(NULL AS INTEGER) AS "id" FROM RDB$DATABASE WHERE 1 = 0'
    )


def test_union_order_by_uses_ordinals_when_required():
    sql = generic().generate_inline(NAMES, TYPES, ROWS, order_by=["name"])
    assert sql.endswith(" ORDER BY 2")
    sql = dialect("mssql").generate_inline(NAMES, TYPES, ROWS, order_by=["name"])
    assert sql.endswith(" ORDER BY [name]")


def test_single_row_order_by_uses_names():
    sql = generic().generate_inline(NAMES, TYPES, ROWS[:1], order_by=["id"])
    assert sql.endswith(' ORDER BY "id"')


def test_order_by_unknown_column():
    with pytest.raises(SchemaMismatchError):
        generic().generate_inline(NAMES, TYPES, ROWS, order_by=["missing"])


def test_derived_table_alias_rules():
    assert dialect("postgres").generate_inline(["n"], ["Integer"], [[1]], as_derived_table=True, alias="v") == (
        """(SELECT * FROM (VALUES (1)) AS "v" ("n")) AS "v\""""
    )
    hive = dialect("hive").generate_inline(["n"], ["Integer"], [[1]], as_derived_table=True)
    assert hive == "(SELECT CAST(1 AS INT) AS `n`) `t`"
    sqlite = dialect("sqlite").generate_inline(["n"], ["Integer"], [[1]], as_derived_table=True)
    assert sqlite == '(SELECT CAST(1 AS INTEGER) AS "n")'


def test_field_alias_keyword_follows_capability():
    chain = GENERIC_CHAIN.extend(DialectOverlay(name="noas", flags={"allows_field_as": False}))
    noas = DialectDescriptor.create("noas", chain, ConnectionIdentity("noas"))
    assert noas.generate_inline(["n"], ["Integer"], [[1]]) == 'SELECT CAST(1 AS INTEGER) "n"'
    assert noas.generate_inline(["n"], ["Integer"], []) == 'SELECT CAST(NULL AS INTEGER) "n" WHERE 1 = 0'


def test_decimal_columns_are_sized_from_values():
    sql = generic().generate_inline(["p"], ["Decimal"], [["1.25"], ["10.5"]])
    assert "CAST(1.25 AS DECIMAL(4, 2))" in sql
    assert "CAST(10.5 AS DECIMAL(4, 2))" in sql


def test_literal_quirks_flow_into_inline_rows():
    sql = dialect("luciddb", "LucidDB").generate_inline(["d"], ["Double"], [["1.5"]])
    assert "1.5E0" in sql
    sql = dialect("mysql").generate_inline(["s"], ["String"], [["it's"]])
    assert "'it''s'" in sql


@pytest.mark.parametrize(
    "names, types, rows",
    [
        ([], [], []),
        (["a", "b"], ["Integer"], []),
        (["a", "a"], ["Integer", "Integer"], []),
        (["a"], ["Integer"], [[1, 2]]),
        (["a"], ["Blob"], [[1]]),
    ],
)
def test_schema_mismatches(names, types, rows):
    with pytest.raises(SchemaMismatchError):
        generic().generate_inline(names, types, rows)


def test_inline_table_keeps_nulls():
    table = InlineValueTable.of(["a"], ["Integer"], [[None], [3]])
    assert table.rows == ((None,), ("3",))
    assert table.column_values(0) == ["3"]
