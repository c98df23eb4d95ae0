import logging
import sqlite3

import pytest

from blazedialect.dialects import DialectError, SchemaMismatchError
from blazedialect.registry import default_registry
from blazedialect.schema import (
    ColumnDefinition,
    ForeignKey,
    IndexColumn,
    ReferentialAction,
    StatementBuilder,
)

COLUMNS = [
    ColumnDefinition("id", "Integer", nullable=False),
    ColumnDefinition("name", "String", size=80),
    ColumnDefinition("price", "Decimal", size=10, scale=2, default="0"),
]


def builder(tag):
    return StatementBuilder(default_registry().resolve_tag(tag))


def test_create_table_sql():
    sql = builder("postgres").create_table_sql("item", COLUMNS, schema="shop", if_not_exists=True)
    assert sql == (
        'CREATE TABLE IF NOT EXISTS "shop"."item" ("id" INTEGER NOT NULL, '
        '"name" VARCHAR(80), "price" DECIMAL(10, 2) DEFAULT 0)'
    )


def test_column_types_follow_the_dialect():
    assert builder("mysql").create_table_sql("item", COLUMNS) == (
        "CREATE TABLE `item` (`id` INT NOT NULL, `name` VARCHAR(80), `price` DECIMAL(10, 2) DEFAULT 0)"
    )
    assert builder("oracle").create_table_sql("item", COLUMNS[:2]) == (
        'CREATE TABLE "item" ("id" NUMBER(10) NOT NULL, "name" VARCHAR2(80))'
    )
    assert builder("mssql").create_table_sql("flags", [ColumnDefinition("on", "Boolean")]) == (
        "CREATE TABLE [flags] ([on] BIT)"
    )


def test_sized_types_need_a_size():
    with pytest.raises(SchemaMismatchError):
        builder("postgres").create_table_sql("item", [ColumnDefinition("name", "String")])
    with pytest.raises(SchemaMismatchError):
        builder("postgres").create_table_sql("item", [])


def test_drop_statements_log_warning(caplog):
    caplog.set_level(logging.WARNING, logger="blazedialect.schema.builder")
    postgres = builder("postgres")
    assert postgres.drop_table_sql("item", schema="shop", if_exists=True) == 'DROP TABLE IF EXISTS "shop"."item"'
    assert postgres.drop_table_sql("recent", kind="view") == 'DROP VIEW "recent"'
    assert postgres.drop_schema_sql("shop", if_exists=True) == 'DROP SCHEMA IF EXISTS "shop"'
    messages = [record.getMessage() for record in caplog.records]
    assert any("DROP TABLE generated" in message for message in messages)
    assert any("DROP SCHEMA generated" in message for message in messages)


def test_schema_and_truncate_delegate_to_descriptor():
    assert builder("mysql").create_schema_sql("shop") == "CREATE SCHEMA `shop`"
    assert builder("sqlite").truncate_table_sql("item") == 'DELETE FROM "item"'
    assert builder("postgres").truncate_table_sql("item", schema="shop") == 'TRUNCATE TABLE "shop"."item"'


def test_column_statements():
    postgres = builder("postgres")
    column = ColumnDefinition("qty", "Integer", nullable=False, default="1")
    assert postgres.add_column_sql("item", column) == (
        'ALTER TABLE "item" ADD COLUMN "qty" INTEGER NOT NULL DEFAULT 1'
    )
    assert postgres.drop_column_sql("item", "qty", if_exists=True) == (
        'ALTER TABLE "item" DROP COLUMN IF EXISTS "qty"'
    )
    assert postgres.modify_column_sql("item", ColumnDefinition("qty", "BigInt")) == (
        'ALTER TABLE "item" ALTER COLUMN "qty" SET DATA TYPE BIGINT'
    )
    assert postgres.rename_column_sql("item", "qty", "quantity") == (
        'ALTER TABLE "item" RENAME COLUMN "qty" TO "quantity"'
    )
    assert postgres.rename_table_sql("item", "product", schema="shop") == (
        'ALTER TABLE "shop"."item" RENAME TO "product"'
    )


def test_primary_keys():
    postgres = builder("postgres")
    assert postgres.add_primary_key_sql("item", ["id"], constraint_name="pk_item") == (
        'ALTER TABLE "item" ADD CONSTRAINT "pk_item" PRIMARY KEY ("id")'
    )
    assert builder("mysql").add_primary_key_sql("item", ["a", "b"]) == (
        "ALTER TABLE `item` ADD PRIMARY KEY (`a`, `b`)"
    )
    assert builder("mysql").drop_primary_key_sql("item") == "ALTER TABLE `item` DROP PRIMARY KEY"
    assert postgres.drop_primary_key_sql("item", constraint_name="pk_item", if_exists=True) == (
        'ALTER TABLE "item" DROP CONSTRAINT IF EXISTS "pk_item"'
    )
    with pytest.raises(SchemaMismatchError):
        postgres.add_primary_key_sql("item", [])


def test_foreign_keys():
    key = ForeignKey(
        name="fk_line_item",
        table="line",
        column="item_id",
        referenced_table="item",
        referenced_column="id",
        on_delete=ReferentialAction.CASCADE,
    )
    assert builder("postgres").add_foreign_key_sql(key) == (
        'ALTER TABLE "line" ADD CONSTRAINT "fk_line_item" FOREIGN KEY ("item_id") '
        'REFERENCES "item" ("id") ON DELETE CASCADE ON UPDATE NO ACTION'
    )
    assert builder("postgres").drop_constraint_sql("line", "fk_line_item") == (
        'ALTER TABLE "line" DROP CONSTRAINT "fk_line_item"'
    )


def test_indexes():
    postgres = builder("postgres")
    sql = postgres.create_index_sql(
        "ix_item", "item", ["name", IndexColumn("price", ascending=False)], unique=True, if_not_exists=True
    )
    assert sql == 'CREATE UNIQUE INDEX IF NOT EXISTS "ix_item" ON "item" ("name", "price" DESC)'
    assert postgres.drop_index_sql("ix_item", if_exists=True) == 'DROP INDEX IF EXISTS "ix_item"'
    assert builder("mysql").drop_index_sql("ix_item", table="item") == "DROP INDEX `ix_item` ON `item`"
    with pytest.raises(SchemaMismatchError):
        postgres.create_index_sql("ix_item", "item", [])


def test_row_statements():
    mssql = builder("mssql")
    assert mssql.insert_sql("item", ["id", "name"], ["1", "'a'"], schema="dbo") == (
        "INSERT INTO [dbo].[item] ([id], [name]) VALUES (1, 'a')"
    )
    assert mssql.update_sql("item", {"name": "'b'", "qty": "2"}, where="[id] = 1") == (
        "UPDATE [item] SET [name] = 'b', [qty] = 2 WHERE [id] = 1"
    )
    assert mssql.delete_sql("item") == "DELETE FROM [item]"
    assert mssql.delete_sql("item", where="[id] = 1") == "DELETE FROM [item] WHERE [id] = 1"
    with pytest.raises(SchemaMismatchError):
        mssql.insert_sql("item", ["id"], ["1", "2"])
    with pytest.raises(SchemaMismatchError):
        mssql.update_sql("item", {})


def test_ddl_refused_but_dml_allowed_without_ddl():
    bigquery = builder("googlebigquery")
    with pytest.raises(DialectError):
        bigquery.create_table_sql("item", COLUMNS)
    with pytest.raises(DialectError):
        bigquery.create_index_sql("ix", "item", ["id"])
    assert bigquery.delete_sql("item") == "DELETE FROM `item`"


def test_statements_run_on_sqlite():
    sqlite = builder("sqlite")
    dialect = sqlite.dialect
    connection = sqlite3.connect(":memory:")
    connection.execute(sqlite.create_table_sql("item", COLUMNS))
    connection.execute(sqlite.create_index_sql("ix_item_name", "item", ["name"]))
    connection.execute(
        sqlite.insert_sql("item", ["id", "name"], [dialect.quote("1", "Integer"), dialect.quote("it's", "String")])
    )
    connection.execute(sqlite.update_sql("item", {"price": "2.5"}, where='"id" = 1'))
    connection.execute(sqlite.rename_column_sql("item", "name", "title"))
    rows = connection.execute('SELECT "id", "title", "price" FROM "item"').fetchall()
    assert rows == [(1, "it's", 2.5)]
    connection.execute(sqlite.delete_sql("item"))
    connection.execute(sqlite.drop_table_sql("item"))
    connection.close()
