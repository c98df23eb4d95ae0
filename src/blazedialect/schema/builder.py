"""
Statement builder rendering dialect-quoted DDL and DML.

Identifiers go through the descriptor's quoting and column types through its
``column_type``. Values, defaults and WHERE conditions are SQL fragments the
caller has already rendered (for example with ``DialectDescriptor.quote``).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Mapping, Sequence

from ..dialects.descriptor import DialectDescriptor
from ..dialects.errors import SchemaMismatchError
from ..dialects.types import Datatype
from ..utils import get_logger


class ReferentialAction(str, enum.Enum):
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    SET_DEFAULT = "SET DEFAULT"
    RESTRICT = "RESTRICT"
    NO_ACTION = "NO ACTION"


@dataclass(frozen=True)
class ColumnDefinition:
    """
    A column for CREATE TABLE and ALTER TABLE; ``size`` is the length or precision.
    """

    name: str
    datatype: Datatype | str
    size: int | None = None
    scale: int | None = None
    nullable: bool = True
    default: str | None = None


@dataclass(frozen=True)
class IndexColumn:
    name: str
    ascending: bool | None = None


@dataclass(frozen=True)
class ForeignKey:
    name: str
    table: str
    column: str
    referenced_table: str
    referenced_column: str
    schema: str | None = None
    referenced_schema: str | None = None
    on_delete: ReferentialAction = ReferentialAction.NO_ACTION
    on_update: ReferentialAction = ReferentialAction.NO_ACTION


class StatementBuilder:
    """
    Produces dialect-specific SQL statements for one descriptor.
    """

    def __init__(self, dialect: DialectDescriptor) -> None:
        self.dialect = dialect
        self.logger = get_logger("schema.builder")

    # ------------------------------------------------------------------ #
    # Schemas and tables
    # ------------------------------------------------------------------ #
    def create_schema_sql(self, schema: str, *, if_not_exists: bool = False) -> str:
        return self.dialect.create_schema(schema, if_not_exists=if_not_exists)

    def drop_schema_sql(self, schema: str, *, if_exists: bool = False) -> str:
        self.dialect.require_ddl("DROP SCHEMA")
        self.logger.warning(
            "DROP SCHEMA generated for %s; confirm destructive migration before applying.", schema
        )
        guard = "IF EXISTS " if if_exists else ""
        return f"DROP SCHEMA {guard}{self.dialect.quote_identifier(schema)}"

    def create_table_sql(
        self,
        table: str,
        columns: Sequence[ColumnDefinition],
        *,
        schema: str | None = None,
        if_not_exists: bool = False,
    ) -> str:
        self.dialect.require_ddl("CREATE TABLE")
        if not columns:
            raise SchemaMismatchError(f"Table {table!r} needs at least one column")
        guard = "IF NOT EXISTS " if if_not_exists else ""
        column_list = ", ".join(self._column_definition(column) for column in columns)
        return f"CREATE TABLE {guard}{self._table(schema, table)} ({column_list})"

    def drop_table_sql(
        self, table: str, *, schema: str | None = None, if_exists: bool = False, kind: str = "TABLE"
    ) -> str:
        """
        DROP for a table or another container such as a VIEW.
        """

        self.dialect.require_ddl(f"DROP {kind}")
        table_name = self._table(schema, table)
        self.logger.warning(
            "DROP %s generated for %s; confirm destructive migration before applying.",
            kind,
            table_name,
        )
        guard = "IF EXISTS " if if_exists else ""
        return f"DROP {kind.upper()} {guard}{table_name}"

    def truncate_table_sql(self, table: str, *, schema: str | None = None) -> str:
        return self.dialect.clear_table(table, schema)

    def rename_table_sql(self, table: str, new_name: str, *, schema: str | None = None) -> str:
        self.dialect.require_ddl("RENAME TABLE")
        return f"ALTER TABLE {self._table(schema, table)} RENAME TO {self.dialect.quote_identifier(new_name)}"

    # ------------------------------------------------------------------ #
    # Columns
    # ------------------------------------------------------------------ #
    def add_column_sql(self, table: str, column: ColumnDefinition, *, schema: str | None = None) -> str:
        self.dialect.require_ddl("ADD COLUMN")
        return f"ALTER TABLE {self._table(schema, table)} ADD COLUMN {self._column_definition(column)}"

    def drop_column_sql(
        self, table: str, column: str, *, schema: str | None = None, if_exists: bool = False
    ) -> str:
        self.dialect.require_ddl("DROP COLUMN")
        guard = "IF EXISTS " if if_exists else ""
        return (
            f"ALTER TABLE {self._table(schema, table)} DROP COLUMN "
            f"{guard}{self.dialect.quote_identifier(column)}"
        )

    def modify_column_sql(self, table: str, column: ColumnDefinition, *, schema: str | None = None) -> str:
        self.dialect.require_ddl("ALTER COLUMN")
        sql = (
            f"ALTER TABLE {self._table(schema, table)} ALTER COLUMN "
            f"{self.dialect.quote_identifier(column.name)} SET DATA TYPE {self._column_type(column)}"
        )
        return sql + self._column_constraints(column)

    def rename_column_sql(self, table: str, old_name: str, new_name: str, *, schema: str | None = None) -> str:
        self.dialect.require_ddl("RENAME COLUMN")
        quote = self.dialect.quote_identifier
        return f"ALTER TABLE {self._table(schema, table)} RENAME COLUMN {quote(old_name)} TO {quote(new_name)}"

    # ------------------------------------------------------------------ #
    # Keys, constraints and indexes
    # ------------------------------------------------------------------ #
    def add_primary_key_sql(
        self,
        table: str,
        columns: Sequence[str],
        *,
        schema: str | None = None,
        constraint_name: str | None = None,
    ) -> str:
        self.dialect.require_ddl("ADD PRIMARY KEY")
        if not columns:
            raise SchemaMismatchError(f"Primary key on {table!r} needs at least one column")
        constraint = (
            f"CONSTRAINT {self.dialect.quote_identifier(constraint_name)} " if constraint_name else ""
        )
        return f"ALTER TABLE {self._table(schema, table)} ADD {constraint}PRIMARY KEY ({self._names(columns)})"

    def drop_primary_key_sql(
        self,
        table: str,
        *,
        schema: str | None = None,
        constraint_name: str | None = None,
        if_exists: bool = False,
    ) -> str:
        # without a constraint name only the MySQL form is available
        self.dialect.require_ddl("DROP PRIMARY KEY")
        if constraint_name is None:
            return f"ALTER TABLE {self._table(schema, table)} DROP PRIMARY KEY"
        return self.drop_constraint_sql(table, constraint_name, schema=schema, if_exists=if_exists)

    def add_foreign_key_sql(self, key: ForeignKey) -> str:
        self.dialect.require_ddl("ADD CONSTRAINT")
        quote = self.dialect.quote_identifier
        return (
            f"ALTER TABLE {self._table(key.schema, key.table)} ADD CONSTRAINT {quote(key.name)} "
            f"FOREIGN KEY ({quote(key.column)}) "
            f"REFERENCES {self._table(key.referenced_schema, key.referenced_table)} ({quote(key.referenced_column)}) "
            f"ON DELETE {ReferentialAction(key.on_delete).value} ON UPDATE {ReferentialAction(key.on_update).value}"
        )

    def drop_constraint_sql(
        self, table: str, name: str, *, schema: str | None = None, if_exists: bool = False
    ) -> str:
        self.dialect.require_ddl("DROP CONSTRAINT")
        guard = "IF EXISTS " if if_exists else ""
        return (
            f"ALTER TABLE {self._table(schema, table)} DROP CONSTRAINT "
            f"{guard}{self.dialect.quote_identifier(name)}"
        )

    def create_index_sql(
        self,
        name: str,
        table: str,
        columns: Sequence[str | IndexColumn],
        *,
        schema: str | None = None,
        unique: bool = False,
        if_not_exists: bool = False,
    ) -> str:
        self.dialect.require_ddl("CREATE INDEX")
        if not columns:
            raise SchemaMismatchError(f"Index {name!r} needs at least one column")
        items = []
        for column in columns:
            if isinstance(column, str):
                column = IndexColumn(column)
            item = self.dialect.quote_identifier(column.name)
            if column.ascending is not None:
                item += " ASC" if column.ascending else " DESC"
            items.append(item)
        unique_sql = "UNIQUE " if unique else ""
        guard = "IF NOT EXISTS " if if_not_exists else ""
        return (
            f"CREATE {unique_sql}INDEX {guard}{self.dialect.quote_identifier(name)} "
            f"ON {self._table(schema, table)} ({', '.join(items)})"
        )

    def drop_index_sql(
        self,
        name: str,
        *,
        table: str | None = None,
        schema: str | None = None,
        if_exists: bool = False,
    ) -> str:
        """
        DROP INDEX; MySQL needs ``table`` for its ``ON`` clause.
        """

        self.dialect.require_ddl("DROP INDEX")
        guard = "IF EXISTS " if if_exists else ""
        sql = f"DROP INDEX {guard}{self.dialect.quote_identifier(name)}"
        if table:
            sql += f" ON {self._table(schema, table)}"
        return sql

    # ------------------------------------------------------------------ #
    # Rows
    # ------------------------------------------------------------------ #
    def insert_sql(
        self, table: str, columns: Sequence[str], values: Sequence[str], *, schema: str | None = None
    ) -> str:
        if not columns or len(columns) != len(values):
            raise SchemaMismatchError(
                f"INSERT into {table!r} got {len(columns)} columns and {len(values)} values"
            )
        return (
            f"INSERT INTO {self._table(schema, table)} ({self._names(columns)}) "
            f"VALUES ({', '.join(values)})"
        )

    def update_sql(
        self,
        table: str,
        assignments: Mapping[str, str],
        *,
        schema: str | None = None,
        where: str | None = None,
    ) -> str:
        if not assignments:
            raise SchemaMismatchError(f"UPDATE of {table!r} needs at least one assignment")
        set_clause = ", ".join(
            f"{self.dialect.quote_identifier(column)} = {value}" for column, value in assignments.items()
        )
        sql = f"UPDATE {self._table(schema, table)} SET {set_clause}"
        return sql + (f" WHERE {where}" if where else "")

    def delete_sql(self, table: str, *, schema: str | None = None, where: str | None = None) -> str:
        sql = f"DELETE FROM {self._table(schema, table)}"
        return sql + (f" WHERE {where}" if where else "")

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _table(self, schema: str | None, table: str) -> str:
        return self.dialect.quote_identifier(schema, table)

    def _names(self, columns: Sequence[str]) -> str:
        return ", ".join(self.dialect.quote_identifier(column) for column in columns)

    def _column_type(self, column: ColumnDefinition) -> str:
        return self.dialect.column_type(column.datatype, column.size, column.scale)

    def _column_constraints(self, column: ColumnDefinition) -> str:
        extras = ""
        if not column.nullable:
            extras += " NOT NULL"
        if column.default is not None:
            extras += f" DEFAULT {column.default}"
        return extras

    def _column_definition(self, column: ColumnDefinition) -> str:
        return (
            f"{self.dialect.quote_identifier(column.name)} {self._column_type(column)}"
            f"{self._column_constraints(column)}"
        )
