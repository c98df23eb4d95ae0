"""
Resolved dialect: the capability descriptor handed to SQL-building code.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from .base import ConnectionIdentity, DialectCapabilities
from .composition import DialectChain
from .errors import DialectError, SchemaMismatchError
from .inline import InlineValueTable, column_cast_type, generate_inline
from .refinement import IdentityRefinement, MetadataProbe, refine_identity
from .types import Datatype, LogicalType, coerce_columns, default_logical_type


class DialectDescriptor:
    """
    Immutable view over a specialised dialect chain for one connection identity.

    Instances are created once per resolution and are safe to share between threads.
    """

    __slots__ = ("_tag", "_chain", "_identity", "_capabilities", "_refinement")

    def __init__(
        self,
        identity_tag: str,
        chain: DialectChain,
        identity: ConnectionIdentity,
        refinement: IdentityRefinement | None = None,
    ) -> None:
        self._tag = identity_tag
        self._chain = chain
        self._identity = identity
        self._capabilities = chain.capabilities()
        self._refinement = refinement or IdentityRefinement(identity.product_name)

    @classmethod
    def create(
        cls,
        identity_tag: str,
        chain: DialectChain,
        identity: ConnectionIdentity,
        probe: MetadataProbe | None = None,
    ) -> "DialectDescriptor":
        """
        Specialise ``chain`` for the identity's version, then run identity refinement once.
        """

        specialized = chain.specialize(identity)
        refinement = refine_identity(specialized, identity, probe)
        return cls(identity_tag, specialized, identity, refinement)

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_refinement"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        return f"DialectDescriptor({self._tag!r}, chain={self._chain.names})"

    # ------------------------------------------------------------------ #
    # Identity
    # ------------------------------------------------------------------ #
    @property
    def identity_tag(self) -> str:
        return self._tag

    @property
    def chain(self) -> DialectChain:
        return self._chain

    @property
    def identity(self) -> ConnectionIdentity:
        return self._identity

    @property
    def refinement(self) -> IdentityRefinement:
        return self._refinement

    @property
    def product_name(self) -> str:
        return self._refinement.product_name

    @property
    def effective_tag(self) -> str:
        return self._refinement.tag or self._tag

    # ------------------------------------------------------------------ #
    # Capabilities
    # ------------------------------------------------------------------ #
    @property
    def capabilities(self) -> DialectCapabilities:
        return self._capabilities

    def flag(self, name: str) -> Any:
        return self._chain.flag(name)

    def source_of(self, name: str) -> str:
        return self._chain.source_of(name)

    def _hook(self, name: str):
        return self._chain.hook(name)

    # ------------------------------------------------------------------ #
    # Quoting
    # ------------------------------------------------------------------ #
    def quote_identifier(self, *names: str | None) -> str:
        """
        Quote and dot-join the non-empty parts: ``quote_identifier(None, "t")`` -> ``"t"``.
        """

        parts = [name for name in names if name]
        if not parts:
            raise DialectError("quote_identifier needs at least one name")
        quote = self._hook("quote_identifier")
        return ".".join(quote(self, part) for part in parts)

    def quote_string_literal(self, value: str) -> str:
        return self._hook("quote_string_literal")(self, value)

    def quote_numeric_literal(self, text: str, datatype: Datatype = Datatype.NUMERIC) -> str:
        return self._hook("quote_numeric_literal")(self, text, datatype)

    def needs_exponent(self, value: Any, text: str) -> bool:
        return self._hook("needs_exponent")(self, value, text)

    def quote_boolean_literal(self, text: str) -> str:
        return self._hook("quote_boolean_literal")(self, text)

    def quote_date_literal(self, text: str) -> str:
        return self._hook("quote_date_literal")(self, text)

    def quote_time_literal(self, text: str) -> str:
        return self._hook("quote_time_literal")(self, text)

    def quote_timestamp_literal(self, text: str) -> str:
        return self._hook("quote_timestamp_literal")(self, text)

    def quote(self, value: str | None, datatype: Datatype | str) -> str:
        """
        Render ``value`` as a literal of ``datatype``; ``None`` renders as ``NULL``.
        """

        if value is None:
            return "NULL"
        datatype = Datatype.parse(datatype)
        if datatype is Datatype.STRING:
            return self.quote_string_literal(value)
        if datatype is Datatype.BOOLEAN:
            return self.quote_boolean_literal(value)
        if datatype is Datatype.DATE:
            return self.quote_date_literal(value)
        if datatype is Datatype.TIME:
            return self.quote_time_literal(value)
        if datatype is Datatype.TIMESTAMP:
            return self.quote_timestamp_literal(value)
        return self.quote_numeric_literal(value, datatype)

    def cast_type(self, datatype: Datatype | str, values: Sequence[str] = ()) -> str:
        return column_cast_type(self, Datatype.parse(datatype), list(values))

    def column_type(
        self, datatype: Datatype | str, size: int | None = None, scale: int | None = None
    ) -> str:
        """
        Column type for DDL; ``size`` fills the length or precision the type needs.
        """

        datatype = Datatype.parse(datatype)
        template = self._hook("column_type")(self, datatype)
        if "{" in template and size is None:
            raise SchemaMismatchError(f"{datatype.value} columns need a size on {self._tag!r}")
        return template.format(length=size, precision=size, scale=scale or 0)

    def cast_expression(self, expression: str, type_name: str) -> str:
        return self._hook("cast_expression")(self, expression, type_name)

    # ------------------------------------------------------------------ #
    # Expressions
    # ------------------------------------------------------------------ #
    def wrap_upper(self, expression: str) -> str:
        return self._hook("wrap_upper")(self, expression)

    def if_then_else(self, condition: str, then_expression: str, else_expression: str) -> str:
        return self._hook("if_then_else")(self, condition, then_expression, else_expression)

    def generate_order_item(
        self,
        expression: str,
        *,
        nullable: bool = True,
        ascending: bool = True,
        collate_nulls_last: bool = True,
    ) -> str:
        if not nullable:
            return f"{expression} {'ASC' if ascending else 'DESC'}"
        return self._hook("order_by_nulls")(self, expression, ascending, collate_nulls_last)

    def generate_regular_expression(self, source: str, pattern: str) -> str | None:
        """
        Predicate matching ``source`` against ``pattern``, or ``None`` when the
        dialect cannot express it (or the pattern does not compile).
        """

        if not self._capabilities.allows_regex_in_where:
            return None
        return self._hook("regular_expression")(self, source, pattern)

    def append_hints(self, hints: Mapping[str, str]) -> str:
        if not hints:
            return ""
        return self._hook("hints_after_from")(self, hints)

    # ------------------------------------------------------------------ #
    # DDL
    # ------------------------------------------------------------------ #
    def require_ddl(self, operation: str) -> None:
        if not self._capabilities.allows_ddl:
            raise DialectError(f"Dialect {self._tag!r} does not allow DDL ({operation})")

    def drop_table(self, table: str, schema: str | None = None, *, if_exists: bool = True) -> str:
        self.require_ddl("DROP TABLE")
        guard = "IF EXISTS " if if_exists else ""
        return f"DROP TABLE {guard}{self.quote_identifier(schema, table)}"

    def clear_table(self, table: str, schema: str | None = None) -> str:
        self.require_ddl("TRUNCATE TABLE")
        return self._hook("truncate_statement")(self, self.quote_identifier(schema, table))

    def create_schema(self, schema: str, *, if_not_exists: bool = True) -> str:
        self.require_ddl("CREATE SCHEMA")
        guard = "IF NOT EXISTS " if if_not_exists else ""
        return f"CREATE SCHEMA {guard}{self.quote_identifier(schema)}"

    # ------------------------------------------------------------------ #
    # Inline tables and type mapping
    # ------------------------------------------------------------------ #
    def generate_inline(
        self,
        column_names: Sequence[str],
        column_types: Sequence[Datatype | str],
        rows: Sequence[Sequence[Any]],
        *,
        order_by: Sequence[str] | None = None,
        as_derived_table: bool = False,
        alias: str = "t",
    ) -> str:
        table = InlineValueTable.of(column_names, column_types, rows)
        return generate_inline(
            self, table, order_by=order_by, as_derived_table=as_derived_table, alias=alias
        )

    def map_type(self, columns: Sequence[Any], column_index: int) -> LogicalType:
        """
        Logical type of column ``column_index`` (0-based) of a result-set description.

        Overlay rules are tried nearest-first; a rule returning ``None`` defers to the
        next one and finally to the standard mapping.
        """

        described = coerce_columns(columns)
        if not 0 <= column_index < len(described):
            raise SchemaMismatchError(
                f"Column index {column_index} out of range for {len(described)} columns"
            )
        column = described[column_index]
        for _, rule in self._chain.type_rules(column.type_code):
            result = rule if isinstance(rule, LogicalType) else rule(column)
            if result is not None:
                return result
        return default_logical_type(column)

    def type_rule_source(self, type_code: int) -> str:
        rules = self._chain.type_rules(type_code)
        return rules[0][0] if rules else self._chain.root.name

