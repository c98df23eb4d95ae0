"""
Config-driven dialects: a named overlay on top of a built-in dialect, read from
a DSN, an environment variable or a plain mapping.

Example DSN::

    dialect://acme?base=postgres&products=acme,acmedb&requiresAliasForFromQuery=true&quote=backtick
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Mapping

from .dialects.base import FLAG_TYPES, QuoteStyle
from .dialects.composition import DialectChain, DialectOverlay
from .dialects.errors import DialectConfigurationError
from .dialects.generic import GENERIC_CHAIN, GENERIC_TAG
from .registry.base import FactoryEntry
from .registry.builtin import builtin_entries
from .registry.predicates import named
from .security.dsns import parse_dsn
from .utils.naming import camel_to_snake

DEFAULT_ENV = "BLAZE_DIALECT_DSN"
DSN_SCHEME = "dialect"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_RESERVED_KEYS = {"name", "base", "products", "quote", "quote_style", "description", "flags"}


def _parse_bool(value: Any, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise DialectConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def _parse_int(value: Any, *, key: str) -> int:
    if isinstance(value, bool):
        raise DialectConfigurationError(f"Invalid integer value for '{key}': {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise DialectConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc


def _parse_quote_style(value: Any, *, key: str = "quote") -> QuoteStyle:
    if isinstance(value, QuoteStyle):
        return value
    try:
        return QuoteStyle(str(value).strip().lower())
    except ValueError as exc:
        choices = ", ".join(style.value for style in QuoteStyle)
        raise DialectConfigurationError(
            f"Invalid quote style for '{key}': {value!r} (expected one of {choices})"
        ) from exc


def _parse_products(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    items = value.split(",") if isinstance(value, str) else list(value)
    return tuple(str(item).strip() for item in items if str(item).strip())


def coerce_flag(key: str, value: Any) -> tuple[str, Any]:
    """
    Normalize an option key to a flag name and convert ``value`` to the flag's type.

    Unknown flags keep their raw value; chain validation reports them.
    """

    name = camel_to_snake(key.strip())
    expected = FLAG_TYPES.get(name)
    if expected is None:
        return name, value
    if bool in expected:
        return name, _parse_bool(value, key=key)
    if QuoteStyle in expected:
        return name, _parse_quote_style(value, key=key)
    if int in expected:
        return name, _parse_int(value, key=key)
    if value is None or value == "":
        return name, None
    return name, str(value)


@dataclass
class DialectConfig:
    """
    A configured dialect: ``name`` extends the built-in ``base`` dialect for the
    listed ``products`` with flag overrides.
    """

    name: str
    base: str = GENERIC_TAG
    products: tuple[str, ...] = ()
    flags: dict[str, Any] = field(default_factory=dict)
    quote_style: QuoteStyle | None = None
    description: str = ""
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise DialectConfigurationError("A configured dialect needs a name")
        self.name = self.name.strip().lower()
        self.base = (self.base or GENERIC_TAG).strip().lower()

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], *, source: str | None = None) -> "DialectConfig":
        options = dict(values)
        flags: dict[str, Any] = {}
        for key, value in dict(options.pop("flags", None) or {}).items():
            name, coerced = coerce_flag(str(key), value)
            flags[name] = coerced
        for key in list(options):
            if key not in _RESERVED_KEYS:
                name, coerced = coerce_flag(str(key), options.pop(key))
                flags[name] = coerced

        quote = options.get("quote", options.get("quote_style"))
        return cls(
            name=str(options.get("name") or ""),
            base=str(options.get("base") or GENERIC_TAG),
            products=_parse_products(options.get("products")),
            flags=flags,
            quote_style=_parse_quote_style(quote) if quote else None,
            description=str(options.get("description") or ""),
            source=source,
        )

    @classmethod
    def from_dsn(cls, dsn: str, *, source: str | None = None) -> "DialectConfig":
        parsed = parse_dsn(dsn)
        if parsed.scheme != DSN_SCHEME:
            raise DialectConfigurationError(
                f"Dialect DSN must use the '{DSN_SCHEME}://' scheme, got {parsed.scheme!r}"
            )
        values: dict[str, Any] = dict(parsed.query)
        values["name"] = parsed.host or parsed.database or ""
        return cls.from_mapping(values, source=source or parsed.redacted())

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_ENV) -> "DialectConfig":
        value = os.getenv(env_var)
        if not value:
            raise DialectConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var)

    # ------------------------------------------------------------------ #
    # Conversion
    # ------------------------------------------------------------------ #
    def to_overlay(self) -> DialectOverlay:
        flags = dict(self.flags)
        if self.quote_style is not None:
            flags["quote_style"] = self.quote_style
        return DialectOverlay(
            name=self.name,
            flags=flags,
            description=self.description or f"Configured dialect {self.name}",
        )

    def base_chain(self) -> DialectChain:
        if self.base == GENERIC_TAG:
            return GENERIC_CHAIN
        for entry in builtin_entries():
            if entry.tag == self.base and entry.chain is not None:
                return entry.chain
        raise DialectConfigurationError(
            f"Unknown base dialect {self.base!r} for configured dialect {self.name!r}"
        )

    def to_chain(self) -> DialectChain:
        return self.base_chain().extend(self.to_overlay())

    def to_entry(self) -> FactoryEntry:
        products = self.products or (self.name,)
        return FactoryEntry.for_chain(
            self.name,
            self.to_chain(),
            named(*products),
            self.description,
        )
