"""
blazedialect public package initialization.

Resolve a connection identity to a dialect descriptor and use it to render
dialect-correct SQL fragments.
"""

from .config import DialectConfig  # noqa: F401
from .dialects import (  # noqa: F401
    CapabilityValidationError,
    ColumnDescription,
    ConnectionIdentity,
    Datatype,
    DialectCapabilities,
    DialectChain,
    DialectConfigurationError,
    DialectConnectionError,
    DialectDescriptor,
    DialectError,
    DialectOverlay,
    LiteralFormatError,
    LogicalType,
    QuoteStyle,
    SchemaMismatchError,
    SecondaryEngine,
    SqlType,
    UnsupportedDialectError,
    compose,
)
from .hooks import hooks  # noqa: F401
from .registry import (  # noqa: F401
    DialectRegistry,
    FactoryEntry,
    build_registry,
    default_registry,
)
from .schema import ColumnDefinition, StatementBuilder  # noqa: F401

__all__ = [
    "CapabilityValidationError",
    "ColumnDefinition",
    "ColumnDescription",
    "ConnectionIdentity",
    "Datatype",
    "DialectCapabilities",
    "DialectChain",
    "DialectConfig",
    "DialectConfigurationError",
    "DialectConnectionError",
    "DialectDescriptor",
    "DialectError",
    "DialectOverlay",
    "DialectRegistry",
    "FactoryEntry",
    "LiteralFormatError",
    "LogicalType",
    "QuoteStyle",
    "SchemaMismatchError",
    "SecondaryEngine",
    "SqlType",
    "StatementBuilder",
    "UnsupportedDialectError",
    "build_registry",
    "compose",
    "default_registry",
    "hooks",
]
