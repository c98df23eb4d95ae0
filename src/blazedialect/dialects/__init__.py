"""
Dialect overlays, composition and the resolved descriptor.
"""

from .base import ConnectionIdentity, DialectCapabilities, QuoteStyle
from .composition import DialectChain, DialectOverlay, compose
from .descriptor import DialectDescriptor
from .errors import (
    CapabilityValidationError,
    DialectConfigurationError,
    DialectConnectionError,
    DialectError,
    LiteralFormatError,
    SchemaMismatchError,
    UnsupportedDialectError,
)
from .generic import GENERIC_CHAIN, GENERIC_TAG
from .inline import InlineValueTable
from .refinement import IdentityRefinement, MetadataProbe, SecondaryEngine, refine_identity
from .types import ColumnDescription, Datatype, LogicalType, SqlType

__all__ = [
    "CapabilityValidationError",
    "ColumnDescription",
    "ConnectionIdentity",
    "Datatype",
    "DialectCapabilities",
    "DialectChain",
    "DialectConfigurationError",
    "DialectConnectionError",
    "DialectDescriptor",
    "DialectError",
    "DialectOverlay",
    "GENERIC_CHAIN",
    "GENERIC_TAG",
    "IdentityRefinement",
    "InlineValueTable",
    "LiteralFormatError",
    "LogicalType",
    "MetadataProbe",
    "QuoteStyle",
    "SchemaMismatchError",
    "SecondaryEngine",
    "SqlType",
    "UnsupportedDialectError",
    "compose",
    "refine_identity",
]
