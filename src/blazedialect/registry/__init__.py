"""
Dialect registry and resolver.
"""

from .base import DialectRegistry, FactoryEntry
from .builtin import build_registry, builtin_entries, default_registry
from .predicates import all_of, any_of, named, not_, product_contains, tagged, version_contains

__all__ = [
    "DialectRegistry",
    "FactoryEntry",
    "all_of",
    "any_of",
    "build_registry",
    "builtin_entries",
    "default_registry",
    "named",
    "not_",
    "product_contains",
    "tagged",
    "version_contains",
]
