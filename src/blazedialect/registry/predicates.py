"""
Identity predicates used by registry entries.

Product names and versions are compared after ``normalize_product_name`` so
case and punctuation differences between drivers do not matter.
"""

from __future__ import annotations

from typing import Callable

from ..dialects.base import ConnectionIdentity
from ..utils.naming import normalize_product_name

Predicate = Callable[[ConnectionIdentity], bool]


def tagged(*names: str) -> Predicate:
    """
    Accept identities whose product name or version equals one of ``names``.
    """

    wanted = frozenset(normalize_product_name(name) for name in names)

    def predicate(identity: ConnectionIdentity) -> bool:
        return (
            normalize_product_name(identity.product_name) in wanted
            or normalize_product_name(identity.product_version) in wanted
        )

    predicate.__qualname__ = f"tagged{names!r}"
    return predicate


def product_contains(*markers: str) -> Predicate:
    needles = tuple(normalize_product_name(marker) for marker in markers)

    def predicate(identity: ConnectionIdentity) -> bool:
        name = normalize_product_name(identity.product_name)
        return any(needle in name for needle in needles)

    predicate.__qualname__ = f"product_contains{markers!r}"
    return predicate


def version_contains(*markers: str) -> Predicate:
    needles = tuple(normalize_product_name(marker) for marker in markers)

    def predicate(identity: ConnectionIdentity) -> bool:
        version = normalize_product_name(identity.product_version)
        return any(needle in version for needle in needles)

    predicate.__qualname__ = f"version_contains{markers!r}"
    return predicate


def any_of(*predicates: Predicate) -> Predicate:
    def predicate(identity: ConnectionIdentity) -> bool:
        return any(check(identity) for check in predicates)

    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    def predicate(identity: ConnectionIdentity) -> bool:
        return all(check(identity) for check in predicates)

    return predicate


def not_(inner: Predicate) -> Predicate:
    def predicate(identity: ConnectionIdentity) -> bool:
        return not inner(identity)

    return predicate


def named(*markers: str) -> Predicate:
    """
    Shorthand for ``any_of(tagged(*markers), product_contains(*markers))``.
    """

    return any_of(tagged(*markers), product_contains(*markers))
