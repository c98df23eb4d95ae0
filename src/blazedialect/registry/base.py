"""
Dialect registry: ordered factory entries resolved first-match-wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator

from ..dialects.base import ConnectionIdentity
from ..dialects.composition import DialectChain
from ..dialects.descriptor import DialectDescriptor
from ..dialects.errors import CapabilityValidationError, DialectError, UnsupportedDialectError
from ..dialects.refinement import MetadataProbe
from ..hooks import DIALECT_RESOLVED, IDENTITY_REFINED, hooks
from ..introspection import describe_connection
from ..security.redaction import redact_metadata
from ..utils import get_logger
from .predicates import Predicate

Builder = Callable[[ConnectionIdentity, "MetadataProbe | None"], DialectDescriptor]


@dataclass(frozen=True)
class FactoryEntry:
    """
    One registered dialect: the tag it answers to, the identities it accepts and
    how to build a descriptor for them.

    ``chain`` is set for entries built from an overlay chain; the registry
    validates it when frozen.
    """

    tag: str
    predicate: Predicate
    builder: Builder
    description: str = ""
    chain: DialectChain | None = None

    @classmethod
    def for_chain(
        cls,
        tag: str,
        chain: DialectChain,
        predicate: Predicate,
        description: str = "",
    ) -> "FactoryEntry":
        def build(identity: ConnectionIdentity, probe: MetadataProbe | None) -> DialectDescriptor:
            return DialectDescriptor.create(tag, chain, identity, probe)

        return cls(
            tag=tag,
            predicate=predicate,
            builder=build,
            description=description or chain.overlays[-1].description,
            chain=chain,
        )

    def accepts(self, identity: ConnectionIdentity) -> bool:
        return bool(self.predicate(identity))

    def build(self, identity: ConnectionIdentity, probe: MetadataProbe | None = None) -> DialectDescriptor:
        return self.builder(identity, probe)


class DialectRegistry:
    """
    Ordered collection of factory entries.

    Entries are registered at start-up; ``freeze()`` validates them and the
    registry is read-only afterwards, so it can be shared between threads.
    """

    def __init__(self, entries: Iterable[FactoryEntry] = ()) -> None:
        self._entries: list[FactoryEntry] = []
        self._frozen = False
        self.logger = get_logger("registry")
        for entry in entries:
            self.register(entry)

    def __iter__(self) -> Iterator[FactoryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entries(self) -> tuple[FactoryEntry, ...]:
        return tuple(self._entries)

    @property
    def tags(self) -> tuple[str, ...]:
        return tuple(entry.tag for entry in self._entries)

    def register(self, entry: FactoryEntry) -> FactoryEntry:
        if self._frozen:
            raise DialectError(f"Cannot register dialect {entry.tag!r}: registry is frozen")
        self._entries.append(entry)
        return entry

    def freeze(self) -> "DialectRegistry":
        """
        Validate every entry and lock the registry. Idempotent.
        """

        if self._frozen:
            return self
        errors: dict[str, list[str]] = {}
        seen: set[str] = set()
        for entry in self._entries:
            if entry.tag in seen:
                errors.setdefault("__all__", []).append(f"duplicate dialect tag {entry.tag!r}")
            seen.add(entry.tag)
        if errors:
            raise CapabilityValidationError(errors)
        for entry in self._entries:
            if entry.chain is not None:
                entry.chain.validate()
        self._frozen = True
        self.logger.debug("Registry frozen with %d dialects", len(self._entries))
        return self

    def find(self, tag: str) -> FactoryEntry:
        for entry in self._entries:
            if entry.tag == tag:
                return entry
        raise UnsupportedDialectError(tag, "")

    # ------------------------------------------------------------------ #
    # Resolution
    # ------------------------------------------------------------------ #
    def resolve(
        self, identity: ConnectionIdentity, probe: MetadataProbe | None = None
    ) -> DialectDescriptor:
        """
        Build the descriptor of the first entry accepting ``identity``.

        Raises ``UnsupportedDialectError`` when no entry matches. Probe failures
        raised while refining the identity propagate unchanged.
        """

        self.freeze()
        for entry in self._entries:
            if entry.accepts(identity):
                return self._build(entry, identity, probe)
            self.logger.debug(
                "Dialect %r does not accept %r", entry.tag, identity.product_name
            )
        self.logger.info(
            "No dialect accepts %r (version %r)",
            identity.product_name,
            identity.product_version,
            extra={"metadata": redact_metadata(identity.metadata)},
        )
        raise UnsupportedDialectError(identity.product_name, identity.product_version)

    def resolve_tag(
        self,
        tag: str,
        identity: ConnectionIdentity | None = None,
        probe: MetadataProbe | None = None,
    ) -> DialectDescriptor:
        """
        Build the descriptor registered under ``tag`` regardless of predicates.
        """

        self.freeze()
        entry = self.find(tag)
        return self._build(entry, identity or ConnectionIdentity(tag), probe)

    def resolve_connection(self, connection: Any, *, slow_probe_ms: int | None = None) -> DialectDescriptor:
        """
        Read the identity of a live DB-API connection and resolve it.
        """

        identity, probe = describe_connection(connection, slow_probe_ms=slow_probe_ms)
        return self.resolve(identity, probe)

    def _build(
        self,
        entry: FactoryEntry,
        identity: ConnectionIdentity,
        probe: MetadataProbe | None,
    ) -> DialectDescriptor:
        descriptor = entry.build(identity, probe)
        self.logger.info(
            "Resolved %r %r to dialect %r (effective %r)",
            identity.product_name,
            identity.product_version,
            entry.tag,
            descriptor.effective_tag,
            extra={"metadata": redact_metadata(identity.metadata)},
        )
        hooks.fire(DIALECT_RESOLVED, descriptor, identity=identity, entry=entry)
        if descriptor.refinement.refined:
            hooks.fire(IDENTITY_REFINED, descriptor, refinement=descriptor.refinement)
        return descriptor
