"""
Identity re-derivation: some servers report a parent product's name (an
Infobright server says "MySQL", Greenplum says "PostgreSQL"). Overlays declare
``SecondaryEngine`` markers; the first marker found in the connection metadata
renames the identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Protocol, Sequence

from ..utils import get_logger
from .base import ConnectionIdentity

if TYPE_CHECKING:
    from .composition import DialectChain

logger = get_logger("dialects.refinement")


class MetadataProbe(Protocol):
    """
    Runs one read-only metadata query against a live connection.

    Implementations raise ``DialectConnectionError`` on failure; they never retry.
    """

    def fetch_strings(self, sql: str) -> Sequence[str]: ...


@dataclass(frozen=True)
class SecondaryEngine:
    """
    Marker that, when present in a metadata source, identifies a derived product.

    ``metadata_key`` names the entry of ``ConnectionIdentity.metadata`` holding the
    same facts ``query`` would return, so callers with a snapshot avoid the probe.
    """

    marker: str
    product_name: str
    tag: str
    query: str
    metadata_key: str

    def matches(self, texts: Iterable[str]) -> bool:
        needle = self.marker.lower()
        return any(needle in text.lower() for text in texts)


@dataclass(frozen=True)
class IdentityRefinement:
    product_name: str
    tag: str | None = None
    engine: SecondaryEngine | None = None

    @property
    def refined(self) -> bool:
        return self.engine is not None


def _snapshot_texts(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, (str, bytes)):
        value = [value]
    texts = []
    for item in value:
        if isinstance(item, bytes):
            texts.append(item.decode("utf-8", errors="replace"))
        elif isinstance(item, (list, tuple)):
            texts.append(" ".join(str(part) for part in item))
        else:
            texts.append(str(item))
    return texts


def refine_identity(
    chain: "DialectChain",
    identity: ConnectionIdentity,
    probe: MetadataProbe | None = None,
) -> IdentityRefinement:
    """
    Check every secondary engine of ``chain``, nearest overlay first.

    The identity's metadata snapshot is consulted before the probe, and each
    probe query runs at most once. Probe failures propagate unchanged.
    """

    fetched: dict[str, list[str]] = {}
    for engine in chain.secondary_engines():
        texts = _snapshot_texts(identity.metadata.get(engine.metadata_key))
        if texts is None and probe is not None:
            if engine.query not in fetched:
                fetched[engine.query] = list(probe.fetch_strings(engine.query))
            texts = fetched[engine.query]
        if texts and engine.matches(texts):
            logger.debug(
                "Refined %s %s to %s (marker %r)",
                identity.product_name,
                identity.product_version,
                engine.product_name,
                engine.marker,
            )
            return IdentityRefinement(engine.product_name, engine.tag, engine)
    return IdentityRefinement(identity.product_name)
