"""
Override composition: a dialect is the generic root plus an ordered chain of
named overlays, each recording only what it changes.

Lookups walk the chain nearest-first, so an overlay sees its parents' values
unless it sets its own.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Sequence

from .base import ROOT_CAPABILITIES, ConnectionIdentity, DialectCapabilities, flag_type_error
from .errors import CapabilityValidationError, DialectError
from .refinement import SecondaryEngine
from .types import ColumnDescription, Datatype, LogicalType, SqlType

TypeRule = Callable[[ColumnDescription], "LogicalType | None"]
VersionFlags = Callable[[tuple[int, ...]], Mapping[str, Any]]

# dependent flag -> flag that must also be true
FLAG_PREREQUISITES: Mapping[str, str] = MappingProxyType(
    {
        "allows_multiple_count_distinct": "allows_count_distinct",
        "allows_compound_count_distinct": "allows_count_distinct",
        "allows_count_distinct_with_other_aggs": "allows_count_distinct",
        "requires_alias_for_from_query": "allows_from_query",
    }
)

_FLAG_NAMES = tuple(spec.name for spec in fields(DialectCapabilities))


@dataclass(frozen=True)
class DialectOverlay:
    """
    A named, partial set of departures from the overlay below it.
    """

    name: str
    flags: Mapping[str, Any] = field(default_factory=dict)
    hooks: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    type_overrides: Mapping[int, "LogicalType | TypeRule"] = field(default_factory=dict)
    cast_types: Mapping[Datatype, str] = field(default_factory=dict)
    secondary_engines: tuple[SecondaryEngine, ...] = ()
    version_flags: VersionFlags | None = None
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", MappingProxyType(dict(self.flags)))
        object.__setattr__(self, "hooks", MappingProxyType(dict(self.hooks)))
        object.__setattr__(
            self,
            "type_overrides",
            MappingProxyType({SqlType.coerce(code): rule for code, rule in self.type_overrides.items()}),
        )
        object.__setattr__(self, "cast_types", MappingProxyType(dict(self.cast_types)))
        object.__setattr__(self, "secondary_engines", tuple(self.secondary_engines))

    def specialize(self, version: tuple[int, ...]) -> "DialectOverlay":
        """
        Fold ``version_flags`` for a concrete server version into plain flags.
        """

        if self.version_flags is None:
            return self
        merged = dict(self.flags)
        merged.update(self.version_flags(version))
        return DialectOverlay(
            name=self.name,
            flags=merged,
            hooks=self.hooks,
            type_overrides=self.type_overrides,
            cast_types=self.cast_types,
            secondary_engines=self.secondary_engines,
            description=self.description,
        )


class DialectChain:
    """
    Root overlay followed by ordered overlays; index 0 is the generic root.
    """

    def __init__(self, overlays: Sequence[DialectOverlay]) -> None:
        if not overlays:
            raise DialectError("A dialect chain needs at least the root overlay")
        self._overlays: tuple[DialectOverlay, ...] = tuple(overlays)

    def __repr__(self) -> str:
        return f"DialectChain({' > '.join(self.names)})"

    def __iter__(self) -> Iterator[DialectOverlay]:
        return iter(self._overlays)

    def __len__(self) -> int:
        return len(self._overlays)

    @property
    def overlays(self) -> tuple[DialectOverlay, ...]:
        return self._overlays

    @property
    def root(self) -> DialectOverlay:
        return self._overlays[0]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(overlay.name for overlay in self._overlays)

    def nearest_first(self) -> Iterator[DialectOverlay]:
        return reversed(self._overlays)

    def extend(self, *overlays: DialectOverlay) -> "DialectChain":
        return DialectChain(self._overlays + tuple(overlays))

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #
    def flag(self, name: str) -> Any:
        for overlay in self.nearest_first():
            if name in overlay.flags:
                return overlay.flags[name]
        if name not in _FLAG_NAMES:
            raise DialectError(f"Unknown capability flag {name!r}")
        return getattr(ROOT_CAPABILITIES, name)

    def source_of(self, name: str) -> str:
        """
        Name of the overlay whose value ``flag(name)`` returns.
        """

        for overlay in self.nearest_first():
            if name in overlay.flags:
                return overlay.name
        if name not in _FLAG_NAMES:
            raise DialectError(f"Unknown capability flag {name!r}")
        return self.root.name

    def capabilities(self) -> DialectCapabilities:
        return DialectCapabilities(**{name: self.flag(name) for name in _FLAG_NAMES})

    def hook(self, name: str) -> Callable[..., Any]:
        for overlay in self.nearest_first():
            if name in overlay.hooks:
                return overlay.hooks[name]
        raise DialectError(f"Unknown dialect hook {name!r}")

    def hook_source(self, name: str) -> str:
        for overlay in self.nearest_first():
            if name in overlay.hooks:
                return overlay.name
        raise DialectError(f"Unknown dialect hook {name!r}")

    def type_rules(self, type_code: int) -> list[tuple[str, "LogicalType | TypeRule"]]:
        code = SqlType.coerce(type_code)
        return [
            (overlay.name, overlay.type_overrides[code])
            for overlay in self.nearest_first()
            if code in overlay.type_overrides
        ]

    def cast_type(self, datatype: Datatype) -> str:
        for overlay in self.nearest_first():
            if datatype in overlay.cast_types:
                return overlay.cast_types[datatype]
        raise DialectError(f"No cast type registered for {datatype.name}")

    def secondary_engines(self) -> list[SecondaryEngine]:
        engines: list[SecondaryEngine] = []
        for overlay in self.nearest_first():
            engines.extend(overlay.secondary_engines)
        return engines

    def specialize(self, identity: ConnectionIdentity) -> "DialectChain":
        """
        Resolve version-dependent flags for ``identity``'s server version.
        """

        version = identity.version_tuple()
        if not any(overlay.version_flags for overlay in self._overlays):
            return self
        chain = DialectChain([overlay.specialize(version) for overlay in self._overlays])
        chain.validate()
        return chain

    # ------------------------------------------------------------------ #
    # Validation
    # ------------------------------------------------------------------ #
    def validate(self) -> None:
        """
        Check the whole chain, raising one aggregated ``CapabilityValidationError``.
        """

        errors: dict[str, list[str]] = defaultdict(list)
        seen: set[str] = set()
        for overlay in self._overlays:
            if overlay.name in seen:
                errors["__all__"].append(f"overlay {overlay.name!r} appears more than once")
            seen.add(overlay.name)

        known_hooks = set(self.root.hooks)
        for overlay in self._overlays:
            self._validate_overlay(overlay, known_hooks, errors)

        if not errors:
            self._check_prerequisites(self, errors)
            if any(overlay.version_flags for overlay in self._overlays):
                # version flags as resolved for a server of unknown (current) version
                current = DialectChain([overlay.specialize(()) for overlay in self._overlays])
                self._check_prerequisites(current, errors)

        if errors:
            raise CapabilityValidationError(errors, dialect=self._overlays[-1].name)

    @staticmethod
    def _check_prerequisites(chain: "DialectChain", errors: dict[str, list[str]]) -> None:
        for dependent, prerequisite in FLAG_PREREQUISITES.items():
            if chain.flag(dependent) and not chain.flag(prerequisite):
                message = (
                    f"cannot be true while {prerequisite} is false "
                    f"(set by {chain.source_of(dependent)!r} and {chain.source_of(prerequisite)!r})"
                )
                if message not in errors.get(dependent, ()):
                    errors[dependent].append(message)

    @staticmethod
    def _validate_overlay(
        overlay: DialectOverlay,
        known_hooks: set[str],
        errors: dict[str, list[str]],
    ) -> None:
        flag_sets = [overlay.flags]
        if overlay.version_flags is not None:
            flag_sets.append(overlay.version_flags(()))
        for flags in flag_sets:
            for name, value in flags.items():
                problem = flag_type_error(name, value)
                if problem:
                    errors[name].append(f"{overlay.name}: {problem}")

        for name, hook in overlay.hooks.items():
            if name not in known_hooks:
                errors[f"hook:{name}"].append(f"{overlay.name}: unknown dialect hook")
            elif not callable(hook):
                errors[f"hook:{name}"].append(f"{overlay.name}: hook is not callable")

        for code, rule in overlay.type_overrides.items():
            if not isinstance(rule, LogicalType) and not callable(rule):
                errors[f"type:{code}"].append(
                    f"{overlay.name}: expected LogicalType or rule, got {type(rule).__name__}"
                )

        for datatype, template in overlay.cast_types.items():
            if not isinstance(datatype, Datatype) or not isinstance(template, str):
                errors[f"cast:{datatype}"].append(f"{overlay.name}: invalid cast type entry")

        for engine in overlay.secondary_engines:
            if not isinstance(engine, SecondaryEngine):
                errors["__all__"].append(f"{overlay.name}: invalid secondary engine {engine!r}")


def compose(base: DialectChain, overlay: DialectOverlay) -> DialectChain:
    """
    Return ``base`` with ``overlay`` applied on top.
    """

    return base.extend(overlay)
