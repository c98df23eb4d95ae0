"""
Hook dispatcher for dialect resolution events.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from ..dialects.descriptor import DialectDescriptor


HookHandler = Callable[..., None]

DIALECT_RESOLVED = "dialect_resolved"
IDENTITY_REFINED = "identity_refined"


class HookDispatcher:
    """
    Maintains global and per-dialect hook handlers.

    Handlers registered with ``tag`` only run for descriptors whose registered
    or refined tag equals it.
    """

    def __init__(self) -> None:
        self._global_handlers: Dict[str, List[HookHandler]] = defaultdict(list)
        self._tag_handlers: Dict[str, Dict[str, List[HookHandler]]] = defaultdict(
            lambda: defaultdict(list)
        )

    def register(self, event: str, handler: HookHandler, *, tag: Optional[str] = None) -> None:
        if tag:
            self._tag_handlers[tag][event].append(handler)
        else:
            self._global_handlers[event].append(handler)

    def fire(self, event: str, descriptor: Optional["DialectDescriptor"], **context: Any) -> None:
        handlers = list(self._global_handlers.get(event, []))
        if descriptor is not None:
            tags = [descriptor.identity_tag]
            if descriptor.effective_tag != descriptor.identity_tag:
                tags.append(descriptor.effective_tag)
            for tag in tags:
                handlers.extend(self._tag_handlers.get(tag, {}).get(event, []))
        for handler in handlers:
            handler(descriptor, **context)

    def clear(self) -> None:
        self._global_handlers.clear()
        self._tag_handlers.clear()


hooks = HookDispatcher()
