"""Key binding tables used by the input state machine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyBinding:
    """Mapping from one or more key tokens (or sequences) to one action."""

    combos: tuple[str, ...]
    handler: Callable[[], None]


class KeyBindingTable:
    """Exact-match dispatch table that also answers prefix queries.

    Prefix lookups are what let ``g`` wait for a second ``g`` while ``G``
    fires immediately.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], None]] = {}
        self._prefixes: set[str] = set()

    def register(self, *bindings: KeyBinding) -> KeyBindingTable:
        """Register bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
                for end in range(1, len(combo)):
                    self._prefixes.add(combo[:end])
        return self

    def lookup(self, sequence: str) -> Callable[[], None] | None:
        return self._handlers.get(sequence)

    def is_prefix(self, sequence: str) -> bool:
        """Return whether ``sequence`` is a strict prefix of a longer binding."""
        return sequence in self._prefixes

    def dispatch(self, key: str) -> bool:
        """Invoke the handler bound to ``key``; return whether one existed."""
        handler = self._handlers.get(key)
        if handler is None:
            return False
        handler()
        return True
