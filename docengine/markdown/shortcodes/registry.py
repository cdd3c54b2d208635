# docengine/markdown/shortcodes/registry.py
"""
Registry mapping shortcode names to handlers.

A handler is any callable taking a single Invocation and returning the
replacement text, or an object with a render(invocation) method. Block
handlers receive the shortcode body in invocation.body.

    registry = ShortcodeRegistry()

    @registry.shortcode("note", block=True)
    def note(invocation):
        return "> NOTE: " + invocation.body

The registry is filled once per build and frozen by the engine when the
first document is processed; after that it is read-only and can be shared
between workers.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Tuple

from .diagnostics import DuplicateShortcodeError, RegistryFrozenError, ShortcodeNotFound
from .scanner import NAME_PATTERN


@dataclass(frozen=True)
class Invocation:
    """Everything a handler gets to see about one shortcode."""

    name: str
    args: Tuple[str, ...]
    kwargs: Mapping[str, str]
    body: Optional[str] = None
    line: int = 0
    column: int = 0
    document_id: Optional[str] = None
    # Scratch space for this shortcode name, reset on every process() call.
    state: Optional[Dict[str, Any]] = None

    def get(self, key: str, position: Optional[int] = None, default: Any = None):
        """Named argument `key`, else positional argument `position`, else default."""
        if key in self.kwargs:
            return self.kwargs[key]
        if position is not None and position < len(self.args):
            return self.args[position]
        return default


@dataclass(frozen=True)
class RegisteredShortcode:
    name: str
    handler: Any
    block: bool = False

    def render(self, invocation: Invocation):
        render = getattr(self.handler, "render", None)
        if callable(render):
            return render(invocation)
        return self.handler(invocation)


class ShortcodeRegistry:
    def __init__(self):
        self._entries: Dict[str, RegisteredShortcode] = {}
        self._frozen = False

    def register(self, name: str, handler: Any, block: bool = False) -> RegisteredShortcode:
        if self._frozen:
            raise RegistryFrozenError(
                f"cannot register '{name}': the registry is in use and read-only"
            )
        if not isinstance(name, str) or not NAME_PATTERN.fullmatch(name):
            raise ValueError(f"invalid shortcode name: {name!r}")
        if name in self._entries:
            raise DuplicateShortcodeError(f"shortcode '{name}' is already registered")
        if not callable(handler) and not callable(getattr(handler, "render", None)):
            raise TypeError(f"handler for '{name}' is not callable and has no render()")

        entry = RegisteredShortcode(name, handler, bool(block))
        self._entries[name] = entry
        return entry

    def shortcode(self, name: str, block: bool = False) -> Callable[[Callable], Callable]:
        """Decorator form of register()."""

        def decorator(function: Callable) -> Callable:
            self.register(name, function, block=block)
            return function

        return decorator

    def resolve(self, name: str) -> RegisteredShortcode:
        try:
            return self._entries[name]
        except KeyError:
            raise ShortcodeNotFound(name) from None

    def freeze(self) -> "ShortcodeRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def block_names(self) -> FrozenSet[str]:
        return frozenset(name for name, entry in self._entries.items() if entry.block)

    def names(self):
        return sorted(self._entries)

    def as_mapping(self) -> Mapping[str, RegisteredShortcode]:
        return MappingProxyType(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<ShortcodeRegistry {self.names()}>"
