"""
Component registry
------------------

Frozen, order-preserving name → component mapping built once from the
caller's factory result. Insertion order is start order; reverse insertion
order is stop order.
"""

from __future__ import annotations

import asyncio
import dataclasses
import inspect
import numbers
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from lifecycle.exceptions import ConfigurationError


def _is_pending(value: Any) -> bool:
    """True for coroutines, tasks, futures and other not-yet-awaited values."""
    return inspect.isawaitable(value) or asyncio.isfuture(value)


def _is_empty(value: Any) -> bool:
    """None, or a falsy scalar such as "", b"", 0 or False. Empty containers are allowed."""
    if value is None:
        return True
    return isinstance(value, (str, bytes, bytearray, numbers.Number)) and not value


def _discard_pending(value: Any) -> None:
    # Silences "coroutine was never awaited" for the value we are rejecting
    if inspect.iscoroutine(value):
        value.close()


class ComponentRegistry(Mapping[str, Any]):
    """
    Read-only mapping of components.

    Also exposes entries as attributes, so a registry built from a dataclass
    reads the same way as the dataclass did:

        registry = ComponentRegistry.freeze({"db": db, "server": server})
        registry["db"] is registry.db
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, Any]):
        for name, component in entries.items():
            if _is_empty(component):
                raise ConfigurationError(f"Null or empty components are not allowed: {name}")
            if _is_pending(component):
                _discard_pending(component)
                raise ConfigurationError(
                    f"Error initializing components. Component '{name}' is awaitable, "
                    f"it should be an object, did you miss an await in init_components?"
                )
        object.__setattr__(self, "_entries", MappingProxyType(dict(entries)))

    @classmethod
    def freeze(cls, components: Any) -> "ComponentRegistry":
        """
        Build a registry from a factory result.

        Accepts a registry (returned as-is), any Mapping, or a dataclass
        instance (fields in declaration order).
        """
        if isinstance(components, cls):
            return components
        if dataclasses.is_dataclass(components) and not isinstance(components, type):
            components = {f.name: getattr(components, f.name) for f in dataclasses.fields(components)}
        if _is_pending(components):
            _discard_pending(components)
            raise ConfigurationError(
                "init_components returned an awaitable instead of the components, "
                "did you miss an await?"
            )
        if not isinstance(components, Mapping):
            raise ConfigurationError(
                f"init_components must return a mapping of components, got {type(components).__name__}"
            )
        return cls(components)

    # -----------------------------
    # Mapping interface
    # -----------------------------
    def __getitem__(self, name: str) -> Any:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._entries[name]
        except KeyError:
            raise AttributeError(f"No component named {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise TypeError("ComponentRegistry is read-only")

    def __delattr__(self, name: str) -> None:
        raise TypeError("ComponentRegistry is read-only")

    def __repr__(self) -> str:
        return f"ComponentRegistry({list(self._entries)!r})"

    # -----------------------------
    # Ordering helpers
    # -----------------------------
    def names(self) -> list:
        return list(self._entries)

    def reversed_items(self) -> list:
        """(name, component) pairs in stop order."""
        return list(reversed(list(self._entries.items())))
