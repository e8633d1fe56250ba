"""
equidist.core.context
=====================

Typed heterogeneous store threaded alongside the generator state.

Samplers sometimes need auxiliary data that has nothing to do with the value
being sampled (a cached second normal deviate, a trace of draws, ...). Such
data lives in an `ExtensibleContext`, keyed by `Key` objects. A key has a
unique identity: two keys with the same name are still different keys, so
independent libraries can never clash.

The context is immutable. `insert` returns a new context; the random variable
interpreter threads the latest one through a single `simulate` call and drops
it at the end.

Examples
--------
>>> from equidist.core.context import ExtensibleContext, Key
>>> hits = Key("hits", int)
>>> ctx = ExtensibleContext.empty().insert(hits, 3)
>>> ctx.lookup(hits)
3
>>> ExtensibleContext.empty().lookup(hits) is None
True
"""

from __future__ import annotations
from typing import Any, Dict, Generic, Mapping, Optional, Type, TypeVar

from equidist.core.errors import ContextTypeError

V = TypeVar("V")


class Key(Generic[V]):
    """A unique, typed key into an `ExtensibleContext`.

    Equality and hashing are by identity; `name` is only for display.
    """

    __slots__ = ("name", "type")

    def __init__(self, name: str, type: Type[V] = object) -> None:  # type: ignore[assignment]
        self.name = name
        self.type = type

    def check(self, value: Any) -> None:
        if not isinstance(value, self.type):
            raise ContextTypeError(
                f"context key {self.name!r} holds {self.type.__name__}, "
                f"got {type(value).__name__}"
            )

    def __repr__(self) -> str:
        return f"Key({self.name!r}, {self.type.__name__})"


class ExtensibleContext:
    """Immutable mapping from `Key[V]` to `V`."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Optional[Mapping[Key[Any], Any]] = None) -> None:
        self._entries: Dict[Key[Any], Any] = dict(entries or {})

    @classmethod
    def empty(cls) -> "ExtensibleContext":
        return cls()

    def lookup(self, key: Key[V]) -> Optional[V]:
        """Return the value stored under `key`, or None when absent."""
        if key not in self._entries:
            return None
        value = self._entries[key]
        key.check(value)
        return value

    def insert(self, key: Key[V], value: V) -> "ExtensibleContext":
        """Return a new context with `key` bound to `value`."""
        key.check(value)
        entries = dict(self._entries)
        entries[key] = value
        return ExtensibleContext(entries)

    def delete(self, key: Key[Any]) -> "ExtensibleContext":
        """Return a new context without `key`."""
        if key not in self._entries:
            return self
        entries = dict(self._entries)
        del entries[key]
        return ExtensibleContext(entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        names = ", ".join(k.name for k in self._entries)
        return f"ExtensibleContext({names})"
