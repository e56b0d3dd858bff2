"""Identity-keyed memoization."""

from __future__ import annotations

import weakref
from typing import Any, Generic, TypeVar


V = TypeVar("V")


class IdentityCache(Generic[V]):
    """Map objects to values by identity rather than equality.

    Keys that support weak references are held weakly: once a key becomes
    unreachable its entry is dropped. Plain ``list`` and ``tuple`` objects
    cannot be weakly referenced, so they are pinned for the life of the
    cache; otherwise their ``id()`` could be reused by an unrelated object.
    """

    __slots__ = ("_entries", "__weakref__")

    def __init__(self) -> None:
        self._entries: dict[int, tuple[Any, V]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: object) -> V | None:
        entry = self._entries.get(id(key))
        if entry is None:
            return None
        anchor, value = entry
        target = anchor() if isinstance(anchor, weakref.ref) else anchor
        if target is not key:
            return None
        return value

    def set(self, key: object, value: V) -> None:
        ident = id(key)
        self_ref = weakref.ref(self)

        def _evict(ref: weakref.ref, ident: int = ident) -> None:
            cache = self_ref()
            if cache is None:
                return
            current = cache._entries.get(ident)
            if current is not None and current[0] is ref:
                del cache._entries[ident]

        try:
            anchor: Any = weakref.ref(key, _evict)
        except TypeError:
            anchor = key
        self._entries[ident] = (anchor, value)
