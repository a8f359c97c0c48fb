"""Bounded key/value cache with age- and size-based eviction."""
from __future__ import annotations

import time
from collections import OrderedDict
from typing import Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class TTLCache(Generic[K, V]):
    """Key/value store bounded by entry age and entry count.

    Entries live in an ``OrderedDict`` kept in last-update order, so both
    eviction passes pop from the front instead of sorting.
    """

    def __init__(
        self,
        max_age: float,
        max_size: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_age = max_age
        self.max_size = max_size
        self._clock = clock
        self._entries: OrderedDict[K, tuple[float, V]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: K) -> V | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry[1]

    def put(self, key: K, value: V) -> None:
        self._entries.pop(key, None)
        self._entries[key] = (self._clock(), value)
        self._trim_to_size()

    def evict(self) -> None:
        """Drop expired entries, then the oldest ones while over capacity."""
        now = self._clock()
        while self._entries:
            key, (stored_at, _) = next(iter(self._entries.items()))
            if now - stored_at <= self.max_age:
                break
            del self._entries[key]
        self._trim_to_size()

    def _trim_to_size(self) -> None:
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)
