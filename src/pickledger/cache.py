"""Small in-process TTL cache injected into lookup services."""

from __future__ import annotations

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    value: Any
    stored_at: float


class TTLCache:
    """Maps a key to ``{value, timestamp}``; entries older than ``ttl_seconds`` are dropped on read."""

    def __init__(
        self,
        ttl_seconds: float,
        max_items: int = 512,
        time_fn: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_items = max_items
        self._time = time_fn
        self._store: dict[Hashable, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._store.get(key)
        if entry is None:
            return default
        if self._time() - entry.stored_at >= self.ttl_seconds:
            self._store.pop(key, None)
            return default
        return entry.value

    def set(self, key: Hashable, value: Any) -> None:
        if key not in self._store and len(self._store) >= self.max_items:
            oldest = min(self._store, key=lambda k: self._store[k].stored_at)
            self._store.pop(oldest, None)
        self._store[key] = CacheEntry(value=value, stored_at=self._time())

    def clear(self) -> None:
        self._store.clear()
