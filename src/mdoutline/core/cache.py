"""Bounded in-memory cache for per-snapshot parse results."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time cache counters."""

    size: int
    capacity: int
    hits: int
    misses: int
    evictions: int
    last_cleared: datetime

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class LRUCache(Generic[K, V]):
    """LRU (Least Recently Used) cache with a fixed capacity.

    Insertion evicts the least recently used entry once ``max_size`` is reached. All
    operations are guarded by a lock since monitored work may run in worker threads.
    """

    def __init__(self, max_size: int = 50):
        """Initialize LRU cache.

        Args:
            max_size: Maximum number of entries to keep.
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._last_cleared = time.time()

    def get(self, key: K) -> V | None:
        """Get item from cache."""
        with self._lock:
            if key not in self._entries:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return self._entries[key]

    def put(self, key: K, value: V) -> None:
        """Put item in cache."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
                self._evictions += 1
            self._entries[key] = value

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list[K]:
        """Keys from least to most recently used."""
        with self._lock:
            return list(self._entries)

    def remove(self, key: K) -> None:
        """Remove item from cache."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all items from cache."""
        with self._lock:
            self._entries.clear()
            self._last_cleared = time.time()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                size=len(self._entries),
                capacity=self.max_size,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                last_cleared=datetime.fromtimestamp(self._last_cleared, UTC),
            )
