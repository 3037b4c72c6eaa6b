"""In-memory cache for VaR results keyed by (identifier, confidence level)."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, Dict, Hashable, Optional


@dataclass
class CacheEntry:
    value: object
    created_at: float
    metadata: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CacheStats:
    hits: int
    misses: int
    evictions: int
    size: int


class VarCache:
    """Bounded LRU cache with a time-to-live on each entry."""

    def __init__(
        self,
        max_entries: int = 1000,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @staticmethod
    def key(namespace: str, identifier: str, confidence_level: float) -> Hashable:
        return (namespace, identifier, float(confidence_level))

    def get(self, key: Hashable) -> Optional[CacheEntry]:
        with self._lock:
            entry = self._store.get(key)
            if entry is not None and self._clock() - entry.created_at >= self.ttl_seconds:
                del self._store[key]
                entry = None
            if entry is None:
                self._misses += 1
                return None
            self._store.move_to_end(key)
            self._hits += 1
            return entry

    def set(self, key: Hashable, value: object, **metadata: str) -> CacheEntry:
        entry = CacheEntry(value=value, created_at=self._clock(), metadata=dict(metadata))
        with self._lock:
            self._store[key] = entry
            self._store.move_to_end(key)
            while len(self._store) > self.max_entries:
                self._store.popitem(last=False)
                self._evictions += 1
        return entry

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._store),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
