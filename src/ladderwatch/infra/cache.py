"""
In-memory TTL cache for Ladderwatch.

Replaces module-level lookup caches with an object the caller owns and
injects. Entries expire after a fixed TTL and the oldest entries are evicted
once the cache is full.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_ENTRIES = 1000


@dataclass
class CacheEntry:
    value: Any
    created_at: float

    def is_expired(self, ttl_seconds: float, now: float) -> bool:
        """Check if entry has expired based on TTL."""
        return now - self.created_at > ttl_seconds


@dataclass
class CacheStats:
    """Hit/miss counters."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    entries: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "entries": self.entries,
            "hit_rate": round(self.hit_rate, 3),
        }


@dataclass
class TTLCache:
    """Thread-safe key/value cache with per-entry expiry."""

    ttl_seconds: float = DEFAULT_TTL_SECONDS
    max_entries: int = DEFAULT_MAX_ENTRIES
    clock: Callable[[], float] = time.time
    _entries: dict[Any, CacheEntry] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _stats: CacheStats = field(default_factory=CacheStats, init=False, repr=False)

    def get(self, key: Any, default: Any = None) -> Any:
        """Get a cached value, or default when missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return default
            if entry.is_expired(self.ttl_seconds, self.clock()):
                del self._entries[key]
                self._stats.misses += 1
                return default
            self._stats.hits += 1
            return entry.value

    def set(self, key: Any, value: Any) -> None:
        with self._lock:
            if key not in self._entries:
                self._enforce_max_entries()
            self._entries[key] = CacheEntry(value=value, created_at=self.clock())

    def get_or_set(self, key: Any, factory: Callable[[], Any]) -> Any:
        """Return the cached value or compute, store and return it."""
        sentinel = object()
        value = self.get(key, sentinel)
        if value is sentinel:
            value = factory()
            self.set(key, value)
        return value

    def invalidate(self, key: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        with self._lock:
            now = self.clock()
            expired = [k for k, e in self._entries.items() if e.is_expired(self.ttl_seconds, now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info(f"Purged {len(expired)} expired cache entries")
        return len(expired)

    def get_stats(self) -> CacheStats:
        with self._lock:
            self._stats.entries = len(self._entries)
            return CacheStats(**vars(self._stats))

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self.ttl_seconds, self.clock())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _enforce_max_entries(self) -> None:
        """Remove oldest entries if max limit reached. Caller holds the lock."""
        if len(self._entries) < self.max_entries:
            return
        oldest = sorted(self._entries.items(), key=lambda item: item[1].created_at)
        to_remove = len(self._entries) - self.max_entries + 1
        for key, _ in oldest[:to_remove]:
            del self._entries[key]
        self._stats.evictions += to_remove
        logger.debug(f"Evicted {to_remove} oldest cache entries (max limit reached)")
