"""
Bounded in-memory cache with per-entry TTL.

Entries expire lazily when read and the oldest inserted key is evicted
when a new key arrives at capacity. One lock guards the whole structure.

Dependencies: stdlib only
System role: Query answer cache shared across requests
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Immutable cached value stamped with its creation time."""

    value: T
    created_at: float
    ttl_seconds: float


class BoundedTTLCache(Generic[T]):
    """
    Thread-safe key/value cache with TTL expiry and FIFO eviction.

    Eviction order is insertion order. Overwriting a key replaces its
    entry but keeps its original slot in the eviction order.

    Every clear() bumps a generation counter. A writer that read the
    generation before computing its value passes it to set(), and the
    value is dropped if a clear happened in between.
    """

    def __init__(
        self,
        max_entries: int = 50,
        default_ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize cache.

        Args:
            max_entries: Capacity before eviction kicks in
            default_ttl_seconds: TTL used when set() gets none
            clock: Time source in seconds (injectable for tests)
        """
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")

        self._max_entries = max_entries
        self._default_ttl = default_ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def set(
        self,
        key: str,
        value: T,
        ttl_seconds: float | None = None,
        generation: int | None = None,
    ) -> bool:
        """
        Store or overwrite a value.

        Args:
            key: Cache key
            value: Value to store
            ttl_seconds: Lifetime of the entry (defaults to the cache TTL)
            generation: Generation observed before the value was computed

        Returns:
            bool: False when the value was dropped as stale
        """
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        entry = CacheEntry(value=value, created_at=self._clock(), ttl_seconds=ttl)

        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug(f"{__name__}:set - Dropped stale entry {key[:12]}")
                return False
            if key not in self._entries and len(self._entries) >= self._max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                logger.debug(f"{__name__}:set - Evicted oldest entry {evicted_key[:12]}")
            # Assignment to an existing OrderedDict key keeps its position
            self._entries[key] = entry
            return True

    def get(self, key: str) -> T | None:
        """
        Return the live value for key, or None when absent or expired.

        Expired entries are removed as a side effect.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            if self._clock() - entry.created_at > entry.ttl_seconds:
                del self._entries[key]
                self._misses += 1
                return None

            self._hits += 1
            return entry.value

    def clear(self) -> None:
        """Remove every entry and start a new generation."""
        with self._lock:
            self._entries.clear()
            self._generation += 1

    def size(self) -> int:
        """Number of tracked entries, including expired ones not yet read."""
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def get_stats(self) -> dict[str, float | int]:
        """Return size and hit/miss counters."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "max_size": self._max_entries,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / lookups if lookups else 0.0,
            }
