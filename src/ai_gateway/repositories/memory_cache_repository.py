"""In-memory implementation of CacheStore.

Bounded LRU store with an absolute per-entry TTL. Entries live only as
long as the process; nothing is persisted.
"""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable

from ai_gateway.config import settings
from ai_gateway.entities import CacheEntryEntity, ChatResponse

logger = logging.getLogger(__name__)


class InMemoryCacheRepository:
    """Thread-safe LRU cache with per-entry TTL expiry.

    This class satisfies the CacheStore protocol through structural
    typing - no explicit inheritance needed.

    Entries are kept in an OrderedDict in recency order (oldest first).
    `get` and `set` count as access; `has` does not refresh recency.
    Expired entries are dropped lazily when read, and swept before
    evicting live entries when the store is full.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        ttl: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory cache repository.

        Args:
            max_entries: Maximum number of entries. Defaults to settings.
            ttl: Time-to-live for entries in seconds. Defaults to settings.
            clock: Monotonic time source, injectable for tests.
        """
        self._max_entries = max_entries if max_entries is not None else settings.cache_max_entries
        self._ttl = ttl if ttl is not None else settings.cache_ttl
        if self._max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if self._ttl <= 0:
            raise ValueError("ttl must be positive")

        self._clock = clock
        self._entries: OrderedDict[str, CacheEntryEntity] = OrderedDict()
        self._lock = threading.Lock()
        self._evictions = 0
        self._expirations = 0

    @classmethod
    def create(
        cls,
        max_entries: int | None = None,
        ttl: float | None = None,
    ) -> "InMemoryCacheRepository":
        """Factory method to create InMemoryCacheRepository with defaults.

        Args:
            max_entries: Capacity. If None, uses settings.
            ttl: Entry TTL in seconds. If None, uses settings.

        Returns:
            Configured InMemoryCacheRepository
        """
        return cls(max_entries=max_entries, ttl=ttl)

    def get(self, key: str) -> ChatResponse | None:
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return None
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: str, value: ChatResponse) -> None:
        with self._lock:
            now = self._clock()
            self._entries.pop(key, None)

            if len(self._entries) >= self._max_entries:
                self._sweep_expired(now)
            while len(self._entries) >= self._max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("Evicted least recently used cache entry %r", evicted_key)

            self._entries[key] = CacheEntryEntity(
                key=key,
                value=value,
                inserted_at=now,
                expires_at=now + self._ttl,
            )

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def count_all(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> dict:
        """Get repository statistics.

        Returns:
            Dictionary with entry count, capacity, TTL and eviction counters
        """
        with self._lock:
            return {
                "total_entries": len(self._entries),
                "max_entries": self._max_entries,
                "ttl": self._ttl,
                "evictions": self._evictions,
                "expirations": self._expirations,
            }

    def _live_entry(self, key: str) -> CacheEntryEntity | None:
        # Caller holds the lock.
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            self._expirations += 1
            return None
        return entry

    def _sweep_expired(self, now: float) -> None:
        # Caller holds the lock.
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self._expirations += len(expired)

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def ttl(self) -> float:
        return self._ttl
