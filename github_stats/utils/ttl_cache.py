"""In-memory TTL cache for computed statistics.

Per-process and thread-safe: lookups share a read lock, writes take it
exclusively. Expiry is lazy, entries are checked against the clock when
read and only dropped while a writer already holds the lock.
"""

from __future__ import annotations

import copy
import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Container for cached values with expiration metadata."""

    value: Any
    expires_at: float


class ReadWriteLock:
    """Lock allowing many concurrent readers or a single writer.

    Waiting writers block new readers so a steady stream of lookups
    cannot starve a pending write.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class TTLCache:
    """Thread-safe, in-memory cache with per-entry time-to-live.

    Values are deep-copied on the way in and on the way out, so callers can
    never mutate what the cache holds.

    Attributes:
        max_entries: Maximum number of stored entries (None for unlimited).
    """

    def __init__(
        self,
        *,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")

        self.max_entries = max_entries
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = ReadWriteLock()

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"TTLCache(max_entries={self.max_entries}, size={len(self._store)})"

    def get(self, key: str) -> tuple[Any, bool]:
        """Look up a live entry.

        Args:
            key: Cache key.

        Returns:
            Tuple of (value, found). ``value`` is None when not found or expired.
        """

        with self._lock.read():
            entry = self._store.get(key)
            if entry is None:
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "not_found"})
                return None, False

            if self._clock() >= entry.expires_at:
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "expired"})
                return None, False

            value = copy.deepcopy(entry.value)

        logger.debug("cache.hit", extra={"cache_key": key})
        return value, True

    def set(self, key: str, value: Any, ttl: float) -> None:
        """Insert or overwrite an entry expiring ``ttl`` seconds from now.

        Args:
            key: Cache key.
            value: Value to store.
            ttl: Time-to-live in seconds.
        """

        stored = copy.deepcopy(value)

        with self._lock.write():
            now = self._clock()
            self._drop_expired_locked(now)
            self._store[key] = CacheEntry(value=stored, expires_at=now + ttl)
            self._evict_if_over_capacity_locked()
            size = len(self._store)

        logger.debug("cache.set", extra={"cache_key": key, "size": size, "ttl_s": ttl})

    def clear(self) -> None:
        """Remove all cached entries."""

        with self._lock.write():
            self._store.clear()

    def stats(self) -> dict[str, int | None]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock.read():
            now = self._clock()
            live = sum(1 for entry in self._store.values() if now < entry.expires_at)
            return {
                "max_entries": self.max_entries,
                "entries": len(self._store),
                "live_entries": live,
            }

    def _drop_expired_locked(self, now: float) -> None:
        expired_keys = [k for k, entry in self._store.items() if now >= entry.expires_at]
        for key in expired_keys:
            del self._store[key]

    def _evict_if_over_capacity_locked(self) -> None:
        if self.max_entries is None:
            return

        while len(self._store) > self.max_entries:
            soonest = min(self._store, key=lambda k: self._store[k].expires_at)
            del self._store[soonest]
