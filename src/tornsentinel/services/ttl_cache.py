"""In-memory TTL cache keyed by logical resource.

Entries expire lazily: a lookup at or after ``expires_at`` removes the
entry and reports a miss. There is no background eviction and nothing is
persisted across restarts.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from tornsentinel.services.clock import Clock, MonotonicClock

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Single cache entry with its absolute expiry time."""

    value: T
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check if the entry is no longer servable at ``now``."""
        return now >= self.expires_at


class TTLCache:
    """Thread-safe in-memory cache with per-entry TTL.

    Args:
        clock: Time source (default: monotonic clock)
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or MonotonicClock()
        self._store: dict[Hashable, CacheEntry[Any]] = {}
        self._lock = threading.Lock()

        # Stats
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> tuple[Any, bool]:
        """Look up a key.

        Returns:
            ``(value, True)`` on a hit, ``(None, False)`` on a miss or
            after expiry
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self.misses += 1
                return None, False

            if entry.is_expired(self._clock.now()):
                del self._store[key]
                self.misses += 1
                return None, False

            self.hits += 1
            return entry.value, True

    def get_typed(self, key: Hashable, expected_type: type[T]) -> T | None:
        """Look up a key whose value must be an ``expected_type``.

        Returns:
            The cached value, or None on a miss

        Raises:
            TypeError: If the cached value has a different type
        """
        value, found = self.get(key)
        if not found:
            return None
        if not isinstance(value, expected_type):
            msg = (
                f"Cache entry {key!r} holds {type(value).__name__}, "
                f"expected {expected_type.__name__}"
            )
            raise TypeError(msg)
        return value

    def set(self, key: Hashable, value: Any, ttl: float) -> None:
        """Store a value that expires ``ttl`` seconds from now, overwriting."""
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=self._clock.now() + ttl)

    def patch(self, key: Hashable, value: Any) -> bool:
        """Replace the value of a live entry, keeping its expiry.

        Returns:
            True if a live entry was patched, False on a miss
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is None or entry.is_expired(self._clock.now()):
                return False
            self._store[key] = CacheEntry(value=value, expires_at=entry.expires_at)
            return True

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            dropped = len(self._store)
            self._store.clear()
        logger.debug("Cleared %d cache entries", dropped)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


__all__ = ["CacheEntry", "TTLCache"]
