"""Thread-safe caching utilities."""

import threading
import time
from typing import Callable, Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class ThreadSafeCache(Generic[K, V]):
    """A generic thread-safe cache with optional per-entry expiry.

    Args:
        ttl: Seconds an entry stays valid, or None to keep entries forever.
        clock: Monotonic time source, replaceable in tests.
    """

    def __init__(self, ttl: float | None = None, clock: Callable[[], float] = time.monotonic) -> None:
        self._cache: dict[K, tuple[float, V]] = {}
        self._lock = threading.Lock()
        self._ttl = ttl
        self._clock = clock

    def _lookup(self, key: K) -> tuple[bool, V | None]:
        # Caller holds the lock
        entry = self._cache.get(key)
        if entry is None:
            return False, None
        stored_at, value = entry
        if self._ttl is not None and self._clock() - stored_at >= self._ttl:
            del self._cache[key]
            return False, None
        return True, value

    def get(self, key: K) -> V | None:
        """Get a value from the cache."""
        with self._lock:
            return self._lookup(key)[1]

    def set(self, key: K, value: V) -> None:
        """Set a value in the cache."""
        with self._lock:
            self._cache[key] = (self._clock(), value)

    def contains(self, key: K) -> bool:
        """Check if a live entry exists for the key."""
        with self._lock:
            return self._lookup(key)[0]

    def get_or_compute(self, key: K, compute_fn: Callable[[], V]) -> V:
        """Get from cache or compute and cache the result.

        compute_fn runs outside the lock, so concurrent misses on the same
        key may compute more than once; the first stored value wins.
        Exceptions from compute_fn propagate and nothing is cached.
        """
        with self._lock:
            found, value = self._lookup(key)
            if found:
                return value

        value = compute_fn()

        with self._lock:
            found, existing = self._lookup(key)
            if found:
                return existing
            self._cache[key] = (self._clock(), value)
            return value

    def clear(self) -> None:
        """Clear all cached values."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        """Return the number of cached items, expired ones included."""
        with self._lock:
            return len(self._cache)
