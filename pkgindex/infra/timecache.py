"""
Time-based memoization for pkgindex.

TimeCache memoizes the result of a computation under a hashable key for a
time-to-live. Expired entries are dropped (never served stale) and an
optional expiry hook runs so callers can clean up anything tied to the key.

Concurrent callers asking for the same missing key share one computation:
the first caller computes, the others wait on its result.
"""

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A memoized value and when it was produced."""
    key: Hashable
    value: Any
    created_at: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.created_at < self.ttl


class TimeCache:
    """
    Thread-safe TTL memoization with single-flight computation.

    Example:
        cache = TimeCache()
        value = cache.get_or_compute(("a", "b"), compute_fn, ttl=3600)
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._inflight: Dict[Hashable, Future] = {}

    def get_or_compute(
        self,
        key: Hashable,
        compute: Callable[[], Any],
        ttl: float,
        on_expire: Optional[Callable[[Hashable], None]] = None,
    ) -> Any:
        """
        Return the cached value for key, computing it when missing or expired.

        Args:
            key: Hashable cache key
            compute: Zero-argument function producing the value
            ttl: Time-to-live in seconds for a newly computed value
            on_expire: Called with the key when an expired entry is dropped

        Returns:
            The cached or freshly computed value
        """
        expired = False
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if entry.is_fresh(self._clock()):
                    return entry.value
                del self._entries[key]
                expired = True

            pending = self._inflight.get(key)
            owner = pending is None
            if owner:
                pending = Future()
                self._inflight[key] = pending

        if expired:
            logger.debug(f"Cache entry expired: {key!r}")

        if not owner:
            if expired:
                self._run_expire_hook(on_expire, key)
            return pending.result()

        try:
            if expired:
                self._run_expire_hook(on_expire, key)
            value = compute()
        except BaseException as e:
            with self._lock:
                del self._inflight[key]
            pending.set_exception(e)
            raise

        with self._lock:
            if ttl > 0:
                self._entries[key] = CacheEntry(key=key, value=value,
                                                created_at=self._clock(), ttl=ttl)
            del self._inflight[key]
        pending.set_result(value)
        return value

    @staticmethod
    def _run_expire_hook(on_expire: Optional[Callable[[Hashable], None]], key: Hashable) -> None:
        # Cleanup failures must not block the refetch
        if on_expire is None:
            return
        try:
            on_expire(key)
        except Exception as e:
            logger.warning(f"Expiry hook failed for {key!r}: {e}")

    def get(self, key: Hashable) -> Optional[CacheEntry]:
        """Return the live entry for key, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_fresh(self._clock()):
                return entry
            return None

    def invalidate(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
