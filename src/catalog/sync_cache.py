"""Process-lifetime cache for catalog results.

Each key is computed at most once per process: the first caller computes
and publishes the value while concurrent callers for the same key wait on
that computation instead of starting their own. Failed computations are not
cached, so the next caller tries again. There is no eviction.
"""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')

_MISSING = object()


class SyncCache:
    """Single-flight, compute-once cache.

    Example:
        >>> cache = SyncCache()
        >>> posts = cache.get_or_compute("all_posts", catalog._fetch_posts)
    """

    def __init__(self):
        self._values: Dict[Hashable, Any] = {}
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, key: Hashable) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def get_or_compute(self, key: Hashable, compute: Callable[[], T]) -> T:
        """Return the cached value for key, computing it on first use.

        Args:
            key: Cache key
            compute: Zero-argument callable producing the value

        Returns:
            The cached or freshly computed value

        Raises:
            Whatever compute raises; nothing is cached in that case
        """
        value = self._values.get(key, _MISSING)
        if value is not _MISSING:
            return value

        with self._lock_for(key):
            value = self._values.get(key, _MISSING)
            if value is not _MISSING:
                return value

            logger.debug(f"Cache miss for {key!r}, computing")
            value = compute()
            self._values[key] = value
            return value

    def peek(self, key: Hashable) -> Optional[Any]:
        """Return the cached value without computing it (None if absent)."""
        value = self._values.get(key, _MISSING)
        return None if value is _MISSING else value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._values

    def clear(self) -> None:
        with self._guard:
            self._values.clear()
            self._locks.clear()
