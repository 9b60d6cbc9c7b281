"""In-memory cache provider backed by cachetools.

Two flavours share one class:

* ``ttl`` set   -> ``cachetools.TTLCache``: entries read as missing once the
  TTL has elapsed and are reclaimed by :meth:`MemoryCacheProvider.sweep`.
* ``ttl=None``  -> ``cachetools.LRUCache``: entries live until evicted by
  size or process restart.  Resolved cities and venues never change, so
  their caches are built with ``max_size=None`` and keep every entry.

cachetools caches are not thread-safe, so every map operation runs under a
``threading.Lock``.  The lock covers the single dict operation only; no
I/O ever happens while it is held.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Any, Callable

import structlog
from cachetools import Cache, LRUCache, TTLCache

from event_enricher.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)


class MemoryCacheProvider(ICacheProvider):
    """In-memory cache, optionally with per-entry TTL.

    Parameters
    ----------
    max_size:
        Maximum number of entries before the least-recently-used entry
        is evicted, or ``None`` for no size bound.
    ttl:
        Time-to-live in seconds for every entry, or ``None`` for no expiry.
    name:
        Label used in log events.
    timer:
        Clock used for expiry; injectable so tests can advance time.
    """

    def __init__(
        self,
        max_size: int | None = 1000,
        ttl: float | None = 3600,
        name: str = "cache",
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._name = name
        self._lock = threading.Lock()
        self._cache: Cache
        maxsize = math.inf if max_size is None else max_size
        if ttl is None:
            self._cache = LRUCache(maxsize=maxsize)
        else:
            self._cache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    # ------------------------------------------------------------------
    # ICacheProvider implementation
    # ------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        """Retrieve the cached value for *key*, or ``None`` if missing/expired."""
        with self._lock:
            value = self._cache.get(key)
        if value is not None:
            logger.debug("cache_hit", cache=self._name, key=key)
        else:
            logger.debug("cache_miss", cache=self._name, key=key)
        return value

    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, resetting its TTL."""
        if value is None:
            raise ValueError("None cannot be cached; it means 'missing'")
        with self._lock:
            self._cache[key] = value
        logger.debug("cache_set", cache=self._name, key=key)

    async def delete(self, key: str) -> None:
        """Remove *key* from the cache (no-op if absent)."""
        with self._lock:
            self._cache.pop(key, None)

    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present and not expired."""
        with self._lock:
            return key in self._cache

    def sweep(self) -> int:
        """Drop expired entries; a no-op returning 0 for caches without TTL."""
        if not isinstance(self._cache, TTLCache):
            return 0
        with self._lock:
            expired = self._cache.expire()
        removed = len(expired)
        if removed:
            logger.debug("cache_expired", cache=self._name, removed=removed)
        return removed
