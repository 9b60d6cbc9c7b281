"""Abstract base class for in-memory cache providers.

Defines the contract for the key-value caches in front of the persistent
store: the per-resolver positive caches, the shared negative cache of
authority failures, and the artist-genre TTL cache.  Implementations must
be safe to share between concurrent tasks and threads.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Contract for key-value cache services.

    Reads and writes are async so a network-backed cache can replace the
    in-memory one without touching the resolvers.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        Any or None
            The cached value if present and not expired; ``None`` otherwise.
        """

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store *value* under *key* using the cache's own expiry policy.

        Parameters
        ----------
        key:
            The cache key.
        value:
            The value to store.  ``None`` is not a valid value.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry stored under *key* (no-op if absent)."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""

    @abstractmethod
    def sweep(self) -> int:
        """Reclaim expired entries now and return how many were removed."""
