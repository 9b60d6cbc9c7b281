"""Abstract base class for the persistent document store.

The store holds the durable caches of resolved cities, venues and
artist genre records.  Only three operations are needed: find one, find
many, insert one.  Filters are equality matches on (dotted) field paths,
e.g. ``{"name": "berghain", "address.locality": "berlin"}``.

A miss is not an error: :meth:`IDocumentStore.find_one` returns
:data:`NOT_FOUND` instead of raising.  Implementations raise
:class:`~event_enricher.utils.errors.PersistentStoreError` only for real
failures (I/O errors, timeouts).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

CITIES = "cities"
VENUES = "venues"
GENRE_RECORDS = "genre-records"


@dataclass(frozen=True)
class FindResult:
    """Outcome of a single-document lookup.

    Attributes
    ----------
    document:
        The matched document, or ``None`` for the NotFound variant.
    """

    document: dict[str, Any] | None = None

    @property
    def found(self) -> bool:
        return self.document is not None


NOT_FOUND = FindResult()


class IDocumentStore(ABC):
    """Contract for the document store behind the resolution caches."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backing storage (create tables, indices, ...)."""

    @abstractmethod
    async def find_one(self, collection: str, criteria: dict[str, str]) -> FindResult:
        """Return the first document in *collection* matching *criteria*.

        Returns
        -------
        FindResult
            :data:`NOT_FOUND` when no document matches.
        """

    @abstractmethod
    async def find_many(self, collection: str, criteria: dict[str, str]) -> list[dict[str, Any]]:
        """Return every document in *collection* matching *criteria*, in insertion order."""

    @abstractmethod
    async def insert_one(self, collection: str, document: dict[str, Any]) -> None:
        """Insert *document* into *collection*."""

    @abstractmethod
    async def close(self) -> None:
        """Release any held resources."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"sqlite"``."""
