"""Abstract base class for music-metadata authorities.

Providers handle their own authentication (e.g. OAuth client-credentials
tokens) and return raw artist candidates.  Choosing among candidates is the
caller's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ArtistCandidate:
    """One artist returned by a name search.

    Attributes
    ----------
    name:
        The artist's name as listed by the provider.
    genres:
        Genre labels the provider attaches to the artist.
    """

    name: str
    genres: tuple[str, ...] = field(default_factory=tuple)


class IMusicMetadataProvider(ABC):
    """Contract for artist lookups used to derive genre tags."""

    @abstractmethod
    async def search_artists(self, name: str) -> list[ArtistCandidate]:
        """Search the authority for artists matching *name*.

        Raises
        ------
        event_enricher.utils.errors.ExternalServiceError
            If authentication or the search request fails.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"spotify"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider has the credentials it needs."""
