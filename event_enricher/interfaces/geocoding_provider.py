"""Abstract base class for geocoding authorities.

The resolvers only need raw ranked candidates; disambiguation (locality
types, importance threshold, country agreement, amenity allow-list) lives
in the resolvers, not in the provider.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from event_enricher.models.authority import NominatimPlace


class IGeocodingProvider(ABC):
    """Contract for forward-geocoding searches."""

    @abstractmethod
    async def search_city(self, city: str, country: str = "") -> list[NominatimPlace]:
        """Search for a locality named *city*, optionally within *country*.

        Returns
        -------
        list[NominatimPlace]
            Candidates in the authority's ranking order (possibly empty).

        Raises
        ------
        event_enricher.utils.errors.ExternalServiceError
            On network failure, non-success status or malformed payload.
        """

    @abstractmethod
    async def search_venue(
        self, location: str, city: str, country: str = ""
    ) -> list[NominatimPlace]:
        """Search for an amenity named *location* within *city*.

        Candidates carry structured address details.

        Raises
        ------
        event_enricher.utils.errors.ExternalServiceError
            On network failure, non-success status or malformed payload.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"nominatim"``."""
