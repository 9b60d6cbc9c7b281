"""Venue-level geocoding with the same tiers as the locality resolver.

A venue is looked up as an amenity named ``location`` inside ``city``.
The authority's answer only confirms that the place exists: the stored
venue keeps the caller's ``location`` as its name.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError as PydanticValidationError

from event_enricher.interfaces.cache_provider import ICacheProvider
from event_enricher.interfaces.document_store import VENUES, IDocumentStore
from event_enricher.interfaces.geocoding_provider import IGeocodingProvider
from event_enricher.models.authority import NominatimAddress, NominatimPlace
from event_enricher.models.geo import Address, Venue
from event_enricher.services.locality_resolver import make_location_key, point_from_place
from event_enricher.utils.errors import (
    ExternalServiceError,
    PersistentStoreError,
    ValidationError,
)
from event_enricher.utils.logging import get_logger

AMENITY_TYPES = frozenset(
    {
        "arts_centre",
        "bar",
        "cafe",
        "community_centre",
        "concert_hall",
        "events_centre",
        "events_venue",
        "mobility_hub",
        "music_school",
        "music_venue",
        "nightclub",
        "place_of_worship",
        "pub",
        "restaurant",
        "social_centre",
        "theatre",
        "university",
    }
)


class VenueResolver:
    """Resolves a venue name within a city to a structured address.

    Parameters
    ----------
    store:
        Durable cache of resolved venues.
    geocoder:
        The geocoding authority.
    venue_cache:
        In-memory positive cache owned by this resolver.
    negative_cache:
        TTL cache of authority failures, shared with the locality resolver.
    """

    def __init__(
        self,
        store: IDocumentStore,
        geocoder: IGeocodingProvider,
        venue_cache: ICacheProvider,
        negative_cache: ICacheProvider,
    ) -> None:
        self._store = store
        self._geocoder = geocoder
        self._cache = venue_cache
        self._negative_cache = negative_cache
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def resolve_venue(self, location: str, city: str, country: str = "") -> Address:
        """Return the address of venue *location* in *city*.

        Raises
        ------
        ValidationError
            If *location* or *city* is empty (no I/O is attempted).
        ExternalServiceError
            If the authority failed now or within the negative-cache TTL,
            including when no allowed amenity matched.
        PersistentStoreError
            If the store could not be read.
        """
        if not location or not city:
            raise ValidationError(message="location and city must be provided for venue lookup")

        key = make_location_key(location, city, country)

        cached = await self._cache.get(key)
        if cached is not None:
            return cached.address

        criteria = {"name": location, "address.locality": city}
        if country:
            criteria["address.country"] = country
        result = await self._store.find_one(VENUES, criteria)
        if result.found:
            venue = self._decode(result.document)
            await self._cache.set(key, venue)
            self._logger.debug("venue_loaded_from_store", venue=location, city=city)
            return venue.address

        negative_key = f"venue:{key}"
        previous_error = await self._negative_cache.get(negative_key)
        if previous_error is not None:
            self._logger.debug("venue_negative_cache_hit", venue=location, city=city)
            raise previous_error.with_traceback(None)

        try:
            venue = await self._query_authority(location, city, country)
        except ExternalServiceError as exc:
            await self._negative_cache.set(negative_key, exc)
            self._logger.info(
                "venue_lookup_failed", venue=location, city=city, country=country, error=str(exc)
            )
            raise

        await self._cache.set(key, venue)
        await self._persist(venue)
        return venue.address

    # -- Private helpers -------------------------------------------------------

    def _decode(self, document: dict | None) -> Venue:
        try:
            return Venue.model_validate(document)
        except PydanticValidationError as exc:
            raise PersistentStoreError(
                message=f"corrupt venue document: {exc}",
                provider_name=self._store.get_provider_name(),
            ) from exc

    async def _persist(self, venue: Venue) -> None:
        """Write *venue* to the store; failures are logged, not raised."""
        try:
            await self._store.insert_one(VENUES, venue.model_dump(mode="json", by_alias=True))
        except PersistentStoreError as exc:
            self._logger.warning("venue_store_write_failed", venue=venue.name, error=str(exc))

    async def _query_authority(self, location: str, city: str, country: str) -> Venue:
        """Take the first candidate that is an allowed kind of amenity."""
        provider = self._geocoder.get_provider_name()
        places = await self._geocoder.search_venue(location, city, country)

        for place in places:
            if place.addresstype != "amenity" or place.type not in AMENITY_TYPES:
                continue

            self._logger.info(
                "venue_found",
                venue=location,
                city=city,
                country=country,
                place=place.name,
                importance=place.importance,
                type=place.type,
            )
            return self._build_venue(place, location, city, provider)

        self._logger.warning("venue_not_found", venue=location, city=city, country=country)
        raise ExternalServiceError(
            message=f"no relevant info found for venue {location} in city {city}",
            provider_name=provider,
        )

    @staticmethod
    def _build_venue(place: NominatimPlace, location: str, city: str, provider: str) -> Venue:
        details = place.address or NominatimAddress()
        locality = details.city or details.town or details.village or city
        return Venue(
            name=location,
            type=place.type,
            address=Address(
                locality=locality,
                country=details.country,
                region=details.state,
                postal_code=details.postcode,
                street=details.road,
                house_number=details.house_number,
                geolocation=point_from_place(place, provider),
            ),
        )
