"""City-level geocoding with a three-tier cache.

Resolution order for a city (and optional country):

1. in-memory positive cache (resolved cities never change, so no TTL),
2. the ``cities`` collection of the persistent store,
3. the shared negative cache of recent authority failures,
4. the geocoding authority, followed by write-through to store and cache.

Only the last tier can fail in a way the caller sees; failures are
remembered in the negative cache so the authority is asked at most once
per key per TTL window.

Concurrent misses for the same key are not coalesced: both callers may
query the store and the authority, and both insert the city.  The
duplicate documents are identical, so readers see the same answer.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError as PydanticValidationError

from event_enricher.interfaces.cache_provider import ICacheProvider
from event_enricher.interfaces.document_store import CITIES, IDocumentStore
from event_enricher.interfaces.geocoding_provider import IGeocodingProvider
from event_enricher.models.authority import NominatimPlace
from event_enricher.models.geo import City, GeoPoint
from event_enricher.utils.errors import (
    AmbiguousResultError,
    ExternalServiceError,
    PersistentStoreError,
    ValidationError,
)
from event_enricher.utils.logging import get_logger

# Nominatim reports Oslo as a 'county', hence county next to city/town/village.
LOCALITY_ADDRESS_TYPES = frozenset({"city", "town", "village", "county"})

_MAX_CANDIDATES = 2
_MIN_IMPORTANCE = 0.4


def make_location_key(*parts: str) -> str:
    """Join lowercased non-empty parts with ``+`` and turn spaces into ``+``."""
    return "+".join(part.lower() for part in parts if part).replace(" ", "+")


def point_from_place(place: NominatimPlace, provider_name: str) -> GeoPoint:
    """Build a GeoPoint from a candidate's string coordinates."""
    try:
        return GeoPoint(coordinates=(float(place.lon), float(place.lat)))
    except ValueError as exc:
        raise ExternalServiceError(
            message=f"unparseable coordinates lat={place.lat!r} lon={place.lon!r}",
            provider_name=provider_name,
        ) from exc


class LocalityResolver:
    """Resolves city names to coordinates.

    Parameters
    ----------
    store:
        Durable cache of resolved cities.
    geocoder:
        The geocoding authority.
    city_cache:
        In-memory positive cache owned by this resolver.
    negative_cache:
        TTL cache of authority failures, shared with the venue resolver.
    """

    def __init__(
        self,
        store: IDocumentStore,
        geocoder: IGeocodingProvider,
        city_cache: ICacheProvider,
        negative_cache: ICacheProvider,
    ) -> None:
        self._store = store
        self._geocoder = geocoder
        self._cache = city_cache
        self._negative_cache = negative_cache
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # -- Public API -----------------------------------------------------------

    async def resolve_city(self, city: str, country: str = "") -> GeoPoint:
        """Return the coordinates of *city*.

        Meant for enrichment of submitted events, not for user searches,
        which could flood the authority with arbitrary names.

        Raises
        ------
        ValidationError
            If *city* is empty.
        ExternalServiceError
            If the authority failed now or within the negative-cache TTL.
        AmbiguousResultError
            If the authority's candidates lie in different countries.
        PersistentStoreError
            If the store could not be read.
        """
        if not city:
            raise ValidationError(message="city must be provided for city lookup")

        city = city.lower()
        country = country.lower()
        key = make_location_key(city, country)

        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        result = await self._store.find_one(CITIES, {"name": city, "country": country})
        if result.found:
            point = self._decode(result.document).geolocation
            await self._cache.set(key, point)
            self._logger.debug("city_loaded_from_store", city=city, country=country)
            return point

        negative_key = f"city:{key}"
        previous_error = await self._negative_cache.get(negative_key)
        if previous_error is not None:
            self._logger.debug("city_negative_cache_hit", city=city, country=country)
            raise previous_error.with_traceback(None)

        try:
            point = await self._query_authority(city, country)
        except ExternalServiceError as exc:
            await self._negative_cache.set(negative_key, exc)
            self._logger.info(
                "city_lookup_failed", city=city, country=country, error=str(exc)
            )
            raise

        await self._cache.set(key, point)
        await self._persist(City(name=city, country=country, geolocation=point))
        self._logger.info(
            "city_resolved", city=city, country=country, coordinates=point.coordinates
        )
        return point

    async def resolve_all_city_candidates(self, city: str, country: str = "") -> list[GeoPoint]:
        """Return the coordinates of every stored city named *city*.

        Bypasses the in-memory caches: callers disambiguating by radius need
        all matches, not the single cached answer.  Never calls the authority.
        """
        criteria = {"name": city.lower()}
        if country:
            criteria["country"] = country.lower()
        documents = await self._store.find_many(CITIES, criteria)
        return [self._decode(doc).geolocation for doc in documents]

    # -- Private helpers -------------------------------------------------------

    def _decode(self, document: dict | None) -> City:
        try:
            return City.model_validate(document)
        except PydanticValidationError as exc:
            raise PersistentStoreError(
                message=f"corrupt city document: {exc}",
                provider_name=self._store.get_provider_name(),
            ) from exc

    async def _persist(self, city: City) -> None:
        """Write *city* to the store; failures are logged, not raised."""
        try:
            await self._store.insert_one(CITIES, city.model_dump(mode="json"))
        except PersistentStoreError as exc:
            self._logger.warning("city_store_write_failed", city=city.name, error=str(exc))

    async def _query_authority(self, city: str, country: str) -> GeoPoint:
        """Ask the authority and accept its answer only if unambiguous.

        Of the top two candidates, keep locality-typed ones that are either
        important enough or the sole candidate returned.  If the kept
        candidates name more than one country, refuse to guess.
        """
        provider = self._geocoder.get_provider_name()
        places = await self._geocoder.search_city(city, country)
        considered = places[:_MAX_CANDIDATES]

        accepted = [
            place
            for place in considered
            if place.addresstype in LOCALITY_ADDRESS_TYPES
            and (place.importance > _MIN_IMPORTANCE or len(considered) == 1)
        ]
        if not accepted:
            raise ExternalServiceError(
                message=f"no relevant coordinates found for {city}, {country}",
                provider_name=provider,
            )

        countries = sorted({place.country_suffix for place in accepted})
        if len(countries) > 1:
            raise AmbiguousResultError(
                message=(
                    f"ambiguous results for coordinates of city {city}. "
                    f"Found {len(countries)} possible countries: {countries}"
                ),
                provider_name=provider,
            )

        return point_from_place(accepted[0], provider)
