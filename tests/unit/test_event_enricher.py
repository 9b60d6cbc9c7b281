"""Unit tests for EventEnricher with mocked resolvers."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from event_enricher.models.event import Event
from event_enricher.models.geo import Address, GeoPoint
from event_enricher.services.artist_genre_resolver import ArtistGenreResolver
from event_enricher.services.event_enricher import (
    STAGE_GENRES,
    STAGE_GEOLOCATION,
    EventEnricher,
)
from event_enricher.services.locality_resolver import LocalityResolver
from event_enricher.services.venue_resolver import VenueResolver
from event_enricher.utils.errors import (
    ExternalServiceError,
    PersistentStoreError,
    ValidationError,
)

CITY_POINT = GeoPoint(coordinates=(13.4, 52.5))
VENUE_ADDRESS = Address(
    locality="Berlin",
    country="Germany",
    geolocation=GeoPoint(coordinates=(13.443, 52.5111)),
)


def _event(**overrides) -> Event:  # noqa: ANN003
    defaults = {"title": "Ben Klock", "location": "Berghain", "city": "Berlin"}
    defaults.update(overrides)
    return Event(**defaults)


@pytest.fixture
def localities() -> MagicMock:
    resolver = MagicMock(spec=LocalityResolver)
    resolver.resolve_city = AsyncMock(return_value=CITY_POINT)
    return resolver


@pytest.fixture
def venues() -> MagicMock:
    resolver = MagicMock(spec=VenueResolver)
    resolver.resolve_venue = AsyncMock(return_value=VENUE_ADDRESS)
    return resolver


@pytest.fixture
def genres() -> MagicMock:
    resolver = MagicMock(spec=ArtistGenreResolver)
    resolver.resolve_genres = AsyncMock(return_value={"techno", "minimal techno"})
    return resolver


@pytest.fixture
def enricher(localities: MagicMock, venues: MagicMock, genres: MagicMock) -> EventEnricher:
    return EventEnricher(localities=localities, venues=venues, genres=genres, concurrency=2)


class TestEnrich:
    @pytest.mark.asyncio
    async def test_venue_resolution_preferred(
        self, enricher: EventEnricher, localities: MagicMock
    ) -> None:
        enriched = await enricher.enrich(_event())

        assert enriched.address == VENUE_ADDRESS
        assert enriched.geolocation == VENUE_ADDRESS.geolocation
        assert enriched.genres == ["minimal techno", "techno"]
        localities.resolve_city.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_to_city_when_venue_unknown(
        self, enricher: EventEnricher, venues: MagicMock, localities: MagicMock
    ) -> None:
        venues.resolve_venue.side_effect = ExternalServiceError(message="no relevant info")

        enriched = await enricher.enrich(_event(country="Germany"))

        assert enriched.geolocation == CITY_POINT
        assert enriched.address is None
        localities.resolve_city.assert_awaited_once_with("Berlin", "Germany")

    @pytest.mark.asyncio
    async def test_falls_back_to_city_without_location(
        self, enricher: EventEnricher, venues: MagicMock
    ) -> None:
        venues.resolve_venue.side_effect = ValidationError()

        enriched = await enricher.enrich(_event(location=""))
        assert enriched.geolocation == CITY_POINT

    @pytest.mark.asyncio
    async def test_store_failure_does_not_fall_back(
        self, enricher: EventEnricher, venues: MagicMock, localities: MagicMock
    ) -> None:
        venues.resolve_venue.side_effect = PersistentStoreError(message="timed out")

        with pytest.raises(PersistentStoreError):
            await enricher.enrich(_event())
        localities.resolve_city.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_raises_first_failure(
        self, enricher: EventEnricher, venues: MagicMock, localities: MagicMock
    ) -> None:
        venues.resolve_venue.side_effect = ExternalServiceError(message="venue")
        localities.resolve_city.side_effect = ExternalServiceError(message="city unknown")

        with pytest.raises(ExternalServiceError, match="city unknown"):
            await enricher.enrich(_event())

    @pytest.mark.asyncio
    async def test_supplied_geolocation_and_genres_skip_lookups(
        self,
        enricher: EventEnricher,
        venues: MagicMock,
        localities: MagicMock,
        genres: MagicMock,
    ) -> None:
        event = Event.model_validate(
            {
                "title": "Ben Klock",
                "location": "Berghain",
                "city": "Berlin",
                "geolocation": [7.4, 46.9],
                "genres": ["techno", "house", "techno"],
            }
        )

        enriched = await enricher.enrich(event)

        assert enriched.geolocation == GeoPoint(coordinates=(7.4, 46.9))
        assert enriched.address is None
        assert enriched.genres == ["house", "techno"]
        venues.resolve_venue.assert_not_awaited()
        localities.resolve_city.assert_not_awaited()
        genres.resolve_genres.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_incomplete_geolocation_is_looked_up(
        self, enricher: EventEnricher, venues: MagicMock, genres: MagicMock
    ) -> None:
        enriched = await enricher.enrich(_event(geolocation=[7.4], genres=[]))

        assert enriched.geolocation == VENUE_ADDRESS.geolocation
        venues.resolve_venue.assert_awaited_once()
        genres.resolve_genres.assert_awaited_once()


class TestEnrichBatch:
    @pytest.mark.asyncio
    async def test_failures_collected_per_stage(
        self, enricher: EventEnricher, venues: MagicMock, localities: MagicMock, genres: MagicMock
    ) -> None:
        events = [_event(title="A"), _event(title="B", city="Atlantis"), _event(title="C")]

        async def resolve_venue(location: str, city: str, country: str = "") -> Address:
            if city == "Atlantis":
                raise ExternalServiceError(message="no venue")
            return VENUE_ADDRESS

        async def resolve_city(city: str, country: str = "") -> GeoPoint:
            raise ExternalServiceError(message=f"no relevant coordinates found for {city}")

        async def resolve_genres(event: Event) -> set[str]:
            if event.title == "C":
                raise ExternalServiceError(message="spotify down")
            return {"techno"}

        venues.resolve_venue.side_effect = resolve_venue
        localities.resolve_city.side_effect = resolve_city
        genres.resolve_genres.side_effect = resolve_genres

        result = await enricher.enrich_batch(events)

        assert [item.event.title for item in result.enriched] == ["A", "B", "C"]
        assert result.enriched[1].geolocation is None
        assert result.enriched[1].genres == ["techno"]
        assert result.enriched[2].genres == []
        assert result.enriched[2].geolocation == VENUE_ADDRESS.geolocation

        failures = [(f.index, f.title, f.stage) for f in result.failures]
        assert failures == [(1, "B", STAGE_GEOLOCATION), (2, "C", STAGE_GENRES)]
        assert "Atlantis" in result.failures[0].error

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(
        self, enricher: EventEnricher, genres: MagicMock
    ) -> None:
        in_flight = 0
        peak = 0

        async def resolve_genres(event: Event) -> set[str]:
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.01)
            in_flight -= 1
            return set()

        genres.resolve_genres.side_effect = resolve_genres

        result = await enricher.enrich_batch([_event(title=str(i)) for i in range(6)])

        assert len(result.enriched) == 6
        assert peak == 2

    @pytest.mark.asyncio
    async def test_empty_batch(self, enricher: EventEnricher) -> None:
        result = await enricher.enrich_batch([])
        assert result.enriched == []
        assert result.failures == []
