"""Event enrichment: coordinates and genre tags for submitted events.

Combines the three resolvers the way event ingestion uses them:

* **location** -- the venue is tried first; when it cannot be resolved
  (unknown to the authority, or no location given) the city is used.
* **genres** -- delegated to :class:`ArtistGenreResolver`.

Coordinates (exactly two numbers) or genres supplied with the event are
kept and the matching lookup is skipped.

Batches are processed concurrently with a bounded number of events in
flight.  A failure in one step of one event is recorded in the batch
result and never aborts the rest of the batch.
"""

from __future__ import annotations

import asyncio

import structlog

from event_enricher.models.event import BatchResult, EnrichedEvent, EnrichmentFailure, Event
from event_enricher.models.geo import Address, GeoPoint
from event_enricher.services.artist_genre_resolver import ArtistGenreResolver
from event_enricher.services.locality_resolver import LocalityResolver
from event_enricher.services.venue_resolver import VenueResolver
from event_enricher.utils.concurrency import throttled_gather
from event_enricher.utils.errors import EventEnricherError, ExternalServiceError, ValidationError
from event_enricher.utils.logging import get_logger

STAGE_GEOLOCATION = "geolocation"
STAGE_GENRES = "genres"


class EventEnricher:
    """Adds geolocation, address and genres to events.

    Parameters
    ----------
    localities, venues, genres:
        The resolvers to delegate to.
    concurrency:
        Maximum number of events enriched at the same time in a batch.
    """

    def __init__(
        self,
        localities: LocalityResolver,
        venues: VenueResolver,
        genres: ArtistGenreResolver,
        concurrency: int = 4,
    ) -> None:
        self._localities = localities
        self._venues = venues
        self._genres = genres
        self._concurrency = max(1, concurrency)
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # -- Public API -----------------------------------------------------------

    async def locate(self, event: Event) -> tuple[GeoPoint, Address | None]:
        """Return the event's coordinates and, when the venue resolved, its address."""
        try:
            address = await self._venues.resolve_venue(event.location, event.city, event.country)
        except (ValidationError, ExternalServiceError) as exc:
            self._logger.debug(
                "venue_fallback_to_city", venue=event.location, city=event.city, reason=str(exc)
            )
        else:
            return address.geolocation, address

        point = await self._localities.resolve_city(event.city, event.country)
        return point, None

    async def enrich(self, event: Event) -> EnrichedEvent:
        """Enrich a single event, raising the first failure."""
        enriched, failures = await self._enrich_item(0, event)
        if failures:
            raise failures[0][1]
        return enriched

    async def enrich_batch(self, events: list[Event]) -> BatchResult:
        """Enrich *events*, collecting per-event failures instead of raising."""
        semaphore = asyncio.Semaphore(self._concurrency)
        outcomes = await throttled_gather(
            [self._enrich_item(index, event) for index, event in enumerate(events)],
            semaphore=semaphore,
            return_exceptions=False,
        )

        result = BatchResult()
        for index, (enriched, failures) in enumerate(outcomes):
            result.enriched.append(enriched)
            for stage, error in failures:
                result.failures.append(
                    EnrichmentFailure(
                        index=index, title=events[index].title, stage=stage, error=str(error)
                    )
                )

        self._logger.info(
            "batch_enriched", events=len(events), failures=len(result.failures)
        )
        return result

    # -- Private helpers -------------------------------------------------------

    async def _enrich_item(
        self, index: int, event: Event
    ) -> tuple[EnrichedEvent, list[tuple[str, EventEnricherError]]]:
        failures: list[tuple[str, EventEnricherError]] = []
        geolocation: GeoPoint | None = None
        address: Address | None = None
        genres: set[str] = set()

        if len(event.geolocation) == 2:
            geolocation = GeoPoint(coordinates=(event.geolocation[0], event.geolocation[1]))
        else:
            try:
                geolocation, address = await self.locate(event)
            except EventEnricherError as exc:
                self._logger.warning(
                    "event_location_failed", index=index, title=event.title, error=str(exc)
                )
                failures.append((STAGE_GEOLOCATION, exc))

        if event.genres:
            genres = set(event.genres)
        else:
            try:
                genres = await self._genres.resolve_genres(event)
            except EventEnricherError as exc:
                self._logger.warning(
                    "event_genres_failed", index=index, title=event.title, error=str(exc)
                )
                failures.append((STAGE_GENRES, exc))

        enriched = EnrichedEvent(
            event=event,
            geolocation=geolocation,
            address=address,
            genres=sorted(genres),
        )
        return enriched, failures
