"""Component wiring for event_enricher.

Builds every provider, cache and resolver explicitly from :class:`Settings`
and hands them out as one :class:`EnrichmentRuntime`; nothing is kept in
module-level globals.  :func:`open_runtime` also owns the lifetimes of the
shared HTTP client, the document store and the background cache sweeper.

Usage::

    async with open_runtime(Settings()) as runtime:
        result = await runtime.enricher.enrich_batch(events)
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

import httpx
import structlog

from event_enricher.config.settings import Settings
from event_enricher.interfaces.document_store import IDocumentStore
from event_enricher.interfaces.geocoding_provider import IGeocodingProvider
from event_enricher.interfaces.music_metadata_provider import IMusicMetadataProvider
from event_enricher.providers.cache.memory_cache import MemoryCacheProvider
from event_enricher.providers.geocoding.nominatim_provider import NominatimProvider
from event_enricher.providers.music.spotify_provider import SpotifyProvider
from event_enricher.providers.store.sqlite_document_store import SQLiteDocumentStore
from event_enricher.services.artist_genre_resolver import ArtistGenreResolver
from event_enricher.services.event_enricher import EventEnricher
from event_enricher.services.genre_extractor import Vocabulary
from event_enricher.services.locality_resolver import LocalityResolver
from event_enricher.services.venue_resolver import VenueResolver
from event_enricher.utils.concurrency import PeriodicSweeper
from event_enricher.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


@dataclass
class EnrichmentRuntime:
    """Every long-lived component, built once at startup."""

    settings: Settings
    store: IDocumentStore
    localities: LocalityResolver
    venues: VenueResolver
    genres: ArtistGenreResolver
    enricher: EventEnricher
    sweeper: PeriodicSweeper


def build_runtime(
    settings: Settings,
    http_client: httpx.AsyncClient,
    store: IDocumentStore | None = None,
    geocoder: IGeocodingProvider | None = None,
    music: IMusicMetadataProvider | None = None,
) -> EnrichmentRuntime:
    """Construct all caches, providers and resolvers.

    *store*, *geocoder* and *music* default to the SQLite, Nominatim and
    Spotify implementations; tests pass their own.
    """
    store = store or SQLiteDocumentStore(
        db_path=settings.store_db_path, timeout=settings.store_timeout_seconds
    )
    geocoder = geocoder or NominatimProvider(http_client=http_client, settings=settings)
    music = music or SpotifyProvider(http_client=http_client, settings=settings)

    location_bound = settings.location_cache_max_size or None

    # One negative cache for both geocoding resolvers; keys are prefixed per resolver.
    negative_cache = MemoryCacheProvider(
        max_size=settings.negative_cache_max_size,
        ttl=settings.negative_cache_ttl_seconds,
        name="geocoding_failures",
    )
    city_cache = MemoryCacheProvider(
        max_size=location_bound, ttl=None, name="cities"
    )
    venue_cache = MemoryCacheProvider(
        max_size=location_bound, ttl=None, name="venues"
    )
    genre_cache = MemoryCacheProvider(
        max_size=settings.genre_cache_max_size,
        ttl=settings.genre_cache_ttl_seconds,
        name="artist_genres",
    )

    localities = LocalityResolver(
        store=store, geocoder=geocoder, city_cache=city_cache, negative_cache=negative_cache
    )
    venues = VenueResolver(
        store=store, geocoder=geocoder, venue_cache=venue_cache, negative_cache=negative_cache
    )
    genres = ArtistGenreResolver(
        vocabulary=Vocabulary.from_file(settings.genres_file or None),
        store=store,
        music=music,
        genre_cache=genre_cache,
        lookup_artists=settings.lookup_artist_genres,
    )
    enricher = EventEnricher(
        localities=localities,
        venues=venues,
        genres=genres,
        concurrency=settings.enrich_concurrency,
    )

    ttl_caches = (negative_cache, genre_cache)
    sweeper = PeriodicSweeper(
        sweep=lambda: sum(cache.sweep() for cache in ttl_caches),
        interval=settings.cache_sweep_interval_seconds,
        name="ttl_caches",
    )

    return EnrichmentRuntime(
        settings=settings,
        store=store,
        localities=localities,
        venues=venues,
        genres=genres,
        enricher=enricher,
        sweeper=sweeper,
    )


@asynccontextmanager
async def open_runtime(settings: Settings) -> AsyncIterator[EnrichmentRuntime]:
    """Build the runtime, initialise the store and run the cache sweeper.

    The HTTP client, sweeper and store are closed on exit.
    """
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds)
    ) as http_client:
        runtime = build_runtime(settings, http_client)
        await runtime.store.initialize()
        runtime.sweeper.start()
        _logger.info(
            "enrichment_runtime_started",
            store=runtime.store.get_provider_name(),
            artist_lookup=settings.lookup_artist_genres and settings.spotify_configured(),
        )
        try:
            yield runtime
        finally:
            await runtime.sweeper.stop()
            await runtime.store.close()
            _logger.info("enrichment_runtime_stopped")
