"""Business logic: genre extraction, the three resolvers and event enrichment."""

from event_enricher.services.artist_genre_resolver import ArtistGenreResolver
from event_enricher.services.event_enricher import EventEnricher
from event_enricher.services.genre_extractor import (
    Vocabulary,
    extract_artists_from_title,
    extract_genres_from_text,
)
from event_enricher.services.locality_resolver import LocalityResolver
from event_enricher.services.venue_resolver import VenueResolver

__all__ = [
    "ArtistGenreResolver",
    "EventEnricher",
    "LocalityResolver",
    "VenueResolver",
    "Vocabulary",
    "extract_artists_from_title",
    "extract_genres_from_text",
]
