"""Pydantic models for events, geographic entities, genre records and
authority payloads."""

from event_enricher.models.authority import (
    NominatimAddress,
    NominatimPlace,
    SpotifyArtist,
    SpotifySearchResponse,
    SpotifyToken,
)
from event_enricher.models.event import BatchResult, EnrichedEvent, EnrichmentFailure, Event
from event_enricher.models.genre import GenreRecord
from event_enricher.models.geo import Address, City, GeoPoint, Venue

__all__ = [
    "Address",
    "BatchResult",
    "City",
    "EnrichedEvent",
    "EnrichmentFailure",
    "Event",
    "GenreRecord",
    "GeoPoint",
    "NominatimAddress",
    "NominatimPlace",
    "SpotifyArtist",
    "SpotifySearchResponse",
    "SpotifyToken",
    "Venue",
]
