"""Geocoding provider implementations."""

from event_enricher.providers.geocoding.nominatim_provider import NominatimProvider

__all__ = ["NominatimProvider"]
