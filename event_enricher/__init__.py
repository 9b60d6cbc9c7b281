"""event_enricher: geocoding and genre enrichment for submitted events."""

__version__ = "0.1.0"
