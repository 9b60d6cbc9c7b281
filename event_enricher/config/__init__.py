"""Configuration package: environment-driven settings."""

from event_enricher.config.settings import Settings

__all__ = ["Settings"]
