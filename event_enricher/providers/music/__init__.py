"""Music metadata provider implementations."""

from event_enricher.providers.music.spotify_provider import SpotifyProvider

__all__ = ["SpotifyProvider"]
