"""Application settings loaded from environment variables via pydantic-settings.

Values are read from two sources, environment variables first and the
``.env`` file in the working directory second.  Field ``spotify_client_id``
maps to env var ``SPOTIFY_CLIENT_ID`` and so on.  Defaults apply when
neither source defines a field.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """event_enricher settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Geocoding authority (Nominatim) ===
    nominatim_base_url: str = "https://nominatim.openstreetmap.org"
    nominatim_user_agent: str = "event_enricher/0.1.0 (uses Nominatim for geocoding)"
    # Nominatim's usage policy allows at most one request per second.
    nominatim_min_interval_seconds: float = 1.0

    # === Music metadata authority (Spotify) ===
    # Empty credentials = artist genre lookup disabled.
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_token_url: str = "https://accounts.spotify.com/api/token"
    spotify_api_url: str = "https://api.spotify.com/v1"
    spotify_token_margin_seconds: int = 5
    lookup_artist_genres: bool = False

    # === Genre vocabulary ===
    # Empty = the vocabulary bundled with the package.
    genres_file: str = ""

    # === Persistent store ===
    store_db_path: str = "data/event_enricher.db"
    store_timeout_seconds: float = 10.0

    # === In-memory caches ===
    negative_cache_ttl_seconds: int = 600
    genre_cache_ttl_seconds: int = 600
    genre_cache_max_size: int = 10000
    # 0 = no bound: resolved cities and venues stay cached until restart.
    location_cache_max_size: int = 0
    negative_cache_max_size: int = 50000
    cache_sweep_interval_seconds: int = 900

    # === HTTP / batching ===
    http_timeout_seconds: float = 10.0
    enrich_concurrency: int = 4

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def spotify_configured(self) -> bool:
        """Return True when both Spotify client credentials are set."""
        return bool(self.spotify_client_id and self.spotify_client_secret)
