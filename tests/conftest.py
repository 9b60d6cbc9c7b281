"""Shared pytest fixtures for the event_enricher test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from event_enricher.config.settings import Settings
from event_enricher.interfaces.geocoding_provider import IGeocodingProvider
from event_enricher.interfaces.music_metadata_provider import IMusicMetadataProvider
from event_enricher.models.authority import NominatimAddress, NominatimPlace
from event_enricher.providers.cache.memory_cache import MemoryCacheProvider
from event_enricher.providers.store.sqlite_document_store import SQLiteDocumentStore
from event_enricher.services.genre_extractor import Vocabulary

TEST_GENRES = [
    "elektro",
    "house",
    "tech house",
    "techno",
    "jazz",
    "jazz fusion",
    "disco",
    "deep house",
]


class FakeTimer:
    """Manually advanced clock for TTL caches."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(
        _env_file=None,
        nominatim_base_url="https://nominatim.test",
        nominatim_min_interval_seconds=0.0,
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        spotify_token_url="https://accounts.spotify.test/api/token",
        spotify_api_url="https://api.spotify.test/v1",
        lookup_artist_genres=True,
        store_db_path=str(tmp_path / "store.db"),
        cache_sweep_interval_seconds=3600,
    )


# ---------------------------------------------------------------------------
# Genre vocabulary
# ---------------------------------------------------------------------------


@pytest.fixture
def vocabulary() -> Vocabulary:
    return Vocabulary(TEST_GENRES)


# ---------------------------------------------------------------------------
# Caches and store
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def negative_cache(fake_timer: FakeTimer) -> MemoryCacheProvider:
    return MemoryCacheProvider(max_size=100, ttl=600, name="failures", timer=fake_timer)


@pytest.fixture
def lru_cache_factory() -> Callable[[str], MemoryCacheProvider]:
    def _make(name: str) -> MemoryCacheProvider:
        return MemoryCacheProvider(max_size=100, ttl=None, name=name)

    return _make


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> SQLiteDocumentStore:
    """An initialized document store on a temporary database."""
    document_store = SQLiteDocumentStore(db_path=tmp_path / "documents.db", timeout=5.0)
    await document_store.initialize()
    return document_store


# ---------------------------------------------------------------------------
# Authority mocks
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_geocoder() -> MagicMock:
    """A mock geocoding provider returning no candidates by default."""
    geocoder = MagicMock(spec=IGeocodingProvider)
    geocoder.search_city = AsyncMock(return_value=[])
    geocoder.search_venue = AsyncMock(return_value=[])
    geocoder.get_provider_name.return_value = "mock_geocoder"
    return geocoder


@pytest.fixture
def mock_music() -> MagicMock:
    """A mock music-metadata provider returning no artists by default."""
    music = MagicMock(spec=IMusicMetadataProvider)
    music.search_artists = AsyncMock(return_value=[])
    music.get_provider_name.return_value = "mock_music"
    music.is_available.return_value = True
    return music


def make_place(**overrides: Any) -> NominatimPlace:
    """Build a Nominatim candidate with Berlin defaults."""
    defaults: dict[str, Any] = {
        "lat": "52.5170365",
        "lon": "13.3888599",
        "display_name": "Berlin, Germany",
        "name": "Berlin",
        "importance": 0.85,
        "addresstype": "city",
        "type": "administrative",
    }
    defaults.update(overrides)
    return NominatimPlace(**defaults)


def make_venue_place(**overrides: Any) -> NominatimPlace:
    """Build a Nominatim amenity candidate for a Berlin club."""
    defaults: dict[str, Any] = {
        "lat": "52.5111",
        "lon": "13.4430",
        "display_name": "Berghain, Am Wriezener Bahnhof, Friedrichshain, Berlin, Germany",
        "name": "Berghain",
        "importance": 0.5,
        "addresstype": "amenity",
        "type": "nightclub",
        "address": NominatimAddress(
            house_number="70",
            road="Am Wriezener Bahnhof",
            city="Berlin",
            state="Berlin",
            country="Germany",
            postcode="10243",
        ),
    }
    defaults.update(overrides)
    return NominatimPlace(**defaults)


@pytest.fixture
def place_factory() -> Callable[..., NominatimPlace]:
    return make_place


@pytest.fixture
def venue_place_factory() -> Callable[..., NominatimPlace]:
    return make_venue_place
