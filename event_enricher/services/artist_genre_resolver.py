"""Genre tags for an event, from its own text or from its artists.

The cheap path mines the event's genre text against the vocabulary.  Only
when that finds nothing are the artists split out of the title and each
resolved through: TTL cache -> ``genre-records`` collection -> music
authority.  Authority answers are stored even when empty, so an artist the
authority does not know is asked about once, not on every event.
"""

from __future__ import annotations

import structlog
from pydantic import ValidationError as PydanticValidationError

from event_enricher.interfaces.cache_provider import ICacheProvider
from event_enricher.interfaces.document_store import GENRE_RECORDS, IDocumentStore
from event_enricher.interfaces.music_metadata_provider import IMusicMetadataProvider
from event_enricher.models.event import Event
from event_enricher.models.genre import GenreRecord
from event_enricher.services.genre_extractor import (
    Vocabulary,
    extract_artists_from_title,
    extract_genres_from_text,
)
from event_enricher.utils.errors import EventEnricherError, PersistentStoreError
from event_enricher.utils.logging import get_logger


class ArtistGenreResolver:
    """Resolves the genre tags of an event.

    Parameters
    ----------
    vocabulary:
        Known genre labels for text extraction.
    store:
        Durable artist -> genres records.
    music:
        The music-metadata authority.
    genre_cache:
        In-memory TTL cache of artist -> genres.
    lookup_artists:
        When False only text extraction runs.
    """

    def __init__(
        self,
        vocabulary: Vocabulary,
        store: IDocumentStore,
        music: IMusicMetadataProvider,
        genre_cache: ICacheProvider,
        lookup_artists: bool = True,
    ) -> None:
        self._vocabulary = vocabulary
        self._store = store
        self._music = music
        self._cache = genre_cache
        self._lookup_artists = lookup_artists
        self._logger: structlog.BoundLogger = get_logger(__name__)

    async def resolve_genres(self, event: Event) -> set[str]:
        """Return the genre tags for *event*.

        A failure for one artist does not stop the others.  The first
        failure is raised only if no artist produced any genre.
        """
        genres = extract_genres_from_text(event.genres_text, self._vocabulary)
        if genres:
            return genres

        if not self._lookup_artists or not self._music.is_available():
            return set()

        errors: list[EventEnricherError] = []
        for artist in extract_artists_from_title(event.title):
            try:
                genres.update(await self._resolve_artist(artist))
            except EventEnricherError as exc:
                self._logger.warning("artist_genre_lookup_failed", artist=artist, error=str(exc))
                errors.append(exc)

        if not genres and errors:
            raise errors[0]
        return genres

    async def _resolve_artist(self, artist: str) -> list[str]:
        key = artist.lower()

        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        # A found record ends the search even with no genres: the authority
        # was already asked and had nothing.
        result = await self._store.find_one(GENRE_RECORDS, {"title": key})
        if result.found:
            try:
                record = GenreRecord.model_validate(result.document)
            except PydanticValidationError as exc:
                raise PersistentStoreError(
                    message=f"corrupt genre record for '{key}': {exc}",
                    provider_name=self._store.get_provider_name(),
                ) from exc
            await self._cache.set(key, record.genres)
            return record.genres

        candidates = await self._music.search_artists(artist)
        genres: list[str] = []
        for candidate in candidates:
            if candidate.name.casefold() == artist.casefold():
                genres = list(candidate.genres)
                break

        await self._persist(GenreRecord(title=key, genres=genres))
        await self._cache.set(key, genres)
        self._logger.info("artist_genres_resolved", artist=key, genres=genres)
        return genres

    async def _persist(self, record: GenreRecord) -> None:
        """Write *record* to the store; failures are logged, not raised."""
        try:
            await self._store.insert_one(GENRE_RECORDS, record.model_dump(mode="json"))
        except PersistentStoreError as exc:
            self._logger.warning("genre_store_write_failed", artist=record.title, error=str(exc))
