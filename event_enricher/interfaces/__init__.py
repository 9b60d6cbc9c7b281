"""Abstract interfaces for every external system the resolvers talk to.

The resolvers depend only on these ABCs; concrete adapters live under
``event_enricher.providers`` and are wired together in
``event_enricher.main``.
"""

from event_enricher.interfaces.cache_provider import ICacheProvider
from event_enricher.interfaces.document_store import (
    CITIES,
    GENRE_RECORDS,
    NOT_FOUND,
    VENUES,
    FindResult,
    IDocumentStore,
)
from event_enricher.interfaces.geocoding_provider import IGeocodingProvider
from event_enricher.interfaces.music_metadata_provider import (
    ArtistCandidate,
    IMusicMetadataProvider,
)

__all__ = [
    "ArtistCandidate",
    "CITIES",
    "FindResult",
    "GENRE_RECORDS",
    "ICacheProvider",
    "IDocumentStore",
    "IGeocodingProvider",
    "IMusicMetadataProvider",
    "NOT_FOUND",
    "VENUES",
]
