"""Inbound event records and the results of enriching them.

``Event`` mirrors the JSON submitted by scrapers; only ``title``,
``location`` and ``city`` are required by the enrichment core.  A client
that already knows the coordinates or genres may send them along.  Field aliases
accept the camelCase keys used on the wire (``genresText``, ``sourceUrl``).
"""

from __future__ import annotations

import datetime

from pydantic import BaseModel, ConfigDict, Field

from event_enricher.models.geo import Address, GeoPoint


class Event(BaseModel):
    """A user-submitted event awaiting enrichment."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    location: str
    city: str
    country: str = ""
    date: datetime.datetime | None = None
    url: str = ""
    comment: str = ""
    type: str = ""
    source_url: str = Field(default="", alias="sourceUrl")
    # Free text with genre hints (tags, description); mined before any I/O.
    genres_text: str = Field(default="", alias="genresText")
    # Values the client already knows, as [longitude, latitude] and genre
    # labels.  When present the matching lookup is skipped.
    geolocation: list[float] = Field(default_factory=list)
    genres: list[str] = Field(default_factory=list)


class EnrichedEvent(BaseModel):
    """An event with its derived coordinates and genre tags.

    ``address`` is set only when the venue itself was resolved; a city-level
    fallback fills ``geolocation`` alone.
    """

    model_config = ConfigDict(frozen=True)

    event: Event
    geolocation: GeoPoint | None = None
    address: Address | None = None
    genres: list[str] = Field(default_factory=list)


class EnrichmentFailure(BaseModel):
    """One failed enrichment step for one event in a batch."""

    model_config = ConfigDict(frozen=True)

    index: int
    title: str
    stage: str  # "geolocation" or "genres"
    error: str


class BatchResult(BaseModel):
    """Outcome of a batch: enriched events plus per-item failures.

    An event appears in ``enriched`` even if one of its steps failed;
    the failed step is listed in ``failures`` and its field stays empty.
    """

    enriched: list[EnrichedEvent] = Field(default_factory=list)
    failures: list[EnrichmentFailure] = Field(default_factory=list)
