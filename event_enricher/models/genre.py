"""Artist -> genre records stored in the ``genre-records`` collection."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GenreRecord(BaseModel):
    """Genres the music authority reported for one artist.

    ``title`` is the lowercased artist key.  A stored record with an empty
    ``genres`` list means the authority was asked and knew nothing; it is
    not the same as having no record at all.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    genres: list[str] = Field(default_factory=list)
