"""Response payloads of the external authorities.

These models only parse what the providers read; unknown keys are ignored.
A payload that fails validation is reported by the provider as an
:class:`~event_enricher.utils.errors.ExternalServiceError`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Nominatim (jsonv2)
# ---------------------------------------------------------------------------

class NominatimAddress(BaseModel):
    """Structured address returned with ``addressdetails=1``."""

    house_number: str = ""
    road: str = ""
    city: str = ""
    town: str = ""
    village: str = ""
    state: str = ""
    country: str = ""
    postcode: str = ""


class NominatimPlace(BaseModel):
    """One search candidate.  Nominatim reports coordinates as strings."""

    lat: str
    lon: str
    display_name: str = ""
    name: str = ""
    importance: float = 0.0
    addresstype: str = ""
    type: str = ""  # amenity subtype, e.g. "nightclub"
    address: NominatimAddress | None = None

    @property
    def country_suffix(self) -> str:
        """Last comma-separated token of the display name."""
        return self.display_name.split(", ")[-1]


# ---------------------------------------------------------------------------
# Spotify
# ---------------------------------------------------------------------------

class SpotifyToken(BaseModel):
    """Client-credentials token response.  ``expires_in`` is in seconds."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 3600


class SpotifyArtist(BaseModel):
    name: str
    genres: list[str] = Field(default_factory=list)


class SpotifyArtistPage(BaseModel):
    items: list[SpotifyArtist] = Field(default_factory=list)


class SpotifySearchResponse(BaseModel):
    artists: SpotifyArtistPage = Field(default_factory=SpotifyArtistPage)
