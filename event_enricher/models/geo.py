"""Geographic entities persisted by the locality and venue resolvers.

All models are frozen: a City or Venue is written once when first resolved
and never updated.  Field aliases match the document layout of the
``cities`` and ``venues`` collections, so ``model_dump(by_alias=True)``
produces exactly what is stored.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """A GeoJSON point.  Coordinates are ``(longitude, latitude)``."""

    model_config = ConfigDict(frozen=True)

    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class City(BaseModel):
    """A resolved locality.  ``name`` and ``country`` are stored lowercased."""

    model_config = ConfigDict(frozen=True)

    name: str
    country: str = ""
    geolocation: GeoPoint


class Address(BaseModel):
    """Structured venue address as reported by the geocoding authority."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    locality: str
    country: str = ""
    region: str = ""
    postal_code: str = Field(default="", alias="postalCode")
    street: str = ""
    house_number: str = Field(default="", alias="houseNumber")
    geolocation: GeoPoint


class Venue(BaseModel):
    """A named place hosting events.

    ``name`` is always the caller-supplied location string, never the
    authority's label; ``type`` is the authority's amenity subtype.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = ""
    address: Address
