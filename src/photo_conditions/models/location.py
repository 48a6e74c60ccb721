"""Location models for photography spots."""

from __future__ import annotations

import re
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

# "lat,lon" with optional signs and whitespace around the comma
COORDINATE_PATTERN = re.compile(r"^(?P<lat>[-+]?\d*\.?\d+)\s*,\s*(?P<lon>[-+]?\d*\.?\d+)$")


class Coordinates(BaseModel):
    """Decimal-degree position: north and east are positive."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Parse ``'lat,lon'``, e.g. ``'54.4609,-3.0886'`` or ``'-33.87, 151.21'``.

        Raises:
            ValueError: If the text is not two numbers or is out of range
        """
        match = COORDINATE_PATTERN.match(value.strip())
        if match is None:
            raise ValueError(f"Expected 'latitude,longitude', got '{value}'")
        return cls(latitude=float(match["lat"]), longitude=float(match["lon"]))

    def __str__(self) -> str:
        return f"{self.latitude},{self.longitude}"

    def to_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class Location(BaseModel):
    """A photography spot: stable identity, display name and position.

    The engine never resolves names itself; locations arrive with
    coordinates already attached.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable location identifier")
    name: str = Field(..., description="Name shown to the photographer")
    coordinates: Coordinates

    @classmethod
    def from_coordinates(
        cls,
        location_id: str,
        latitude: float,
        longitude: float,
        name: str | None = None,
    ) -> Self:
        coordinates = Coordinates(latitude=latitude, longitude=longitude)
        return cls(id=location_id, name=name or str(coordinates), coordinates=coordinates)

    @classmethod
    def from_string(cls, value: str, location_id: str | None = None) -> Self:
        """Parse ``'lat,lon'`` or ``'Name=lat,lon'``.

        The id defaults to the coordinate text, so unnamed spots are
        identified by where they are.
        """
        name, _, text = value.rpartition("=")
        coordinates = Coordinates.from_string(text)
        return cls(
            id=location_id or str(coordinates),
            name=name.strip() or str(coordinates),
            coordinates=coordinates,
        )

    def display_name(self) -> str:
        return self.name or str(self.coordinates)
