"""Models for comparing photography conditions across locations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from photo_conditions.models.location import Coordinates, Location
from photo_conditions.models.photography import (
    PhotographyConditions,
    PhotographyScore,
    SunTimes,
)
from photo_conditions.models.weather import HourlyForecast


class ComparisonCategory(str, Enum):
    """Categories locations are compared on."""

    OVERALL = "overall"
    LIGHTING = "lighting"
    WEATHER = "weather"
    VISIBILITY = "visibility"
    # Display only; these never decide the winner or tradeoffs
    WIND = "wind"
    CLOUD_COVER = "cloud_cover"
    GOLDEN_HOUR_DURATION = "golden_hour_duration"


class LocationReference(BaseModel):
    """A location named in a comparison, with the value it won on."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    score: int = Field(..., ge=0, le=100)


class CategoryValue(BaseModel):
    """One location's value in a comparison category."""

    model_config = ConfigDict(frozen=True)

    location_id: str
    name: str
    value: str = Field(..., description="Formatted for display")
    numeric_value: float


class CategoryWinner(BaseModel):
    """Winner of a single comparison category."""

    model_config = ConfigDict(frozen=True)

    category: ComparisonCategory
    label: str
    winner_id: str
    winner_name: str
    value: str
    all_values: list[CategoryValue] = Field(default_factory=list)


class ComparisonLocation(BaseModel):
    """One location in a batch, with whatever evaluation data it has so far.

    ``error`` and a populated ``photography_score`` are mutually exclusive
    once the batch has settled.
    """

    model_config = ConfigDict(frozen=True)

    location: Location
    coordinates: Coordinates
    weather: HourlyForecast | None = None
    photography_score: PhotographyScore | None = None
    photography_conditions: PhotographyConditions | None = None
    sun_times: SunTimes | None = None
    is_loading: bool = False
    error: str | None = None

    @classmethod
    def pending(cls, location: Location) -> ComparisonLocation:
        """A location whose evaluation has not finished yet."""
        return cls(location=location, coordinates=location.coordinates, is_loading=True)

    @property
    def has_usable_score(self) -> bool:
        """Scored without error, so it can take part in a comparison."""
        return self.error is None and self.photography_score is not None


class ComparisonResult(BaseModel):
    """Outcome of comparing a set of evaluated locations.

    Built fresh for every batch and never mutated; the recommendation text is
    added with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    overall_winner: LocationReference | None = None
    lighting_leader: LocationReference | None = None
    weather_leader: LocationReference | None = None
    visibility_leader: LocationReference | None = None
    category_winners: list[CategoryWinner] = Field(default_factory=list)
    insufficient_data: bool = False
    recommendation: str = ""
    tradeoffs: list[str] = Field(default_factory=list)


class RecommendationText(BaseModel):
    """Natural-language summary of a comparison."""

    model_config = ConfigDict(frozen=True)

    recommendation: str
    tradeoffs: list[str] = Field(default_factory=list)


class BatchEvaluationRequest(BaseModel):
    """Locations to evaluate against one shared instant."""

    model_config = ConfigDict(frozen=True)

    locations: list[Location] = Field(..., min_length=1)
    instant: datetime

    @model_validator(mode="after")
    def validate_unique_ids(self) -> Self:
        """Winners are reported by id, so two locations cannot share one."""
        seen: set[str] = set()
        for location in self.locations:
            if location.id in seen:
                raise ValueError(f"Duplicate location id '{location.id}'")
            seen.add(location.id)
        return self


class BatchEvaluationResult(BaseModel):
    """Everything one batch evaluation produced."""

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(..., ge=1, description="Generation number of the request")
    instant: datetime
    locations: list[ComparisonLocation]
    comparison: ComparisonResult
