"""Photography condition and score models.

These are value objects: they have no identity beyond their inputs, and the
functions that produce them are pure, so recomputing from the same instant
and weather gives an equal object.
"""

from __future__ import annotations

from datetime import date as date_type
from datetime import datetime
from enum import Enum
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from photo_conditions.models.weather import HourlyForecast


class TimeOfDay(str, Enum):
    """Time of day classification for photography."""

    NIGHT = "night"
    DAY = "day"
    GOLDEN_HOUR_MORNING = "golden_hour_morning"
    GOLDEN_HOUR_EVENING = "golden_hour_evening"
    BLUE_HOUR_MORNING = "blue_hour_morning"
    BLUE_HOUR_EVENING = "blue_hour_evening"

    @property
    def is_golden_hour(self) -> bool:
        return self in (TimeOfDay.GOLDEN_HOUR_MORNING, TimeOfDay.GOLDEN_HOUR_EVENING)

    @property
    def is_blue_hour(self) -> bool:
        return self in (TimeOfDay.BLUE_HOUR_MORNING, TimeOfDay.BLUE_HOUR_EVENING)


class RecommendationTier(str, Enum):
    """Thresholded bucket of the composite score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ReasonCode(str, Enum):
    """Machine-readable identifier for each explanation the scorer can emit."""

    GOLDEN_HOUR = "golden_hour"
    BLUE_HOUR = "blue_hour"
    HARSH_MIDDAY_LIGHT = "harsh_midday_light"
    GOLDEN_HOUR_SOON = "golden_hour_soon"
    PARTLY_CLOUDY = "partly_cloudy"
    OVERCAST = "overcast"
    HIGH_RAIN_CHANCE = "high_rain_chance"
    STRONG_WIND = "strong_wind"
    EXCELLENT_VISIBILITY = "excellent_visibility"
    LIMITED_VISIBILITY = "limited_visibility"
    FREEZING = "freezing"
    WARM = "warm"


class Reason(BaseModel):
    """A single explanation attached to a score."""

    model_config = ConfigDict(frozen=True)

    code: ReasonCode
    message: str


class SunPosition(BaseModel):
    """Sun position at a specific time and location."""

    model_config = ConfigDict(frozen=True)

    altitude_deg: float  # Degrees above horizon (negative = below)
    azimuth_deg: float  # Degrees from north (0=N, 90=E, 180=S, 270=W)
    time: datetime

    @property
    def is_day(self) -> bool:
        """Sun above horizon."""
        return self.altitude_deg > 0


class SunTimes(BaseModel):
    """Sun events and photography windows for one solar day at one location.

    Any boundary is ``None`` when the sun never crosses the corresponding
    altitude on that day (polar day or polar night).
    """

    model_config = ConfigDict(frozen=True)

    date: date_type
    sunrise: datetime | None = None
    sunset: datetime | None = None
    solar_noon: datetime | None = None

    golden_hour_morning_start: datetime | None = None
    golden_hour_morning_end: datetime | None = None
    golden_hour_evening_start: datetime | None = None
    golden_hour_evening_end: datetime | None = None

    blue_hour_morning_start: datetime | None = None
    blue_hour_morning_end: datetime | None = None
    blue_hour_evening_start: datetime | None = None
    blue_hour_evening_end: datetime | None = None

    @property
    def golden_hour_minutes(self) -> float:
        """Total length of both golden-hour windows that occur, in minutes."""
        total = 0.0
        for start, end in (
            (self.golden_hour_morning_start, self.golden_hour_morning_end),
            (self.golden_hour_evening_start, self.golden_hour_evening_end),
        ):
            if start is not None and end is not None:
                total += (end - start).total_seconds() / 60
        return total

    def window_contains(
        self,
        time_of_day: TimeOfDay,
        instant: datetime,
    ) -> bool:
        """Check whether ``instant`` falls inside the window for ``time_of_day``.

        Golden windows are closed. Blue windows exclude the sunrise/sunset
        boundary they share with golden hour, so the two never overlap.
        """
        if time_of_day == TimeOfDay.GOLDEN_HOUR_MORNING:
            start, end = self.golden_hour_morning_start, self.golden_hour_morning_end
            return start is not None and end is not None and start <= instant <= end
        if time_of_day == TimeOfDay.GOLDEN_HOUR_EVENING:
            start, end = self.golden_hour_evening_start, self.golden_hour_evening_end
            return start is not None and end is not None and start <= instant <= end
        if time_of_day == TimeOfDay.BLUE_HOUR_MORNING:
            start, end = self.blue_hour_morning_start, self.blue_hour_morning_end
            return start is not None and end is not None and start <= instant < end
        if time_of_day == TimeOfDay.BLUE_HOUR_EVENING:
            start, end = self.blue_hour_evening_start, self.blue_hour_evening_end
            return start is not None and end is not None and start < instant <= end
        return False


class PhotographyConditions(BaseModel):
    """Sun-derived photography conditions at one instant and place."""

    model_config = ConfigDict(frozen=True)

    time_of_day: TimeOfDay
    is_golden_hour: bool = False
    is_blue_hour: bool = False
    minutes_to_golden_hour: int | None = Field(default=None, ge=0)
    minutes_to_sunrise: int | None = Field(default=None, ge=0)
    minutes_to_sunset: int | None = Field(default=None, ge=0)
    sun_altitude: float = Field(..., ge=-90, le=90, description="Degrees above horizon")
    sun_azimuth: float = Field(default=180.0, ge=0, lt=360, description="Degrees from north")

    @model_validator(mode="after")
    def validate_exclusive_windows(self) -> Self:
        """Golden hour and blue hour can never both apply."""
        if self.is_golden_hour and self.is_blue_hour:
            raise ValueError("Conditions cannot be both golden hour and blue hour")
        return self


class WeatherConditions(BaseModel):
    """The minimal weather shape the scoring engine needs."""

    model_config = ConfigDict(frozen=True)

    cloud_cover_percent: float = Field(..., ge=0, le=100)
    visibility_meters: float = Field(..., ge=0)
    wind_speed_mph: float = Field(..., ge=0)
    precipitation_probability: float = Field(..., ge=0, le=100)
    temperature: float = Field(..., description="Temperature in Celsius")


class PhotographyScore(BaseModel):
    """Composite photography score with its breakdown and explanations."""

    model_config = ConfigDict(frozen=True)

    overall: int = Field(..., ge=0, le=100)
    lighting_score: int = Field(..., ge=0, le=100)
    weather_score: int = Field(..., ge=0, le=100)
    visibility_score: int = Field(..., ge=0, le=100)
    recommendation: RecommendationTier
    reason_details: tuple[Reason, ...] = Field(default_factory=tuple)
    conditions: PhotographyConditions

    @property
    def reasons(self) -> list[str]:
        """Reason messages in evaluation order."""
        return [reason.message for reason in self.reason_details]

    @property
    def reason_codes(self) -> list[ReasonCode]:
        """Reason codes in evaluation order."""
        return [reason.code for reason in self.reason_details]


class NextPhotoTime(BaseModel):
    """The next good photography opportunity."""

    model_config = ConfigDict(frozen=True)

    time: str
    minutes_away: int = Field(..., ge=0)


class DayScore(BaseModel):
    """Photography score for one day of a multi-day forecast."""

    model_config = ConfigDict(frozen=True)

    date: date_type
    day_of_week: str
    scored_at: datetime = Field(..., description="Instant the day was scored at")
    score: PhotographyScore
    sun_times: SunTimes
    snapshot: HourlyForecast = Field(..., description="Forecast hour used for weather")


class ForecastRanking(BaseModel):
    """Days of a forecast ranked for photography."""

    model_config = ConfigDict(frozen=True)

    days: list[DayScore] = Field(default_factory=list, description="Chronological order")
    best_day: DayScore | None = None
    best_days: list[DayScore] = Field(default_factory=list, description="Highest scores first")
