"""Canonical weather and forecast models.

Every weather provider translates its API response into these models, so the
photography adapter only ever sees one shape regardless of the data source.
Only the readings photography scoring can use are kept.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from photo_conditions.models.location import Coordinates

MS_TO_MPH = 2.237


class CloudCover(BaseModel):
    """Sky cover, total and (where the provider splits it) by layer."""

    total_percent: float = Field(..., ge=0, le=100, description="Fraction of sky covered (%)")
    low_percent: float | None = Field(default=None, ge=0, le=100, description="Below ~2 km (%)")
    mid_percent: float | None = Field(default=None, ge=0, le=100, description="~2-6 km (%)")
    high_percent: float | None = Field(default=None, ge=0, le=100, description="Above ~6 km (%)")


class Precipitation(BaseModel):
    probability_percent: float = Field(..., ge=0, le=100, description="Chance of precipitation (%)")
    amount_mm: float | None = Field(default=None, ge=0, description="Expected amount (mm)")


class Wind(BaseModel):
    """Wind at 10 m; SI units, with mph for display and scoring."""

    speed_ms: float = Field(..., ge=0, description="Mean speed (m/s)")
    gust_ms: float | None = Field(default=None, ge=0, description="Gust speed (m/s)")
    direction_deg: float | None = Field(
        default=None, ge=0, le=360, description="Direction the wind blows from (0=N, 90=E)"
    )

    @property
    def speed_mph(self) -> float:
        return self.speed_ms * MS_TO_MPH


class HourlyForecast(BaseModel):
    """Weather snapshot for a single hour.

    This is the "current weather snapshot" the photography adapter consumes.
    Fields a provider does not supply are left as ``None`` rather than zero.
    """

    time: datetime = Field(..., description="Start of the forecast hour")
    temperature_c: float | None = Field(default=None, description="Air temperature (°C)")
    cloud_cover: CloudCover | None = None
    precipitation: Precipitation | None = None
    wind: Wind | None = None
    visibility_m: float | None = Field(default=None, ge=0, description="Horizontal visibility (m)")


class Forecast(BaseModel):
    """Hourly forecast for one location, as returned by a provider."""

    location: Coordinates
    generated_at: datetime = Field(..., description="Model run or fetch time")
    provider: str
    hourly: list[HourlyForecast] = Field(default_factory=list)
    timezone: str | None = Field(default=None, description="IANA zone reported by the provider")
    elevation_m: float | None = Field(default=None, description="Grid-cell elevation (m)")

    def get_forecast_at(
        self, time: datetime, max_offset_seconds: float = 1800
    ) -> HourlyForecast | None:
        """Return the hour nearest ``time``, or None if none is within the offset."""
        if not self.hourly:
            return None

        nearest = min(self.hourly, key=lambda hour: abs((hour.time - time).total_seconds()))
        if abs((nearest.time - time).total_seconds()) > max_offset_seconds:
            return None
        return nearest


class CurrentWeather(BaseModel):
    """Result of a weather fetch for one location.

    ``current`` is the snapshot used for scoring; ``forecast`` keeps the full
    provider response when one is available.
    """

    current: HourlyForecast = Field(..., description="Snapshot used for scoring")
    forecast: Forecast | None = Field(default=None, description="Full forecast")
    provider: str | None = Field(default=None, description="Weather data provider name")
