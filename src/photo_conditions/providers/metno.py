"""MET Norway weather provider.

Source: https://api.met.no/weatherapi/locationforecast/2.0/documentation

Two endpoints share one path: ``compact`` and ``complete``. Only
``complete`` carries cloud layers, gusts and precipitation probability, so
it is the default. MET rejects requests without an identifying User-Agent
(403) and asks clients to send If-Modified-Since; the base provider does both.

## Field mapping

| ``instant.details``                  | Canonical field             |
|--------------------------------------|-----------------------------|
| cloud_area_fraction                  | cloud_cover.total_percent   |
| cloud_area_fraction_low/medium/high  | cloud_cover.*_percent       |
| air_temperature                      | temperature_c               |
| wind_speed / wind_speed_of_gust      | wind.speed_ms / wind.gust_ms |
| wind_from_direction                  | wind.direction_deg          |

Precipitation comes from the ``next_1_hours`` period, or ``next_6_hours``
near the end of the horizon. Without ``probability_of_precipitation`` the
block is left unset so the adapter's neutral probability applies instead
of a misleading 0%. MET has no visibility variable.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from photo_conditions.models.location import Coordinates
from photo_conditions.models.weather import (
    CloudCover,
    Forecast,
    HourlyForecast,
    Precipitation,
    Wind,
)
from photo_conditions.providers.base import WeatherProvider

logger = logging.getLogger(__name__)


def _parse_time(value: str) -> datetime | None:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _period_details(data: dict[str, Any]) -> dict[str, Any]:
    for key in ("next_1_hours", "next_6_hours"):
        if key in data:
            return data[key].get("details", {})
    return {}


def _translate_entry(time: datetime, data: dict[str, Any]) -> HourlyForecast:
    details = data.get("instant", {}).get("details", {})
    period = _period_details(data)

    cloud_cover = None
    if details.get("cloud_area_fraction") is not None:
        cloud_cover = CloudCover(
            total_percent=details["cloud_area_fraction"],
            low_percent=details.get("cloud_area_fraction_low"),
            mid_percent=details.get("cloud_area_fraction_medium"),
            high_percent=details.get("cloud_area_fraction_high"),
        )

    precipitation = None
    if period.get("probability_of_precipitation") is not None:
        precipitation = Precipitation(
            probability_percent=period["probability_of_precipitation"],
            amount_mm=period.get("precipitation_amount"),
        )

    wind = None
    if details.get("wind_speed") is not None:
        wind = Wind(
            speed_ms=details["wind_speed"],
            gust_ms=details.get("wind_speed_of_gust"),
            direction_deg=details.get("wind_from_direction"),
        )

    return HourlyForecast(
        time=time,
        temperature_c=details.get("air_temperature"),
        cloud_cover=cloud_cover,
        precipitation=precipitation,
        wind=wind,
    )


class MetNoProvider(WeatherProvider):
    """MET Norway Locationforecast 2.0 provider.

    Example:
        ```python
        async with MetNoProvider(user_agent="my-app/1.0 contact@example.com") as provider:
            forecast = await provider.get_forecast(
                Coordinates(latitude=54.4609, longitude=-3.0886)
            )
        ```
    """

    name = "metno"
    base_url = "https://api.met.no/weatherapi/locationforecast/2.0"

    def __init__(
        self,
        user_agent: str | None = None,
        use_complete: bool = True,
        timeout: float = 30.0,
    ):
        """Create a MET provider.

        Args:
            user_agent: Application name and contact, as MET's terms require
            use_complete: Query ``complete`` rather than ``compact``
            timeout: Request timeout in seconds
        """
        super().__init__(user_agent=user_agent, timeout=timeout)
        self.use_complete = use_complete

    async def get_forecast(
        self,
        coordinates: Coordinates,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> Forecast:
        """Fetch the MET forecast; a 304 reuses the last translated one.

        The API always returns its full horizon, so ``start_time`` and
        ``end_time`` are applied locally.
        """
        url = f"{self.base_url}/{'complete' if self.use_complete else 'compact'}"
        # MET caches by URL and rejects more than 4 decimals
        params = {
            "lat": round(coordinates.latitude, 4),
            "lon": round(coordinates.longitude, 4),
        }

        forecast = await self._fetch_forecast(url, params, coordinates)
        return self._trim_hours(forecast, start_time, end_time)

    def _translate_response(
        self,
        response_data: dict[str, Any],
        coordinates: Coordinates,
    ) -> Forecast:
        """Translate MET GeoJSON into a canonical forecast."""
        properties = response_data.get("properties", {})
        updated_at = properties.get("meta", {}).get("updated_at", "")
        point = response_data.get("geometry", {}).get("coordinates", [])

        hourly = []
        for entry in properties.get("timeseries", []):
            time = _parse_time(entry.get("time", ""))
            if time is None:
                logger.debug(f"metno: skipping entry with bad time {entry.get('time')!r}")
                continue
            hourly.append(_translate_entry(time, entry.get("data", {})))

        return Forecast(
            location=coordinates,
            generated_at=_parse_time(updated_at) or datetime.now(timezone.utc),
            provider=self.name,
            hourly=hourly,
            elevation_m=point[2] if len(point) > 2 else None,
        )

    def get_max_forecast_days(self) -> int:
        return 9
