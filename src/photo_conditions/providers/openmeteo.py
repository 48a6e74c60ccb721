"""Open-Meteo weather provider.

Source: https://open-meteo.com/en/docs

## Endpoint
- https://api.open-meteo.com/v1/forecast?latitude=..&longitude=..&hourly=..
- No API key for non-commercial use (10,000 requests/day)

Requests ask for ``wind_speed_unit=ms`` and ``timezone=UTC`` so the response
is already in canonical units and hourly times are UTC.

## Response shape
```json
{
  "latitude": 54.46, "longitude": -3.09, "elevation": 120.0,
  "hourly": {
    "time": ["2024-06-01T00:00", "2024-06-01T01:00"],
    "temperature_2m": [9.8, 9.4],
    "cloud_cover": [35, 40],
    "visibility": [24140.0, 24140.0],
    ...
  }
}
```

## Variable Translation (hourly arrays -> Canonical)
| Open-Meteo field | Canonical field |
|------------------|-----------------|
| temperature_2m | temperature_c |
| cloud_cover (+ _low/_mid/_high) | cloud_cover.*_percent |
| precipitation_probability | precipitation.probability_percent |
| precipitation | precipitation.amount_mm |
| wind_speed_10m / wind_gusts_10m | wind.speed_ms / wind.gust_ms |
| wind_direction_10m | wind.direction_deg |
| visibility | visibility_m |

Arrays may contain ``null`` for hours a model does not cover; those values
stay ``None``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from photo_conditions.models.location import Coordinates
from photo_conditions.models.weather import (
    CloudCover,
    Forecast,
    HourlyForecast,
    Precipitation,
    Wind,
)
from photo_conditions.providers.base import ProviderError, WeatherProvider

logger = logging.getLogger(__name__)

HOURLY_VARIABLES = (
    "temperature_2m",
    "precipitation_probability",
    "precipitation",
    "cloud_cover",
    "cloud_cover_low",
    "cloud_cover_mid",
    "cloud_cover_high",
    "visibility",
    "wind_speed_10m",
    "wind_direction_10m",
    "wind_gusts_10m",
)


def _parse_time(value: str) -> datetime:
    """Open-Meteo times are naive ISO strings in the requested timezone (UTC)."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class OpenMeteoProvider(WeatherProvider):
    """Open-Meteo forecast provider.

    Example:
        ```python
        async with OpenMeteoProvider() as provider:
            forecast = await provider.get_forecast(
                Coordinates(latitude=54.4609, longitude=-3.0886)
            )
        ```
    """

    name = "openmeteo"
    base_url = "https://api.open-meteo.com/v1/forecast"

    def __init__(
        self,
        user_agent: str | None = None,
        forecast_days: int = 7,
        timeout: float = 30.0,
    ):
        """Initialize Open-Meteo provider.

        Args:
            user_agent: User-Agent string for requests
            forecast_days: Days of hourly forecast to request (1-16)
            timeout: Request timeout in seconds
        """
        super().__init__(user_agent=user_agent, timeout=timeout)
        self.forecast_days = max(1, min(forecast_days, self.get_max_forecast_days()))

    def _build_params(self, coordinates: Coordinates) -> dict[str, Any]:
        return {
            "latitude": round(coordinates.latitude, 4),
            "longitude": round(coordinates.longitude, 4),
            "hourly": ",".join(HOURLY_VARIABLES),
            "wind_speed_unit": "ms",
            "temperature_unit": "celsius",
            "timezone": "UTC",
            "forecast_days": self.forecast_days,
        }

    async def get_forecast(
        self,
        coordinates: Coordinates,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> Forecast:
        """Get hourly forecast from Open-Meteo.

        Raises:
            ProviderError: If the request fails or the API reports an error
        """
        forecast = await self._fetch_forecast(
            self.base_url, self._build_params(coordinates), coordinates
        )
        return self._trim_hours(forecast, start_time, end_time)

    def _check_payload(self, data: dict[str, Any], response: httpx.Response) -> None:
        # Open-Meteo reports bad parameters as {"error": true, "reason": ...}
        if data.get("error"):
            raise ProviderError(
                f"Open-Meteo error: {data.get('reason', 'unknown')}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )

    def _translate_response(
        self,
        response_data: dict[str, Any],
        coordinates: Coordinates,
    ) -> Forecast:
        """Translate Open-Meteo hourly arrays to canonical format."""
        hourly_data = response_data.get("hourly", {})
        times = hourly_data.get("time", [])

        def value(field: str, index: int) -> Any:
            series = hourly_data.get(field)
            if not series or index >= len(series):
                return None
            return series[index]

        hourly: list[HourlyForecast] = []
        for index, time_str in enumerate(times):
            try:
                time = _parse_time(time_str)
            except (TypeError, ValueError):
                logger.debug(f"openmeteo: skipping entry with bad time {time_str!r}")
                continue

            cloud_cover = None
            total_cloud = value("cloud_cover", index)
            if total_cloud is not None:
                cloud_cover = CloudCover(
                    total_percent=total_cloud,
                    low_percent=value("cloud_cover_low", index),
                    mid_percent=value("cloud_cover_mid", index),
                    high_percent=value("cloud_cover_high", index),
                )

            precipitation = None
            precip_prob = value("precipitation_probability", index)
            if precip_prob is not None:
                precipitation = Precipitation(
                    probability_percent=precip_prob,
                    amount_mm=value("precipitation", index),
                )

            wind = None
            wind_speed = value("wind_speed_10m", index)
            if wind_speed is not None:
                wind = Wind(
                    speed_ms=wind_speed,
                    gust_ms=value("wind_gusts_10m", index),
                    direction_deg=value("wind_direction_10m", index),
                )

            hourly.append(
                HourlyForecast(
                    time=time,
                    temperature_c=value("temperature_2m", index),
                    cloud_cover=cloud_cover,
                    precipitation=precipitation,
                    wind=wind,
                    visibility_m=value("visibility", index),
                )
            )

        return Forecast(
            location=coordinates,
            generated_at=datetime.now(timezone.utc),
            provider=self.name,
            hourly=hourly,
            timezone=response_data.get("timezone"),
            elevation_m=response_data.get("elevation"),
        )

    def get_max_forecast_days(self) -> int:
        return 16
