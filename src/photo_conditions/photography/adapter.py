"""Adapter from canonical weather snapshots to the scoring engine's shape.

The scoring engine never sees provider data directly. This module does pure
field mapping and unit conversion, and nothing else.

## Field mapping

| Snapshot field | WeatherConditions field | Conversion |
|----------------|-------------------------|------------|
| cloud_cover.total_percent | cloud_cover_percent | none (already %) |
| visibility_m | visibility_meters | none |
| wind.speed_ms | wind_speed_mph | x 2.237 |
| precipitation.probability_percent | precipitation_probability | none |
| temperature_c | temperature | none |

## Missing fields

A field the provider did not supply maps to the matching value in
``NEUTRAL_WEATHER``. Those values sit between scoring bands, so they neither
earn a bonus nor trigger a reason. Zero is never used for "unknown": zero
cloud cover is a real clear-sky signal.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from photo_conditions.models.photography import WeatherConditions
from photo_conditions.models.weather import HourlyForecast

NEUTRAL_WEATHER = WeatherConditions(
    cloud_cover_percent=25.0,
    visibility_meters=10000.0,
    wind_speed_mph=10.0,
    precipitation_probability=20.0,
    temperature=15.0,
)

# Keys used by flat snapshots (already in photography units: mph, %, m, °C)
_FLAT_KEYS = {
    "cloud_cover_percent": "cloudCover",
    "visibility_meters": "visibility",
    "wind_speed_mph": "windSpeed",
    "precipitation_probability": "precipitation",
    "temperature": "temperature",
}


def _or_neutral(value: float | None, field: str) -> float:
    if value is None:
        return getattr(NEUTRAL_WEATHER, field)
    return float(value)


def adapt_weather_for_photography(
    snapshot: HourlyForecast | Mapping[str, Any],
) -> WeatherConditions:
    """Convert a weather snapshot into scoring-engine weather.

    Args:
        snapshot: A canonical ``HourlyForecast``, or a flat mapping with
            ``cloudCover``, ``visibility``, ``windSpeed`` (mph),
            ``precipitation`` (probability %) and ``temperature`` keys

    Returns:
        WeatherConditions with neutral defaults for missing fields
    """
    if isinstance(snapshot, Mapping):
        return WeatherConditions(
            **{
                field: _or_neutral(snapshot.get(key), field)
                for field, key in _FLAT_KEYS.items()
            }
        )

    cloud = snapshot.cloud_cover.total_percent if snapshot.cloud_cover else None
    wind = snapshot.wind.speed_mph if snapshot.wind else None
    precipitation = (
        snapshot.precipitation.probability_percent if snapshot.precipitation else None
    )

    return WeatherConditions(
        cloud_cover_percent=_or_neutral(cloud, "cloud_cover_percent"),
        visibility_meters=_or_neutral(snapshot.visibility_m, "visibility_meters"),
        wind_speed_mph=_or_neutral(wind, "wind_speed_mph"),
        precipitation_probability=_or_neutral(precipitation, "precipitation_probability"),
        temperature=_or_neutral(snapshot.temperature_c, "temperature"),
    )


def is_favorable_weather(weather: WeatherConditions) -> bool:
    """Quick check for photo-friendly weather.

    Favorable means low precipitation (< 30%), moderate wind (< 20 mph),
    good visibility (> 5 km) and no more than 70% cloud cover.
    """
    if weather.precipitation_probability >= 30:
        return False
    if weather.wind_speed_mph >= 20:
        return False
    if weather.visibility_meters <= 5000:
        return False
    return weather.cloud_cover_percent <= 70
