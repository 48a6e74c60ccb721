"""Astronomical calculations for sun position and photography windows."""

from photo_conditions.astronomy.calculator import (
    AstronomyCalculator,
    classify_time_of_day,
    compute_conditions,
    compute_sun_times,
    ensure_utc,
    get_sun_altitude_time,
    get_sun_position,
    solar_date,
    validate_coordinates,
)

__all__ = [
    "AstronomyCalculator",
    "classify_time_of_day",
    "compute_conditions",
    "compute_sun_times",
    "ensure_utc",
    "get_sun_altitude_time",
    "get_sun_position",
    "solar_date",
    "validate_coordinates",
]
