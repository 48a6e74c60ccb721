"""Astronomical calculations for photography planning, using astropy.

This module provides:
- Sun position (altitude, azimuth)
- Sunrise/sunset and the golden-hour and blue-hour windows for a day
- Time-of-day classification and minute counters for an instant

## Definitions

- Sunrise/sunset: sun centre at -0.833° (refraction plus solar radius)
- Golden hour: between sunrise/sunset and the sun standing at +6°
- Blue hour: between civil twilight (-6°) and sunrise/sunset

## Days

Events are grouped by the local *mean solar day* of the location: UTC
midnight shifted by ``-longitude / 15`` hours. Within one solar day the
morning events always precede the evening ones, whatever the longitude.

Event times are found by sampling the sun's altitude over the whole day in a
single vectorised astropy call and interpolating between the two samples that
bracket the target altitude.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache

import numpy as np
from astropy import units as u
from astropy.coordinates import AltAz, EarthLocation, get_sun
from astropy.time import Time

from photo_conditions.errors import InvalidCoordinateError
from photo_conditions.models.location import Coordinates
from photo_conditions.models.photography import (
    PhotographyConditions,
    SunPosition,
    SunTimes,
    TimeOfDay,
)

SUNRISE_ALTITUDE = -0.833
GOLDEN_HOUR_ALTITUDE = 6.0
BLUE_HOUR_ALTITUDE = -6.0  # Civil twilight

SAMPLE_MINUTES = 5
SAMPLES_PER_DAY = 24 * 60 // SAMPLE_MINUTES + 1


def validate_coordinates(latitude: float, longitude: float) -> Coordinates:
    """Reject out-of-range or non-finite coordinates.

    Raises:
        InvalidCoordinateError: If latitude is outside [-90, 90] or longitude
            outside [-180, 180]. Values are never clamped.
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinateError(latitude, longitude)
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise InvalidCoordinateError(latitude, longitude)
    return Coordinates(latitude=latitude, longitude=longitude)


def ensure_utc(dt: datetime) -> datetime:
    """Return an aware UTC datetime. Naive values are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _to_astropy_time(dt: datetime) -> Time:
    """Convert datetime to astropy Time."""
    return Time(ensure_utc(dt).replace(tzinfo=None), scale="utc")


def _coords_to_earth_location(coords: Coordinates) -> EarthLocation:
    """Convert our Coordinates to astropy EarthLocation."""
    return EarthLocation(lat=coords.latitude * u.deg, lon=coords.longitude * u.deg)


def _solar_offset(longitude: float) -> timedelta:
    return timedelta(hours=longitude / 15)


def solar_date(instant: datetime, longitude: float) -> date:
    """Local mean solar date containing ``instant``."""
    return (ensure_utc(instant) + _solar_offset(longitude)).date()


def solar_day_start(day: date, longitude: float) -> datetime:
    """UTC instant of local mean midnight starting ``day``."""
    midnight = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return midnight - _solar_offset(longitude)


def _round_minutes(delta: timedelta) -> int:
    """Whole minutes in ``delta``, rounded half up and never negative."""
    return max(0, math.floor(delta.total_seconds() / 60 + 0.5))


def get_sun_position(coords: Coordinates, time: datetime) -> SunPosition:
    """Calculate sun position at a given time and location.

    Args:
        coords: Geographic coordinates
        time: Time to calculate position for (naive values are UTC)

    Returns:
        SunPosition with altitude and azimuth in degrees
    """
    location = _coords_to_earth_location(coords)
    obs_time = _to_astropy_time(time)

    altaz_frame = AltAz(obstime=obs_time, location=location)
    sun_altaz = get_sun(obs_time).transform_to(altaz_frame)

    return SunPosition(
        altitude_deg=float(sun_altaz.alt.deg),
        azimuth_deg=float(sun_altaz.az.deg) % 360.0,
        time=ensure_utc(time),
    )


@lru_cache(maxsize=512)
def _day_altitudes(latitude: float, longitude: float, start: datetime) -> tuple[float, ...]:
    """Sun altitude every SAMPLE_MINUTES over the 24 hours from ``start``."""
    location = EarthLocation(lat=latitude * u.deg, lon=longitude * u.deg)
    offsets = np.arange(SAMPLES_PER_DAY) * SAMPLE_MINUTES * u.min
    times = _to_astropy_time(start) + offsets

    altaz_frame = AltAz(obstime=times, location=location)
    sun_altaz = get_sun(times).transform_to(altaz_frame)
    return tuple(float(alt) for alt in sun_altaz.alt.deg)


def _find_altitude_crossing(
    start: datetime,
    altitudes: tuple[float, ...],
    target_altitude: float,
    rising: bool,
) -> datetime | None:
    """Find the first time the sampled altitude crosses ``target_altitude``.

    Args:
        start: Time of the first sample
        altitudes: Sun altitude samples, SAMPLE_MINUTES apart
        target_altitude: Target altitude in degrees
        rising: True for a rising crossing, False for setting

    Returns:
        Interpolated crossing time, or None if the sun never crosses
    """
    for index in range(len(altitudes) - 1):
        before, after = altitudes[index], altitudes[index + 1]
        if rising:
            crossed = before < target_altitude <= after
        else:
            crossed = before > target_altitude >= after
        if crossed:
            fraction = (target_altitude - before) / (after - before)
            return start + timedelta(minutes=SAMPLE_MINUTES * (index + fraction))
    return None


def _window(
    start: datetime | None, end: datetime | None
) -> tuple[datetime | None, datetime | None]:
    """Keep a window only if both boundaries exist and are ordered."""
    if start is None or end is None or start >= end:
        return None, None
    return start, end


def compute_sun_times(
    day: date | datetime,
    latitude: float,
    longitude: float,
) -> SunTimes:
    """Calculate sunrise, sunset and photography windows for one solar day.

    Args:
        day: A date, or a datetime whose solar day should be used
        latitude: Latitude in decimal degrees
        longitude: Longitude in decimal degrees

    Returns:
        SunTimes with ``None`` for any event that does not occur that day

    Raises:
        InvalidCoordinateError: If the coordinates are out of range
    """
    validate_coordinates(latitude, longitude)
    if isinstance(day, datetime):
        day = solar_date(day, longitude)

    start = solar_day_start(day, longitude)
    altitudes = _day_altitudes(latitude, longitude, start)

    sunrise = _find_altitude_crossing(start, altitudes, SUNRISE_ALTITUDE, rising=True)
    sunset = _find_altitude_crossing(start, altitudes, SUNRISE_ALTITUDE, rising=False)
    golden_end = _find_altitude_crossing(start, altitudes, GOLDEN_HOUR_ALTITUDE, rising=True)
    golden_start = _find_altitude_crossing(start, altitudes, GOLDEN_HOUR_ALTITUDE, rising=False)
    civil_dawn = _find_altitude_crossing(start, altitudes, BLUE_HOUR_ALTITUDE, rising=True)
    civil_dusk = _find_altitude_crossing(start, altitudes, BLUE_HOUR_ALTITUDE, rising=False)

    peak_index = int(np.argmax(altitudes))
    solar_noon = None
    if altitudes[peak_index] > SUNRISE_ALTITUDE:
        solar_noon = start + timedelta(minutes=SAMPLE_MINUTES * peak_index)

    golden_morning = _window(sunrise, golden_end)
    golden_evening = _window(golden_start, sunset)
    blue_morning = _window(civil_dawn, sunrise)
    blue_evening = _window(sunset, civil_dusk)

    return SunTimes(
        date=day,
        sunrise=sunrise,
        sunset=sunset,
        solar_noon=solar_noon,
        golden_hour_morning_start=golden_morning[0],
        golden_hour_morning_end=golden_morning[1],
        golden_hour_evening_start=golden_evening[0],
        golden_hour_evening_end=golden_evening[1],
        blue_hour_morning_start=blue_morning[0],
        blue_hour_morning_end=blue_morning[1],
        blue_hour_evening_start=blue_evening[0],
        blue_hour_evening_end=blue_evening[1],
    )


def classify_time_of_day(
    instant: datetime,
    sun_altitude: float,
    sun_times: SunTimes,
) -> TimeOfDay:
    """Classify an instant: blue hour, then golden hour, then day or night."""
    instant = ensure_utc(instant)
    for candidate in (
        TimeOfDay.BLUE_HOUR_MORNING,
        TimeOfDay.BLUE_HOUR_EVENING,
        TimeOfDay.GOLDEN_HOUR_MORNING,
        TimeOfDay.GOLDEN_HOUR_EVENING,
    ):
        if sun_times.window_contains(candidate, instant):
            return candidate
    return TimeOfDay.DAY if sun_altitude > 0 else TimeOfDay.NIGHT


def _minutes_to_golden_hour(
    instant: datetime,
    sun_times: SunTimes,
    latitude: float,
    longitude: float,
) -> int | None:
    """Minutes until the next golden-hour start, today or tomorrow."""
    upcoming = [
        start
        for start in (sun_times.golden_hour_morning_start, sun_times.golden_hour_evening_start)
        if start is not None and start > instant
    ]
    if upcoming:
        return _round_minutes(min(upcoming) - instant)

    tomorrow = compute_sun_times(sun_times.date + timedelta(days=1), latitude, longitude)
    if tomorrow.golden_hour_morning_start is not None:
        return _round_minutes(tomorrow.golden_hour_morning_start - instant)
    return None


def compute_conditions(
    instant: datetime,
    latitude: float,
    longitude: float,
) -> PhotographyConditions:
    """Compute photography conditions for an instant and place.

    Minute counters are ``None`` when the event has already happened today or
    does not happen at all (polar day/night). ``None`` means "not applicable",
    never "zero" or "far away".

    Raises:
        InvalidCoordinateError: If the coordinates are out of range
    """
    coords = validate_coordinates(latitude, longitude)
    instant = ensure_utc(instant)

    position = get_sun_position(coords, instant)
    sun_times = compute_sun_times(instant, latitude, longitude)
    time_of_day = classify_time_of_day(instant, position.altitude_deg, sun_times)
    is_golden_hour = time_of_day.is_golden_hour

    minutes_to_golden_hour = None
    if not is_golden_hour:
        minutes_to_golden_hour = _minutes_to_golden_hour(
            instant, sun_times, latitude, longitude
        )

    minutes_to_sunrise = None
    if sun_times.sunrise is not None and sun_times.sunrise > instant:
        minutes_to_sunrise = _round_minutes(sun_times.sunrise - instant)

    minutes_to_sunset = None
    if sun_times.sunset is not None and sun_times.sunset > instant:
        minutes_to_sunset = _round_minutes(sun_times.sunset - instant)

    return PhotographyConditions(
        time_of_day=time_of_day,
        is_golden_hour=is_golden_hour,
        is_blue_hour=time_of_day.is_blue_hour,
        minutes_to_golden_hour=minutes_to_golden_hour,
        minutes_to_sunrise=minutes_to_sunrise,
        minutes_to_sunset=minutes_to_sunset,
        sun_altitude=position.altitude_deg,
        sun_azimuth=position.azimuth_deg,
    )


def get_sun_altitude_time(
    coords: Coordinates,
    day: date | datetime,
    target_altitude: float,
    rising: bool = True,
) -> datetime | None:
    """Find when the sun reaches a specific altitude during a solar day.

    Args:
        coords: Geographic coordinates
        day: Date (or datetime whose solar day is used) to search within
        target_altitude: Target altitude in degrees
        rising: True to find rising time, False for setting

    Returns:
        Time when sun reaches target altitude, or None
    """
    if isinstance(day, datetime):
        day = solar_date(day, coords.longitude)
    start = solar_day_start(day, coords.longitude)
    altitudes = _day_altitudes(coords.latitude, coords.longitude, start)
    return _find_altitude_crossing(start, altitudes, target_altitude, rising)


class AstronomyCalculator:
    """Calculator for photography conditions at a fixed location.

    Example:
        ```python
        calc = AstronomyCalculator(Coordinates(latitude=54.4609, longitude=-3.0886))

        # Sun times for today
        sun_times = calc.get_sun_times(datetime.now(timezone.utc))

        # Conditions right now
        conditions = calc.get_conditions(datetime.now(timezone.utc))
        ```
    """

    def __init__(self, coordinates: Coordinates):
        """Initialize calculator for a specific location.

        Args:
            coordinates: Geographic coordinates for calculations
        """
        self.coordinates = coordinates
        self._sun_times_cache: dict[str, SunTimes] = {}

    def get_sun_position(self, time: datetime) -> SunPosition:
        """Get sun position at the given time."""
        return get_sun_position(self.coordinates, time)

    def get_sun_times(self, day: date | datetime) -> SunTimes:
        """Get sun times for a solar day (cached)."""
        if isinstance(day, datetime):
            day = solar_date(day, self.coordinates.longitude)
        cache_key = day.isoformat()
        if cache_key not in self._sun_times_cache:
            self._sun_times_cache[cache_key] = compute_sun_times(
                day, self.coordinates.latitude, self.coordinates.longitude
            )
        return self._sun_times_cache[cache_key]

    def get_conditions(self, instant: datetime) -> PhotographyConditions:
        """Get photography conditions at the given instant."""
        return compute_conditions(
            instant, self.coordinates.latitude, self.coordinates.longitude
        )

    def get_sun_altitude_time(
        self,
        day: date | datetime,
        target_altitude: float,
        rising: bool = True,
    ) -> datetime | None:
        """Find when sun reaches a specific altitude."""
        return get_sun_altitude_time(self.coordinates, day, target_altitude, rising)

    def is_night(self, time: datetime) -> bool:
        """Check if it's night (sun below horizon)."""
        return self.get_sun_position(time).altitude_deg < 0
