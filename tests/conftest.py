"""Pytest fixtures for photography conditions tests.

This module provides test fixtures that ensure:
1. No external API calls are made (weather providers, IERS downloads)
2. Isolated test environment with controlled configuration
3. Factories for conditions, weather and evaluated locations
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest
from astropy.utils import iers

# No network in tests: use the bundled IERS tables
iers.conf.auto_download = False
iers.conf.iers_degraded_accuracy = "warn"

from photo_conditions.models.comparison import ComparisonLocation
from photo_conditions.models.location import Coordinates, Location
from photo_conditions.models.photography import (
    PhotographyConditions,
    PhotographyScore,
    TimeOfDay,
    WeatherConditions,
)
from photo_conditions.models.weather import (
    CloudCover,
    Forecast,
    HourlyForecast,
    Precipitation,
    Wind,
)
from photo_conditions.photography.scoring import tier_for_score


# =============================================================================
# Test Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset settings cache before each test to ensure clean state."""
    from photo_conditions.config import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Locations
# =============================================================================


@pytest.fixture
def london() -> Coordinates:
    """London, UK."""
    return Coordinates(latitude=51.5074, longitude=-0.1278)


@pytest.fixture
def tromso() -> Coordinates:
    """Tromsø, Norway (inside the Arctic Circle)."""
    return Coordinates(latitude=69.6492, longitude=18.9553)


@pytest.fixture
def sample_coordinates() -> Coordinates:
    """Lake District, UK."""
    return Coordinates(latitude=54.4609, longitude=-3.0886)


@pytest.fixture
def sample_location(sample_coordinates: Coordinates) -> Location:
    """A saved photography spot."""
    return Location(
        id="buttermere",
        name="Buttermere",
        coordinates=sample_coordinates,
    )


# =============================================================================
# Scoring inputs
# =============================================================================


@pytest.fixture
def make_conditions() -> Callable[..., PhotographyConditions]:
    """Factory for daytime conditions, overridable per field.

    Defaults: day, sun at 45°, golden hour in 120 minutes, sunset in 240.
    """

    def factory(**overrides) -> PhotographyConditions:
        values = {
            "time_of_day": TimeOfDay.DAY,
            "is_golden_hour": False,
            "is_blue_hour": False,
            "minutes_to_golden_hour": 120,
            "minutes_to_sunrise": None,
            "minutes_to_sunset": 240,
            "sun_altitude": 45.0,
            "sun_azimuth": 180.0,
        }
        values.update(overrides)
        return PhotographyConditions(**values)

    return factory


@pytest.fixture
def golden_conditions(make_conditions) -> PhotographyConditions:
    """Evening golden hour."""
    return make_conditions(
        time_of_day=TimeOfDay.GOLDEN_HOUR_EVENING,
        is_golden_hour=True,
        minutes_to_golden_hour=None,
        minutes_to_sunset=30,
        sun_altitude=3.0,
        sun_azimuth=290.0,
    )


@pytest.fixture
def blue_conditions(make_conditions) -> PhotographyConditions:
    """Morning blue hour."""
    return make_conditions(
        time_of_day=TimeOfDay.BLUE_HOUR_MORNING,
        is_blue_hour=True,
        minutes_to_golden_hour=20,
        minutes_to_sunrise=20,
        minutes_to_sunset=None,
        sun_altitude=-3.0,
        sun_azimuth=60.0,
    )


@pytest.fixture
def make_weather() -> Callable[..., WeatherConditions]:
    """Factory for scoring-engine weather, overridable per field.

    Defaults: 30% cloud, 20 km visibility, 8 mph wind, 10% rain, 15°C.
    """

    def factory(**overrides) -> WeatherConditions:
        values = {
            "cloud_cover_percent": 30.0,
            "visibility_meters": 20000.0,
            "wind_speed_mph": 8.0,
            "precipitation_probability": 10.0,
            "temperature": 15.0,
        }
        values.update(overrides)
        return WeatherConditions(**values)

    return factory


# =============================================================================
# Weather snapshots
# =============================================================================


@pytest.fixture
def sample_hourly_forecast() -> HourlyForecast:
    """Snapshot with mild, partly cloudy conditions."""
    return HourlyForecast(
        time=datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc),
        temperature_c=22.0,
        cloud_cover=CloudCover(total_percent=40.0),
        precipitation=Precipitation(probability_percent=10.0, amount_mm=0.0),
        wind=Wind(speed_ms=3.5, gust_ms=5.0, direction_deg=180),
        visibility_m=25000.0,
    )


@pytest.fixture
def make_snapshot() -> Callable[..., HourlyForecast]:
    """Factory for canonical snapshots from photography-friendly units."""

    def factory(
        time: datetime = datetime(2024, 6, 21, 12, 0, tzinfo=timezone.utc),
        cloud: float = 30.0,
        visibility: float = 20000.0,
        wind_ms: float = 3.0,
        rain: float = 10.0,
        temperature: float = 15.0,
    ) -> HourlyForecast:
        return HourlyForecast(
            time=time,
            temperature_c=temperature,
            cloud_cover=CloudCover(total_percent=cloud),
            precipitation=Precipitation(probability_percent=rain),
            wind=Wind(speed_ms=wind_ms),
            visibility_m=visibility,
        )

    return factory


@pytest.fixture
def sample_forecast(sample_coordinates: Coordinates) -> Forecast:
    """24 hours of forecast starting 06:00 UTC."""
    base_time = datetime(2024, 6, 15, 6, 0, tzinfo=timezone.utc)
    hourly = [
        HourlyForecast(
            time=base_time + timedelta(hours=i),
            temperature_c=15 + i * 0.2,
            cloud_cover=CloudCover(total_percent=30 + i),
            precipitation=Precipitation(probability_percent=5.0),
            wind=Wind(speed_ms=3.0 + i * 0.1),
            visibility_m=20000.0,
        )
        for i in range(24)
    ]
    return Forecast(
        location=sample_coordinates,
        generated_at=datetime(2024, 6, 15, 5, 0, tzinfo=timezone.utc),
        provider="test",
        hourly=hourly,
    )


# =============================================================================
# Comparison inputs
# =============================================================================


@pytest.fixture
def make_evaluated() -> Callable[..., ComparisonLocation]:
    """Factory for an evaluated location with fixed sub-scores."""

    def factory(
        location_id: str,
        overall: int | None = 70,
        lighting: int = 70,
        weather: int = 70,
        visibility: int = 70,
        error: str | None = None,
        snapshot: HourlyForecast | None = None,
        sun_times=None,
        latitude: float = 54.0,
        longitude: float = -3.0,
    ) -> ComparisonLocation:
        location = Location.from_coordinates(
            location_id, latitude, longitude, name=location_id.title()
        )
        score = None
        if overall is not None:
            score = PhotographyScore(
                overall=overall,
                lighting_score=lighting,
                weather_score=weather,
                visibility_score=visibility,
                recommendation=tier_for_score(overall),
                conditions=PhotographyConditions(
                    time_of_day=TimeOfDay.DAY, sun_altitude=30.0
                ),
            )
        return ComparisonLocation(
            location=location,
            coordinates=location.coordinates,
            weather=snapshot,
            photography_score=score,
            sun_times=sun_times,
            error=error,
        )

    return factory
