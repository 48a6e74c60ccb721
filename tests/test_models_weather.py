"""Tests for weather models."""

from datetime import datetime, timedelta, timezone

import pytest

from photo_conditions.models.location import Coordinates
from photo_conditions.models.weather import (
    CloudCover,
    CurrentWeather,
    Forecast,
    HourlyForecast,
    Precipitation,
    Wind,
)

NOON = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class TestReadings:
    """Tests for the per-hour reading blocks."""

    def test_cloud_layers_optional(self):
        """Only the total is required; layers come from richer endpoints."""
        clouds = CloudCover(total_percent=50)
        assert clouds.low_percent is None
        layered = CloudCover(total_percent=70, low_percent=30, mid_percent=20, high_percent=20)
        assert layered.high_percent == 20

    @pytest.mark.parametrize("percent", [-1, 120])
    def test_cloud_cover_bounds(self, percent):
        with pytest.raises(ValueError):
            CloudCover(total_percent=percent)

    def test_precipitation_probability_bounds(self):
        assert Precipitation(probability_percent=80, amount_mm=5.0).amount_mm == 5.0
        with pytest.raises(ValueError):
            Precipitation(probability_percent=101)

    def test_wind_mph(self):
        """Scoring and display use mph."""
        assert Wind(speed_ms=10.0).speed_mph == pytest.approx(22.37)
        assert Wind(speed_ms=0.0).speed_mph == 0.0

    def test_wind_rejects_negative_speed(self):
        with pytest.raises(ValueError):
            Wind(speed_ms=-1.0)


class TestHourlyForecast:
    """Tests for HourlyForecast model."""

    def test_missing_fields_stay_none(self):
        """Fields a provider did not supply are None, not zero."""
        snapshot = HourlyForecast(time=NOON)
        assert snapshot.temperature_c is None
        assert snapshot.cloud_cover is None
        assert snapshot.precipitation is None
        assert snapshot.wind is None
        assert snapshot.visibility_m is None

    def test_complete_snapshot(self, sample_hourly_forecast: HourlyForecast):
        f = sample_hourly_forecast
        assert f.cloud_cover is not None
        assert f.cloud_cover.total_percent == 40.0
        assert f.wind is not None
        assert f.wind.speed_ms == 3.5
        assert f.visibility_m == 25000.0


class TestForecast:
    """Tests for Forecast model."""

    def test_empty_forecast(self, sample_coordinates: Coordinates):
        """No hours means no snapshot at any time."""
        forecast = Forecast(location=sample_coordinates, generated_at=NOON, provider="test")
        assert forecast.hourly == []
        assert forecast.get_forecast_at(NOON) is None

    def test_get_forecast_at_nearest_hour(self, sample_forecast: Forecast):
        base = sample_forecast.hourly[0].time
        assert sample_forecast.get_forecast_at(base).time == base
        # 40 minutes past is nearer the next hour
        nearest = sample_forecast.get_forecast_at(base + timedelta(minutes=40))
        assert nearest.time == base + timedelta(hours=1)

    def test_get_forecast_at_outside_range(self, sample_forecast: Forecast):
        old_time = sample_forecast.hourly[0].time - timedelta(days=1)
        assert sample_forecast.get_forecast_at(old_time) is None

    def test_get_forecast_at_custom_offset(self, sample_forecast: Forecast):
        """A wider offset accepts hours further from the target."""
        before = sample_forecast.hourly[0].time - timedelta(hours=2)
        assert sample_forecast.get_forecast_at(before) is None
        assert sample_forecast.get_forecast_at(before, max_offset_seconds=3 * 3600) is not None


class TestCurrentWeather:
    def test_wraps_snapshot(self, sample_hourly_forecast: HourlyForecast):
        weather = CurrentWeather(current=sample_hourly_forecast, provider="test")
        assert weather.current.temperature_c == 22.0
        assert weather.forecast is None
