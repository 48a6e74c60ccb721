"""Rank the days of a multi-day forecast for photography.

Each day is scored once, at the moment a photographer would most likely be
out: the start of the evening golden hour. Days without an evening golden
hour fall back to sunset, then solar noon, then the middle of the forecast
hours for that day.

Scoring reuses the astronomy calculator, the weather adapter and the scoring
engine, so a day's score is exactly what ``calculate_photography_score``
would return for that instant.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta

from photo_conditions.astronomy.calculator import (
    AstronomyCalculator,
    ensure_utc,
    solar_date,
)
from photo_conditions.config import ScoringConfig
from photo_conditions.models.photography import DayScore, ForecastRanking, SunTimes
from photo_conditions.models.weather import Forecast, HourlyForecast
from photo_conditions.photography.adapter import adapt_weather_for_photography
from photo_conditions.photography.scoring import PhotographyScorer

# Forecast hours further than this from the scoring instant do not describe it
MAX_SNAPSHOT_OFFSET = timedelta(hours=2)


def _scoring_instant(sun_times: SunTimes, hours: list[HourlyForecast]) -> datetime:
    for candidate in (
        sun_times.golden_hour_evening_start,
        sun_times.sunset,
        sun_times.solar_noon,
    ):
        if candidate is not None:
            return candidate
    return ensure_utc(hours[len(hours) // 2].time)


def _nearest_hour(hours: list[HourlyForecast], instant: datetime) -> HourlyForecast:
    return min(hours, key=lambda h: abs(ensure_utc(h.time) - instant))


class ForecastDayRanker:
    """Scores and ranks forecast days for one location.

    Example:
        ```python
        ranker = ForecastDayRanker()
        ranking = ranker.rank(forecast, max_days=3)

        if ranking.best_day:
            print(f"Best day: {ranking.best_day.day_of_week}")
        ```
    """

    def __init__(self, config: ScoringConfig | None = None):
        """Initialize the ranker.

        Args:
            config: Scoring thresholds passed to the scoring engine
        """
        self.scorer = PhotographyScorer(config)

    def score_days(self, forecast: Forecast) -> list[DayScore]:
        """Score every solar day covered by the forecast, in date order.

        Days whose nearest forecast hour is more than two hours from the
        scoring instant are skipped (typically the partial first or last day).
        """
        coords = forecast.location
        calculator = AstronomyCalculator(coords)

        by_day: dict[date, list[HourlyForecast]] = defaultdict(list)
        for hour in forecast.hourly:
            by_day[solar_date(hour.time, coords.longitude)].append(hour)

        days: list[DayScore] = []
        for day in sorted(by_day):
            hours = by_day[day]
            sun_times = calculator.get_sun_times(day)
            instant = _scoring_instant(sun_times, hours)
            snapshot = _nearest_hour(hours, instant)
            if abs(ensure_utc(snapshot.time) - instant) > MAX_SNAPSHOT_OFFSET:
                continue

            conditions = calculator.get_conditions(instant)
            weather = adapt_weather_for_photography(snapshot)
            days.append(
                DayScore(
                    date=day,
                    day_of_week=day.strftime("%A"),
                    scored_at=instant,
                    score=self.scorer.score(conditions, weather),
                    sun_times=sun_times,
                    snapshot=snapshot,
                )
            )
        return days

    def rank(self, forecast: Forecast, max_days: int = 3) -> ForecastRanking:
        """Rank forecast days by overall score.

        Args:
            forecast: Hourly forecast for one location
            max_days: Number of days to keep in ``best_days``

        Returns:
            ForecastRanking; ties keep chronological order
        """
        days = self.score_days(forecast)
        ranked = sorted(days, key=lambda d: d.score.overall, reverse=True)
        return ForecastRanking(
            days=days,
            best_day=ranked[0] if ranked else None,
            best_days=ranked[:max_days],
        )


def rank_forecast_days(
    forecast: Forecast,
    config: ScoringConfig | None = None,
    max_days: int = 3,
) -> ForecastRanking:
    """Convenience function to rank forecast days for photography."""
    return ForecastDayRanker(config).rank(forecast, max_days=max_days)
