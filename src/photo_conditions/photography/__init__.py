"""Photography scoring: weather adaptation, scoring and forecast ranking."""

from photo_conditions.photography.adapter import (
    NEUTRAL_WEATHER,
    adapt_weather_for_photography,
    is_favorable_weather,
)
from photo_conditions.photography.forecast_days import (
    ForecastDayRanker,
    rank_forecast_days,
)
from photo_conditions.photography.scoring import (
    PhotographyScorer,
    calculate_photography_score,
    get_next_best_photo_time,
    is_ideal_for_photography,
    round_half_up,
    tier_for_score,
)

__all__ = [
    "NEUTRAL_WEATHER",
    "ForecastDayRanker",
    "PhotographyScorer",
    "adapt_weather_for_photography",
    "calculate_photography_score",
    "get_next_best_photo_time",
    "is_favorable_weather",
    "is_ideal_for_photography",
    "rank_forecast_days",
    "round_half_up",
    "tier_for_score",
]
