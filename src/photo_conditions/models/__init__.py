"""Data models for photography conditions."""

from photo_conditions.models.comparison import (
    BatchEvaluationRequest,
    BatchEvaluationResult,
    CategoryValue,
    CategoryWinner,
    ComparisonCategory,
    ComparisonLocation,
    ComparisonResult,
    LocationReference,
    RecommendationText,
)
from photo_conditions.models.location import Coordinates, Location
from photo_conditions.models.photography import (
    DayScore,
    ForecastRanking,
    NextPhotoTime,
    PhotographyConditions,
    PhotographyScore,
    Reason,
    ReasonCode,
    RecommendationTier,
    SunPosition,
    SunTimes,
    TimeOfDay,
    WeatherConditions,
)
from photo_conditions.models.weather import (
    CloudCover,
    CurrentWeather,
    Forecast,
    HourlyForecast,
    Precipitation,
    Wind,
)

__all__ = [
    # Location
    "Coordinates",
    "Location",
    # Weather
    "CloudCover",
    "CurrentWeather",
    "Forecast",
    "HourlyForecast",
    "Precipitation",
    "Wind",
    # Photography
    "DayScore",
    "ForecastRanking",
    "NextPhotoTime",
    "PhotographyConditions",
    "PhotographyScore",
    "Reason",
    "ReasonCode",
    "RecommendationTier",
    "SunPosition",
    "SunTimes",
    "TimeOfDay",
    "WeatherConditions",
    # Comparison
    "BatchEvaluationRequest",
    "BatchEvaluationResult",
    "CategoryValue",
    "CategoryWinner",
    "ComparisonCategory",
    "ComparisonLocation",
    "ComparisonResult",
    "LocationReference",
    "RecommendationText",
]
