"""Multi-location comparison, recommendations and batch evaluation."""

from photo_conditions.comparison.batch import (
    BatchEvaluator,
    ComparisonSession,
    ProviderWeatherFetcher,
)
from photo_conditions.comparison.compare import compare_locations, get_category_win_count
from photo_conditions.comparison.recommendation import generate_recommendation

__all__ = [
    "BatchEvaluator",
    "ComparisonSession",
    "ProviderWeatherFetcher",
    "compare_locations",
    "generate_recommendation",
    "get_category_win_count",
]
