"""Weather data providers."""

from photo_conditions.providers.base import (
    AuthenticationError,
    ProviderError,
    RateLimitError,
    WeatherProvider,
)
from photo_conditions.providers.metno import MetNoProvider
from photo_conditions.providers.openmeteo import OpenMeteoProvider

__all__ = [
    "WeatherProvider",
    "ProviderError",
    "RateLimitError",
    "AuthenticationError",
    "MetNoProvider",
    "OpenMeteoProvider",
]
