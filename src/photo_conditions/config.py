"""Application configuration.

Configuration is loaded from environment variables using pydantic-settings.
Scoring thresholds and weights live in one ``ScoringConfig`` model so the
exact boundary values can be tuned without touching the scoring logic.

## Optional Environment Variables

- LOG_LEVEL: Logging level for the CLI (default: INFO)
- DEFAULT_WEATHER_PROVIDER: ``metno`` or ``openmeteo`` (default: openmeteo)
- METNO_USER_AGENT: User-Agent for MET Norway (required by their terms)
- PROVIDER_TIMEOUT_SECONDS: HTTP timeout for weather requests
- MAX_BATCH_LOCATIONS: Upper bound on locations per comparison (default: 8)
- SCORING__<FIELD>: Override any ScoringConfig field, e.g. ``SCORING__HARSH_LIGHT_ALTITUDE=55``

## Example .env file

```
LOG_LEVEL=DEBUG
DEFAULT_WEATHER_PROVIDER=metno
METNO_USER_AGENT=photo-conditions/0.1.0 you@example.com
SCORING__TIER_GOOD=60
```
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ScoringConfig(BaseModel):
    """Thresholds and weights for the photography scoring engine."""

    model_config = ConfigDict(frozen=True)

    # Composite weights (lighting dominates)
    lighting_weight: float = Field(default=0.5, ge=0, le=1)
    weather_weight: float = Field(default=0.3, ge=0, le=1)
    visibility_weight: float = Field(default=0.2, ge=0, le=1)

    # Recommendation tiers (lower bounds, inclusive)
    tier_excellent: int = Field(default=80, ge=0, le=100)
    tier_good: int = Field(default=65, ge=0, le=100)
    tier_fair: int = Field(default=45, ge=0, le=100)

    # Lighting
    golden_hour_lighting: int = 100
    blue_hour_lighting: int = 90
    night_lighting: int = 30
    low_sun_lighting: int = 70  # day score up to soft_light_altitude
    soft_light_altitude: float = 20.0
    moderate_sun_lighting: int = 50  # day score at harsh_light_start_altitude
    harsh_light_start_altitude: float = 45.0
    overhead_sun_lighting: int = 40  # day score with the sun at zenith
    harsh_light_altitude: float = 60.0  # "harsh midday light" reason
    golden_hour_lead_minutes: int = 60

    # Cloud cover bands (percent)
    partly_cloudy_min: float = 30.0
    partly_cloudy_max: float = 60.0
    partly_cloudy_bonus: int = 10
    mostly_cloudy_above: float = 60.0
    mostly_cloudy_penalty: int = 20
    overcast_above: float = 85.0
    overcast_penalty: int = 40

    # Precipitation probability bands (percent, exclusive lower bounds)
    rain_heavy_above: float = 70.0
    rain_heavy_penalty: int = 30
    rain_moderate_above: float = 40.0
    rain_moderate_penalty: int = 15
    rain_light_above: float = 20.0
    rain_light_penalty: int = 5
    rain_reason_above: float = 50.0

    # Wind bands (mph, exclusive lower bounds)
    wind_strong_above: float = 30.0
    wind_strong_penalty: int = 25
    wind_moderate_above: float = 20.0
    wind_moderate_penalty: int = 15
    wind_light_above: float = 10.0
    wind_light_penalty: int = 5
    wind_reason_above: float = 20.0

    # Temperature advisories (Celsius, inclusive)
    freezing_at_or_below: float = 0.0
    warm_at_or_above: float = 25.0

    # Visibility steps: (minimum meters, score), checked top-down
    visibility_steps: tuple[tuple[float, int], ...] = (
        (40000, 100),
        (20000, 90),
        (10000, 75),
        (5000, 60),
        (2000, 40),
    )
    visibility_floor_score: int = 20
    excellent_visibility_score: int = 90
    limited_visibility_score: int = 50

    @model_validator(mode="after")
    def validate_thresholds(self) -> Self:
        """Weights must sum to one and tiers must be ordered."""
        total = self.lighting_weight + self.weather_weight + self.visibility_weight
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Score weights must sum to 1.0, got {total}")
        if not self.tier_excellent > self.tier_good > self.tier_fair:
            raise ValueError("Tier thresholds must satisfy excellent > good > fair")
        return self


DEFAULT_SCORING = ScoringConfig()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Photo Conditions"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Weather providers
    default_weather_provider: Literal["metno", "openmeteo"] = "openmeteo"
    metno_user_agent: str = Field(
        default="photo-conditions/0.1.0 github.com/photo-conditions",
        description="User-Agent for MET Norway API (required)",
    )
    provider_timeout_seconds: float = Field(default=30.0, gt=0)

    # Batch evaluation
    max_batch_locations: int = Field(default=8, ge=2, le=32)

    # Scoring
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are loaded once and cached. To reload, clear the cache:
    ```python
    get_settings.cache_clear()
    ```
    """
    return Settings()


def get_settings_uncached() -> Settings:
    """Get fresh settings without caching.

    Useful for testing when environment variables change.
    """
    return Settings()
