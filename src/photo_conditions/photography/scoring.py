"""Photography scoring engine.

Turns sun-derived conditions and weather into one 0-100 score with three
sub-scores, a recommendation tier and an ordered list of reasons.

## Sub-scores

- Lighting (weight 0.5): golden hour 100, blue hour 90, night 30, and during
  the day a function of sun altitude that drops as the light gets harsher.
- Weather (weight 0.3): starts at 100; partly cloudy skies earn a bonus over
  clear skies, overcast skies, rain risk and wind are penalised.
- Visibility (weight 0.2): step function of visibility distance.

Temperature never changes a score; it only adds advisory reasons.

All thresholds and weights come from ``ScoringConfig``. The scorer is a total
function: every valid input yields a score.
"""

from __future__ import annotations

import math

from photo_conditions.config import DEFAULT_SCORING, ScoringConfig
from photo_conditions.models.photography import (
    NextPhotoTime,
    PhotographyConditions,
    PhotographyScore,
    Reason,
    ReasonCode,
    RecommendationTier,
    TimeOfDay,
    WeatherConditions,
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def _clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def _interpolate(x: float, x0: float, x1: float, y0: float, y1: float) -> float:
    if x1 == x0:
        return y1
    return y0 + (y1 - y0) * (x - x0) / (x1 - x0)


def tier_for_score(
    overall: float, config: ScoringConfig = DEFAULT_SCORING
) -> RecommendationTier:
    """Bucket a composite score into a recommendation tier."""
    if overall >= config.tier_excellent:
        return RecommendationTier.EXCELLENT
    if overall >= config.tier_good:
        return RecommendationTier.GOOD
    if overall >= config.tier_fair:
        return RecommendationTier.FAIR
    return RecommendationTier.POOR


class PhotographyScorer:
    """Scores photography conditions using a fixed set of thresholds.

    Example:
        ```python
        scorer = PhotographyScorer()
        score = scorer.score(conditions, weather)
        print(score.overall, score.recommendation, score.reasons)
        ```
    """

    def __init__(self, config: ScoringConfig | None = None):
        """Initialize with scoring thresholds.

        Args:
            config: Thresholds and weights (defaults to ``ScoringConfig()``)
        """
        self.config = config or DEFAULT_SCORING

    def score_lighting(self, conditions: PhotographyConditions) -> int:
        """Score lighting from time of day and sun altitude (0-100)."""
        config = self.config
        if conditions.is_golden_hour or conditions.time_of_day.is_golden_hour:
            return config.golden_hour_lighting
        if conditions.is_blue_hour or conditions.time_of_day.is_blue_hour:
            return config.blue_hour_lighting
        if conditions.time_of_day == TimeOfDay.NIGHT:
            return config.night_lighting

        altitude = conditions.sun_altitude
        if altitude <= config.soft_light_altitude:
            lighting = config.low_sun_lighting
        elif altitude <= config.harsh_light_start_altitude:
            lighting = _interpolate(
                altitude,
                config.soft_light_altitude,
                config.harsh_light_start_altitude,
                config.low_sun_lighting,
                config.moderate_sun_lighting,
            )
        else:
            lighting = _interpolate(
                min(altitude, 90.0),
                config.harsh_light_start_altitude,
                90.0,
                config.moderate_sun_lighting,
                config.overhead_sun_lighting,
            )
        return _clamp_score(lighting)

    def score_weather(self, weather: WeatherConditions) -> int:
        """Score cloud, precipitation and wind (0-100).

        Partly cloudy skies score higher than clear ones, so
        the score is not monotonic in cloud cover.
        """
        config = self.config
        score = 100

        cloud = weather.cloud_cover_percent
        if cloud > config.overcast_above:
            score -= config.overcast_penalty
        elif cloud > config.mostly_cloudy_above:
            score -= config.mostly_cloudy_penalty
        elif config.partly_cloudy_min <= cloud <= config.partly_cloudy_max:
            score += config.partly_cloudy_bonus

        rain = weather.precipitation_probability
        if rain > config.rain_heavy_above:
            score -= config.rain_heavy_penalty
        elif rain > config.rain_moderate_above:
            score -= config.rain_moderate_penalty
        elif rain > config.rain_light_above:
            score -= config.rain_light_penalty

        wind = weather.wind_speed_mph
        if wind > config.wind_strong_above:
            score -= config.wind_strong_penalty
        elif wind > config.wind_moderate_above:
            score -= config.wind_moderate_penalty
        elif wind > config.wind_light_above:
            score -= config.wind_light_penalty

        return _clamp_score(score)

    def score_visibility(self, visibility_meters: float) -> int:
        """Score visibility for distant landscapes (0-100)."""
        for minimum, step_score in self.config.visibility_steps:
            if visibility_meters >= minimum:
                return step_score
        return self.config.visibility_floor_score

    def _reasons(
        self,
        conditions: PhotographyConditions,
        weather: WeatherConditions,
        visibility_score: int,
    ) -> tuple[Reason, ...]:
        """Explain the score: lighting, weather, visibility, then temperature."""
        config = self.config
        reasons: list[Reason] = []

        def add(code: ReasonCode, message: str) -> None:
            reasons.append(Reason(code=code, message=message))

        # Lighting
        if conditions.is_golden_hour:
            add(ReasonCode.GOLDEN_HOUR, "Golden hour - perfect lighting for landscapes")
        elif conditions.is_blue_hour:
            add(ReasonCode.BLUE_HOUR, "Blue hour - excellent for moody photography")
        elif (
            conditions.time_of_day == TimeOfDay.DAY
            and conditions.sun_altitude >= config.harsh_light_altitude
        ):
            add(
                ReasonCode.HARSH_MIDDAY_LIGHT,
                "Harsh midday light - consider waiting for golden hour",
            )

        if (
            not conditions.is_golden_hour
            and conditions.minutes_to_golden_hour is not None
            and conditions.minutes_to_golden_hour <= config.golden_hour_lead_minutes
        ):
            add(
                ReasonCode.GOLDEN_HOUR_SOON,
                f"Golden hour starting in {conditions.minutes_to_golden_hour} minutes",
            )

        # Weather
        cloud = weather.cloud_cover_percent
        if config.partly_cloudy_min <= cloud <= config.partly_cloudy_max:
            add(ReasonCode.PARTLY_CLOUDY, "Partly cloudy - good for dramatic skies")
        elif cloud > config.overcast_above:
            add(ReasonCode.OVERCAST, "Overcast conditions - flat lighting")

        if weather.precipitation_probability > config.rain_reason_above:
            add(ReasonCode.HIGH_RAIN_CHANCE, "High chance of rain - protect your gear")

        if weather.wind_speed_mph > config.wind_reason_above:
            add(
                ReasonCode.STRONG_WIND,
                "Strong winds - tripod stability may be challenging",
            )

        # Visibility
        if visibility_score >= config.excellent_visibility_score:
            add(
                ReasonCode.EXCELLENT_VISIBILITY,
                "Excellent visibility for distant landscapes",
            )
        elif visibility_score < config.limited_visibility_score:
            add(
                ReasonCode.LIMITED_VISIBILITY,
                "Limited visibility may affect distant views",
            )

        # Temperature (comfort only)
        if weather.temperature <= config.freezing_at_or_below:
            add(
                ReasonCode.FREEZING,
                "Freezing temperatures - dress warmly, protect batteries",
            )
        elif weather.temperature >= config.warm_at_or_above:
            add(ReasonCode.WARM, "Warm conditions - stay hydrated")

        return tuple(reasons)

    def score(
        self,
        conditions: PhotographyConditions,
        weather: WeatherConditions,
    ) -> PhotographyScore:
        """Calculate the full photography score."""
        config = self.config
        lighting_score = self.score_lighting(conditions)
        weather_score = self.score_weather(weather)
        visibility_score = self.score_visibility(weather.visibility_meters)

        overall = _clamp_score(
            lighting_score * config.lighting_weight
            + weather_score * config.weather_weight
            + visibility_score * config.visibility_weight
        )

        return PhotographyScore(
            overall=overall,
            lighting_score=lighting_score,
            weather_score=weather_score,
            visibility_score=visibility_score,
            recommendation=tier_for_score(overall, config),
            reason_details=self._reasons(conditions, weather, visibility_score),
            conditions=conditions,
        )


def calculate_photography_score(
    conditions: PhotographyConditions,
    weather: WeatherConditions,
    config: ScoringConfig | None = None,
) -> PhotographyScore:
    """Calculate the photography score for one location and instant."""
    return PhotographyScorer(config).score(conditions, weather)


def is_ideal_for_photography(
    conditions: PhotographyConditions,
    weather: WeatherConditions,
    config: ScoringConfig | None = None,
) -> bool:
    """True if the conditions reach the excellent tier."""
    score = calculate_photography_score(conditions, weather, config)
    return score.recommendation == RecommendationTier.EXCELLENT


def get_next_best_photo_time(
    conditions: PhotographyConditions,
) -> NextPhotoTime | None:
    """Get the next good photography opportunity.

    Returns None when already in golden hour. An upcoming golden hour is
    preferred over sunset; None if neither is known.
    """
    if conditions.is_golden_hour:
        return None

    if conditions.minutes_to_golden_hour is not None:
        return NextPhotoTime(
            time="golden hour", minutes_away=conditions.minutes_to_golden_hour
        )

    if conditions.minutes_to_sunset is not None:
        return NextPhotoTime(time="sunset", minutes_away=conditions.minutes_to_sunset)

    return None
