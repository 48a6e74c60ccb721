"""Multi-location comparison.

Pure functions over evaluated locations. Locations with an error or without
a score are ignored; a comparison needs at least two usable locations.

## Ordering

The overall winner is the location with the strictly highest overall score.
Lighting, weather and visibility leaders are picked the same way on their
sub-scores. Ties always go to the location listed first.

Wind, cloud cover and golden-hour length are reported as extra display
categories and never influence the winner or the tradeoffs.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from photo_conditions.models.comparison import (
    CategoryValue,
    CategoryWinner,
    ComparisonCategory,
    ComparisonLocation,
    ComparisonResult,
    LocationReference,
)
from photo_conditions.photography.adapter import adapt_weather_for_photography

INSUFFICIENT_DATA_MESSAGE = "Not enough location data to compare."

# Cloud cover (%) giving the most dramatic skies
IDEAL_CLOUD_COVER = 40.0


@dataclass(frozen=True)
class _CategoryDef:
    """How to extract, format and rank one comparison category."""

    category: ComparisonCategory
    label: str
    get_value: Callable[[ComparisonLocation], float]
    format_value: Callable[[float], str]
    # Lower rank wins; defaults to "highest value wins"
    rank: Callable[[float], float] = lambda value: -value


def _score(attr: str) -> Callable[[ComparisonLocation], float]:
    def get(loc: ComparisonLocation) -> float:
        return getattr(loc.photography_score, attr)

    return get


def _format_score(value: float) -> str:
    return f"{round(value)}/100"


def _wind_mph(loc: ComparisonLocation) -> float:
    return adapt_weather_for_photography(loc.weather).wind_speed_mph


def _cloud_cover(loc: ComparisonLocation) -> float:
    return adapt_weather_for_photography(loc.weather).cloud_cover_percent


def _golden_hour_minutes(loc: ComparisonLocation) -> float:
    return loc.sun_times.golden_hour_minutes if loc.sun_times else 0.0


SCORE_CATEGORIES = (
    _CategoryDef(ComparisonCategory.OVERALL, "Overall Score", _score("overall"), _format_score),
    _CategoryDef(ComparisonCategory.LIGHTING, "Lighting", _score("lighting_score"), _format_score),
    _CategoryDef(ComparisonCategory.WEATHER, "Weather", _score("weather_score"), _format_score),
    _CategoryDef(
        ComparisonCategory.VISIBILITY, "Visibility", _score("visibility_score"), _format_score
    ),
)

DISPLAY_CATEGORIES = (
    _CategoryDef(
        ComparisonCategory.WIND,
        "Wind",
        _wind_mph,
        lambda value: f"{value:.1f} mph",
        rank=lambda value: value,
    ),
    _CategoryDef(
        ComparisonCategory.CLOUD_COVER,
        "Cloud Cover",
        _cloud_cover,
        lambda value: f"{round(value)}%",
        rank=lambda value: abs(value - IDEAL_CLOUD_COVER),
    ),
    _CategoryDef(
        ComparisonCategory.GOLDEN_HOUR_DURATION,
        "Golden Hour",
        _golden_hour_minutes,
        lambda value: f"{round(value)} min",
    ),
)


def _best(
    locations: Sequence[ComparisonLocation],
    definition: _CategoryDef,
) -> ComparisonLocation:
    """First location with the best rank; later equal ranks never displace it."""
    best = locations[0]
    best_rank = definition.rank(definition.get_value(best))
    for loc in locations[1:]:
        rank = definition.rank(definition.get_value(loc))
        if rank < best_rank:
            best, best_rank = loc, rank
    return best


def _category_winner(
    locations: Sequence[ComparisonLocation],
    definition: _CategoryDef,
) -> CategoryWinner:
    winner = _best(locations, definition)
    return CategoryWinner(
        category=definition.category,
        label=definition.label,
        winner_id=winner.location.id,
        winner_name=winner.location.name,
        value=definition.format_value(definition.get_value(winner)),
        all_values=[
            CategoryValue(
                location_id=loc.location.id,
                name=loc.location.name,
                value=definition.format_value(definition.get_value(loc)),
                numeric_value=definition.get_value(loc),
            )
            for loc in locations
        ],
    )


def _reference(loc: ComparisonLocation, definition: _CategoryDef) -> LocationReference:
    return LocationReference(
        id=loc.location.id,
        name=loc.location.name,
        score=int(definition.get_value(loc)),
    )


def compare_locations(locations: Sequence[ComparisonLocation]) -> ComparisonResult:
    """Compare evaluated locations and pick the winner and leaders.

    Args:
        locations: Evaluated locations in display order

    Returns:
        ComparisonResult; ``insufficient_data`` is set and every winner is
        None when fewer than two locations have usable scores. The
        recommendation text is filled in by ``generate_recommendation``.
    """
    usable = [loc for loc in locations if loc.has_usable_score]
    if len(usable) < 2:
        return ComparisonResult(
            insufficient_data=True,
            recommendation=INSUFFICIENT_DATA_MESSAGE,
        )

    overall_def, lighting_def, weather_def, visibility_def = SCORE_CATEGORIES
    category_winners = [_category_winner(usable, d) for d in SCORE_CATEGORIES]

    with_weather = [loc for loc in usable if loc.weather is not None]
    if len(with_weather) >= 2:
        category_winners.extend(_category_winner(with_weather, d) for d in DISPLAY_CATEGORIES)

    return ComparisonResult(
        overall_winner=_reference(_best(usable, overall_def), overall_def),
        lighting_leader=_reference(_best(usable, lighting_def), lighting_def),
        weather_leader=_reference(_best(usable, weather_def), weather_def),
        visibility_leader=_reference(_best(usable, visibility_def), visibility_def),
        category_winners=category_winners,
    )


def get_category_win_count(result: ComparisonResult, location_id: str) -> int:
    """Number of categories other than overall that a location won."""
    return sum(
        1
        for winner in result.category_winners
        if winner.category != ComparisonCategory.OVERALL and winner.winner_id == location_id
    )
