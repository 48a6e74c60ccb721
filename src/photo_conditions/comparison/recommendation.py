"""Natural-language recommendations from comparison results.

Deterministic and template based. Tradeoffs only cover the three score
dimensions (lighting, weather, visibility), and only where a location other
than the overall winner has a strictly higher sub-score.
"""

from __future__ import annotations

from collections.abc import Sequence

from photo_conditions.models.comparison import (
    ComparisonLocation,
    ComparisonResult,
    LocationReference,
    RecommendationText,
)
from photo_conditions.models.photography import RecommendationTier

NO_WINNER_MESSAGE = "Not enough data to generate a recommendation."
MAX_TRADEOFFS = 3

# (result attribute, score attribute, "excelling in" name, tradeoff label)
_DIMENSIONS = (
    ("lighting_leader", "lighting_score", "lighting", "lighting"),
    ("weather_leader", "weather_score", "weather", "weather conditions"),
    ("visibility_leader", "visibility_score", "visibility", "visibility"),
)


def format_list(items: Sequence[str]) -> str:
    """Format items as "a", "a and b" or "a, b, and c"."""
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return f"{items[0]} and {items[1]}"
    return f"{', '.join(items[:-1])}, and {items[-1]}"


def _build_tradeoffs(
    result: ComparisonResult,
    winner: ComparisonLocation,
) -> list[str]:
    score = winner.photography_score
    candidates: list[tuple[int, str]] = []
    for leader_attr, score_attr, _, label in _DIMENSIONS:
        leader: LocationReference | None = getattr(result, leader_attr)
        if leader is None or leader.id == winner.location.id:
            continue
        winner_value = getattr(score, score_attr)
        if leader.score <= winner_value:
            continue
        candidates.append(
            (
                leader.score - winner_value,
                f"{leader.name} has better {label} "
                f"({leader.score}/100 vs {winner_value}/100).",
            )
        )

    # sorted() is stable, so equal gaps keep dimension order
    candidates = sorted(candidates, key=lambda item: item[0], reverse=True)
    return [text for _, text in candidates[:MAX_TRADEOFFS]]


def generate_recommendation(
    locations: Sequence[ComparisonLocation],
    result: ComparisonResult,
) -> RecommendationText:
    """Summarise a comparison in one sentence plus tradeoff statements.

    Args:
        locations: The evaluated locations the comparison was built from
        result: Output of ``compare_locations`` for those locations

    Returns:
        RecommendationText; a neutral message and no tradeoffs when there is
        no overall winner
    """
    winner_ref = result.overall_winner
    if winner_ref is None:
        return RecommendationText(recommendation=NO_WINNER_MESSAGE)

    usable = [loc for loc in locations if loc.has_usable_score]
    winner = next((loc for loc in usable if loc.location.id == winner_ref.id), None)
    if winner is None:
        return RecommendationText(recommendation=NO_WINNER_MESSAGE)

    score = winner.photography_score
    if all(loc.photography_score.recommendation == RecommendationTier.POOR for loc in usable):
        return RecommendationText(
            recommendation=(
                "None of the locations have ideal conditions right now. "
                f"{winner_ref.name} is the best option with a score of {score.overall}/100."
            ),
            tradeoffs=_build_tradeoffs(result, winner),
        )

    excelling = [
        name
        for leader_attr, _, name, _ in _DIMENSIONS
        if getattr(result, leader_attr) is not None
        and getattr(result, leader_attr).id == winner_ref.id
    ]
    text = (
        f"{winner_ref.name} is the best choice with {score.recommendation.value} "
        f"conditions (score: {score.overall}/100)"
    )
    if excelling:
        text += f", excelling in {format_list(excelling)}"

    return RecommendationText(
        recommendation=text + ".",
        tradeoffs=_build_tradeoffs(result, winner),
    )
