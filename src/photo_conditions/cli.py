"""Command-line interface for photography condition scoring."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime, timezone

import httpx

from photo_conditions import __version__
from photo_conditions.astronomy.calculator import (
    compute_conditions,
    compute_sun_times,
    ensure_utc,
)
from photo_conditions.comparison.batch import BatchEvaluator, ProviderWeatherFetcher
from photo_conditions.config import Settings, get_settings
from photo_conditions.errors import PhotoConditionsError
from photo_conditions.models.comparison import BatchEvaluationRequest, BatchEvaluationResult
from photo_conditions.models.location import Location
from photo_conditions.models.photography import ForecastRanking, PhotographyScore, SunTimes
from photo_conditions.photography.adapter import adapt_weather_for_photography
from photo_conditions.photography.forecast_days import rank_forecast_days
from photo_conditions.photography.scoring import (
    calculate_photography_score,
    get_next_best_photo_time,
)
from photo_conditions.providers import (
    MetNoProvider,
    OpenMeteoProvider,
    ProviderError,
    WeatherProvider,
)

logger = logging.getLogger(__name__)


def parse_location(value: str) -> Location:
    """Parse 'lat,lon' or 'Name=lat,lon' into a Location."""
    try:
        return Location.from_string(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid location '{value}': {e}") from e


def parse_instant(value: str) -> datetime:
    """Parse an ISO 8601 datetime; naive values are UTC."""
    try:
        return ensure_utc(datetime.fromisoformat(value))
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid datetime '{value}'") from e


def parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date '{value}'") from e


def create_provider(name: str, settings: Settings) -> WeatherProvider:
    """Build the named weather provider from settings."""
    if name == "metno":
        return MetNoProvider(
            user_agent=settings.metno_user_agent,
            timeout=settings.provider_timeout_seconds,
        )
    return OpenMeteoProvider(timeout=settings.provider_timeout_seconds)


def _fmt_time(value: datetime | None) -> str:
    return value.strftime("%H:%M UTC") if value else "-"


def format_score(name: str, score: PhotographyScore) -> str:
    lines = [
        f"{name}: {score.overall}/100 ({score.recommendation.value})",
        f"  lighting {score.lighting_score}, weather {score.weather_score}, "
        f"visibility {score.visibility_score}",
        f"  time of day: {score.conditions.time_of_day.value}",
    ]
    lines.extend(f"  - {reason}" for reason in score.reasons)
    next_time = get_next_best_photo_time(score.conditions)
    if next_time:
        lines.append(f"  next: {next_time.time} in {next_time.minutes_away} min")
    return "\n".join(lines)


def format_sun_times(sun_times: SunTimes) -> str:
    rows = [
        ("Blue hour (morning)", sun_times.blue_hour_morning_start, sun_times.blue_hour_morning_end),
        ("Golden hour (morning)", sun_times.golden_hour_morning_start, sun_times.golden_hour_morning_end),
        ("Golden hour (evening)", sun_times.golden_hour_evening_start, sun_times.golden_hour_evening_end),
        ("Blue hour (evening)", sun_times.blue_hour_evening_start, sun_times.blue_hour_evening_end),
    ]
    lines = [
        f"Sun times for {sun_times.date.isoformat()}",
        f"  Sunrise:    {_fmt_time(sun_times.sunrise)}",
        f"  Solar noon: {_fmt_time(sun_times.solar_noon)}",
        f"  Sunset:     {_fmt_time(sun_times.sunset)}",
    ]
    lines.extend(f"  {label}: {_fmt_time(start)} - {_fmt_time(end)}" for label, start, end in rows)
    return "\n".join(lines)


def format_comparison(result: BatchEvaluationResult) -> str:
    lines = []
    for loc in result.locations:
        if loc.photography_score:
            lines.append(format_score(loc.location.name, loc.photography_score))
        else:
            lines.append(f"{loc.location.name}: error: {loc.error}")
    lines.append("")
    lines.append(result.comparison.recommendation)
    lines.extend(f"  * {tradeoff}" for tradeoff in result.comparison.tradeoffs)
    return "\n".join(lines)


def format_ranking(ranking: ForecastRanking) -> str:
    if not ranking.days:
        return "No forecast days could be scored."
    lines = [
        f"{day.date.isoformat()} {day.day_of_week:<9} {day.score.overall:>3}/100 "
        f"({day.score.recommendation.value}) at {_fmt_time(day.scored_at)}"
        for day in ranking.days
    ]
    best = ", ".join(day.day_of_week for day in ranking.best_days)
    lines.append(f"Best days: {best}")
    return "\n".join(lines)


async def _run_score(args: argparse.Namespace, settings: Settings) -> str:
    location: Location = args.location
    instant = args.at or datetime.now(timezone.utc)
    async with create_provider(args.provider, settings) as provider:
        weather = await ProviderWeatherFetcher(provider, instant)(location.coordinates)

    latitude, longitude = location.coordinates.to_tuple()
    conditions = compute_conditions(instant, latitude, longitude)
    score = calculate_photography_score(
        conditions, adapt_weather_for_photography(weather.current), settings.scoring
    )
    return format_score(location.name, score)


async def _run_compare(args: argparse.Namespace, settings: Settings) -> str:
    instant = args.at or datetime.now(timezone.utc)
    locations = [
        loc.model_copy(update={"id": f"{index}:{loc.id}"})
        for index, loc in enumerate(args.locations, start=1)
    ]
    async with create_provider(args.provider, settings) as provider:
        evaluator = BatchEvaluator(
            ProviderWeatherFetcher(provider, instant),
            config=settings.scoring,
            max_locations=settings.max_batch_locations,
        )
        result = await evaluator.evaluate(
            BatchEvaluationRequest(locations=locations, instant=instant)
        )
    return format_comparison(result)


async def _run_days(args: argparse.Namespace, settings: Settings) -> str:
    location: Location = args.location
    async with create_provider(args.provider, settings) as provider:
        forecast = await provider.get_forecast(location.coordinates)
    return format_ranking(rank_forecast_days(forecast, settings.scoring, args.max_days))


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="photo-conditions",
        description="Photo Conditions - score and compare locations for landscape photography",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    provider_args = argparse.ArgumentParser(add_help=False)
    provider_args.add_argument(
        "--provider",
        choices=["metno", "openmeteo"],
        default=settings.default_weather_provider,
        help="Weather data provider",
    )

    score_parser = subparsers.add_parser(
        "score", parents=[provider_args], help="Score one location"
    )
    score_parser.add_argument("location", type=parse_location, help="lat,lon or Name=lat,lon")
    score_parser.add_argument("--at", type=parse_instant, help="ISO datetime (default: now)")

    compare_parser = subparsers.add_parser(
        "compare", parents=[provider_args], help="Compare several locations"
    )
    compare_parser.add_argument(
        "locations", type=parse_location, nargs="+", help="lat,lon or Name=lat,lon"
    )
    compare_parser.add_argument("--at", type=parse_instant, help="ISO datetime (default: now)")

    days_parser = subparsers.add_parser(
        "days", parents=[provider_args], help="Rank forecast days for one location"
    )
    days_parser.add_argument("location", type=parse_location, help="lat,lon or Name=lat,lon")
    days_parser.add_argument("--max-days", type=int, default=3, help="Best days to list")

    sun_parser = subparsers.add_parser("sun-times", help="Show sun and golden/blue hour times")
    sun_parser.add_argument("location", type=parse_location, help="lat,lon or Name=lat,lon")
    sun_parser.add_argument("--date", type=parse_date, help="YYYY-MM-DD (default: today)")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    settings = get_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "compare" and len(args.locations) < 2:
        parser.error("compare needs at least two locations")

    try:
        if args.command == "sun-times":
            latitude, longitude = args.location.coordinates.to_tuple()
            day = args.date or datetime.now(timezone.utc)
            print(format_sun_times(compute_sun_times(day, latitude, longitude)))
        elif args.command == "score":
            print(asyncio.run(_run_score(args, settings)))
        elif args.command == "compare":
            print(asyncio.run(_run_compare(args, settings)))
        elif args.command == "days":
            print(asyncio.run(_run_days(args, settings)))
    except (ProviderError, PhotoConditionsError, httpx.HTTPError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
