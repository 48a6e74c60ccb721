"""Batch evaluation orchestrator.

The only part of the engine that does I/O. One batch evaluates a fixed set
of locations against one shared instant:

1. Start one weather fetch per location as a task, then await them all
   together. A failed fetch never stops the others.
2. When every fetch has settled, compute sun conditions, sun times and the
   photography score for each location that has weather. Each step has its
   own failure boundary, so a single bad location only marks itself.
3. Compare the usable locations and attach the recommendation text.

Every batch gets a sequence number. A caller that re-triggers evaluation
(new instant, added or removed location) should apply a result only when
``BatchEvaluator.is_current(result)`` holds; ``ComparisonSession`` does
this for you. In-flight batches are never cancelled, only discarded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta, timezone

from photo_conditions.astronomy.calculator import (
    compute_conditions,
    compute_sun_times,
    ensure_utc,
)
from photo_conditions.comparison.compare import compare_locations
from photo_conditions.comparison.recommendation import generate_recommendation
from photo_conditions.config import ScoringConfig
from photo_conditions.errors import WeatherFetchError
from photo_conditions.models.comparison import (
    BatchEvaluationRequest,
    BatchEvaluationResult,
    ComparisonLocation,
)
from photo_conditions.models.location import Coordinates, Location
from photo_conditions.models.weather import CurrentWeather
from photo_conditions.photography.adapter import adapt_weather_for_photography
from photo_conditions.photography.scoring import PhotographyScorer
from photo_conditions.providers.base import WeatherProvider

logger = logging.getLogger(__name__)

FetchWeather = Callable[[Coordinates], Awaitable[CurrentWeather]]

# Forecast hours further than this from the target instant are not used
MAX_SNAPSHOT_OFFSET = timedelta(hours=3)


class ProviderWeatherFetcher:
    """Fetch capability backed by a ``WeatherProvider``.

    Returns the forecast hour nearest the target instant as the snapshot.

    Example:
        ```python
        async with OpenMeteoProvider() as provider:
            evaluator = BatchEvaluator(ProviderWeatherFetcher(provider, instant))
            result = await evaluator.evaluate(request)
        ```
    """

    def __init__(self, provider: WeatherProvider, instant: datetime | None = None):
        """Initialize the fetcher.

        Args:
            provider: Provider to fetch forecasts from
            instant: Target instant for the snapshot (defaults to now)
        """
        self.provider = provider
        self.instant = instant

    async def __call__(self, coordinates: Coordinates) -> CurrentWeather:
        target = ensure_utc(self.instant) if self.instant else datetime.now(timezone.utc)
        forecast = await self.provider.get_forecast(coordinates)
        snapshot = forecast.get_forecast_at(
            target, max_offset_seconds=MAX_SNAPSHOT_OFFSET.total_seconds()
        )
        if snapshot is None:
            raise WeatherFetchError(
                f"{self.provider.name} has no forecast near {target.isoformat()}"
            )
        return CurrentWeather(current=snapshot, forecast=forecast, provider=self.provider.name)


class BatchEvaluator:
    """Evaluates and compares a batch of locations for one instant.

    Example:
        ```python
        evaluator = BatchEvaluator(fetch_weather)
        result = await evaluator.evaluate(
            BatchEvaluationRequest(locations=locations, instant=instant)
        )
        print(result.comparison.recommendation)
        ```
    """

    def __init__(
        self,
        fetch_weather: FetchWeather,
        config: ScoringConfig | None = None,
        max_locations: int | None = None,
    ):
        """Initialize the evaluator.

        Args:
            fetch_weather: Async callable returning the weather for coordinates
            config: Scoring thresholds
            max_locations: Largest batch accepted (unbounded when None)
        """
        self.fetch_weather = fetch_weather
        self.scorer = PhotographyScorer(config)
        self.max_locations = max_locations
        self._sequence = 0

    @property
    def latest_sequence(self) -> int:
        """Sequence number of the most recently started batch."""
        return self._sequence

    def next_sequence(self) -> int:
        """Issue the next batch sequence number."""
        self._sequence += 1
        return self._sequence

    def is_current(self, result: BatchEvaluationResult) -> bool:
        """True if no newer batch was started after ``result``'s."""
        return result.sequence == self._sequence

    async def _fetch(self, location: Location) -> CurrentWeather:
        try:
            return await self.fetch_weather(location.coordinates)
        except WeatherFetchError:
            raise
        except Exception as e:
            raise WeatherFetchError(
                f"Weather unavailable for {location.display_name()}: {e}",
                location_id=location.id,
            ) from e

    def _failed(
        self,
        location: Location,
        message: str,
        **data: object,
    ) -> ComparisonLocation:
        return ComparisonLocation(
            location=location,
            coordinates=location.coordinates,
            error=message,
            **data,
        )

    def _evaluate_location(
        self,
        location: Location,
        outcome: CurrentWeather | BaseException,
        instant: datetime,
    ) -> ComparisonLocation:
        """Score one settled fetch; failures are recorded on the location."""
        if isinstance(outcome, BaseException):
            message = str(outcome) or type(outcome).__name__
            logger.warning(f"Weather fetch failed for {location.id}: {message}")
            return self._failed(location, message)

        weather = outcome.current
        latitude, longitude = location.coordinates.to_tuple()

        try:
            conditions = compute_conditions(instant, latitude, longitude)
        except Exception as e:
            logger.warning(f"Sun conditions failed for {location.id}: {e}")
            return self._failed(location, f"Astronomy failed: {e}", weather=weather)

        try:
            sun_times = compute_sun_times(instant, latitude, longitude)
        except Exception as e:
            logger.warning(f"Sun times failed for {location.id}: {e}")
            return self._failed(
                location,
                f"Astronomy failed: {e}",
                weather=weather,
                photography_conditions=conditions,
            )

        try:
            score = self.scorer.score(conditions, adapt_weather_for_photography(weather))
        except Exception as e:
            logger.warning(f"Scoring failed for {location.id}: {e}")
            return self._failed(
                location,
                f"Scoring failed: {e}",
                weather=weather,
                photography_conditions=conditions,
                sun_times=sun_times,
            )

        return ComparisonLocation(
            location=location,
            coordinates=location.coordinates,
            weather=weather,
            photography_score=score,
            photography_conditions=conditions,
            sun_times=sun_times,
        )

    async def evaluate(self, request: BatchEvaluationRequest) -> BatchEvaluationResult:
        """Run one batch evaluation.

        Raises:
            ValueError: If the batch is larger than ``max_locations``
        """
        if self.max_locations is not None and len(request.locations) > self.max_locations:
            raise ValueError(
                f"Too many locations: {len(request.locations)} "
                f"(maximum {self.max_locations})"
            )

        sequence = self.next_sequence()
        instant = ensure_utc(request.instant)
        logger.info(
            f"Batch {sequence}: evaluating {len(request.locations)} locations "
            f"at {instant.isoformat()}"
        )

        # All fetches are in flight before any is awaited
        tasks = [asyncio.create_task(self._fetch(loc)) for loc in request.locations]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        locations = [
            self._evaluate_location(location, outcome, instant)
            for location, outcome in zip(request.locations, outcomes)
        ]

        comparison = compare_locations(locations)
        if not comparison.insufficient_data:
            text = generate_recommendation(locations, comparison)
            comparison = comparison.model_copy(
                update={
                    "recommendation": text.recommendation,
                    "tradeoffs": text.tradeoffs,
                }
            )

        usable = sum(1 for loc in locations if loc.has_usable_score)
        logger.debug(f"Batch {sequence}: {usable}/{len(locations)} locations scored")

        return BatchEvaluationResult(
            sequence=sequence,
            instant=instant,
            locations=locations,
            comparison=comparison,
        )


class ComparisonSession:
    """Caller-side holder of the latest batch result.

    Results from superseded batches are discarded when they arrive.

    Example:
        ```python
        session = ComparisonSession(BatchEvaluator(fetch_weather))
        first = asyncio.create_task(session.submit(request_for_today))
        second = asyncio.create_task(session.submit(request_for_tomorrow))
        await asyncio.gather(first, second)
        assert session.latest.instant == request_for_tomorrow.instant
        ```
    """

    def __init__(self, evaluator: BatchEvaluator):
        self.evaluator = evaluator
        self.latest: BatchEvaluationResult | None = None
        self._pending: list[ComparisonLocation] | None = None
        self._submitted = 0

    @property
    def locations(self) -> list[ComparisonLocation]:
        """Loading placeholders while a batch is in flight, else the latest locations."""
        if self._pending is not None:
            return self._pending
        return self.latest.locations if self.latest else []

    async def submit(self, request: BatchEvaluationRequest) -> BatchEvaluationResult | None:
        """Evaluate ``request`` and keep the result if it is still the newest.

        Returns:
            The applied result, or None if a newer batch superseded it
        """
        self._submitted += 1
        submission = self._submitted
        self._pending = [ComparisonLocation.pending(loc) for loc in request.locations]
        try:
            result = await self.evaluator.evaluate(request)
        except Exception:
            # Fall back to the latest result unless a newer batch is loading
            if submission == self._submitted:
                self._pending = None
            raise

        if not self.evaluator.is_current(result):
            logger.info(
                f"Discarding stale batch {result.sequence} "
                f"(latest is {self.evaluator.latest_sequence})"
            )
            return None

        self._pending = None
        self.latest = result
        return result
