"""Weather provider plumbing shared by MET Norway and Open-Meteo.

Providers are the weather-fetch collaborators of the photography engine: they
talk HTTP and translate each API's response into the canonical models in
`photo_conditions.models.weather`. Nothing in the scoring core imports them.

Canonical units are SI: °C, m/s, mm, metres of visibility and percentages
for cloud and precipitation probability. A value the provider does not
report is left as ``None``; the photography adapter substitutes neutral
defaults later, so providers never invent zeros.

| Provider   | Key needed | Visibility | Precipitation probability |
|------------|------------|------------|---------------------------|
| metno      | no (User-Agent with contact) | no | ``complete`` endpoint only |
| openmeteo  | no (non-commercial) | yes | yes |
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from photo_conditions import __version__
from photo_conditions.models.location import Coordinates
from photo_conditions.models.weather import Forecast

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"photo-conditions/{__version__}"

# Connection trouble is worth retrying; an HTTP error status is an answer
_TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError)


class ProviderError(Exception):
    """A weather API request failed or returned something unusable."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """HTTP 429. ``retry_after`` is in seconds when the API says."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = 429,
    ):
        super().__init__(
            f"{provider} is rate limiting requests",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """HTTP 401/403; for MET this usually means a missing User-Agent."""


def _retry_after_seconds(response: httpx.Response) -> int | None:
    value = response.headers.get("Retry-After", "")
    return int(value) if value.isdigit() else None


class WeatherProvider(ABC):
    """Base class for forecast APIs.

    Subclasses set ``name`` and ``base_url``, build their query in
    ``get_forecast`` and pass it to ``_fetch_forecast``, which handles
    conditional requests, error mapping and translation through
    ``_translate_response``.

    Example:
        ```python
        async with OpenMeteoProvider() as provider:
            forecast = await provider.get_forecast(coords)
            snapshot = forecast.get_forecast_at(instant)
        ```
    """

    name: str
    base_url: str
    # Distinct URL + query pairs kept for conditional requests
    cache_size: int = 64

    def __init__(
        self,
        user_agent: str | None = None,
        timeout: float = 30.0,
    ):
        """Set up the provider; the HTTP client is created lazily.

        Args:
            user_agent: Sent with every request
            timeout: Per-request timeout in seconds
        """
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

        # Keyed by URL + query, oldest first: forecasts and their Last-Modified
        self._last_modified: dict[str, str] = {}
        self._response_cache: dict[str, Forecast] = {}

    async def __aenter__(self) -> WeatherProvider:
        self._client = httpx.AsyncClient(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    @staticmethod
    def _cache_key(url: str, params: dict[str, Any] | None) -> str:
        return f"{url}:{params}"

    def _raise_for_status(self, response: httpx.Response) -> None:
        status = response.status_code
        if status == 429:
            raise RateLimitError(self.name, retry_after=_retry_after_seconds(response))
        if status in (401, 403):
            raise AuthenticationError(
                f"{self.name} refused the request ({status})",
                provider=self.name,
                status_code=status,
                response_body=response.text,
            )
        if status >= 400:
            raise ProviderError(
                f"API request failed: {status}",
                provider=self.name,
                status_code=status,
                response_body=response.text,
            )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def _fetch(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """GET ``url``, retrying timeouts and network errors only.

        Sends If-Modified-Since when a cached forecast for the same request
        carried Last-Modified. A 304 is returned as-is when that forecast
        is still cached.

        Raises:
            RateLimitError: On HTTP 429
            AuthenticationError: On HTTP 401 or 403
            ProviderError: On any other HTTP error status
        """
        key = self._cache_key(url, params)
        request_headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        request_headers.update(headers or {})
        if key in self._last_modified:
            request_headers["If-Modified-Since"] = self._last_modified[key]

        logger.debug(f"{self.name}: GET {url} {params}")
        response = await self.client.get(url, params=params, headers=request_headers)

        if response.status_code == 304 and key in self._response_cache:
            return response
        self._raise_for_status(response)
        return response

    def _parse_json(self, response: httpx.Response) -> dict[str, Any]:
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"Failed to parse response: {e}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            ) from e

    def _check_payload(self, data: dict[str, Any], response: httpx.Response) -> None:
        """Raise ProviderError for a 200 body that reports a failure."""

    async def _fetch_forecast(
        self,
        url: str,
        params: dict[str, Any],
        coordinates: Coordinates,
    ) -> Forecast:
        """Fetch and translate, reusing the cached forecast on 304."""
        response = await self._fetch(url, params=params)
        key = self._cache_key(url, params)

        if response.status_code == 304 and key in self._response_cache:
            logger.debug(f"{self.name}: forecast for {coordinates} not modified")
            return self._response_cache[key]

        data = self._parse_json(response)
        self._check_payload(data, response)
        forecast = self._translate_response(data, coordinates)
        self._remember(key, forecast, response.headers.get("Last-Modified"))
        return forecast

    def _remember(self, key: str, forecast: Forecast, last_modified: str | None) -> None:
        """Cache a translated forecast, dropping the oldest past the limit.

        Last-Modified is only kept alongside a cached forecast, so a later
        304 always has something to reuse.
        """
        self._response_cache.pop(key, None)
        self._response_cache[key] = forecast
        if last_modified:
            self._last_modified[key] = last_modified
        else:
            self._last_modified.pop(key, None)

        while len(self._response_cache) > self.cache_size:
            oldest = next(iter(self._response_cache))
            del self._response_cache[oldest]
            self._last_modified.pop(oldest, None)

    @staticmethod
    def _trim_hours(
        forecast: Forecast,
        start_time: datetime | None,
        end_time: datetime | None,
    ) -> Forecast:
        """Keep only the hours inside [start_time, end_time]."""
        if start_time is None and end_time is None:
            return forecast
        hourly = [
            hour
            for hour in forecast.hourly
            if (start_time is None or hour.time >= start_time)
            and (end_time is None or hour.time <= end_time)
        ]
        return forecast.model_copy(update={"hourly": hourly})

    @abstractmethod
    async def get_forecast(
        self,
        coordinates: Coordinates,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> Forecast:
        """Fetch the hourly forecast for one photography spot.

        Args:
            coordinates: Where to forecast
            start_time: Drop hours before this instant
            end_time: Drop hours after this instant

        Returns:
            Canonical ``Forecast``; unreported values are None

        Raises:
            ProviderError: If the request fails or the body is unusable
        """

    @abstractmethod
    def _translate_response(
        self,
        response_data: dict[str, Any],
        coordinates: Coordinates,
    ) -> Forecast:
        """Map a decoded API body onto the canonical ``Forecast``."""

    def get_max_forecast_days(self) -> int:
        """Longest forecast horizon the API serves, in days."""
        return 7
