"""Geocoding (Nominatim) and forecast (Tomorrow.io) clients."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from briefsnap.core.config import Settings
from briefsnap.domain.exceptions import FetchFailedException
from briefsnap.infrastructure.external.http_policy import CallPolicy
from briefsnap.shared.telemetry import traced

logger = logging.getLogger(__name__)


class WeatherApiClient:
    """Nominatim search/reverse plus the Tomorrow.io forecast (imperial units).

    A forecast answered with 429 is retried up to `max_retries` times,
    `retry_delay_seconds` apart; other non-2xx answers fail at once.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        settings: Settings,
        geocoding_policy: CallPolicy,
        weather_policy: CallPolicy,
        sleep=asyncio.sleep,
    ) -> None:
        self._http = http
        self._geocoding = geocoding_policy
        self._weather = weather_policy
        self._nominatim = settings.nominatim_base_url.rstrip("/")
        self._headers = {"User-Agent": settings.nominatim_user_agent}
        self._forecast_url = settings.weather_forecast_url
        self._api_key = (
            settings.tomorrow_io_api_key.get_secret_value() if settings.tomorrow_io_api_key else ""
        )
        self._max_retries = settings.weather_max_retries
        self._retry_delay = settings.weather_retry_delay_seconds
        self._sleep = sleep

    async def _nominatim_get(self, path: str, params: dict[str, Any]) -> Any:
        try:
            resp = await self._geocoding.request(
                self._http,
                "GET",
                f"{self._nominatim}/{path}",
                params={"format": "json", **params},
                headers=self._headers,
            )
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Geocoding request %s failed: %s", path, e)
            raise FetchFailedException("Failed to fetch location data", source="geocoding") from e

    @traced("geocoding.search")
    async def search(self, query: str, limit: int) -> list[dict[str, Any]]:
        data = await self._nominatim_get(
            "search",
            {"q": query, "limit": limit, "addressdetails": 1, "accept-language": "en"},
        )
        return [item for item in data if isinstance(item, dict)] if isinstance(data, list) else []

    async def geocode(self, query: str) -> tuple[float, float] | None:
        data = await self._nominatim_get("search", {"q": query})
        if not isinstance(data, list) or not data:
            return None
        try:
            return float(data[0]["lat"]), float(data[0]["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise FetchFailedException("Malformed geocoding result", source="geocoding") from e

    @traced("geocoding.reverse")
    async def reverse(self, lat: float, lon: float) -> dict[str, Any] | None:
        data = await self._nominatim_get(
            "reverse", {"lat": lat, "lon": lon, "addressdetails": 1, "zoom": 18}
        )
        if not isinstance(data, dict) or "error" in data:
            return None
        return data

    def _rate_limit_retrying(self) -> AsyncRetrying:
        """Retry 429 answers at a fixed delay; after the last one, hand back that 429."""
        return AsyncRetrying(
            retry=retry_if_result(lambda resp: resp.status_code == 429),
            stop=stop_after_attempt(self._max_retries + 1),
            wait=wait_fixed(self._retry_delay),
            sleep=self._sleep,
            before_sleep=before_sleep_log(logger, logging.INFO),
            retry_error_callback=lambda state: state.outcome.result(),
        )

    @traced("weather.forecast")
    async def forecast(self, lat: float, lon: float) -> dict[str, Any]:
        params = {"location": f"{lat},{lon}", "apikey": self._api_key, "units": "imperial"}
        try:
            resp = await self._rate_limit_retrying()(
                self._weather.request, self._http, "GET", self._forecast_url, params=params
            )
        except httpx.HTTPError as e:
            logger.warning("Weather request failed: %s", e)
            raise FetchFailedException("Weather service unavailable", source="weather") from e
        if resp.status_code == 429:
            raise FetchFailedException(
                "Weather service is busy. Please try again in a few minutes.", source="weather"
            )
        if not resp.is_success:
            raise FetchFailedException("Weather service unavailable", source="weather")
        try:
            return resp.json()
        except ValueError as e:
            raise FetchFailedException("Weather service unavailable", source="weather") from e
