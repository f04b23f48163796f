"""Weather, location search and the forecast client's 429 handling."""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from briefsnap.application.services import (
    DebouncedLocationSearch,
    LocationService,
    WeatherService,
)
from briefsnap.core.config import Settings
from briefsnap.domain.exceptions import FetchFailedException, ResourceNotFoundException
from briefsnap.infrastructure.external.http_policy import CallPolicy
from briefsnap.infrastructure.external.nominatim_tomorrow import WeatherApiClient

FORECAST = {
    "timelines": {
        "minutely": [{"values": {"temperature": 55}}],
        "hourly": [{"h": 1}],
        "daily": [{"d": 1}],
    }
}

PARIS = {
    "lat": "48.85",
    "lon": "2.35",
    "display_name": "Paris, Ile-de-France, France",
    "address": {"city": "Paris", "state": "Ile-de-France", "country": "France"},
}


@pytest.fixture
def weather_client():
    client = AsyncMock()
    client.geocode = AsyncMock(return_value=(48.85, 2.35))
    client.forecast = AsyncMock(return_value=FORECAST)
    return client


async def test_weather_cached_per_lowercased_location(weather_client, store) -> None:
    service = WeatherService(weather_client, store)
    first = await service.get_weather("Paris")
    second = await service.get_weather(" paris ")
    assert first.current == {"values": {"temperature": 55}}
    assert second == first
    weather_client.geocode.assert_awaited_once_with("Paris")


async def test_weather_expires_after_thirty_minutes(weather_client, store, clock) -> None:
    service = WeatherService(weather_client, store)
    await service.get_weather("Paris")
    clock.advance(minutes=29)
    await service.get_weather("Paris")
    clock.advance(minutes=1)
    await service.get_weather("Paris")
    assert weather_client.forecast.await_count == 2


async def test_unknown_location(weather_client, store) -> None:
    weather_client.geocode.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await WeatherService(weather_client, store).get_weather("Atlantis")
    assert len(store) == 0


async def test_location_search_needs_two_characters(weather_client) -> None:
    weather_client.search = AsyncMock(return_value=[PARIS])
    service = LocationService(weather_client)
    assert await service.search("P") == []
    weather_client.search.assert_not_called()
    suggestions = await service.search("Pa")
    assert [s.name for s in suggestions] == ["Paris"]
    weather_client.search.assert_awaited_once_with("Pa", 5)


async def test_reverse_geocode(weather_client) -> None:
    weather_client.reverse = AsyncMock(return_value=PARIS)
    suggestion = await LocationService(weather_client).reverse(48.85, 2.35)
    assert suggestion.name == "Paris"
    weather_client.reverse.return_value = None
    with pytest.raises(ResourceNotFoundException):
        await LocationService(weather_client).reverse(0.0, 0.0)


async def test_debounced_search_only_sends_last_query(weather_client) -> None:
    weather_client.search = AsyncMock(return_value=[PARIS])
    search = DebouncedLocationSearch(LocationService(weather_client), delay_seconds=0.01)
    for query in ("Pa", "Par", "Pari", "Paris"):
        search.type(query)
    results = await search.results()
    assert [s.name for s in results] == ["Paris"]
    weather_client.search.assert_awaited_once_with("Paris", 5)
    assert search.superseded == 3


def _forecast_client(handler, settings: Settings) -> tuple[WeatherApiClient, list[float]]:
    slept: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        slept.append(seconds)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    policy = CallPolicy("weather", 1.0, retries=0)
    return WeatherApiClient(http, settings, policy, policy, sleep=fake_sleep), slept


async def test_forecast_retries_rate_limit(settings) -> None:
    responses = iter([429, 429, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        status = next(responses)
        return httpx.Response(status, json=FORECAST if status == 200 else {})

    client, slept = _forecast_client(handler, settings)
    assert await client.forecast(1.0, 2.0) == FORECAST
    assert slept == [settings.weather_retry_delay_seconds] * 2


async def test_forecast_gives_up_after_max_retries(settings) -> None:
    client, slept = _forecast_client(lambda request: httpx.Response(429), settings)
    with pytest.raises(FetchFailedException) as exc_info:
        await client.forecast(1.0, 2.0)
    assert "busy" in exc_info.value.message
    assert len(slept) == settings.weather_max_retries


async def test_forecast_other_errors_fail_immediately(settings) -> None:
    client, slept = _forecast_client(lambda request: httpx.Response(500), settings)
    with pytest.raises(FetchFailedException):
        await client.forecast(1.0, 2.0)
    assert slept == []


async def test_forecast_network_error_is_not_a_rate_limit(settings) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client, slept = _forecast_client(handler, settings)
    with pytest.raises(FetchFailedException) as exc_info:
        await client.forecast(1.0, 2.0)
    assert exc_info.value.message == "Weather service unavailable"
    assert slept == []


async def test_debounced_results_follow_query_typed_while_waiting(weather_client) -> None:
    london = {
        "lat": "51.50",
        "lon": "-0.12",
        "display_name": "London, England, United Kingdom",
        "address": {"city": "London", "state": "England", "country": "United Kingdom"},
    }

    async def search_by_query(query: str, limit: int) -> list[dict]:
        return [london] if query == "London" else [PARIS]

    weather_client.search = AsyncMock(side_effect=search_by_query)
    search = DebouncedLocationSearch(LocationService(weather_client), delay_seconds=0.05)
    search.type("Paris")
    waiter = asyncio.create_task(search.results())
    await asyncio.sleep(0.01)
    search.type("London")

    results = await waiter
    assert [s.name for s in results] == ["London"]
    assert not search.pending
    weather_client.search.assert_awaited_once_with("London", 5)
