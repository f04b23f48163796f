"""Weather for a named location, and location search for the picker."""

from __future__ import annotations

import logging

from briefsnap.application.fetching import cached_fetch
from briefsnap.application.interfaces import IWeatherClient
from briefsnap.core.constants import (
    LOCATION_QUERY_MIN_LENGTH,
    LOCATION_SEARCH_DEBOUNCE_SECONDS,
    LOCATION_SUGGESTION_LIMIT,
)
from briefsnap.domain.entities import LocationSuggestion, WeatherReport
from briefsnap.domain.entities.weather import location_name
from briefsnap.domain.exceptions import ResourceNotFoundException, ValidationException
from briefsnap.infrastructure.cache import CacheStore, Namespace, weather_key
from briefsnap.shared.debounce import Debouncer
from briefsnap.shared.telemetry import traced

logger = logging.getLogger(__name__)


class WeatherService:
    """Geocode then forecast, cached per lower-cased location for 30 minutes."""

    def __init__(self, client: IWeatherClient, store: CacheStore) -> None:
        self._client = client
        self._store = store

    @traced("weather.get")
    async def get_weather(self, location: str) -> WeatherReport:
        location = location.strip()
        if not location:
            raise ValidationException("location is required", field="location")

        async def load() -> WeatherReport:
            coords = await self._client.geocode(location)
            if coords is None:
                raise ResourceNotFoundException("location", location)
            payload = await self._client.forecast(*coords)
            return WeatherReport.from_forecast(location, payload)

        return await cached_fetch(self._store, Namespace.WEATHER, weather_key(location), load)


class LocationService:
    """Location suggestions (not cached)."""

    def __init__(self, client: IWeatherClient) -> None:
        self._client = client

    async def search(self, query: str) -> list[LocationSuggestion]:
        """Up to five named places; queries shorter than two characters return []."""
        query = (query or "").strip()
        if len(query) < LOCATION_QUERY_MIN_LENGTH:
            return []
        results = await self._client.search(query, LOCATION_SUGGESTION_LIMIT)
        suggestions = [LocationSuggestion.from_search_result(item) for item in results]
        return [s for s in suggestions if s is not None][:LOCATION_SUGGESTION_LIMIT]

    async def reverse(self, lat: float, lon: float) -> LocationSuggestion:
        """Name the place at a coordinate (used for "use my location")."""
        data = await self._client.reverse(lat, lon)
        name = location_name(data.get("address") or {}, data.get("display_name") or "") if data else ""
        if not name:
            raise ResourceNotFoundException("location", f"{lat},{lon}")
        return LocationSuggestion(name=name, lat=lat, lon=lon, full=data.get("display_name") or "")


class DebouncedLocationSearch:
    """Type-ahead wrapper: only the last query in a 300 ms burst is searched.

    Superseded queries are cancelled before they reach the geocoder.
    """

    def __init__(
        self,
        service: LocationService,
        delay_seconds: float = LOCATION_SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self._debouncer: Debouncer[list[LocationSuggestion]] = Debouncer(delay_seconds, service.search)

    def type(self, query: str) -> None:
        self._debouncer.call(query)

    def cancel(self) -> None:
        self._debouncer.cancel()

    @property
    def pending(self) -> bool:
        return self._debouncer.pending

    async def results(self) -> list[LocationSuggestion]:
        """Wait for the scheduled search and return the latest suggestions."""
        await self._debouncer.wait()
        return self._debouncer.last_result or []

    @property
    def superseded(self) -> int:
        return self._debouncer.calls_superseded
