"""Weather forecast and location suggestion records.

Built from Tomorrow.io forecast and Nominatim search payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from briefsnap.core.constants import WEATHER_DAILY_POINTS, WEATHER_HOURLY_POINTS
from briefsnap.domain.exceptions import DecodeError


@dataclass(frozen=True)
class WeatherReport:
    """Current conditions plus the next 24 hours and 5 days."""

    location: str
    current: dict[str, Any]
    hourly: list[dict[str, Any]] = field(default_factory=list)
    daily: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_forecast(cls, location: str, payload: Any) -> WeatherReport:
        """Parse a forecast response. Raises DecodeError without minutely/hourly/daily timelines."""
        timelines = payload.get("timelines") if isinstance(payload, dict) else None
        if not isinstance(timelines, dict):
            raise DecodeError("weather", location, "missing 'timelines'")
        minutely = timelines.get("minutely")
        hourly = timelines.get("hourly")
        daily = timelines.get("daily")
        if not minutely or not isinstance(minutely, list) or not isinstance(minutely[0], dict):
            raise DecodeError("weather", location, "missing 'timelines.minutely[0]'")
        if not isinstance(hourly, list):
            raise DecodeError("weather", location, "missing 'timelines.hourly'")
        if not isinstance(daily, list):
            raise DecodeError("weather", location, "missing 'timelines.daily'")
        return cls(
            location=location,
            current=minutely[0],
            hourly=hourly[:WEATHER_HOURLY_POINTS],
            daily=daily[:WEATHER_DAILY_POINTS],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "current": self.current,
            "hourly": self.hourly,
            "daily": self.daily,
        }


def location_name(address: dict[str, Any], display_name: str = "") -> str:
    """Pick the most specific place name from a Nominatim address breakdown."""
    for key in ("city", "town", "village", "suburb", "municipality"):
        if address.get(key):
            return address[key]
    for key in ("city_district", "county", "state"):
        if address.get(key):
            return address[key]
    return display_name.split(",")[0].strip()


@dataclass(frozen=True)
class LocationSuggestion:
    name: str
    lat: float
    lon: float
    full: str = ""

    @classmethod
    def from_search_result(cls, item: dict[str, Any]) -> LocationSuggestion | None:
        """Build a suggestion from one search hit; None when no name can be derived."""
        address = item.get("address") or {}
        name = location_name(address, item.get("display_name") or "")
        if not name:
            return None
        try:
            lat, lon = float(item["lat"]), float(item["lon"])
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError("location", name, "missing or invalid coordinates") from e
        full = ", ".join(p for p in (address.get("state"), address.get("country")) if p)
        return cls(name=name, lat=lat, lon=lon, full=full)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "lat": self.lat, "lon": self.lon, "full": self.full}
