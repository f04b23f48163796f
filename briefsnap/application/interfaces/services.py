"""Ports for third-party APIs used by the application services."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from briefsnap.application.dtos.moderation import ModerationVerdict


class IModerationClient(Protocol):
    """Content classification API."""

    async def moderate(self, text: str) -> ModerationVerdict:
        """Classify text. Raises ModerationUnavailableException on any failure."""


class IWeatherClient(Protocol):
    """Geocoding plus forecast API."""

    async def geocode(self, query: str) -> tuple[float, float] | None:
        """Return (lat, lon) of the first search hit, or None."""

    async def search(self, query: str, limit: int) -> list[dict[str, Any]]:
        """Return raw search hits with address details."""

    async def reverse(self, lat: float, lon: float) -> dict[str, Any] | None:
        """Return the raw reverse-geocoding result, or None."""

    async def forecast(self, lat: float, lon: float) -> dict[str, Any]:
        """Return the raw forecast payload."""


class ICalendarGateway(Protocol):
    """Calendar API reached with a user's OAuth token."""

    async def list_events(
        self, token: dict[str, Any], time_min: datetime, time_max: datetime
    ) -> list[dict[str, Any]]:
        """Return raw events in [time_min, time_max).

        Raises CalendarAuthorizationException when the token is rejected.
        """

    async def reauthorize(self, token: dict[str, Any]) -> dict[str, Any] | None:
        """Exchange the refresh token for a new token map; None if not possible."""


class IDeploymentTrigger(Protocol):
    """Static-site deployment platform."""

    async def trigger(self) -> bool:
        """Start a deployment; return True when the platform accepted it."""
