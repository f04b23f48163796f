"""Google Calendar gateway (implements ICalendarGateway).

Events are read with the stored access token only, so an expired token
surfaces as CalendarAuthorizationException instead of being refreshed
silently; CalendarService decides whether to re-authorize.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from briefsnap.core.config import Settings
from briefsnap.domain.exceptions import CalendarAuthorizationException, FetchFailedException
from briefsnap.infrastructure.external.http_policy import CallPolicy
from briefsnap.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)

# Upper bound on events returned for one week
MAX_EVENTS = 50


class GoogleCalendarGateway:
    """Reads the primary calendar and refreshes tokens via the refresh-token grant."""

    def __init__(self, settings: Settings, policy: CallPolicy) -> None:
        self._client_id = settings.google_oauth_client_id
        self._client_secret = (
            settings.google_oauth_client_secret.get_secret_value()
            if settings.google_oauth_client_secret
            else None
        )
        self._token_uri = settings.google_token_uri
        self._policy = policy

    def _list_events_sync(
        self, access_token: str, time_min: datetime, time_max: datetime
    ) -> list[dict[str, Any]]:
        service = build(
            "calendar", "v3", credentials=Credentials(token=access_token), cache_discovery=False
        )
        request = service.events().list(
            calendarId="primary",
            timeMin=ensure_utc(time_min).isoformat(),
            timeMax=ensure_utc(time_max).isoformat(),
            singleEvents=True,
            orderBy="startTime",
            maxResults=MAX_EVENTS,
        )
        result = request.execute(num_retries=self._policy.retries)
        return result.get("items", [])

    async def list_events(
        self, token: dict[str, Any], time_min: datetime, time_max: datetime
    ) -> list[dict[str, Any]]:
        access_token = token.get("access_token")
        if not access_token:
            raise CalendarAuthorizationException("Calendar token has no access token")
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._list_events_sync, access_token, time_min, time_max),
                timeout=self._policy.timeout_seconds,
            )
        except HttpError as e:
            if e.resp.status in (401, 403):
                raise CalendarAuthorizationException() from e
            logger.warning("Calendar API error: %s", e)
            raise FetchFailedException("Failed to load calendar events", source="calendar") from e
        except TimeoutError as e:
            raise FetchFailedException("Calendar request timed out", source="calendar") from e

    def _refresh_sync(self, refresh_token: str) -> Credentials:
        creds = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=self._token_uri,
            client_id=self._client_id,
            client_secret=self._client_secret,
        )
        creds.refresh(Request())
        return creds

    async def reauthorize(self, token: dict[str, Any]) -> dict[str, Any] | None:
        refresh_token = token.get("refresh_token")
        if not refresh_token or not self._client_id or not self._client_secret:
            return None
        try:
            creds = await asyncio.wait_for(
                asyncio.to_thread(self._refresh_sync, refresh_token),
                timeout=self._policy.timeout_seconds,
            )
        except (GoogleAuthError, TimeoutError) as e:
            logger.warning("Calendar re-authorization failed: %s", e)
            return None
        logger.info("Calendar token re-authorized")
        return {
            "access_token": creds.token,
            "refresh_token": creds.refresh_token or refresh_token,
            "expiry": creds.expiry.isoformat() if creds.expiry else None,
        }
