"""Current-week calendar events for a signed-in user.

Authorization failures never reach the caller: the stale token is
dropped, one re-authorization is attempted, and if that fails the
calendar feature is switched off in the user's preferences.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from briefsnap.application.dtos.calendar import CalendarResult
from briefsnap.application.fetching import CachedFetch
from briefsnap.application.interfaces import ICalendarGateway, IUserRepository
from briefsnap.domain.entities import CalendarEvent
from briefsnap.domain.exceptions import CalendarAuthorizationException
from briefsnap.infrastructure.cache import CacheStore, Namespace, calendar_key
from briefsnap.shared.telemetry import traced
from briefsnap.shared.utils.datetime import utc_now, week_bounds

logger = logging.getLogger(__name__)


class CalendarService:
    def __init__(
        self,
        gateway: ICalendarGateway,
        users: IUserRepository,
        store: CacheStore,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._gateway = gateway
        self._users = users
        self._store = store
        self._clock = clock

    @traced("calendar.current_week")
    async def current_week_events(self, user_id: str) -> CalendarResult:
        """Events for the ISO week containing now, cached until expiry or the week changes.

        Disabled results (feature off, no token, authorization lost) are not cached.
        """
        week_start, week_end = week_bounds(self._clock())

        async def load() -> CalendarResult:
            preferences = await self._users.get_preferences(user_id)
            if not preferences.show_calendar:
                return CalendarResult(enabled=False)
            token = await self._users.get_calendar_token(user_id)
            if token is None:
                return CalendarResult(enabled=False)
            raw = await self._list_with_reauthorization(user_id, token, week_start, week_end)
            if raw is None:
                return CalendarResult(enabled=False)
            events = sorted((CalendarEvent.from_api(item) for item in raw), key=CalendarEvent.sort_key)
            return CalendarResult(
                enabled=True, events=events, week_start=week_start, week_end=week_end
            )

        fetch = CachedFetch[CalendarResult](self._store, Namespace.CALENDAR, calendar_key(user_id))
        return await fetch.run(load, cache_if=lambda result: result.enabled)

    async def _list_with_reauthorization(
        self,
        user_id: str,
        token: dict,
        week_start: datetime,
        week_end: datetime,
    ) -> list[dict] | None:
        try:
            return await self._gateway.list_events(token, week_start, week_end)
        except CalendarAuthorizationException:
            logger.info("Calendar token rejected for user %s; re-authorizing", user_id)

        await self._users.delete_calendar_token(user_id)
        new_token = await self._gateway.reauthorize(token)
        if new_token is not None:
            await self._users.save_calendar_token(user_id, new_token)
            try:
                return await self._gateway.list_events(new_token, week_start, week_end)
            except CalendarAuthorizationException:
                logger.warning("Calendar still unauthorized after re-authorization for %s", user_id)
                await self._users.delete_calendar_token(user_id)

        await self.disable(user_id)
        return None

    async def disable(self, user_id: str) -> None:
        """Turn the calendar widget off in the user's preferences."""
        preferences = await self._users.get_preferences(user_id)
        if preferences.show_calendar:
            await self._users.save_preferences(user_id, preferences.merged({"show_calendar": False}))
        logger.info("Calendar disabled for user %s", user_id)

    async def connect(self, user_id: str, token: dict) -> None:
        """Store a newly granted calendar token and turn the widget on."""
        await self._users.save_calendar_token(user_id, token)
        preferences = await self._users.get_preferences(user_id)
        if not preferences.show_calendar:
            await self._users.save_preferences(user_id, preferences.merged({"show_calendar": True}))
        logger.info("Calendar connected for user %s", user_id)
