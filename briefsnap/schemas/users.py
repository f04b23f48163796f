"""User preference, reading-history and calendar-connect schemas."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class PreferencesUpdate(BaseModel):
    """Partial preferences update; unset fields keep their stored value."""

    email_notifications: bool | None = None
    theme: Literal["light", "dark", "system"] | None = None
    article_language: str | None = Field(default=None, min_length=2, max_length=8)
    pinned_topics: list[str] | None = None
    weather_location: str | None = Field(default=None, max_length=200)
    show_calendar: bool | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class HistoryAddRequest(BaseModel):
    """Record that the current user opened an article."""

    slug: str = Field(..., min_length=1, max_length=300)


class CalendarConnectRequest(BaseModel):
    """OAuth token granted to the client for the calendar read-only scope."""

    access_token: str = Field(..., min_length=1)
    refresh_token: str | None = None
    expiry: str | None = None

    def token(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
