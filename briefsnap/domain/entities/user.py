"""User preference and reading-history records (`users`, `reading_history`)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from briefsnap.domain.entities._fields import (
    optional_bool,
    optional_str,
    optional_str_list,
    optional_timestamp,
    require_str,
)
from briefsnap.shared.utils.datetime import to_iso

# Document field name for each preference attribute
_PREFERENCE_FIELDS = {
    "email_notifications": "emailNotifications",
    "theme": "theme",
    "article_language": "articleLanguage",
    "pinned_topics": "pinnedTopics",
    "weather_location": "weatherLocation",
    "show_calendar": "showCalendar",
}


@dataclass(frozen=True)
class UserPreferences:
    email_notifications: bool = True
    theme: str = "system"
    article_language: str = "en"
    pinned_topics: list[str] = field(default_factory=list)
    weather_location: str = ""
    show_calendar: bool = False

    @classmethod
    def from_document(cls, user_id: str, data: dict[str, Any] | None) -> UserPreferences:
        """Parse the `preferences` map, filling defaults for missing fields."""
        data = data or {}
        defaults = cls()
        return cls(
            email_notifications=optional_bool(
                "preferences", user_id, data, "emailNotifications", defaults.email_notifications
            ),
            theme=optional_str("preferences", user_id, data, "theme", defaults.theme),
            article_language=optional_str(
                "preferences", user_id, data, "articleLanguage", defaults.article_language
            ),
            pinned_topics=optional_str_list("preferences", user_id, data, "pinnedTopics"),
            weather_location=optional_str("preferences", user_id, data, "weatherLocation"),
            show_calendar=optional_bool(
                "preferences", user_id, data, "showCalendar", defaults.show_calendar
            ),
        )

    def merged(self, changes: dict[str, Any]) -> UserPreferences:
        """Return a copy with the given attributes replaced; unknown names are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if k in _PREFERENCE_FIELDS})

    def to_document(self) -> dict[str, Any]:
        return {doc_field: getattr(self, attr) for attr, doc_field in _PREFERENCE_FIELDS.items()}

    def to_dict(self) -> dict[str, Any]:
        return {attr: getattr(self, attr) for attr in _PREFERENCE_FIELDS}


@dataclass(frozen=True)
class ReadingHistoryItem:
    id: str
    title: str = ""
    description: str = ""
    read_at: datetime | None = None

    @classmethod
    def from_document(cls, user_id: str, data: dict[str, Any]) -> ReadingHistoryItem:
        return cls(
            id=require_str("reading_history", user_id, data, "id"),
            title=optional_str("reading_history", user_id, data, "title"),
            description=optional_str("reading_history", user_id, data, "description"),
            read_at=optional_timestamp("reading_history", user_id, data, "readAt"),
        )

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "readAt": to_iso(self.read_at),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "read_at": to_iso(self.read_at),
        }
