"""Calendar event record (Google Calendar `events.list` items)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from briefsnap.domain.entities._fields import optional_str, require_str
from briefsnap.domain.exceptions import DecodeError
from briefsnap.shared.utils.datetime import parse_iso_utc, to_iso


def _event_time(doc_id: str, value: Any, field: str) -> tuple[datetime | None, bool]:
    """Return (instant, all_day) from a {dateTime} or {date} map."""
    if value is None:
        return None, False
    if not isinstance(value, dict):
        raise DecodeError("calendar_event", doc_id, f"'{field}' must be a map")
    raw = value.get("dateTime") or value.get("date")
    if raw is None:
        return None, False
    try:
        return parse_iso_utc(raw), "dateTime" not in value
    except (TypeError, ValueError) as e:
        raise DecodeError("calendar_event", doc_id, f"'{field}' is not a date/time") from e


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    summary: str = ""
    description: str = ""
    location: str = ""
    status: str = ""
    start: datetime | None = None
    end: datetime | None = None
    attendee_count: int = 0
    hangout_link: str = ""
    all_day: bool = False

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> CalendarEvent:
        doc_id = item.get("id") if isinstance(item.get("id"), str) else None
        event_id = require_str("calendar_event", doc_id, item, "id")
        start, all_day = _event_time(event_id, item.get("start"), "start")
        end, _ = _event_time(event_id, item.get("end"), "end")
        attendees = item.get("attendees") or []
        if not isinstance(attendees, list):
            raise DecodeError("calendar_event", event_id, "'attendees' must be a list")
        return cls(
            id=event_id,
            summary=optional_str("calendar_event", event_id, item, "summary"),
            description=optional_str("calendar_event", event_id, item, "description"),
            location=optional_str("calendar_event", event_id, item, "location"),
            status=optional_str("calendar_event", event_id, item, "status"),
            start=start,
            end=end,
            attendee_count=len(attendees),
            hangout_link=optional_str("calendar_event", event_id, item, "hangoutLink"),
            all_day=all_day,
        )

    def sort_key(self) -> tuple[bool, datetime | str]:
        # events without a start sort last
        return (self.start is None, self.start or "")

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "summary": self.summary,
            "description": self.description,
            "location": self.location,
            "status": self.status,
            "start": to_iso(self.start),
            "end": to_iso(self.end),
            "attendee_count": self.attendee_count,
            "hangout_link": self.hangout_link,
            "all_day": self.all_day,
        }
