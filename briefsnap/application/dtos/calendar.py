"""DTO for the current-week calendar widget."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from briefsnap.domain.entities import CalendarEvent
from briefsnap.shared.utils.datetime import to_iso


@dataclass(frozen=True)
class CalendarResult:
    """Events for [week_start, week_end); enabled=False when the feature is off or unauthorized."""

    enabled: bool
    events: list[CalendarEvent] = field(default_factory=list)
    week_start: datetime | None = None
    week_end: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "events": [e.to_dict() for e in self.events],
            "week_start": to_iso(self.week_start),
            "week_end": to_iso(self.week_end),
        }
