"""UTC datetime helpers.

Stored timestamps, cache entry ages and the calendar week rule are all UTC.
Use utc_now() rather than datetime.now() so clocks can be injected in tests.
"""

from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Attach UTC to a naive datetime, convert an aware one; None passes through."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def parse_iso_utc(value: str | None) -> datetime | None:
    """Parse ISO-8601 (a trailing 'Z' is accepted) into UTC; empty gives None."""
    if not value:
        return None
    return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


def to_iso(dt: datetime | None) -> str | None:
    return None if dt is None else ensure_utc(dt).isoformat()


def iso_week(dt: datetime) -> tuple[int, int]:
    """(ISO year, ISO week) of dt in UTC. Calendar cache entries die when this changes."""
    year, week, _ = ensure_utc(dt).isocalendar()
    return year, week


def week_bounds(dt: datetime) -> tuple[datetime, datetime]:
    """[Monday 00:00, next Monday 00:00) in UTC for the week containing dt."""
    day = ensure_utc(dt).replace(hour=0, minute=0, second=0, microsecond=0)
    start = day - timedelta(days=day.weekday())
    return start, start + timedelta(days=7)
