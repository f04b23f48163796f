"""Tests for UTC datetime helpers."""

from datetime import UTC, datetime, timedelta, timezone

from briefsnap.shared.utils.datetime import ensure_utc, iso_week, parse_iso_utc, week_bounds


def test_ensure_utc_naive_and_aware() -> None:
    naive = datetime(2025, 1, 1, 12, 0)
    assert ensure_utc(naive).tzinfo is UTC
    plus2 = datetime(2025, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert ensure_utc(plus2) == datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
    assert ensure_utc(None) is None


def test_parse_iso_utc_accepts_z_suffix() -> None:
    assert parse_iso_utc("2025-03-05T10:00:00Z") == datetime(2025, 3, 5, 10, 0, tzinfo=UTC)
    assert parse_iso_utc(None) is None


def test_week_bounds_monday_to_monday() -> None:
    start, end = week_bounds(datetime(2025, 3, 9, 23, 59, tzinfo=UTC))
    assert start == datetime(2025, 3, 3, tzinfo=UTC)
    assert end == datetime(2025, 3, 10, tzinfo=UTC)


def test_iso_week_changes_on_monday() -> None:
    assert iso_week(datetime(2025, 3, 9, 23, 59, tzinfo=UTC)) == (2025, 10)
    assert iso_week(datetime(2025, 3, 10, 0, 0, tzinfo=UTC)) == (2025, 11)
