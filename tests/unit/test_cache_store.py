"""Tests for CacheStore: fixed expiry, week rule, overwrite, clear."""

from datetime import UTC, datetime, timedelta

import pytest

from briefsnap.infrastructure.cache import CacheStore, Namespace


def test_entry_is_fresh_until_duration_then_absent(store: CacheStore, clock) -> None:
    """Fresh for T <= T' < T+D; absent at T' >= T+D."""
    store.put(Namespace.ARTICLE, "abc-slug", {"title": "x"})
    clock.advance(minutes=4, seconds=59)
    assert store.get(Namespace.ARTICLE, "abc-slug") == {"title": "x"}
    clock.advance(seconds=1)
    assert store.get(Namespace.ARTICLE, "abc-slug") is None


def test_stale_entry_is_evicted_on_lookup(store: CacheStore, clock) -> None:
    store.put(Namespace.COMMENTS, "a1", [])
    clock.advance(minutes=5)
    assert len(store) == 1
    assert store.get(Namespace.COMMENTS, "a1") is None
    assert len(store) == 0


def test_repeated_gets_return_same_value_without_mutation(store: CacheStore, clock) -> None:
    value = ["c1", "c2"]
    store.put(Namespace.COMMENTS, "a1", value)
    first = store.get(Namespace.COMMENTS, "a1")
    clock.advance(minutes=1)
    second = store.get(Namespace.COMMENTS, "a1")
    assert first is second is value
    assert value == ["c1", "c2"]
    assert len(store) == 1


def test_get_returns_stored_object_by_reference(store: CacheStore) -> None:
    article = object()
    store.put("article", "abc-slug", article)
    assert store.get("article", "abc-slug") is article


def test_last_put_wins(store: CacheStore) -> None:
    store.put(Namespace.COMMENTS, "a1", ["first"])
    store.put(Namespace.COMMENTS, "a1", ["second"])
    assert store.get(Namespace.COMMENTS, "a1") == ["second"]
    assert len(store) == 1


def test_overwrite_restarts_the_expiry_window(store: CacheStore, clock) -> None:
    store.put(Namespace.ARTICLE, "s", 1)
    clock.advance(minutes=4)
    store.put(Namespace.ARTICLE, "s", 2)
    clock.advance(minutes=4)
    assert store.get(Namespace.ARTICLE, "s") == 2


def test_weather_hit_at_29_minutes_absent_at_31(store: CacheStore, clock) -> None:
    store.put(Namespace.WEATHER, "paris", {"temp": 60})
    clock.advance(minutes=29)
    assert store.get(Namespace.WEATHER, "paris") == {"temp": 60}
    clock.advance(minutes=2)
    assert store.get(Namespace.WEATHER, "paris") is None


def test_calendar_entry_invalidated_by_week_change_inside_duration(clock) -> None:
    clock.now = datetime(2025, 3, 9, 23, 58, tzinfo=UTC)  # Sunday, ISO week 10
    store = CacheStore(clock=clock)
    store.put(Namespace.CALENDAR, "u1", ["event"])
    clock.advance(minutes=1)
    assert store.get(Namespace.CALENDAR, "u1") == ["event"]
    clock.advance(minutes=2)  # Monday 00:01, week 11; still inside 5 minutes
    assert store.get(Namespace.CALENDAR, "u1") is None


def test_week_rule_applies_only_to_calendar(clock) -> None:
    clock.now = datetime(2025, 3, 9, 23, 58, tzinfo=UTC)
    store = CacheStore(clock=clock)
    store.put(Namespace.ARTICLE, "s", 1)
    clock.advance(minutes=3)
    assert store.get(Namespace.ARTICLE, "s") == 1


def test_clear_empties_every_namespace(store: CacheStore) -> None:
    store.put(Namespace.ARTICLE, "abc-slug", 1)
    store.put(Namespace.WEATHER, "paris", 2)
    store.put(Namespace.CALENDAR, "u1", 3)
    store.put(Namespace.VIEW_COUNT, "a1", 4)
    store.clear()
    assert len(store) == 0
    assert store.get(Namespace.ARTICLE, "abc-slug") is None
    assert store.get(Namespace.WEATHER, "paris") is None
    assert store.get(Namespace.CALENDAR, "u1") is None


def test_namespaces_are_independent(store: CacheStore) -> None:
    store.put(Namespace.ARTICLE, "same", "article")
    store.put(Namespace.COMMENTS, "same", "comments")
    assert store.get(Namespace.ARTICLE, "same") == "article"
    assert store.get(Namespace.COMMENTS, "same") == "comments"


def test_sitemap_namespace_is_rejected(store: CacheStore) -> None:
    with pytest.raises(ValueError):
        store.put(Namespace.SITEMAP, "articles", [])
    with pytest.raises(ValueError):
        store.get(Namespace.SITEMAP, "articles")


def test_unknown_namespace_is_rejected(store: CacheStore) -> None:
    with pytest.raises(ValueError):
        store.get("bookmarks", "x")


def test_custom_durations_override_defaults(clock) -> None:
    store = CacheStore({Namespace.ARTICLE: timedelta(seconds=10)}, clock=clock)
    assert store.duration(Namespace.ARTICLE) == timedelta(seconds=10)
    assert store.duration(Namespace.WEATHER) == timedelta(minutes=30)
    store.put(Namespace.ARTICLE, "s", 1)
    clock.advance(seconds=10)
    assert store.get(Namespace.ARTICLE, "s") is None
