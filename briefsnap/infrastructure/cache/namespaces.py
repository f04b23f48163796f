"""Cache namespaces and their expiry durations."""

from __future__ import annotations

from datetime import timedelta
from enum import Enum

from briefsnap.core.config import Settings


class Namespace(str, Enum):
    """Logical cache partition; each has its own key space and expiry policy."""

    ARTICLES = "articles"
    ARTICLE = "article"
    COMMENTS = "comments"
    TOPIC_SUMMARY = "topic_summary"
    WEATHER = "weather"
    CALENDAR = "calendar"
    SITEMAP = "sitemap"
    ARTICLE_SUMMARY = "article_summary"
    VIEW_COUNT = "view_count"


# Served by the durable SitemapCache, never by the in-memory store.
DURABLE_NAMESPACES = frozenset({Namespace.SITEMAP})

# Entries additionally expire when the ISO week changes.
WEEK_BOUND_NAMESPACES = frozenset({Namespace.CALENDAR})

DEFAULT_TTL = timedelta(minutes=5)
WEATHER_TTL = timedelta(minutes=30)
CALENDAR_TTL = timedelta(minutes=5)


def default_durations() -> dict[Namespace, timedelta]:
    """Fixed durations for every in-memory namespace."""
    durations = {
        ns: DEFAULT_TTL for ns in Namespace if ns not in DURABLE_NAMESPACES
    }
    durations[Namespace.WEATHER] = WEATHER_TTL
    durations[Namespace.CALENDAR] = CALENDAR_TTL
    return durations


def durations_from_settings(settings: Settings) -> dict[Namespace, timedelta]:
    """Durations with the configured overrides applied."""
    default = timedelta(seconds=settings.cache_ttl_default_seconds)
    durations = {ns: default for ns in Namespace if ns not in DURABLE_NAMESPACES}
    durations[Namespace.WEATHER] = timedelta(seconds=settings.cache_ttl_weather_seconds)
    durations[Namespace.CALENDAR] = timedelta(seconds=settings.cache_ttl_calendar_seconds)
    return durations
