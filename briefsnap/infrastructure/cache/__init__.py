"""Cache: in-memory namespaced store, durable sitemap cache, key builders.

CacheStore answers "fresh value for key K?" per namespace; SitemapCache
persists the sitemap listing in Redis; CacheSession owns both.
"""

from briefsnap.infrastructure.cache.durable_cache import SitemapCache
from briefsnap.infrastructure.cache.keys import (
    article_slug_key,
    article_summary_key,
    articles_query_key,
    calendar_key,
    comments_key,
    sitemap_key,
    topic_summary_key,
    view_count_key,
    weather_key,
)
from briefsnap.infrastructure.cache.memory_cache import CacheEntry, CacheStore
from briefsnap.infrastructure.cache.namespaces import Namespace
from briefsnap.infrastructure.cache.session import CacheSession

__all__ = [
    "CacheEntry",
    "CacheSession",
    "CacheStore",
    "Namespace",
    "SitemapCache",
    "article_slug_key",
    "article_summary_key",
    "articles_query_key",
    "calendar_key",
    "comments_key",
    "sitemap_key",
    "topic_summary_key",
    "view_count_key",
    "weather_key",
]
