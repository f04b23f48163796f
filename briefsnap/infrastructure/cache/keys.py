"""Cache key builders. Single place for key format.

Key components (slugs, article IDs, topics, locations) come from request
input and must not contain CACHE_KEY_SEP; a bad component is a
ValidationException (400), not a server error.
"""

from briefsnap.core.constants import CACHE_KEY_SEP
from briefsnap.domain.exceptions import ValidationException
from briefsnap.infrastructure.cache.namespaces import Namespace


def _validate_key_component(value: str, name: str) -> None:
    if not value:
        raise ValidationException(f"{name} must not be empty", field=name)
    if CACHE_KEY_SEP in value:
        raise ValidationException(f"{name} must not contain {CACHE_KEY_SEP!r}", field=name)


def _key(namespace: Namespace, discriminator: str) -> str:
    return f"{namespace.value}{CACHE_KEY_SEP}{discriminator}"


def articles_query_key(topic: str | None, page_size: int) -> str:
    """Cache key for the first page of the article feed (optionally by topic)."""
    topic_part = topic.strip().lower() if topic else "all"
    _validate_key_component(topic_part, "topic")
    return _key(Namespace.ARTICLES, f"topic={topic_part}{CACHE_KEY_SEP}limit={page_size}")


def article_slug_key(slug: str) -> str:
    """Cache key for a single article by slug."""
    _validate_key_component(slug, "slug")
    return _key(Namespace.ARTICLE, slug)


def comments_key(article_id: str) -> str:
    """Cache key for the comment list of an article."""
    _validate_key_component(article_id, "article_id")
    return _key(Namespace.COMMENTS, article_id)


def topic_summary_key(topic: str | None) -> str:
    """Cache key for the latest news summary (overall or for one topic)."""
    topic_part = topic.strip().lower() if topic else "latest"
    _validate_key_component(topic_part, "topic")
    return _key(Namespace.TOPIC_SUMMARY, topic_part)


def weather_key(location: str) -> str:
    """Cache key for weather at a location (name normalized to lower case)."""
    normalized = location.strip().lower()
    _validate_key_component(normalized, "location")
    return _key(Namespace.WEATHER, normalized)


def calendar_key(user_id: str) -> str:
    """Cache key for a user's current-week calendar events."""
    _validate_key_component(user_id, "user_id")
    return _key(Namespace.CALENDAR, user_id)


def sitemap_key() -> str:
    """Cache key for the sitemap article listing (durable store)."""
    return _key(Namespace.SITEMAP, "articles")


def article_summary_key(article_id: str, summary_type: str) -> str:
    """Cache key for an article's AI summary of one content type."""
    _validate_key_component(article_id, "article_id")
    _validate_key_component(summary_type, "summary_type")
    return _key(Namespace.ARTICLE_SUMMARY, f"{article_id}_{summary_type}")


def view_count_key(article_id: str) -> str:
    """Cache key for an article's view count."""
    _validate_key_component(article_id, "article_id")
    return _key(Namespace.VIEW_COUNT, article_id)
