"""Daily news briefing and per-article AI summaries."""

from __future__ import annotations

import logging

from briefsnap.application.fetching import CachedFetch, cached_fetch
from briefsnap.application.interfaces import ISummaryRepository
from briefsnap.core.constants import NO_SUMMARY_MESSAGE
from briefsnap.domain.entities import ArticleSummary, NewsSummary, SummaryType
from briefsnap.domain.exceptions import ResourceNotFoundException, ValidationException
from briefsnap.infrastructure.cache import (
    CacheStore,
    Namespace,
    article_summary_key,
    topic_summary_key,
)
from briefsnap.shared.telemetry import traced

logger = logging.getLogger(__name__)


class SummaryService:
    def __init__(self, repo: ISummaryRepository, store: CacheStore) -> None:
        self._repo = repo
        self._store = store

    @traced("summaries.topic")
    async def topic_summary(self, topic: str | None = None) -> NewsSummary:
        """Latest briefing, overall or for one topic.

        With no briefing stored, a placeholder is returned and not cached, so
        the next request checks the database again.
        """
        topic = topic.strip().lower() if topic and topic.strip() else None
        fetch = CachedFetch[NewsSummary](self._store, Namespace.TOPIC_SUMMARY, topic_summary_key(topic))
        return await fetch.run(
            lambda: self._latest_or_placeholder(topic),
            cache_if=lambda summary: bool(summary.id),
        )

    async def _latest_or_placeholder(self, topic: str | None) -> NewsSummary:
        summary = await self._repo.latest_news_summary(topic)
        if summary is None:
            logger.info("No news summaries found (topic=%s)", topic or "latest")
            return NewsSummary(id="", summary=NO_SUMMARY_MESSAGE, topic=topic or "")
        return summary

    @traced("summaries.article")
    async def article_summary(self, article_id: str, summary_type: str | SummaryType) -> ArticleSummary:
        try:
            kind = SummaryType(summary_type)
        except ValueError as e:
            allowed = ", ".join(t.value for t in SummaryType)
            raise ValidationException(
                f"Unknown summary type {summary_type!r}; expected one of: {allowed}",
                field="summary_type",
            ) from e

        async def load() -> ArticleSummary:
            summary = await self._repo.get_article_summary(article_id, kind)
            if summary is None:
                raise ResourceNotFoundException("article_summary", f"{article_id}_{kind.value}")
            return summary

        return await cached_fetch(
            self._store, Namespace.ARTICLE_SUMMARY, article_summary_key(article_id, kind.value), load
        )
