"""Firestore-backed summary repository (implements ISummaryRepository)."""

from __future__ import annotations

from briefsnap.domain.entities import ArticleSummary, NewsSummary, SummaryType
from briefsnap.infrastructure.firebase._rest_client import FirestoreRESTClient
from briefsnap.infrastructure.firebase.collections import (
    COLLECTION_ARTICLE_SUMMARIES,
    COLLECTION_NEWS_SUMMARIES,
    FIELD_TIMESTAMP,
)


class FirestoreSummaryRepository:
    """Reads daily briefings and per-article AI summaries."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._news = client.collection(COLLECTION_NEWS_SUMMARIES)
        self._articles = client.collection(COLLECTION_ARTICLE_SUMMARIES)

    async def latest_news_summary(self, topic: str | None) -> NewsSummary | None:
        """Return the newest `news_summaries` document (optionally for one topic)."""
        if topic:
            query = self._news.where("topic", "==", topic).order_by(FIELD_TIMESTAMP, "DESCENDING")
        else:
            query = self._news.order_by(FIELD_TIMESTAMP, "DESCENDING")
        async for snapshot in query.limit(1).stream():
            return NewsSummary.from_document(snapshot.id, snapshot.to_dict())
        return None

    async def get_article_summary(
        self, article_id: str, summary_type: SummaryType
    ) -> ArticleSummary | None:
        """Summaries are stored under the ID `<article_id>_<type>`."""
        doc = await self._articles.document(f"{article_id}_{summary_type.value}").get()
        if not doc:
            return None
        return ArticleSummary.from_document(doc.id, doc.to_dict())
