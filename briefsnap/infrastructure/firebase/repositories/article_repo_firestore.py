"""Firestore-backed article repository (implements IArticleRepository)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from briefsnap.domain.entities import Article, SitemapEntry
from briefsnap.domain.exceptions import DecodeError
from briefsnap.infrastructure.firebase._rest_client import FirestoreRESTClient, _Query
from briefsnap.infrastructure.firebase.collections import (
    COLLECTION_ARTICLES,
    FIELD_DOCUMENT_NAME,
    FIELD_TIMESTAMP,
    FIELD_VIEW_COUNT,
)

logger = logging.getLogger(__name__)

# array-contains-any accepts at most this many values
_MAX_KEYWORDS = 30
_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


class FirestoreArticleRepository:
    """Article queries against the `articles` collection."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_ARTICLES)

    async def _fetch(self, query: _Query) -> list[Article]:
        return [Article.from_document(s.id, s.to_dict()) async for s in query.stream()]

    async def list_page(
        self,
        topic: str | None,
        page_size: int,
        after: tuple[datetime, str] | None = None,
    ) -> list[Article]:
        """Return one feed page, newest first; `after` is the last (timestamp, id) seen."""
        if topic:
            query = self._coll.where("topic", "==", topic).order_by(FIELD_TIMESTAMP, "DESCENDING")
        else:
            query = self._coll.order_by(FIELD_TIMESTAMP, "DESCENDING")
        query = query.order_by(FIELD_DOCUMENT_NAME, "DESCENDING").limit(page_size)
        if after is not None:
            timestamp, doc_id = after
            query = query.start_after(timestamp, self._coll.reference(doc_id))
        return await self._fetch(query)

    async def get_by_slug(self, slug: str) -> Article | None:
        async for snapshot in self._coll.where("slug", "==", slug).limit(1).stream():
            return Article.from_document(snapshot.id, snapshot.to_dict())
        return None

    async def list_popular(self, topic: str, min_view_count: float, limit: int) -> list[Article]:
        query = (
            self._coll.where("topic", "==", topic)
            .where(FIELD_VIEW_COUNT, ">", min_view_count)
            .order_by(FIELD_VIEW_COUNT, "DESCENDING")
            .limit(limit)
        )
        return await self._fetch(query)

    async def list_recent(self, topic: str, keywords: list[str], limit: int) -> list[Article]:
        """Same-topic articles, plus keyword matches when keywords are given; newest first."""
        by_topic = self._coll.where("topic", "==", topic).order_by(FIELD_TIMESTAMP, "DESCENDING").limit(limit)
        found = {a.id: a for a in await self._fetch(by_topic)}
        if keywords:
            by_keyword = (
                self._coll.where("keywords", "array-contains-any", keywords[:_MAX_KEYWORDS])
                .order_by(FIELD_TIMESTAMP, "DESCENDING")
                .limit(limit)
            )
            for article in await self._fetch(by_keyword):
                found.setdefault(article.id, article)
        ordered = sorted(
            found.values(),
            key=lambda a: (a.timestamp is not None, a.timestamp or _EPOCH),
            reverse=True,
        )
        return ordered[:limit]

    async def list_for_sitemap(self, limit: int) -> list[SitemapEntry]:
        entries: list[SitemapEntry] = []
        query = self._coll.order_by(FIELD_TIMESTAMP, "DESCENDING").limit(limit)
        async for snapshot in query.stream():
            data = snapshot.to_dict()
            if not data.get("slug"):
                logger.warning("Skipping article %s without slug in sitemap", snapshot.id)
                continue
            entries.append(SitemapEntry.from_document(snapshot.id, data))
        return entries

    async def list_with_slugs(self, limit: int) -> list[Article]:
        """Newest articles first; documents without a slug are skipped with a warning."""
        articles: list[Article] = []
        query = self._coll.order_by(FIELD_TIMESTAMP, "DESCENDING").limit(limit)
        async for snapshot in query.stream():
            data = snapshot.to_dict()
            if not data.get("slug"):
                logger.warning("Skipping article %s without slug", snapshot.id)
                continue
            articles.append(Article.from_document(snapshot.id, data))
        return articles

    async def get_view_count(self, article_id: str) -> int | None:
        doc = await self._coll.document(article_id).get()
        if not doc:
            return None
        count = doc.to_dict().get(FIELD_VIEW_COUNT) or 0
        if isinstance(count, bool) or not isinstance(count, (int, float)):
            raise DecodeError("article", article_id, f"'{FIELD_VIEW_COUNT}' must be a number")
        return int(count)

    async def increment_view_count(self, article_id: str) -> None:
        await self._coll.document(article_id).increment(FIELD_VIEW_COUNT, 1)
