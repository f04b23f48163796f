"""Article feed, detail, recommendations, view counts and sitemap."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import datetime
from xml.sax.saxutils import escape

from briefsnap.application.dtos.articles import ArticlePage, RelatedArticles
from briefsnap.application.fetching import CachedFetch, cached_fetch
from briefsnap.application.interfaces import IArticleRepository
from briefsnap.core.constants import (
    ARTICLES_PER_PAGE,
    POPULAR_VIEW_RATIO,
    RELATED_ARTICLES_LIMIT,
    RELATED_RECENT_CANDIDATES,
    SITEMAP_ARTICLE_LIMIT,
)
from briefsnap.domain.entities import Article, SitemapEntry
from briefsnap.domain.exceptions import (
    BriefSnapException,
    FetchFailedException,
    ResourceNotFoundException,
    ValidationException,
)
from briefsnap.infrastructure.cache import (
    CacheStore,
    Namespace,
    SitemapCache,
    article_slug_key,
    articles_query_key,
    sitemap_key,
    view_count_key,
)
from briefsnap.shared.telemetry import traced
from briefsnap.shared.utils.datetime import parse_iso_utc, to_iso, utc_now

logger = logging.getLogger(__name__)

# Static pages listed ahead of the articles on the sitemap
STATIC_SITEMAP_PATHS = ("", "/articles", "/sitemap")


def encode_cursor(article: Article) -> str | None:
    """Opaque token for "start after this article"; None if it has no timestamp."""
    if article.timestamp is None:
        return None
    raw = json.dumps({"t": to_iso(article.timestamp), "id": article.id}).encode()
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(token: str) -> tuple[datetime, str]:
    """Inverse of encode_cursor. Raises ValidationException for a malformed token."""
    try:
        data = json.loads(base64.urlsafe_b64decode(token.encode("ascii")))
        timestamp = parse_iso_utc(data["t"])
        doc_id = data["id"]
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError, AttributeError) as e:
        raise ValidationException("Invalid pagination cursor", field="cursor") from e
    if timestamp is None or not isinstance(doc_id, str) or not doc_id:
        raise ValidationException("Invalid pagination cursor", field="cursor")
    return timestamp, doc_id


class ArticleService:
    """Cache-first article reads.

    Only the first feed page is cached; a page requested with a cursor
    always goes to the database and never touches the cache.
    """

    def __init__(
        self,
        repo: IArticleRepository,
        store: CacheStore,
        sitemap_cache: SitemapCache | None = None,
    ) -> None:
        self._repo = repo
        self._store = store
        self._sitemap_cache = sitemap_cache

    @traced("articles.list")
    async def list_articles(
        self,
        topic: str | None = None,
        page_size: int = ARTICLES_PER_PAGE,
        cursor: str | None = None,
    ) -> ArticlePage:
        if page_size < 1:
            raise ValidationException("page_size must be >= 1", field="page_size")
        topic = topic.strip().lower() if topic and topic.strip() else None

        if cursor:
            after = decode_cursor(cursor)
            try:
                articles = await self._repo.list_page(topic, page_size, after)
            except BriefSnapException:
                raise
            except Exception as e:
                logger.exception("Failed to load more articles")
                raise FetchFailedException("Failed to load more articles", source="articles") from e
            return self._page(articles, page_size, from_cache=False)

        fetch = CachedFetch[list[Article]](
            self._store, Namespace.ARTICLES, articles_query_key(topic, page_size)
        )
        articles = await fetch.run(lambda: self._repo.list_page(topic, page_size))
        return self._page(articles, page_size, from_cache=fetch.from_cache)

    @staticmethod
    def _page(articles: list[Article], page_size: int, from_cache: bool) -> ArticlePage:
        has_more = len(articles) == page_size
        next_cursor = encode_cursor(articles[-1]) if has_more and articles else None
        return ArticlePage(
            articles=articles,
            has_more=has_more,
            next_cursor=next_cursor,
            from_cache=from_cache,
        )

    @traced("articles.get")
    async def get_article(self, slug: str) -> Article:
        """Return the article for a slug. A missing article is not cached.

        A slug that cannot form a cache key names no article: 404.
        """
        try:
            key = article_slug_key(slug)
        except ValidationException as e:
            raise ResourceNotFoundException("article", slug) from e

        async def load() -> Article:
            article = await self._repo.get_by_slug(slug)
            if article is None:
                raise ResourceNotFoundException("article", slug)
            return article

        return await cached_fetch(self._store, Namespace.ARTICLE, key, load)

    @traced("articles.related")
    async def related_articles(self, article: Article, signed_in: bool) -> RelatedArticles:
        """Pick up to three recommendations.

        Signed-in readers first get "popular" same-topic articles (viewed
        more than half as often as this one); the rest is filled with the
        newest same-topic or keyword-sharing articles.
        """
        if not article.topic:
            return RelatedArticles()
        picked: list[Article] = []
        recommendation_type = ""

        def take(candidates: list[Article]) -> None:
            seen = {a.id for a in picked}
            for candidate in candidates:
                if len(picked) >= RELATED_ARTICLES_LIMIT:
                    return
                if candidate.id != article.id and candidate.id not in seen:
                    picked.append(candidate)
                    seen.add(candidate.id)

        if signed_in:
            take(
                await self._repo.list_popular(
                    article.topic,
                    article.view_count * POPULAR_VIEW_RATIO,
                    RELATED_ARTICLES_LIMIT,
                )
            )
            if picked:
                recommendation_type = "popular"

        if len(picked) < RELATED_ARTICLES_LIMIT:
            take(
                await self._repo.list_recent(
                    article.topic, article.keywords, RELATED_RECENT_CANDIDATES
                )
            )
            if picked and not recommendation_type:
                recommendation_type = "recent"

        return RelatedArticles(articles=picked, recommendation_type=recommendation_type)

    async def get_view_count(self, article_id: str) -> int:
        async def load() -> int:
            count = await self._repo.get_view_count(article_id)
            if count is None:
                raise ResourceNotFoundException("article", article_id)
            return count

        return await cached_fetch(
            self._store, Namespace.VIEW_COUNT, view_count_key(article_id), load
        )

    async def record_view(self, article_id: str) -> None:
        """Count one view in the database; the cached count catches up on expiry."""
        await self._repo.increment_view_count(article_id)

    @traced("articles.sitemap")
    async def sitemap_listing(self) -> list[SitemapEntry]:
        """Slug/title/timestamp of every article, kept in the durable cache for an hour."""
        key = sitemap_key()
        if self._sitemap_cache is not None:
            cached = await self._sitemap_cache.get(key)
            if isinstance(cached, list):
                return [SitemapEntry.from_dict(item) for item in cached]
        try:
            entries = await self._repo.list_for_sitemap(SITEMAP_ARTICLE_LIMIT)
        except Exception as e:
            logger.exception("Failed to load sitemap articles")
            raise FetchFailedException("Failed to load sitemap", source="sitemap") from e
        if self._sitemap_cache is not None:
            await self._sitemap_cache.set(key, [entry.to_dict() for entry in entries])
        return entries

    async def sitemap_xml(self, base_url: str, now: datetime | None = None) -> str:
        """Render sitemap.xml: static pages plus one <url> per article."""
        base = base_url.rstrip("/")
        generated = to_iso(now or utc_now())
        pages: list[tuple[str, str | None]] = [(base + path, generated) for path in STATIC_SITEMAP_PATHS]
        pages += [
            (f"{base}/article/{entry.slug}", to_iso(entry.timestamp))
            for entry in await self.sitemap_listing()
        ]
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        ]
        for url, lastmod in pages:
            is_home = url == base
            lines.append("  <url>")
            lines.append(f"    <loc>{escape(url)}</loc>")
            if lastmod:
                lines.append(f"    <lastmod>{lastmod}</lastmod>")
            lines.append(f"    <changefreq>{'daily' if is_home else 'weekly'}</changefreq>")
            lines.append(f"    <priority>{'1.0' if is_home else '0.8'}</priority>")
            lines.append("  </url>")
        lines.append("</urlset>")
        return "\n".join(lines) + "\n"
