"""ArticleService: cache-first feed, cursor pages, recommendations and sitemap."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from briefsnap.application.services import ArticleService, decode_cursor, encode_cursor
from briefsnap.domain.entities import SitemapEntry
from briefsnap.domain.exceptions import (
    FetchFailedException,
    ResourceNotFoundException,
    ValidationException,
)
from briefsnap.infrastructure.cache import Namespace, view_count_key


@pytest.fixture
def article_repo():
    repo = AsyncMock()
    repo.list_page = AsyncMock(return_value=[])
    repo.list_popular = AsyncMock(return_value=[])
    repo.list_recent = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def service(article_repo, store):
    return ArticleService(article_repo, store)


def test_cursor_round_trip(article_factory) -> None:
    article = article_factory(id="a9")
    assert decode_cursor(encode_cursor(article)) == (article.timestamp, "a9")
    assert encode_cursor(article_factory(timestamp=None)) is None


@pytest.mark.parametrize("token", ["not-base64!!", "e30=", "eyJ0IjogMX0="])
def test_malformed_cursor_is_validation_error(token) -> None:
    with pytest.raises(ValidationException):
        decode_cursor(token)


async def test_first_page_is_cached(service, article_repo, article_factory) -> None:
    article_repo.list_page.return_value = [article_factory(id=f"a{i}") for i in range(2)]
    first = await service.list_articles(topic=" Business ", page_size=2)
    second = await service.list_articles(topic="business", page_size=2)
    assert first.from_cache is False
    assert second.from_cache is True
    assert second.has_more is True
    assert second.next_cursor is not None
    article_repo.list_page.assert_awaited_once_with("business", 2)


async def test_short_page_has_no_more(service, article_repo, article_factory) -> None:
    article_repo.list_page.return_value = [article_factory()]
    page = await service.list_articles(page_size=10)
    assert page.has_more is False
    assert page.next_cursor is None


async def test_cursor_page_bypasses_cache(service, article_repo, article_factory, store) -> None:
    cursor = encode_cursor(article_factory(id="last"))
    article_repo.list_page.return_value = [article_factory(id="next")]
    page = await service.list_articles(page_size=10, cursor=cursor)
    assert [a.id for a in page.articles] == ["next"]
    assert len(store) == 0
    _, _, after = article_repo.list_page.await_args.args
    assert after[1] == "last"


async def test_cursor_page_failure_is_fetch_failed(service, article_repo, article_factory) -> None:
    article_repo.list_page.side_effect = ConnectionError("down")
    with pytest.raises(FetchFailedException):
        await service.list_articles(cursor=encode_cursor(article_factory()))


async def test_invalid_page_size(service) -> None:
    with pytest.raises(ValidationException):
        await service.list_articles(page_size=0)


async def test_missing_article_is_not_cached(service, article_repo, article_factory, store) -> None:
    article_repo.get_by_slug = AsyncMock(return_value=None)
    with pytest.raises(ResourceNotFoundException):
        await service.get_article("nope")
    assert len(store) == 0
    article_repo.get_by_slug.return_value = article_factory(slug="nope")
    assert (await service.get_article("nope")).slug == "nope"


async def test_related_popular_then_recent(service, article_repo, article_factory) -> None:
    current = article_factory(id="cur", view_count=10)
    article_repo.list_popular.return_value = [article_factory(id="p1"), current]
    article_repo.list_recent.return_value = [
        article_factory(id="p1"),
        article_factory(id="r1"),
        article_factory(id="r2"),
    ]
    related = await service.related_articles(current, signed_in=True)
    assert [a.id for a in related.articles] == ["p1", "r1", "r2"]
    assert related.recommendation_type == "popular"
    article_repo.list_popular.assert_awaited_once_with("business", 5.0, 3)


async def test_related_anonymous_uses_recent_only(service, article_repo, article_factory) -> None:
    article_repo.list_recent.return_value = [article_factory(id="r1")]
    related = await service.related_articles(article_factory(id="cur"), signed_in=False)
    assert related.recommendation_type == "recent"
    article_repo.list_popular.assert_not_called()


async def test_related_without_topic_is_empty(service, article_factory) -> None:
    related = await service.related_articles(article_factory(topic=""), signed_in=True)
    assert related.articles == []
    assert related.recommendation_type == ""


async def test_record_view_does_not_touch_cached_count(service, article_repo, store) -> None:
    article_repo.get_view_count = AsyncMock(return_value=7)
    assert await service.get_view_count("a1") == 7
    await service.record_view("a1")
    article_repo.increment_view_count.assert_awaited_once_with("a1")
    assert await service.get_view_count("a1") == 7
    assert article_repo.get_view_count.await_count == 1
    assert store.get(Namespace.VIEW_COUNT, view_count_key("a1")) == 7


async def test_sitemap_xml(service, article_repo) -> None:
    article_repo.list_for_sitemap = AsyncMock(
        return_value=[
            SitemapEntry(slug="a&b", title="T", timestamp=datetime(2025, 3, 1, tzinfo=UTC)),
        ]
    )
    xml = await service.sitemap_xml("https://briefsnap.com/", now=datetime(2025, 3, 5, tzinfo=UTC))
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<loc>https://briefsnap.com</loc>" in xml
    assert "<priority>1.0</priority>" in xml
    assert "<loc>https://briefsnap.com/article/a&amp;b</loc>" in xml
    assert "<lastmod>2025-03-01T00:00:00+00:00</lastmod>" in xml
    assert xml.count("<url>") == 4


class FakeSitemapCache:
    def __init__(self):
        self.data = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ttl=None):
        self.data[key] = value
        return True


async def test_sitemap_listing_uses_durable_cache(article_repo, store) -> None:
    durable = FakeSitemapCache()
    article_repo.list_for_sitemap = AsyncMock(return_value=[SitemapEntry(slug="s1", title="One")])
    service = ArticleService(article_repo, store, durable)
    assert [e.slug for e in await service.sitemap_listing()] == ["s1"]
    assert [e.slug for e in await service.sitemap_listing()] == ["s1"]
    article_repo.list_for_sitemap.assert_awaited_once()
    assert len(durable.data) == 1


async def test_sitemap_listing_failure(service, article_repo) -> None:
    article_repo.list_for_sitemap = AsyncMock(side_effect=RuntimeError("boom"))
    with pytest.raises(FetchFailedException):
        await service.sitemap_listing()
