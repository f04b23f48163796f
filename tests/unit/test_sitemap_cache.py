"""SitemapCache: JSON round trip, TTL, and Redis outages treated as misses."""

import redis.asyncio as redis

from briefsnap.infrastructure.cache import CacheSession, CacheStore, SitemapCache, sitemap_key


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the sitemap cache."""

    def __init__(self, fail: bool = False) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail = fail
        self.closed = False

    async def get(self, key):
        if self.fail:
            raise redis.ResponseError("boom")
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        if self.fail:
            raise redis.ResponseError("boom")
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key):
        self.data.pop(key, None)

    async def aclose(self):
        self.closed = True


async def test_set_then_get(settings) -> None:
    fake = FakeRedis()
    cache = SitemapCache(fake, settings)
    assert await cache.set(sitemap_key(), [{"slug": "s1"}]) is True
    assert await cache.get(sitemap_key()) == [{"slug": "s1"}]
    assert fake.ttls[sitemap_key()] == 3600


async def test_unavailable_cache_is_a_miss(settings) -> None:
    cache = SitemapCache(None, settings)
    assert cache.is_available() is False
    assert await cache.get(sitemap_key()) is None
    assert await cache.set(sitemap_key(), []) is False


async def test_redis_errors_do_not_raise(settings) -> None:
    cache = SitemapCache(FakeRedis(fail=True), settings)
    assert await cache.get(sitemap_key()) is None
    assert await cache.set(sitemap_key(), []) is False


async def test_session_clear_drops_durable_listing(settings, store: CacheStore) -> None:
    fake = FakeRedis()
    cache = SitemapCache(fake, settings)
    await cache.set(sitemap_key(), [])
    session = CacheSession(store, cache)
    await session.clear()
    assert sitemap_key() not in fake.data
    await session.close()
    assert fake.closed is True
