"""Tests for the cache-first fetch protocol."""

import pytest

from briefsnap.application.fetching import CachedFetch, FetchState, cached_fetch
from briefsnap.domain.exceptions import FetchFailedException, ResourceNotFoundException
from briefsnap.infrastructure.cache import CacheStore, Namespace


async def test_miss_loads_stores_and_succeeds(store: CacheStore) -> None:
    calls = []

    async def loader():
        calls.append(1)
        return ["comment"]

    fetch = CachedFetch(store, Namespace.COMMENTS, "a1")
    assert fetch.state is FetchState.IDLE
    assert await fetch.run(loader) == ["comment"]
    assert fetch.state is FetchState.SUCCESS
    assert fetch.from_cache is False
    assert calls == [1]
    assert store.get(Namespace.COMMENTS, "a1") == ["comment"]


async def test_hit_skips_loader_and_loading_state(store: CacheStore) -> None:
    store.put(Namespace.COMMENTS, "a1", ["cached"])
    states = []
    fetch = CachedFetch(store, Namespace.COMMENTS, "a1")

    async def loader():
        states.append(fetch.state)
        return ["fresh"]

    assert await fetch.run(loader) == ["cached"]
    assert fetch.from_cache is True
    assert fetch.state is FetchState.SUCCESS
    assert states == []


async def test_loader_runs_in_loading_state(store: CacheStore) -> None:
    fetch = CachedFetch(store, Namespace.ARTICLE, "s")
    seen = []

    async def loader():
        seen.append(fetch.state)
        return 1

    await fetch.run(loader)
    assert seen == [FetchState.LOADING]


async def test_domain_error_is_reraised_and_not_cached(store: CacheStore) -> None:
    async def loader():
        raise ResourceNotFoundException("article", "missing")

    fetch = CachedFetch(store, Namespace.ARTICLE, "missing")
    with pytest.raises(ResourceNotFoundException):
        await fetch.run(loader)
    assert fetch.state is FetchState.ERROR
    assert isinstance(fetch.error, ResourceNotFoundException)
    assert store.get(Namespace.ARTICLE, "missing") is None


async def test_unexpected_error_is_wrapped(store: CacheStore) -> None:
    async def loader():
        raise ConnectionError("reset")

    fetch = CachedFetch(store, Namespace.COMMENTS, "a1")
    with pytest.raises(FetchFailedException) as exc_info:
        await fetch.run(loader)
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert fetch.error is exc_info.value
    assert len(store) == 0


async def test_run_twice_raises(store: CacheStore) -> None:
    async def loader():
        return 1

    fetch = CachedFetch(store, Namespace.ARTICLE, "s")
    await fetch.run(loader)
    with pytest.raises(RuntimeError):
        await fetch.run(loader)


async def test_cache_if_false_skips_store(store: CacheStore) -> None:
    async def loader():
        return {"enabled": False}

    fetch = CachedFetch(store, Namespace.CALENDAR, "u1")
    assert await fetch.run(loader, cache_if=lambda v: v["enabled"]) == {"enabled": False}
    assert fetch.state is FetchState.SUCCESS
    assert store.get(Namespace.CALENDAR, "u1") is None


async def test_cached_fetch_helper(store: CacheStore) -> None:
    async def loader():
        return 42

    assert await cached_fetch(store, "view_count", "a1", loader) == 42
    assert store.get(Namespace.VIEW_COUNT, "a1") == 42
