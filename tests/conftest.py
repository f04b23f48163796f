"""Pytest configuration and fixtures for briefsnap.

HTTP tests run against create_app() through httpx ASGITransport. The
transport does not run the lifespan, so the `app` fixture puts test
doubles on app.state (no Firestore, no Redis, no network) and tests
override service dependencies where they need data.
"""

from collections.abc import AsyncIterator, Callable, Iterator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from briefsnap.application.services import RebuildService
from briefsnap.core.config import Settings, get_settings
from briefsnap.core.limiter import SlidingWindowLimiter, limiter
from briefsnap.domain.entities import Article
from briefsnap.infrastructure.cache import CacheSession, CacheStore
from briefsnap.infrastructure.external import CallPolicies

WEBHOOK_SECRET = "test-webhook-secret"


class FakeClock:
    """Settable UTC clock for TTL tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 3, 5, 12, 0, tzinfo=UTC)  # a Wednesday

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class FakeTrigger:
    """Deployment trigger that records calls."""

    def __init__(self, result: bool = True) -> None:
        self.result = result
        self.calls = 0

    async def trigger(self) -> bool:
        self.calls += 1
        return self.result


def make_article(**overrides) -> Article:
    fields = {
        "id": "a1",
        "slug": "abc-slug",
        "title": "Markets rally",
        "description": "Stocks rose on Tuesday.",
        "content": "Full text",
        "img_url": "https://img.example/a1.jpg",
        "topic": "business",
        "keywords": ["markets", "stocks"],
        "timestamp": datetime(2025, 3, 4, 9, 5, tzinfo=UTC),
        "view_count": 10,
    }
    fields.update(overrides)
    return Article(**fields)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> CacheStore:
    """In-memory cache driven by the fake clock (default durations)."""
    return CacheStore(clock=clock)


@pytest.fixture
def article_factory() -> Callable[..., Article]:
    return make_article


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[Settings]:
    """Settings for HTTP tests: no Redis, no credentials, static files under tmp_path."""
    monkeypatch.setenv("REDIS_ENABLED", "false")
    monkeypatch.setenv("TELEMETRY_ENABLED", "false")
    monkeypatch.setenv("WEBHOOK_SECRET", WEBHOOK_SECRET)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("STATIC_ROOT", str(tmp_path))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def deploy_trigger() -> FakeTrigger:
    return FakeTrigger()


@pytest.fixture
async def app(settings: Settings, deploy_trigger: FakeTrigger) -> AsyncIterator[FastAPI]:
    """Application with lifespan state replaced by test doubles."""
    from briefsnap.main import create_app

    application = create_app()
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(599))
    )
    application.state.http_client = http_client
    application.state.call_policies = CallPolicies.from_settings(settings)
    application.state.firestore = None
    application.state.token_verifier = None
    application.state.cache_session = CacheSession(CacheStore(), None)
    application.state.moderation_limiter = SlidingWindowLimiter(
        settings.moderation_rate_limit, settings.moderation_rate_window_seconds
    )
    application.state.rebuild_service = RebuildService(deploy_trigger, WEBHOOK_SECRET)
    limiter.reset()
    yield application
    await http_client.aclose()


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
