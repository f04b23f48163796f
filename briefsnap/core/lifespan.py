"""Application lifespan: startup and shutdown.

Single place for infrastructure wiring: shared HTTP client, call policies,
Firestore client, caches, the per-user moderation limiter, the rebuild
webhook debouncer and telemetry. Everything lives on app.state; dependencies
read it from there.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from briefsnap.application.services.rebuild_service import RebuildService
from briefsnap.core.config import get_settings
from briefsnap.core.limiter import SlidingWindowLimiter
from briefsnap.infrastructure.cache import CacheSession, CacheStore, SitemapCache
from briefsnap.infrastructure.cache.namespaces import durations_from_settings
from briefsnap.infrastructure.external import CallPolicies, CloudflarePagesTrigger
from briefsnap.infrastructure.firebase import (
    FirebaseTokenVerifier,
    close_firebase,
    init_firebase,
)
from briefsnap.shared.telemetry import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, telemetry (if enabled), HTTP client, Firestore,
    sitemap cache (if Redis is enabled), cache session, edge-function state.
    Shutdown order: pending rebuild cancelled, cache session closed, Firestore
    and HTTP client closed, telemetry shutdown.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    if settings.telemetry_enabled:
        from briefsnap.shared.telemetry.telemetry import setup_telemetry

        setup_telemetry(app, settings)

    # Shared client for every outbound call (connection reuse); per-call
    # timeouts come from the CallPolicies.
    app.state.http_client = httpx.AsyncClient(timeout=settings.external_timeout_seconds)
    app.state.call_policies = CallPolicies.from_settings(settings)

    firestore = init_firebase(settings, http_client=app.state.http_client)
    app.state.firestore = firestore
    app.state.token_verifier = (
        FirebaseTokenVerifier(firestore.project_id) if firestore is not None else None
    )

    sitemap_cache: SitemapCache | None = None
    if settings.redis_enabled:
        sitemap_cache = SitemapCache(settings=settings)
        await sitemap_cache.connect()
    app.state.cache_session = CacheSession(
        CacheStore(durations_from_settings(settings)), sitemap_cache
    )

    app.state.moderation_limiter = SlidingWindowLimiter(
        settings.moderation_rate_limit, settings.moderation_rate_window_seconds
    )
    app.state.rebuild_service = RebuildService(
        CloudflarePagesTrigger(app.state.http_client, settings, app.state.call_policies.deploy),
        settings.webhook_secret.get_secret_value() if settings.webhook_secret else None,
        debounce_seconds=settings.rebuild_debounce_seconds,
    )
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    app.state.rebuild_service.cancel_pending()

    await app.state.cache_session.close()
    logger.info("Cache session closed")

    await close_firebase(app.state.firestore)
    app.state.firestore = None

    await app.state.http_client.aclose()
    logger.info("Shared HTTP client closed")

    if settings.telemetry_enabled:
        from briefsnap.shared.telemetry.telemetry import shutdown_telemetry

        shutdown_telemetry()
