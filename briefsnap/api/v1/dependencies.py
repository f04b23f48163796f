"""Presentation-layer dependency injection (composition root).

Infrastructure built by the lifespan lives on app.state; everything here
reads it from there and assembles per-request repositories and services.
Routes depend only on these functions, never on infrastructure directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import httpx
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from briefsnap.application.services import (
    ArticleService,
    CalendarService,
    CommentService,
    LocationService,
    ModerationService,
    RebuildService,
    SocialPreviewService,
    SummaryService,
    UserService,
    WeatherService,
)
from briefsnap.core.config import Settings, get_settings
from briefsnap.core.limiter import SlidingWindowLimiter
from briefsnap.domain.exceptions import AuthenticationException, ServiceNotConfiguredException
from briefsnap.infrastructure.cache import CacheSession, CacheStore
from briefsnap.infrastructure.external import (
    AuthProxy,
    CallPolicies,
    GoogleCalendarGateway,
    OpenAIModerationClient,
    WeatherApiClient,
)
from briefsnap.infrastructure.firebase import AuthenticatedUser, FirebaseTokenVerifier
from briefsnap.infrastructure.firebase._rest_client import FirestoreRESTClient
from briefsnap.infrastructure.firebase.repositories import (
    FirestoreArticleRepository,
    FirestoreCommentRepository,
    FirestoreSummaryRepository,
    FirestoreUserRepository,
)
from briefsnap.infrastructure.services.preview_renderer import PreviewRenderer

_http_bearer = HTTPBearer(auto_error=False)

SettingsDep = Annotated[Settings, Depends(get_settings)]


# ---- Infrastructure on app.state ----


def get_cache_session(request: Request) -> CacheSession:
    return request.app.state.cache_session


def get_cache_store(
    session: Annotated[CacheSession, Depends(get_cache_session)],
) -> CacheStore:
    return session.store


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_call_policies(request: Request) -> CallPolicies:
    return request.app.state.call_policies


def get_firestore(request: Request) -> FirestoreRESTClient:
    """Firestore client; 503 when the service started without credentials."""
    client = getattr(request.app.state, "firestore", None)
    if client is None:
        raise ServiceNotConfiguredException("Document database")
    return client


def get_moderation_limiter(request: Request) -> SlidingWindowLimiter:
    return request.app.state.moderation_limiter


def get_rebuild_service(request: Request) -> RebuildService:
    return request.app.state.rebuild_service


FirestoreDep = Annotated[FirestoreRESTClient, Depends(get_firestore)]
HttpDep = Annotated[httpx.AsyncClient, Depends(get_http_client)]
PoliciesDep = Annotated[CallPolicies, Depends(get_call_policies)]
SessionDep = Annotated[CacheSession, Depends(get_cache_session)]
StoreDep = Annotated[CacheStore, Depends(get_cache_store)]


# ---- Authentication ----


async def get_current_user_optional(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> AuthenticatedUser | None:
    """Signed-in user from a Firebase ID token if present; None when anonymous.

    A token that is present but invalid is rejected (401), not ignored.
    """
    if not credentials:
        return None
    verifier: FirebaseTokenVerifier | None = getattr(request.app.state, "token_verifier", None)
    if verifier is None:
        raise ServiceNotConfiguredException("Authentication")
    return await verifier.verify(credentials.credentials)


async def get_current_user(
    current_user: Annotated[AuthenticatedUser | None, Depends(get_current_user_optional)],
) -> AuthenticatedUser:
    """Signed-in user; raise 401 if no token was sent."""
    if current_user is None:
        raise AuthenticationException("Not authenticated")
    return current_user


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
OptionalUser = Annotated[AuthenticatedUser | None, Depends(get_current_user_optional)]


# ---- Repositories ----


def get_article_repo(client: FirestoreDep) -> FirestoreArticleRepository:
    return FirestoreArticleRepository(client)


def get_comment_repo(client: FirestoreDep) -> FirestoreCommentRepository:
    return FirestoreCommentRepository(client)


def get_summary_repo(client: FirestoreDep) -> FirestoreSummaryRepository:
    return FirestoreSummaryRepository(client)


def get_user_repo(client: FirestoreDep) -> FirestoreUserRepository:
    return FirestoreUserRepository(client)


# ---- Services ----


def get_article_service(
    repo: Annotated[FirestoreArticleRepository, Depends(get_article_repo)],
    session: SessionDep,
) -> ArticleService:
    """Article feed, detail, related, views and sitemap (composition root)."""
    return ArticleService(repo, session.store, session.sitemap)


def get_comment_service(
    repo: Annotated[FirestoreCommentRepository, Depends(get_comment_repo)],
    store: StoreDep,
) -> CommentService:
    return CommentService(repo, store)


def get_summary_service(
    repo: Annotated[FirestoreSummaryRepository, Depends(get_summary_repo)],
    store: StoreDep,
) -> SummaryService:
    return SummaryService(repo, store)


def get_user_service(
    repo: Annotated[FirestoreUserRepository, Depends(get_user_repo)],
) -> UserService:
    return UserService(repo)


def get_weather_client(
    http: HttpDep, policies: PoliciesDep, settings: SettingsDep
) -> WeatherApiClient:
    return WeatherApiClient(http, settings, policies.geocoding, policies.weather)


def get_weather_service(
    client: Annotated[WeatherApiClient, Depends(get_weather_client)],
    store: StoreDep,
    settings: SettingsDep,
) -> WeatherService:
    """Weather lookups; 503 without a forecast API key."""
    if settings.tomorrow_io_api_key is None:
        raise ServiceNotConfiguredException("Weather service")
    return WeatherService(client, store)


def get_location_service(
    client: Annotated[WeatherApiClient, Depends(get_weather_client)],
) -> LocationService:
    return LocationService(client)


def get_calendar_service(
    repo: Annotated[FirestoreUserRepository, Depends(get_user_repo)],
    store: StoreDep,
    policies: PoliciesDep,
    settings: SettingsDep,
) -> CalendarService:
    return CalendarService(GoogleCalendarGateway(settings, policies.calendar), repo, store)


def get_moderation_service(
    comments: Annotated[FirestoreCommentRepository, Depends(get_comment_repo)],
    limiter: Annotated[SlidingWindowLimiter, Depends(get_moderation_limiter)],
    http: HttpDep,
    policies: PoliciesDep,
    settings: SettingsDep,
) -> ModerationService:
    """Comment moderation pipeline; 503 without a moderation API key."""
    if settings.openai_api_key is None:
        raise ServiceNotConfiguredException("Content moderation")
    client = OpenAIModerationClient(
        http, settings.openai_api_key.get_secret_value(), policies.moderation, settings.moderation_url
    )
    return ModerationService(client, comments, limiter, policies.comment_write)


def get_preview_renderer(settings: SettingsDep) -> PreviewRenderer:
    return PreviewRenderer(settings.site_base_url, settings.site_name, settings.twitter_handle)


def get_preview_service(
    articles: Annotated[ArticleService, Depends(get_article_service)],
    renderer: Annotated[PreviewRenderer, Depends(get_preview_renderer)],
    settings: SettingsDep,
) -> SocialPreviewService:
    return SocialPreviewService(articles, renderer, settings.static_root)


def get_auth_proxy(http: HttpDep, policies: PoliciesDep, settings: SettingsDep) -> AuthProxy:
    return AuthProxy(http, settings.firebase_auth_domain, policies.auth_proxy)


def get_static_root(settings: SettingsDep) -> Path:
    return Path(settings.static_root)
