"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from briefsnap.api.v1.dependencies.
"""

from fastapi import APIRouter

from briefsnap.api.v1.endpoints import (
    articles,
    cache,
    calendar,
    comments,
    health,
    sitemap,
    summaries,
    users,
    weather,
)

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(articles.router, prefix="/articles", tags=["articles"])
api_router.include_router(comments.router, prefix="/comments", tags=["comments"])
api_router.include_router(summaries.router, prefix="/summaries", tags=["summaries"])
api_router.include_router(weather.router, tags=["weather"])
api_router.include_router(calendar.router, prefix="/calendar", tags=["calendar"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(sitemap.router, prefix="/sitemap", tags=["sitemap"])
api_router.include_router(cache.router, prefix="/cache", tags=["cache"])
