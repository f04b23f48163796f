"""Application services: data fetching behind the cache, edge-function logic."""

from briefsnap.application.services.article_service import (
    ArticleService,
    decode_cursor,
    encode_cursor,
)
from briefsnap.application.services.calendar_service import CalendarService
from briefsnap.application.services.comment_service import CommentService
from briefsnap.application.services.moderation_service import ModerationService
from briefsnap.application.services.preview_service import (
    PreviewResult,
    SocialPreviewService,
    is_crawler,
)
from briefsnap.application.services.rebuild_service import (
    RebuildOutcome,
    RebuildService,
)
from briefsnap.application.services.summary_service import SummaryService
from briefsnap.application.services.user_service import UserService
from briefsnap.application.services.weather_service import (
    DebouncedLocationSearch,
    LocationService,
    WeatherService,
)

__all__ = [
    "ArticleService",
    "CalendarService",
    "CommentService",
    "DebouncedLocationSearch",
    "LocationService",
    "ModerationService",
    "PreviewResult",
    "RebuildOutcome",
    "RebuildService",
    "SocialPreviewService",
    "SummaryService",
    "UserService",
    "WeatherService",
    "decode_cursor",
    "encode_cursor",
    "is_crawler",
]
