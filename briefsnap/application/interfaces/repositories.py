"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain records or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from briefsnap.domain.entities import (
        Article,
        ArticleSummary,
        Comment,
        NewsSummary,
        ReadingHistoryItem,
        SitemapEntry,
        SummaryType,
        UserPreferences,
    )


class IArticleRepository(Protocol):
    """Protocol for the `articles` collection."""

    async def list_page(
        self,
        topic: str | None,
        page_size: int,
        after: tuple[datetime, str] | None = None,
    ) -> list[Article]:
        """Return articles by timestamp desc, starting after (timestamp, id) when given."""

    async def get_by_slug(self, slug: str) -> Article | None:
        """Return the article with this slug, or None."""

    async def list_popular(self, topic: str, min_view_count: float, limit: int) -> list[Article]:
        """Return same-topic articles with viewCount > min_view_count, most viewed first."""

    async def list_recent(self, topic: str, keywords: list[str], limit: int) -> list[Article]:
        """Return same-topic (or keyword-sharing) articles, newest first."""

    async def list_for_sitemap(self, limit: int) -> list[SitemapEntry]:
        """Return slug/title/timestamp for up to `limit` newest articles."""

    async def list_with_slugs(self, limit: int) -> list[Article]:
        """Return up to `limit` newest articles that have a slug."""

    async def get_view_count(self, article_id: str) -> int | None:
        """Return the stored view count, or None if the article does not exist."""

    async def increment_view_count(self, article_id: str) -> None:
        """Atomically add one view."""


class ICommentRepository(Protocol):
    """Protocol for the `comments` collection."""

    async def list_for_article(self, article_id: str) -> list[Comment]:
        """Return comments on an article, newest first."""

    async def add(self, data: dict[str, Any]) -> str:
        """Write a comment document; return its generated ID."""


class ISummaryRepository(Protocol):
    """Protocol for `news_summaries` and `article_summaries`."""

    async def latest_news_summary(self, topic: str | None) -> NewsSummary | None:
        """Return the newest briefing (optionally for one topic), or None."""

    async def get_article_summary(
        self, article_id: str, summary_type: SummaryType
    ) -> ArticleSummary | None:
        """Return an article's summary of the given type, or None."""


class IUserRepository(Protocol):
    """Protocol for `users` and `reading_history`."""

    async def get_preferences(self, user_id: str) -> UserPreferences:
        """Return stored preferences merged over defaults."""

    async def save_preferences(self, user_id: str, preferences: UserPreferences) -> None:
        """Merge-write the preferences map onto the user document."""

    async def get_calendar_token(self, user_id: str) -> dict[str, Any] | None:
        """Return the stored calendar OAuth token map, or None."""

    async def save_calendar_token(self, user_id: str, token: dict[str, Any]) -> None:
        """Store the calendar OAuth token map."""

    async def delete_calendar_token(self, user_id: str) -> None:
        """Remove the stored calendar token."""

    async def get_reading_history(self, user_id: str) -> list[ReadingHistoryItem]:
        """Return reading history, newest first."""

    async def save_reading_history(self, user_id: str, items: list[ReadingHistoryItem]) -> None:
        """Replace the reading history list."""
