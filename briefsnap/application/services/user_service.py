"""User preferences and reading history."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from briefsnap.application.interfaces import IUserRepository
from briefsnap.core.constants import READING_HISTORY_LIMIT
from briefsnap.domain.entities import Article, ReadingHistoryItem, UserPreferences
from briefsnap.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self, repo: IUserRepository, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self._repo = repo
        self._clock = clock

    async def get_preferences(self, user_id: str) -> UserPreferences:
        return await self._repo.get_preferences(user_id)

    async def update_preferences(self, user_id: str, changes: dict[str, Any]) -> UserPreferences:
        """Merge changes over the stored preferences and save the result."""
        current = await self._repo.get_preferences(user_id)
        updated = current.merged(changes)
        await self._repo.save_preferences(user_id, updated)
        return updated

    async def reading_history(self, user_id: str) -> list[ReadingHistoryItem]:
        return await self._repo.get_reading_history(user_id)

    async def add_to_history(self, user_id: str, article: Article) -> list[ReadingHistoryItem]:
        """Put the article first, dropping an older entry for it; keep the newest 100."""
        item = ReadingHistoryItem(
            id=article.id,
            title=article.title,
            description=article.description,
            read_at=self._clock(),
        )
        history = [h for h in await self._repo.get_reading_history(user_id) if h.id != article.id]
        history = [item, *history][:READING_HISTORY_LIMIT]
        await self._repo.save_reading_history(user_id, history)
        return history

    async def clear_history(self, user_id: str) -> None:
        await self._repo.save_reading_history(user_id, [])
        logger.info("Reading history cleared for user %s", user_id)
