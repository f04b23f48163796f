"""UserService: preference merge and reading history."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from briefsnap.application.services import UserService
from briefsnap.core.constants import READING_HISTORY_LIMIT
from briefsnap.domain.entities import ReadingHistoryItem, UserPreferences


@pytest.fixture
def user_repo():
    repo = AsyncMock()
    repo.get_preferences = AsyncMock(return_value=UserPreferences())
    repo.get_reading_history = AsyncMock(return_value=[])
    return repo


async def test_update_preferences_merges(user_repo, clock) -> None:
    updated = await UserService(user_repo, clock).update_preferences("u1", {"theme": "dark"})
    assert updated.theme == "dark"
    assert updated.article_language == "en"
    user_repo.save_preferences.assert_awaited_once_with("u1", updated)


async def test_add_to_history_moves_article_first(user_repo, clock, article_factory) -> None:
    user_repo.get_reading_history.return_value = [
        ReadingHistoryItem(id="b"),
        ReadingHistoryItem(id="a1"),
    ]
    history = await UserService(user_repo, clock).add_to_history("u1", article_factory())
    assert [h.id for h in history] == ["a1", "b"]
    assert history[0].read_at == datetime(2025, 3, 5, 12, 0, tzinfo=UTC)
    assert history[0].title == "Markets rally"


async def test_history_is_capped(user_repo, clock, article_factory) -> None:
    user_repo.get_reading_history.return_value = [
        ReadingHistoryItem(id=f"x{i}") for i in range(READING_HISTORY_LIMIT)
    ]
    history = await UserService(user_repo, clock).add_to_history("u1", article_factory())
    assert len(history) == READING_HISTORY_LIMIT
    assert history[-1].id == f"x{READING_HISTORY_LIMIT - 2}"


async def test_clear_history(user_repo) -> None:
    await UserService(user_repo).clear_history("u1")
    user_repo.save_reading_history.assert_awaited_once_with("u1", [])
