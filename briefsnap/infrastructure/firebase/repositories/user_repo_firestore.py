"""Firestore-backed user repository (implements IUserRepository).

Preferences live in the `preferences` map of `users/<uid>`; the calendar
OAuth token in its `calendarToken` map. Reading history is one document
per user in `reading_history` holding an `articles` list.
"""

from __future__ import annotations

from typing import Any

from briefsnap.domain.entities import ReadingHistoryItem, UserPreferences
from briefsnap.domain.exceptions import DecodeError
from briefsnap.infrastructure.firebase._rest_client import FirestoreRESTClient
from briefsnap.infrastructure.firebase.collections import (
    COLLECTION_READING_HISTORY,
    COLLECTION_USERS,
)

_PREFERENCES = "preferences"
_CALENDAR_TOKEN = "calendarToken"
_HISTORY_ARTICLES = "articles"


class FirestoreUserRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._users = client.collection(COLLECTION_USERS)
        self._history = client.collection(COLLECTION_READING_HISTORY)

    async def _user_data(self, user_id: str) -> dict[str, Any]:
        doc = await self._users.document(user_id).get()
        return doc.to_dict() if doc else {}

    async def get_preferences(self, user_id: str) -> UserPreferences:
        raw = (await self._user_data(user_id)).get(_PREFERENCES)
        if raw is not None and not isinstance(raw, dict):
            raise DecodeError("preferences", user_id, "'preferences' must be a map")
        return UserPreferences.from_document(user_id, raw)

    async def save_preferences(self, user_id: str, preferences: UserPreferences) -> None:
        await self._users.document(user_id).set(
            {_PREFERENCES: preferences.to_document()}, merge=True
        )

    async def get_calendar_token(self, user_id: str) -> dict[str, Any] | None:
        token = (await self._user_data(user_id)).get(_CALENDAR_TOKEN)
        return token if isinstance(token, dict) and token else None

    async def save_calendar_token(self, user_id: str, token: dict[str, Any]) -> None:
        await self._users.document(user_id).set({_CALENDAR_TOKEN: token}, merge=True)

    async def delete_calendar_token(self, user_id: str) -> None:
        await self._users.document(user_id).delete_fields(_CALENDAR_TOKEN)

    async def get_reading_history(self, user_id: str) -> list[ReadingHistoryItem]:
        doc = await self._history.document(user_id).get()
        if not doc:
            return []
        items = doc.to_dict().get(_HISTORY_ARTICLES) or []
        if not isinstance(items, list):
            raise DecodeError("reading_history", user_id, "'articles' must be a list")
        return [ReadingHistoryItem.from_document(user_id, item) for item in items]

    async def save_reading_history(self, user_id: str, items: list[ReadingHistoryItem]) -> None:
        await self._history.document(user_id).set(
            {_HISTORY_ARTICLES: [item.to_document() for item in items]}, merge=True
        )
