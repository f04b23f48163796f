"""Firestore-backed comment repository (implements ICommentRepository)."""

from __future__ import annotations

from typing import Any

from briefsnap.domain.entities import Comment
from briefsnap.infrastructure.firebase._rest_client import FirestoreRESTClient
from briefsnap.infrastructure.firebase.collections import COLLECTION_COMMENTS, FIELD_TIMESTAMP

# Upper bound on comments returned for one article
_COMMENT_LIMIT = 200


class FirestoreCommentRepository:
    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_COMMENTS)

    async def list_for_article(self, article_id: str) -> list[Comment]:
        """Return comments on an article, newest first."""
        query = (
            self._coll.where("articleId", "==", article_id)
            .order_by(FIELD_TIMESTAMP, "DESCENDING")
            .limit(_COMMENT_LIMIT)
        )
        return [Comment.from_document(s.id, s.to_dict()) async for s in query.stream()]

    async def add(self, data: dict[str, Any]) -> str:
        """Write a comment document with a generated ID; return the ID."""
        ref = await self._coll.add(data)
        return ref.id
