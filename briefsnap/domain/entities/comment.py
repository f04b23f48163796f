"""Comment domain record (`comments` collection)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from briefsnap.domain.entities._fields import (
    optional_int,
    optional_str,
    optional_str_list,
    optional_timestamp,
    require_str,
)
from briefsnap.shared.utils.datetime import to_iso

_KIND = "comment"


@dataclass(frozen=True)
class Comment:
    id: str
    content: str
    article_id: str
    user_id: str
    user_name: str = ""
    user_photo: str = ""
    timestamp: datetime | None = None
    likes: int = 0
    liked_by: list[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any]) -> Comment:
        """Parse a Firestore field map. Raises DecodeError if malformed."""
        return cls(
            id=doc_id,
            content=require_str(_KIND, doc_id, data, "content"),
            article_id=require_str(_KIND, doc_id, data, "articleId"),
            user_id=require_str(_KIND, doc_id, data, "userId"),
            user_name=optional_str(_KIND, doc_id, data, "userName"),
            user_photo=optional_str(_KIND, doc_id, data, "userPhoto"),
            timestamp=optional_timestamp(_KIND, doc_id, data, "timestamp"),
            likes=optional_int(_KIND, doc_id, data, "likes"),
            liked_by=optional_str_list(_KIND, doc_id, data, "likedBy"),
        )

    def to_document(self) -> dict[str, Any]:
        """Field map written by the moderation edge function."""
        return {
            "content": self.content,
            "articleId": self.article_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userPhoto": self.user_photo,
            "timestamp": self.timestamp,
            "likes": self.likes,
            "likedBy": list(self.liked_by),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "content": self.content,
            "article_id": self.article_id,
            "user_id": self.user_id,
            "user_name": self.user_name,
            "user_photo": self.user_photo,
            "timestamp": to_iso(self.timestamp),
            "likes": self.likes,
            "liked_by": list(self.liked_by),
        }
