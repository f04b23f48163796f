"""DTOs for the comment moderation edge function."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ModerationVerdict:
    """Classification of one text by the moderation API."""

    flagged: bool
    categories: dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class CommentSubmission:
    text: str
    article_id: str
    user_id: str
    user_name: str = ""
    user_photo: str = ""


@dataclass(frozen=True)
class ModerationOutcome:
    """Result returned to the caller: either flagged (nothing written) or the new comment ID."""

    flagged: bool
    message: str
    categories: dict[str, bool] | None = None
    comment_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"flagged": self.flagged, "message": self.message}
        if self.categories is not None:
            body["categories"] = self.categories
        if self.comment_id is not None:
            body["commentId"] = self.comment_id
        return body
