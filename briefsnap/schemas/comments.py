"""Comment moderation request schema (edge function body)."""

from pydantic import BaseModel, ConfigDict, Field

from briefsnap.application.dtos.moderation import CommentSubmission


class CommentAuthor(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    photo_url: str | None = Field(default=None, alias="photoURL")


class ModerateCommentRequest(BaseModel):
    """Body of POST /api/moderate-comment.

    Everything is optional at the schema level: missing fields are reported
    as 400 "Missing required fields", not as a 422 validation error.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: str | None = None
    article_id: str | None = Field(default=None, alias="articleId")
    user: CommentAuthor | None = None

    def to_submission(self) -> CommentSubmission:
        user = self.user or CommentAuthor()
        return CommentSubmission(
            text=self.text or "",
            article_id=self.article_id or "",
            user_id=user.uid or "",
            user_name=user.display_name or "Anonymous",
            user_photo=user.photo_url or "",
        )
