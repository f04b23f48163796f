"""Comment submission: validate, rate-limit, moderate, then write."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from briefsnap.application.dtos.moderation import CommentSubmission, ModerationOutcome
from briefsnap.application.interfaces import ICommentRepository, IModerationClient
from briefsnap.core.limiter import SlidingWindowLimiter
from briefsnap.domain.entities import Comment
from briefsnap.domain.exceptions import FetchFailedException, ValidationException
from briefsnap.infrastructure.external.http_policy import CallPolicy
from briefsnap.shared.telemetry import traced
from briefsnap.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)

FLAGGED_MESSAGE = "Content was flagged by moderation"
ADDED_MESSAGE = "Comment added successfully"


class ModerationService:
    """Runs the moderation edge function.

    Order matters: input is validated before the rate limiter counts the
    request, and nothing is written unless moderation passed.
    """

    def __init__(
        self,
        moderation: IModerationClient,
        comments: ICommentRepository,
        limiter: SlidingWindowLimiter,
        write_policy: CallPolicy,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._moderation = moderation
        self._comments = comments
        self._limiter = limiter
        self._write_policy = write_policy
        self._clock = clock

    @staticmethod
    def validate(submission: CommentSubmission) -> None:
        if not submission.text or not submission.text.strip():
            raise ValidationException("Missing required fields", field="text")
        if not submission.article_id:
            raise ValidationException("Missing required fields", field="articleId")
        if not submission.user_id:
            raise ValidationException("Missing required fields", field="user.uid")

    @traced("moderation.submit")
    async def submit(self, submission: CommentSubmission) -> ModerationOutcome:
        """Raises ValidationException, RateLimitExceededException,
        ModerationUnavailableException or FetchFailedException (write exhausted)."""
        self.validate(submission)
        self._limiter.check(submission.user_id)

        verdict = await self._moderation.moderate(submission.text)
        if verdict.flagged:
            logger.info(
                "Comment by %s on %s flagged by moderation",
                submission.user_id,
                submission.article_id,
            )
            return ModerationOutcome(
                flagged=True, message=FLAGGED_MESSAGE, categories=verdict.categories
            )

        comment = Comment(
            id="",
            content=submission.text.strip(),
            article_id=submission.article_id,
            user_id=submission.user_id,
            user_name=submission.user_name,
            user_photo=submission.user_photo,
            timestamp=self._clock(),
            likes=0,
            liked_by=[],
        )
        try:
            comment_id = await self._write_policy.call(self._comments.add, comment.to_document())
        except Exception as e:
            logger.exception("Failed to save comment after %s attempts", self._write_policy.retries + 1)
            raise FetchFailedException("Failed to save comment", source="comments") from e
        logger.info("Comment %s added to article %s", comment_id, submission.article_id)
        return ModerationOutcome(flagged=False, message=ADDED_MESSAGE, comment_id=comment_id)
