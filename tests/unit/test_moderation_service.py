"""ModerationService: validation, per-user window, verdict and write retries."""

from unittest.mock import AsyncMock

import pytest

from briefsnap.application.dtos.moderation import CommentSubmission, ModerationVerdict
from briefsnap.application.services import ModerationService
from briefsnap.core.limiter import SlidingWindowLimiter
from briefsnap.domain.exceptions import (
    FetchFailedException,
    ModerationUnavailableException,
    RateLimitExceededException,
    ValidationException,
)
from briefsnap.infrastructure.external.http_policy import CallPolicy

SUBMISSION = CommentSubmission(text="  Nice piece  ", article_id="a1", user_id="u1", user_name="Ann")


@pytest.fixture
def moderation():
    client = AsyncMock()
    client.moderate = AsyncMock(return_value=ModerationVerdict(flagged=False))
    return client


@pytest.fixture
def comments():
    repo = AsyncMock()
    repo.add = AsyncMock(return_value="c1")
    return repo


@pytest.fixture
def service(moderation, comments, clock):
    return ModerationService(
        moderation,
        comments,
        SlidingWindowLimiter(5, 60, clock=lambda: 0.0),
        CallPolicy("comment_write", 1.0, retries=2, retry_on=(Exception,)),
        clock,
    )


async def test_clean_comment_is_written(service, comments) -> None:
    outcome = await service.submit(SUBMISSION)
    assert outcome.to_dict() == {
        "flagged": False,
        "message": "Comment added successfully",
        "commentId": "c1",
    }
    written = comments.add.await_args.args[0]
    assert written["content"] == "Nice piece"
    assert written["likes"] == 0
    assert written["likedBy"] == []
    assert written["userName"] == "Ann"


async def test_flagged_comment_is_not_written(service, moderation, comments) -> None:
    moderation.moderate.return_value = ModerationVerdict(flagged=True, categories={"hate": True})
    outcome = await service.submit(SUBMISSION)
    assert outcome.flagged is True
    assert outcome.categories == {"hate": True}
    comments.add.assert_not_called()


@pytest.mark.parametrize(
    "submission",
    [
        CommentSubmission(text="   ", article_id="a1", user_id="u1"),
        CommentSubmission(text="hi", article_id="", user_id="u1"),
        CommentSubmission(text="hi", article_id="a1", user_id=""),
    ],
)
async def test_missing_fields(service, moderation, submission) -> None:
    with pytest.raises(ValidationException):
        await service.submit(submission)
    moderation.moderate.assert_not_called()


async def test_sixth_request_in_window_is_rejected(service, moderation) -> None:
    for _ in range(5):
        await service.submit(SUBMISSION)
    with pytest.raises(RateLimitExceededException):
        await service.submit(SUBMISSION)
    assert moderation.moderate.await_count == 5


async def test_moderation_outage_propagates(service, moderation, comments) -> None:
    moderation.moderate.side_effect = ModerationUnavailableException()
    with pytest.raises(ModerationUnavailableException):
        await service.submit(SUBMISSION)
    comments.add.assert_not_called()


async def test_write_is_retried(service, comments) -> None:
    comments.add.side_effect = [RuntimeError("busy"), "c2"]
    outcome = await service.submit(SUBMISSION)
    assert outcome.comment_id == "c2"
    assert comments.add.await_count == 2


async def test_write_gives_up_after_three_attempts(service, comments) -> None:
    comments.add.side_effect = RuntimeError("down")
    with pytest.raises(FetchFailedException):
        await service.submit(SUBMISSION)
    assert comments.add.await_count == 3
