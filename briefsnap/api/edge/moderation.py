"""POST /api/moderate-comment: moderate a comment and store it if clean."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from briefsnap.api.v1.dependencies import get_moderation_service
from briefsnap.application.services import ModerationService
from briefsnap.core.exception_handlers import status_for
from briefsnap.domain.exceptions import (
    BriefSnapException,
    FetchFailedException,
    RateLimitExceededException,
)
from briefsnap.schemas.comments import ModerateCommentRequest

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
PROCESSING_FAILED = "Failed to process request"


def _error(status: int, message: str, retry_after: int | None = None) -> JSONResponse:
    headers = dict(CORS_HEADERS)
    if retry_after:
        headers["Retry-After"] = str(retry_after)
    return JSONResponse(status_code=status, content={"error": message}, headers=headers)


@router.options("/api/moderate-comment")
async def moderate_comment_preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@router.post("/api/moderate-comment")
async def moderate_comment(
    request: Request,
    service: Annotated[ModerationService, Depends(get_moderation_service)],
) -> JSONResponse:
    """Validate, rate-limit per user, moderate, then write the comment.

    A flagged comment is answered with 200 and flagged=true; nothing is stored.
    """
    try:
        body = ModerateCommentRequest.model_validate(await request.json())
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("Unreadable moderation request body: %s", e)
        return _error(500, PROCESSING_FAILED)
    except ValidationError:
        return _error(400, "Missing required fields")

    try:
        outcome = await service.submit(body.to_submission())
    except FetchFailedException:
        return _error(500, PROCESSING_FAILED)
    except RateLimitExceededException as e:
        return _error(429, e.message, e.retry_after)
    except BriefSnapException as e:
        return _error(status_for(e), e.message)
    return JSONResponse(content=outcome.to_dict(), headers=CORS_HEADERS)
