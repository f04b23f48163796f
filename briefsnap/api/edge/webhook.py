"""POST /webhook/rebuild: rebuild the static site when an article is created."""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from briefsnap.api.v1.dependencies import get_rebuild_service
from briefsnap.application.services import RebuildOutcome, RebuildService
from briefsnap.core.limiter import limit_webhook
from briefsnap.domain.exceptions import AuthenticationException

logger = logging.getLogger(__name__)

router = APIRouter()

_STATUS = {
    RebuildOutcome.TRIGGERED: 200,
    RebuildOutcome.NO_ACTION: 200,
    RebuildOutcome.SCHEDULED: 202,
    RebuildOutcome.FAILED: 500,
}


@router.post("/webhook/rebuild", response_class=PlainTextResponse)
@limit_webhook
async def rebuild(
    request: Request,
    service: Annotated[RebuildService, Depends(get_rebuild_service)],
) -> PlainTextResponse:
    try:
        service.verify(request.headers.get("authorization"))
    except AuthenticationException:
        return PlainTextResponse("Unauthorized", status_code=401)

    try:
        payload = await request.json()
        outcome = await service.handle(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError) as e:
        logger.error("Webhook error: %s", e)
        return PlainTextResponse("Internal error", status_code=500)
    return PlainTextResponse(outcome.value, status_code=_STATUS[outcome])
