"""Explicit cache-busting (used on logout)."""

import logging

from fastapi import APIRouter, Request, Response

from briefsnap.api.v1.dependencies import SessionDep
from briefsnap.core.limiter import limit_writes

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/clear", status_code=204)
@limit_writes
async def clear_cache(request: Request, session: SessionDep) -> Response:
    """Drop every cached entry, including the durable sitemap listing."""
    await session.clear()
    return Response(status_code=204)
