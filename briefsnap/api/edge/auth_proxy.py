"""/__/auth/{path}: relay the identity provider's auth handler pages."""

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from briefsnap.api.v1.dependencies import get_auth_proxy
from briefsnap.infrastructure.external import AuthProxy

logger = logging.getLogger(__name__)

router = APIRouter()

_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@router.api_route("/__/auth/{path:path}", methods=_METHODS, include_in_schema=False)
async def auth_proxy(
    path: str,
    request: Request,
    proxy: Annotated[AuthProxy, Depends(get_auth_proxy)],
) -> Response:
    try:
        upstream = await proxy.forward(
            request.method,
            path,
            request.url.query,
            dict(request.headers),
            await request.body(),
        )
    except httpx.HTTPError as e:
        logger.warning("Auth proxy request to %s failed: %s", path, e)
        return JSONResponse(
            status_code=502,
            content={"error": "BAD_GATEWAY", "message": "Authentication service unreachable"},
        )
    response = Response(content=upstream.content, status_code=upstream.status_code)
    for name, value in proxy.response_headers(upstream):
        response.headers.append(name, value)
    return response
