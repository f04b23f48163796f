"""Error responses for the /api/v1 data endpoints.

Every failure leaves as {"error": CODE, "message": text[, "details": ...]}
plus the request_id when one is bound. The edge functions build their own
bodies and only borrow status_for().
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from briefsnap.core.config import get_settings
from briefsnap.domain.exceptions import BriefSnapException, RateLimitExceededException
from briefsnap.shared.context import get_request_id

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[str, int] = {
    "VALIDATION_ERROR": 400,
    "AUTHENTICATION_ERROR": 401,
    "RESOURCE_NOT_FOUND": 404,
    "RATE_LIMITED": 429,
    "FETCH_FAILED": 502,
    "DECODE_ERROR": 502,
    "MODERATION_UNAVAILABLE": 503,
    "SERVICE_UNAVAILABLE": 503,
}


def status_for(exc: BriefSnapException) -> int:
    """HTTP status for a domain error; unknown codes are 500."""
    return STATUS_BY_CODE.get(exc.error_code, 500)


def error_response(
    status: int,
    body: dict,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    request_id = get_request_id()
    if request_id:
        body = {**body, "request_id": request_id}
    return JSONResponse(status_code=status, content=body, headers=headers)


async def _domain_error(request: Request, exc: BriefSnapException) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        # Logged without a stack trace.
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
    headers = None
    if isinstance(exc, RateLimitExceededException) and exc.retry_after:
        headers = {"Retry-After": str(exc.retry_after)}
    return error_response(status, exc.to_dict(), headers)


async def _invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    # 422 so bad query params (page_size, summary type) differ from domain 400s.
    return error_response(
        422,
        {
            "error": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": exc.errors(),
        },
    )


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(
        exc.status_code,
        {"error": "HTTP_ERROR", "message": exc.detail},
        getattr(exc, "headers", None),
    )


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    message = str(exc) if get_settings().debug else "Internal server error"
    return error_response(500, {"error": "INTERNAL_ERROR", "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers on app. Call once from create_app()."""
    app.add_exception_handler(BriefSnapException, _domain_error)
    app.add_exception_handler(RequestValidationError, _invalid_request)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled)
