"""Request deadline middleware (raw ASGI).

Slow upstreams (Firestore, Tomorrow.io, the moderation API) are bounded by
their own CallPolicy timeouts; this is the outer deadline for the whole
request. A request past the deadline is cancelled and answered 504 in the
data-API error shape, unless the response had already started.
"""

import asyncio
import json
import logging
from typing import Callable

from briefsnap.shared.context import get_request_id

logger = logging.getLogger(__name__)


def _timeout_body(timeout_seconds: float) -> bytes:
    body = {
        "error": "GATEWAY_TIMEOUT",
        "message": f"Request timed out after {timeout_seconds} seconds",
        "details": {"timeout_seconds": timeout_seconds},
    }
    request_id = get_request_id()
    if request_id:
        body["request_id"] = request_id
    return json.dumps(body).encode()


def TimeoutMiddleware(app: Callable, timeout_seconds: float) -> Callable:
    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        response_started = False

        async def tracking_send(message: dict) -> None:
            nonlocal response_started
            response_started = response_started or message["type"] == "http.response.start"
            await send(message)

        try:
            await asyncio.wait_for(app(scope, receive, tracking_send), timeout=timeout_seconds)
        except asyncio.TimeoutError:
            logger.warning(
                "%s %s exceeded the %ss deadline",
                scope.get("method", ""),
                scope.get("path", ""),
                timeout_seconds,
            )
            if response_started:
                return
            await send({
                "type": "http.response.start",
                "status": 504,
                "headers": [(b"content-type", b"application/json")],
            })
            await send({"type": "http.response.body", "body": _timeout_body(timeout_seconds)})

    return asgi_app
