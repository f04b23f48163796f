"""Request ID middleware (raw ASGI).

Reuses a caller's X-Request-ID when it is short and plain (letters, digits,
'-' and '_'), otherwise mints a UUID. The ID is bound to the logging
context for the request and echoed on the response, replacing any value a
handler set.
"""

import re
import uuid
from typing import Callable

from briefsnap.shared.context import reset_request_id, set_request_id

REQUEST_ID_MAX_LENGTH = 64
_SAFE_ID = re.compile(rf"[A-Za-z0-9_-]{{1,{REQUEST_ID_MAX_LENGTH}}}")


def sanitize_request_id(raw: str | None) -> str:
    """Return the trimmed caller ID if safe to log, else a new UUID."""
    candidate = (raw or "").strip()
    return candidate if _SAFE_ID.fullmatch(candidate) else str(uuid.uuid4())


def _header(scope: dict, name: bytes) -> str | None:
    for key, value in scope.get("headers", []):
        if key.lower() == name:
            return value.decode("latin-1")
    return None


def RequestIDMiddleware(app: Callable, header_name: str = "X-Request-ID") -> Callable:
    header = header_name.lower().encode("latin-1")

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        request_id = sanitize_request_id(_header(scope, header))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = [(k, v) for k, v in message.get("headers", []) if k.lower() != header]
                headers.append((header, request_id.encode("latin-1")))
                message["headers"] = headers
            await send(message)

        token = set_request_id(request_id)
        try:
            await app(scope, receive, send_with_id)
        finally:
            reset_request_id(token)

    return asgi_app
