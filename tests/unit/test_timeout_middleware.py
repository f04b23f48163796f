"""Request deadline middleware on a bare ASGI app."""

import asyncio
import json

from briefsnap.middleware import TimeoutMiddleware
from briefsnap.shared.context import reset_request_id, set_request_id


def slow_app(delay: float, start_first: bool = False):
    async def app(scope, receive, send) -> None:
        if start_first:
            await send({"type": "http.response.start", "status": 200, "headers": []})
        await asyncio.sleep(delay)
        await send({"type": "http.response.body", "body": b"done"})

    return app


async def run(app) -> list[dict]:
    sent: list[dict] = []

    async def receive() -> dict:
        return {"type": "http.request", "body": b""}

    async def send(message: dict) -> None:
        sent.append(message)

    await app({"type": "http", "method": "GET", "path": "/api/v1/weather"}, receive, send)
    return sent


async def test_slow_request_gets_504_with_request_id() -> None:
    token = set_request_id("req-1")
    try:
        sent = await run(TimeoutMiddleware(slow_app(1.0), timeout_seconds=0.01))
    finally:
        reset_request_id(token)

    assert sent[0]["status"] == 504
    body = json.loads(sent[1]["body"])
    assert body["error"] == "GATEWAY_TIMEOUT"
    assert body["request_id"] == "req-1"


async def test_fast_request_passes_through() -> None:
    sent = await run(TimeoutMiddleware(slow_app(0, start_first=True), timeout_seconds=1))
    assert [m["type"] for m in sent] == ["http.response.start", "http.response.body"]


async def test_started_response_is_not_replaced() -> None:
    sent = await run(TimeoutMiddleware(slow_app(1.0, start_first=True), timeout_seconds=0.01))
    assert len(sent) == 1
    assert sent[0]["status"] == 200
