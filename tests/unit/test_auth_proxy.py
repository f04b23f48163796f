"""AuthProxy.forward: network errors are retried only for idempotent methods."""

import httpx
import pytest

from briefsnap.infrastructure.external.auth_proxy import AuthProxy
from briefsnap.infrastructure.external.http_policy import CallPolicy


def _failing_proxy(attempts: list[str]) -> tuple[AuthProxy, httpx.AsyncClient]:
    def upstream(request: httpx.Request) -> httpx.Response:
        attempts.append(request.method)
        raise httpx.ReadTimeout("no answer", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    return AuthProxy(http, "auth.example.com", CallPolicy("auth_proxy", 5, retries=2)), http


async def test_post_is_sent_once() -> None:
    attempts: list[str] = []
    proxy, http = _failing_proxy(attempts)
    with pytest.raises(httpx.ReadTimeout):
        await proxy.forward("POST", "handler", "", {}, b"id_token=x")
    assert attempts == ["POST"]
    await http.aclose()


async def test_get_is_retried() -> None:
    attempts: list[str] = []
    proxy, http = _failing_proxy(attempts)
    with pytest.raises(httpx.ReadTimeout):
        await proxy.forward("GET", "handler", "apiKey=k", {}, b"")
    assert attempts == ["GET"] * 3
    await http.aclose()
