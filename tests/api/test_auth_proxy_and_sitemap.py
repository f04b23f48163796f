"""Auth handler relay and sitemap.xml."""

from unittest.mock import AsyncMock

import httpx
from httpx import AsyncClient

from briefsnap.api.v1.dependencies import get_article_service
from briefsnap.application.services import ArticleService
from briefsnap.domain.entities import SitemapEntry
from briefsnap.infrastructure.cache import CacheStore


async def test_auth_requests_are_relayed(app, client: AsyncClient) -> None:
    seen: list[httpx.Request] = []

    def upstream(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            headers=[("set-cookie", "a=1"), ("set-cookie", "b=2"), ("content-type", "text/html")],
            content=b"<html>handler</html>",
        )

    app.state.http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    response = await client.get("/__/auth/handler?apiKey=k&mode=signIn")

    assert response.status_code == 200
    assert response.text == "<html>handler</html>"
    assert response.headers.get_list("set-cookie") == ["a=1", "b=2"]
    assert str(seen[0].url) == "https://briefsnap-76b64.firebaseapp.com/__/auth/handler?apiKey=k&mode=signIn"
    assert seen[0].headers["host"] == "briefsnap-76b64.firebaseapp.com"
    await app.state.http_client.aclose()


async def test_unreachable_auth_domain(app, client: AsyncClient) -> None:
    def upstream(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    app.state.http_client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    response = await client.post("/__/auth/handler", content=b"x")
    assert response.status_code == 502
    await app.state.http_client.aclose()


async def test_sitemap_xml(app, client: AsyncClient) -> None:
    repo = AsyncMock()
    repo.list_for_sitemap = AsyncMock(return_value=[SitemapEntry(slug="abc-slug", title="T")])
    service = ArticleService(repo, CacheStore())
    app.dependency_overrides[get_article_service] = lambda: service
    try:
        response = await client.get("/sitemap.xml")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/xml")
    assert "<loc>https://briefsnap.com/article/abc-slug</loc>" in response.text
