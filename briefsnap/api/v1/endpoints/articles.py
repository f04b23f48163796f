"""Article feed, detail, related articles and view counts."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, Response

from briefsnap.api.v1.dependencies import OptionalUser, get_article_service
from briefsnap.application.services import ArticleService
from briefsnap.core.constants import ARTICLES_PER_PAGE
from briefsnap.core.limiter import limit_writes

router = APIRouter()

ArticleServiceDep = Annotated[ArticleService, Depends(get_article_service)]


@router.get("")
async def list_articles(
    service: ArticleServiceDep,
    response: Response,
    topic: str | None = None,
    page_size: Annotated[int, Query(ge=1, le=50)] = ARTICLES_PER_PAGE,
    cursor: str | None = None,
) -> dict[str, Any]:
    """One feed page, newest first. Pass next_cursor back as cursor for the next page."""
    page = await service.list_articles(topic, page_size, cursor)
    response.headers["X-Cache"] = "HIT" if page.from_cache else "MISS"
    return page.to_dict()


@router.get("/{slug}")
async def get_article(slug: str, service: ArticleServiceDep) -> dict[str, Any]:
    return (await service.get_article(slug)).to_dict()


@router.get("/{slug}/related")
async def related_articles(
    slug: str, service: ArticleServiceDep, user: OptionalUser
) -> dict[str, Any]:
    """Up to three recommendations; popular ones only for signed-in readers."""
    article = await service.get_article(slug)
    related = await service.related_articles(article, signed_in=user is not None)
    return related.to_dict()


@router.get("/{article_id}/views")
async def get_view_count(article_id: str, service: ArticleServiceDep) -> dict[str, Any]:
    return {"article_id": article_id, "view_count": await service.get_view_count(article_id)}


@router.post("/{article_id}/views", status_code=204)
@limit_writes
async def record_view(request: Request, article_id: str, service: ArticleServiceDep) -> Response:
    await service.record_view(article_id)
    return Response(status_code=204)
