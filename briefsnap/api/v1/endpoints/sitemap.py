"""Sitemap listing (JSON) for the in-app sitemap page."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from briefsnap.api.v1.dependencies import get_article_service
from briefsnap.application.services import ArticleService

router = APIRouter()


@router.get("")
async def sitemap_listing(
    service: Annotated[ArticleService, Depends(get_article_service)],
) -> dict[str, Any]:
    entries = await service.sitemap_listing()
    return {"articles": [entry.to_dict() for entry in entries]}
