"""GET /sitemap.xml for search engines."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from briefsnap.api.v1.dependencies import SettingsDep, get_article_service
from briefsnap.application.services import ArticleService

router = APIRouter()


@router.get("/sitemap.xml")
async def sitemap_xml(
    service: Annotated[ArticleService, Depends(get_article_service)],
    settings: SettingsDep,
) -> Response:
    xml = await service.sitemap_xml(settings.site_base_url)
    return Response(content=xml, media_type="application/xml")
