"""GET /article/{slug}: Open Graph page for crawlers, the SPA for everyone else."""

import logging
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.responses import FileResponse, HTMLResponse

from briefsnap.api.v1.dependencies import (
    get_preview_renderer,
    get_static_root,
)
from briefsnap.application.services import ArticleService, SocialPreviewService, is_crawler
from briefsnap.infrastructure.firebase.repositories import FirestoreArticleRepository
from briefsnap.infrastructure.services.preview_renderer import PreviewRenderer

logger = logging.getLogger(__name__)

router = APIRouter()

PREVIEW_CACHE_CONTROL = "public, max-age=300"


def get_preview_service_optional(
    request: Request,
    renderer: Annotated[PreviewRenderer, Depends(get_preview_renderer)],
    static_root: Annotated[Path, Depends(get_static_root)],
) -> SocialPreviewService | None:
    """Preview service, or None without a document database (crawlers get the SPA)."""
    firestore = getattr(request.app.state, "firestore", None)
    if firestore is None:
        return None
    session = request.app.state.cache_session
    articles = ArticleService(FirestoreArticleRepository(firestore), session.store, session.sitemap)
    return SocialPreviewService(articles, renderer, static_root)


def spa_response(static_root: Path) -> Response:
    index = static_root / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=404, detail="Not found")
    return FileResponse(index, media_type="text/html")


@router.get("/article/{slug}")
async def article_preview(
    slug: str,
    request: Request,
    static_root: Annotated[Path, Depends(get_static_root)],
    service: Annotated[SocialPreviewService | None, Depends(get_preview_service_optional)],
) -> Response:
    if not is_crawler(request.headers.get("user-agent")) or service is None:
        return spa_response(static_root)

    result = await service.preview(slug)
    if result is None:
        return spa_response(static_root)
    if result.path is not None:
        return FileResponse(result.path, media_type="text/html")
    return HTMLResponse(
        content=result.html,
        headers={"Cache-Control": PREVIEW_CACHE_CONTROL},
    )
