"""Comments on an article (read side; writes go through moderation)."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from briefsnap.api.v1.dependencies import get_comment_service
from briefsnap.application.services import CommentService

router = APIRouter()


@router.get("/{article_id}")
async def list_comments(
    article_id: str,
    service: Annotated[CommentService, Depends(get_comment_service)],
) -> dict[str, Any]:
    comments = await service.list_comments(article_id)
    return {"comments": [c.to_dict() for c in comments]}
