"""News briefings and per-article AI summaries."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from briefsnap.api.v1.dependencies import get_summary_service
from briefsnap.application.services import SummaryService

router = APIRouter()

SummaryServiceDep = Annotated[SummaryService, Depends(get_summary_service)]


@router.get("/latest")
async def latest_summary(service: SummaryServiceDep, topic: str | None = None) -> dict[str, Any]:
    """Latest news briefing, optionally for one topic."""
    return (await service.topic_summary(topic)).to_dict()


@router.get("/articles/{article_id}/{summary_type}")
async def article_summary(
    article_id: str, summary_type: str, service: SummaryServiceDep
) -> dict[str, Any]:
    return (await service.article_summary(article_id, summary_type)).to_dict()
