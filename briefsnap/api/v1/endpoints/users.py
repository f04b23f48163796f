"""Current user's preferences and reading history."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response

from briefsnap.api.v1.dependencies import CurrentUser, get_article_service, get_user_service
from briefsnap.application.services import ArticleService, UserService
from briefsnap.core.limiter import limit_writes
from briefsnap.schemas.users import HistoryAddRequest, PreferencesUpdate

router = APIRouter()

UserServiceDep = Annotated[UserService, Depends(get_user_service)]


@router.get("/me/preferences")
async def get_preferences(user: CurrentUser, service: UserServiceDep) -> dict[str, Any]:
    return (await service.get_preferences(user.uid)).to_dict()


@router.patch("/me/preferences")
@limit_writes
async def update_preferences(
    request: Request,
    body: PreferencesUpdate,
    user: CurrentUser,
    service: UserServiceDep,
) -> dict[str, Any]:
    """Merge the given fields over the stored preferences."""
    return (await service.update_preferences(user.uid, body.changes())).to_dict()


@router.get("/me/history")
async def reading_history(user: CurrentUser, service: UserServiceDep) -> dict[str, Any]:
    return {"items": [item.to_dict() for item in await service.reading_history(user.uid)]}


@router.post("/me/history")
@limit_writes
async def add_to_history(
    request: Request,
    body: HistoryAddRequest,
    user: CurrentUser,
    service: UserServiceDep,
    articles: Annotated[ArticleService, Depends(get_article_service)],
) -> dict[str, Any]:
    article = await articles.get_article(body.slug)
    history = await service.add_to_history(user.uid, article)
    return {"items": [item.to_dict() for item in history]}


@router.delete("/me/history", status_code=204)
async def clear_history(user: CurrentUser, service: UserServiceDep) -> Response:
    await service.clear_history(user.uid)
    return Response(status_code=204)
