"""Current-week calendar events for the signed-in user."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response

from briefsnap.api.v1.dependencies import CurrentUser, get_calendar_service
from briefsnap.application.services import CalendarService
from briefsnap.core.limiter import limit_writes
from briefsnap.schemas.users import CalendarConnectRequest

router = APIRouter()

CalendarServiceDep = Annotated[CalendarService, Depends(get_calendar_service)]


@router.get("/events")
async def current_week_events(user: CurrentUser, service: CalendarServiceDep) -> dict[str, Any]:
    return (await service.current_week_events(user.uid)).to_dict()


@router.post("/connect", status_code=204)
@limit_writes
async def connect_calendar(
    request: Request,
    body: CalendarConnectRequest,
    user: CurrentUser,
    service: CalendarServiceDep,
) -> Response:
    """Store the granted token and switch the calendar widget on."""
    await service.connect(user.uid, body.token())
    return Response(status_code=204)


@router.delete("/connect", status_code=204)
async def disconnect_calendar(user: CurrentUser, service: CalendarServiceDep) -> Response:
    await service.disable(user.uid)
    return Response(status_code=204)
