"""Weather widget and location search."""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from briefsnap.api.v1.dependencies import get_location_service, get_weather_service
from briefsnap.application.services import LocationService, WeatherService

router = APIRouter()

LocationServiceDep = Annotated[LocationService, Depends(get_location_service)]


@router.get("/weather")
async def get_weather(
    service: Annotated[WeatherService, Depends(get_weather_service)],
    location: Annotated[str, Query(min_length=1, max_length=200)],
) -> dict[str, Any]:
    """Current conditions, next 24 hours and next 5 days for a place name."""
    return (await service.get_weather(location)).to_dict()


@router.get("/locations/search")
async def search_locations(
    service: LocationServiceDep,
    q: Annotated[str, Query(max_length=200)] = "",
) -> dict[str, Any]:
    """Up to five suggestions; queries under two characters return none."""
    return {"results": [s.to_dict() for s in await service.search(q)]}


@router.get("/locations/reverse")
async def reverse_location(
    service: LocationServiceDep,
    lat: Annotated[float, Query(ge=-90, le=90)],
    lon: Annotated[float, Query(ge=-180, le=180)],
) -> dict[str, Any]:
    """Place name for coordinates (browser geolocation)."""
    return (await service.reverse(lat, lon)).to_dict()
