"""Health check endpoints. Used by liveness and readiness checks."""

from fastapi import APIRouter, Request

from briefsnap.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(request: Request) -> ReadinessResponse:
    """Report which optional collaborators are available.

    The service is usable without either (data endpoints answer 503 without
    Firestore; the sitemap is rebuilt on every request without Redis).
    """
    state = request.app.state
    sitemap = getattr(state, "cache_session", None) and state.cache_session.sitemap
    return ReadinessResponse(
        firestore=getattr(state, "firestore", None) is not None,
        sitemap_cache=bool(sitemap and sitemap.is_available()),
    )
