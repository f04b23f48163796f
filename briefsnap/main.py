"""BriefSnap ASGI app: /api/v1 data endpoints plus the edge routes.

Settings are read inside create_app(), so tests can set env and clear the
get_settings cache first.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from briefsnap.api.edge import edge_router
from briefsnap.api.v1 import api_router
from briefsnap.core.config import get_settings
from briefsnap.core.exception_handlers import register_exception_handlers
from briefsnap.core.lifespan import create_lifespan
from briefsnap.core.limiter import limiter
from briefsnap.middleware import RequestIDMiddleware, TimeoutMiddleware


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # Last added runs outermost: request ID, then the deadline, then CORS, so
    # a 504 still carries the request ID.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=settings.allowed_origins.strip() != "*",
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)

    app.include_router(api_router, prefix="/api/v1")
    app.include_router(edge_router)

    return app


app = create_app()
