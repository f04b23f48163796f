"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready: which collaborators are configured."""

    status: str = Field(default="ok", description="Readiness status")
    firestore: bool = Field(..., description="Document database client configured")
    sitemap_cache: bool = Field(..., description="Durable sitemap cache reachable")
