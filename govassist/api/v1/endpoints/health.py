"""Health check endpoints for both services."""

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from govassist.core.config import settings
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="Health check status")
    version: str = Field(..., description="Running application version")
    service: str = Field(..., description="Service name")
    database: str = Field(..., description="Database status")
    cache: str | None = Field(None, description="Cache status, AI service only")


@router.get(
    "/",
    response_model=HealthCheckResponse,
    tags=["Health"],
    summary="Health check endpoint",
    description="Check if the service is running and its backing stores respond",
    operation_id="get_service_health_status",
)
async def health_check(request: Request) -> HealthCheckResponse:
    """Report ``degraded`` when the database or, for the AI service, Redis is down."""
    db_client = getattr(request.app.state, "db", None)
    db_health = await db_client.health_check() if db_client else {"status": "unavailable"}
    healthy = db_health["status"] == "healthy"

    cache_status = None
    cache = getattr(request.app.state, "cache", None)
    if cache is not None:
        cache_status = "healthy" if await cache.ping() else "unhealthy"
        healthy = healthy and cache_status == "healthy"

    return HealthCheckResponse(
        status="healthy" if healthy else "degraded",
        version=settings.app_version,
        service=request.app.title,
        database=db_health["status"],
        cache=cache_status,
    )
