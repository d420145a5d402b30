"""API service entry point: procedure catalog and chat."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from pydantic import BaseModel, Field

from govassist.api.middleware import register_middleware
from govassist.api.v1.endpoints import health
from govassist.api.v1.router import api_router
from govassist.core.config import settings
from govassist.core.database import DatabaseClient
from govassist.core.jwt import jwt_verifier
from govassist.database.seed import seed_database
from govassist.services.chat.ai_client import AIServiceClient
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


class RootResponse(BaseModel):
    """Root endpoint response payload."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    docs: str = Field(..., description="Path to the interactive API docs")
    health: str = Field(..., description="Path to the health check endpoint")


async def startup_database(db: DatabaseClient) -> None:
    """Verify the connection, create missing tables and optionally seed."""
    await db.connect()
    if settings.db.auto_migrate:
        await db.auto_migrate()
    if settings.db.seed_on_startup:
        async with db.session_maker() as session:
            await seed_database(session)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the database and AI-service clients, and dispose of them on shutdown."""
    LOGGER.info(
        "Starting application",
        extra={
            "app_name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
        },
    )
    jwt_verifier.ensure_configured()

    app.state.db = DatabaseClient.from_settings(settings.db)
    app.state.ai_client = AIServiceClient(
        settings.chat.ai_service_url,
        timeout=settings.chat.ai_service_timeout,
    )

    try:
        await asyncio.wait_for(startup_database(app.state.db), timeout=settings.db_init_timeout)
        LOGGER.info("Database initialized successfully")
    except asyncio.TimeoutError:
        LOGGER.error(f"Database initialization timed out after {settings.db_init_timeout}s")
    except Exception as e:
        LOGGER.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    LOGGER.info("Shutting down application")
    await app.state.db.disconnect()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Sri Lankan government services assistant: procedure catalog and citizen chat",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

register_middleware(app)

app.include_router(api_router, prefix=settings.api_v1_prefix)
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get(
    "/",
    response_model=RootResponse,
    tags=["Root"],
    summary="Root endpoint",
    description="Get basic information about the API",
    operation_id="get_public_root_metadata",
)
async def root() -> RootResponse:
    return RootResponse(
        message="Server is running",
        version=settings.app_version,
        docs="/docs",
        health="/health",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "govassist.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
