"""AI service entry point: provider orchestration behind ``/chat/process``."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from govassist.api.ai.router import ai_router
from govassist.api.middleware import register_middleware
from govassist.api.v1.endpoints import health
from govassist.core.cache import ResponseCache
from govassist.core.config import settings
from govassist.core.database import DatabaseClient
from govassist.core.jwt import jwt_verifier
from govassist.core.dependencies import build_llm_clients
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the database, cache and SDK clients, and release them on shutdown.

    The AI service only reads the catalog, so it never migrates the schema.
    """
    LOGGER.info(
        "Starting AI service",
        extra={"version": settings.app_version, "environment": settings.environment},
    )
    jwt_verifier.ensure_configured()

    app.state.db = DatabaseClient.from_settings(settings.db)
    app.state.cache = ResponseCache.from_settings(settings.redis)
    app.state.openai_client, app.state.huggingface_client = build_llm_clients()

    if app.state.openai_client is None and app.state.huggingface_client is None:
        LOGGER.error("No AI provider API keys configured; every request will fail")

    try:
        await asyncio.wait_for(app.state.db.connect(), timeout=settings.db_init_timeout)
    except asyncio.TimeoutError:
        LOGGER.error(f"Database connection timed out after {settings.db_init_timeout}s")
    except Exception as e:
        LOGGER.error(f"Database connection failed: {e}", exc_info=True)

    if not await app.state.cache.ping():
        LOGGER.warning("Redis unavailable at startup; responses will not be cached until it recovers")

    yield

    LOGGER.info("Shutting down AI service")
    await app.state.cache.close()
    await app.state.db.disconnect()


app = FastAPI(
    title=settings.ai_service_name,
    version=settings.app_version,
    description="Answers citizen questions with OpenAI or HuggingFace models grounded in the procedure catalog",
    docs_url="/docs",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

register_middleware(app)

app.include_router(ai_router)
app.include_router(health.router, prefix="/health", tags=["Health"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "govassist.ai_main:app",
        host=settings.host,
        port=settings.ai_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
