"""Provider status and cache administration."""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from govassist.core.auth import require_admin
from govassist.core.constants import AI_CACHE_PATTERN
from govassist.core.dependencies import get_orchestrator
from govassist.core.exceptions import CacheError
from govassist.schemas.ai import CacheClearResponse, ModelStatus
from govassist.schemas.auth import CurrentUser
from govassist.services.ai.orchestrator import AIOrchestrator
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.get(
    "/models/status",
    response_model=List[ModelStatus],
    summary="Provider availability",
    operation_id="get_model_status",
)
async def get_model_status(
    orchestrator: Annotated[AIOrchestrator, Depends(get_orchestrator)],
) -> List[ModelStatus]:
    return orchestrator.model_status()


@router.delete(
    "/cache",
    response_model=CacheClearResponse,
    summary="Clear cached AI responses",
    operation_id="clear_ai_cache",
)
async def clear_cache(
    orchestrator: Annotated[AIOrchestrator, Depends(get_orchestrator)],
    admin: Annotated[CurrentUser, Depends(require_admin)],
    pattern: str = Query(AI_CACHE_PATTERN, description="Key pattern inside the ai: keyspace"),
) -> CacheClearResponse:
    try:
        cleared = await orchestrator.clear_cache(pattern)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except CacheError as e:
        LOGGER.error("Failed to clear cache", extra={"pattern": pattern, "error": str(e)})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to clear cache")

    LOGGER.info("Cache cleared by admin", extra={"user_id": str(admin.id), "cleared": cleared})
    return CacheClearResponse(cleared=cleared)
