"""AI service chat processing endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from govassist.core.dependencies import get_orchestrator
from govassist.schemas.ai import AIRequest, ProcessChatResponse, ProcessingMeta
from govassist.services.ai.orchestrator import AIOrchestrator
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "/process",
    response_model=ProcessChatResponse,
    summary="Answer a citizen question",
    operation_id="process_chat_message",
    responses={500: {"description": "No provider could answer"}},
)
async def process_message(
    body: AIRequest,
    orchestrator: Annotated[AIOrchestrator, Depends(get_orchestrator)],
):
    """Run the request through cache, primary provider and fallback."""
    result = await orchestrator.process(body)

    if not result.success or result.response is None:
        LOGGER.error(
            "Chat processing failed",
            extra={"model_used": result.model_used, "error": result.error},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": result.error or "Processing failed"},
        )

    return ProcessChatResponse(
        success=True,
        data=result.response,
        meta=ProcessingMeta(processing_time=result.processing_time, model_used=result.model_used),
    )
