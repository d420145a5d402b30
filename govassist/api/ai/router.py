from fastapi import APIRouter

from govassist.api.ai.endpoints import chat, models

ai_router = APIRouter()

ai_router.include_router(chat.router, prefix="/chat", tags=["Chat"])
ai_router.include_router(models.router, tags=["Models"])

__all__ = ["ai_router"]
