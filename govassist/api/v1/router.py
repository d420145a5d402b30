from fastapi import APIRouter

from govassist.api.v1.endpoints import chat, procedures

# Create API router
api_router = APIRouter()

api_router.include_router(procedures.router, prefix="/procedures", tags=["Procedures"])
api_router.include_router(chat.router, prefix="/chat", tags=["Chat"])

__all__ = ["api_router"]
