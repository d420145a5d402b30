"""FastAPI dependency factories shared by both services.

Long-lived clients (database, cache, SDK wrappers, AI service client) are
built in each application's lifespan and read from ``app.state``; repositories
and services are built per request around the request's database session.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from govassist.core.cache import ResponseCache
from govassist.core.config import settings
from govassist.core.database import get_async_session
from govassist.core.llm_client import HuggingFaceClient, OpenAIChatClient
from govassist.repositories.chat_repository import ChatMessageRepository, ChatSessionRepository
from govassist.repositories.procedure_repository import ProcedureRepository
from govassist.services.ai.orchestrator import AIOrchestrator
from govassist.services.ai.providers.huggingface_provider import HuggingFaceProvider
from govassist.services.ai.providers.openai_provider import OpenAIProvider
from govassist.services.chat.ai_client import AIServiceClient
from govassist.services.chat.chat_service import ChatService
from govassist.services.procedure.procedure_service import ProcedureService
from govassist.services.procedure.search_service import ProcedureSearchService


async def get_procedure_repository(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> ProcedureRepository:
    return ProcedureRepository(db_session)


async def get_search_service(
    repository: Annotated[ProcedureRepository, Depends(get_procedure_repository)]
) -> ProcedureSearchService:
    return ProcedureSearchService(repository)


async def get_procedure_service(
    repository: Annotated[ProcedureRepository, Depends(get_procedure_repository)]
) -> ProcedureService:
    return ProcedureService(repository)


def get_ai_service_client(request: Request) -> AIServiceClient:
    client: Optional[AIServiceClient] = getattr(request.app.state, "ai_client", None)
    if client is None:
        client = AIServiceClient(settings.chat.ai_service_url, timeout=settings.chat.ai_service_timeout)
    return client


async def get_chat_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)],
    ai_client: Annotated[AIServiceClient, Depends(get_ai_service_client)],
) -> ChatService:
    return ChatService(
        session_repo=ChatSessionRepository(db_session),
        message_repo=ChatMessageRepository(db_session),
        procedure_repo=ProcedureRepository(db_session),
        ai_client=ai_client,
    )


def build_llm_clients() -> tuple[Optional[OpenAIChatClient], Optional[HuggingFaceClient]]:
    """SDK clients for every provider that has an API key configured."""
    ai = settings.ai
    openai_client = (
        OpenAIChatClient(
            api_key=ai.openai_api_key,
            model=ai.openai_model,
            max_tokens=ai.openai_max_tokens,
            temperature=ai.openai_temperature,
        )
        if ai.openai_api_key
        else None
    )
    hf_client = HuggingFaceClient(api_key=ai.huggingface_api_key) if ai.huggingface_api_key else None
    return openai_client, hf_client


def get_optional_cache(request: Request) -> Optional[ResponseCache]:
    return getattr(request.app.state, "cache", None)


async def get_orchestrator(
    request: Request,
    search: Annotated[ProcedureSearchService, Depends(get_search_service)],
    cache: Annotated[Optional[ResponseCache], Depends(get_optional_cache)],
) -> AIOrchestrator:
    """Orchestrator with both adapters in preference order, OpenAI first."""
    openai_client = getattr(request.app.state, "openai_client", None)
    hf_client = getattr(request.app.state, "huggingface_client", None)
    ai = settings.ai
    providers = [
        OpenAIProvider(search, openai_client, model_name=ai.openai_model),
        HuggingFaceProvider(
            search,
            hf_client,
            model_name=ai.huggingface_model_name,
            classifier_model=ai.huggingface_classifier_model,
            generation_model=ai.huggingface_generation_model,
            max_new_tokens=ai.huggingface_max_tokens,
            temperature=ai.huggingface_temperature,
        ),
    ]
    return AIOrchestrator(providers, cache=cache)
