"""Chat orchestration on the API side.

Resolves or creates the session, forwards the message to the AI service,
persists the exchange and serves history, session lists and exports. Every
read is scoped to the requesting user's own active sessions.
"""

import json
from collections import OrderedDict
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from govassist.core.constants import CHAT_PROCESSING_ERROR, CSV_EXPORT_HEADERS
from govassist.core.exceptions import APIClientError, AIServiceError, ChatProcessingError, SessionNotFoundError
from govassist.database.models import ChatMessage, ChatSession
from govassist.repositories.chat_repository import ChatMessageRepository, ChatSessionRepository
from govassist.repositories.procedure_repository import ProcedureRepository
from govassist.schemas.ai import AIRequest, ChatContext
from govassist.schemas.chat import (
    ChatExport,
    ChatHistory,
    ChatMessageRead,
    ChatReply,
    ChatSessionList,
    ChatSessionSummary,
    ProcedureBrief,
)
from govassist.schemas.enums import ExportFormat, Language, ProcedureCategory
from govassist.services.chat.ai_client import AIServiceClient
from govassist.utils.logging import get_logger
from govassist.utils.text import detect_language

LOGGER = get_logger(__name__)


class ChatService:
    """Service for citizen chat sessions."""

    def __init__(
        self,
        session_repo: ChatSessionRepository,
        message_repo: ChatMessageRepository,
        procedure_repo: ProcedureRepository,
        ai_client: AIServiceClient,
    ):
        self.session_repo = session_repo
        self.message_repo = message_repo
        self.procedure_repo = procedure_repo
        self.ai_client = ai_client

    async def send_message(
        self,
        message: str,
        user_id: Optional[UUID] = None,
        session_id: Optional[UUID] = None,
        language: Optional[Language] = None,
    ) -> ChatReply:
        """Answer a message and record the exchange.

        Args:
            message: The citizen's question
            user_id: Authenticated user, or None for anonymous chat
            session_id: Session to continue; a new one is created when it is
                missing, inactive or owned by someone else
            language: Declared language; detected from the text when absent

        Returns:
            ChatReply: Projection of the stored message

        Raises:
            ChatProcessingError: If the AI service could not answer
        """
        language = language or detect_language(message)
        chat_session = await self.get_or_create_session(session_id, user_id)

        ai_request = AIRequest(
            message=message,
            session_id=chat_session.id,
            user_id=user_id,
            language=language,
            context=ChatContext(session_id=chat_session.id),
        )

        try:
            result = await self.ai_client.process(ai_request)
        except (APIClientError, AIServiceError) as e:
            LOGGER.error(
                "AI service could not process message",
                extra={"session_id": str(chat_session.id), "error": str(e)},
            )
            raise ChatProcessingError(CHAT_PROCESSING_ERROR, original_error=e) from e

        answer = result.data
        procedure = None
        if answer.procedure_id:
            procedure = await self.procedure_repo.get_by_id(answer.procedure_id)

        stored = await self.message_repo.create(
            session_id=chat_session.id,
            message=message,
            response=answer.message,
            confidence=answer.confidence,
            category=answer.category.value,
            language=language.value,
            intent=answer.intent,
            entities=[entity.model_dump(mode="json") for entity in answer.entities],
            procedure_id=procedure.id if procedure else None,
        )
        await self.session_repo.update(chat_session)

        LOGGER.info(
            "Chat message processed",
            extra={
                "session_id": str(chat_session.id),
                "message_id": str(stored.id),
                "model_used": result.meta.model_used,
            },
        )

        return ChatReply(
            message_id=stored.id,
            session_id=chat_session.id,
            response=answer.message,
            confidence=answer.confidence,
            category=answer.category,
            language=language,
            intent=answer.intent,
            procedure=ProcedureBrief.model_validate(procedure) if procedure else None,
            suggested_actions=answer.suggested_actions,
            processing_time=result.meta.processing_time,
            model_used=result.meta.model_used,
        )

    async def get_or_create_session(self, session_id: Optional[UUID], user_id: Optional[UUID]) -> ChatSession:
        if session_id is not None:
            existing = await self.session_repo.find_owned(session_id, user_id)
            if existing:
                return existing
            LOGGER.info(
                "Session not found for caller, starting a new one",
                extra={"requested_session_id": str(session_id)},
            )
        return await self.session_repo.create(user_id=user_id, is_active=True)

    async def get_history(
        self,
        user_id: UUID,
        session_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ChatHistory:
        """Page of history in chronological order.

        Pages are counted from the newest message backwards.
        """
        messages, total = await self.message_repo.list_for_user(user_id, session_id, limit=limit, offset=offset)
        messages.reverse()
        return ChatHistory(
            messages=[ChatMessageRead.model_validate(m) for m in messages],
            total=total,
            has_more=offset + len(messages) < total,
        )

    async def list_sessions(self, user_id: UUID, limit: int = 20, offset: int = 0) -> ChatSessionList:
        rows, total = await self.session_repo.list_summaries(user_id, limit=limit, offset=offset)
        sessions = [
            ChatSessionSummary(
                id=row.ChatSession.id,
                last_message=row.last_message,
                last_activity=row.ChatSession.updated_at,
                message_count=row.message_count,
                category=ProcedureCategory(row.last_category) if row.last_category else None,
                created_at=row.ChatSession.created_at,
            )
            for row in rows
        ]
        return ChatSessionList(sessions=sessions, total=total)

    async def delete_session(self, session_id: UUID, user_id: UUID) -> None:
        """Soft-delete a session owned by ``user_id``.

        Raises:
            SessionNotFoundError: If the session does not exist, is already
                deleted or belongs to another user. Nothing is changed.
        """
        chat_session = await self.session_repo.find_owned(session_id, user_id)
        if not chat_session:
            raise SessionNotFoundError("Session not found or access denied")
        await self.session_repo.update(chat_session, is_active=False)
        LOGGER.info("Chat session deleted", extra={"session_id": str(session_id), "user_id": str(user_id)})

    async def export_history(
        self,
        user_id: UUID,
        export_format: ExportFormat = ExportFormat.JSON,
        session_id: Optional[UUID] = None,
    ) -> ChatExport:
        messages = await self.message_repo.list_for_export(user_id, session_id)
        now = datetime.now(timezone.utc)
        filename = f"chat-history-{now.strftime('%Y%m%d%H%M%S')}.{export_format.value}"

        if export_format == ExportFormat.CSV:
            return ChatExport(content=render_csv(messages), media_type="text/csv", filename=filename)
        return ChatExport(
            content=render_json(messages, now),
            media_type="application/json",
            filename=filename,
        )


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def render_csv(messages: List[ChatMessage]) -> str:
    """CSV with a fixed header; message and response are always quoted."""
    rows = [",".join(CSV_EXPORT_HEADERS)]
    for m in messages:
        rows.append(
            ",".join(
                [
                    m.timestamp.isoformat(),
                    str(m.session_id),
                    _quote(m.message),
                    _quote(m.response),
                    m.category,
                    str(m.confidence),
                ]
            )
        )
    return "\n".join(rows)


def render_json(messages: List[ChatMessage], exported_at: datetime) -> str:
    """JSON export grouped by session in chronological order."""
    sessions: "OrderedDict[UUID, dict]" = OrderedDict()
    for m in messages:
        group = sessions.get(m.session_id)
        if group is None:
            group = {
                "session_id": str(m.session_id),
                "created_at": m.session.created_at.isoformat() if m.session else None,
                "messages": [],
            }
            sessions[m.session_id] = group
        group["messages"].append(
            {
                "timestamp": m.timestamp.isoformat(),
                "message": m.message,
                "response": m.response,
                "category": m.category,
                "procedure": {"title": m.procedure.title, "slug": m.procedure.slug} if m.procedure else None,
            }
        )

    return json.dumps(
        {
            "export_date": exported_at.isoformat(),
            "total_messages": len(messages),
            "sessions": list(sessions.values()),
        },
        ensure_ascii=False,
        indent=2,
    )
