"""Chat schemas for the API service."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from govassist.core.constants import MAX_MESSAGE_LENGTH
from govassist.schemas.ai import SuggestedAction
from govassist.schemas.enums import Language, ProcedureCategory


class ChatSendRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)
    session_id: Optional[UUID] = None
    language: Optional[Language] = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message is required")
        return value


class ProcedureBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    category: ProcedureCategory


class ChatReply(BaseModel):
    """What the caller sees after sending a message."""

    message_id: UUID
    session_id: UUID
    response: str
    confidence: float
    category: ProcedureCategory
    language: Language
    intent: Optional[str] = None
    procedure: Optional[ProcedureBrief] = None
    suggested_actions: list[SuggestedAction] = Field(default_factory=list)
    processing_time: float = 0.0
    model_used: str = ""


class ChatMessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    session_id: UUID
    message: str
    response: str
    confidence: float
    category: ProcedureCategory
    language: Language
    intent: Optional[str] = None
    entities: Optional[list[dict[str, Any]]] = None
    procedure_id: Optional[UUID] = None
    timestamp: datetime


class ChatHistory(BaseModel):
    messages: list[ChatMessageRead]
    total: int
    has_more: bool


class ChatSessionSummary(BaseModel):
    id: UUID
    last_message: Optional[str] = None
    last_activity: datetime
    message_count: int
    category: Optional[ProcedureCategory] = None
    created_at: datetime


class ChatSessionList(BaseModel):
    sessions: list[ChatSessionSummary]
    total: int


class ChatExport(BaseModel):
    """Rendered export ready to be sent as an attachment."""

    content: str
    media_type: str
    filename: str
