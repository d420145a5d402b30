"""Schemas exchanged with and inside the AI service."""

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from govassist.core.constants import MAX_MESSAGE_LENGTH
from govassist.schemas.enums import ActionType, EntityType, IntentType, Language, ProcedureCategory


class EntityPosition(BaseModel):
    start: int
    end: int


class ExtractedEntity(BaseModel):
    type: EntityType
    value: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    position: Optional[EntityPosition] = None


class SuggestedAction(BaseModel):
    type: ActionType
    label: str
    label_si: Optional[str] = None
    label_ta: Optional[str] = None
    data: dict[str, Any] = Field(default_factory=dict)


class ChatContext(BaseModel):
    session_id: Optional[UUID] = None
    previous_messages: list[str] = Field(default_factory=list)


class AIRequest(BaseModel):
    """Question forwarded to the AI service."""

    message: str = Field(..., max_length=MAX_MESSAGE_LENGTH)
    session_id: Optional[UUID] = None
    user_id: Optional[UUID] = None
    language: Optional[Language] = None
    context: Optional[ChatContext] = None

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Message is required")
        return value


class AIResponse(BaseModel):
    """Normalized answer produced by any provider."""

    message: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    category: ProcedureCategory = ProcedureCategory.OTHER
    intent: str = IntentType.UNCLEAR.value
    entities: list[ExtractedEntity] = Field(default_factory=list)
    suggested_actions: list[SuggestedAction] = Field(default_factory=list)
    procedure_id: Optional[UUID] = None
    language: Language = Language.EN


class ProcessingResult(BaseModel):
    """Outcome of one orchestrator or provider call."""

    success: bool
    response: Optional[AIResponse] = None
    error: Optional[str] = None
    processing_time: float = 0.0
    model_used: str


class ModelStatus(BaseModel):
    name: str
    provider: str
    enabled: bool
    status: str


class ProcessingMeta(BaseModel):
    processing_time: float
    model_used: str


class ProcessChatResponse(BaseModel):
    """Body returned by ``POST /chat/process``."""

    success: bool
    data: AIResponse
    meta: ProcessingMeta


class CacheClearResponse(BaseModel):
    cleared: int
