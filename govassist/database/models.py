"""SQLAlchemy models for all database tables."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    TIMESTAMP,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from govassist.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Procedure(Base):
    """Government administrative procedure in three languages."""

    __tablename__ = "procedures"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    title_si: Mapped[str | None] = mapped_column(String, nullable=True)
    title_ta: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(
        String, nullable=False, index=True
    )  # ProcedureCategory value
    status: Mapped[str] = mapped_column(
        String, nullable=False, default="ACTIVE", index=True
    )  # ACTIVE | DEPRECATED | DRAFT | UNDER_REVIEW
    difficulty: Mapped[str] = mapped_column(String, nullable=False, default="MEDIUM")
    estimated_duration: Mapped[str | None] = mapped_column(String, nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    slug: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    keywords: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    search_tags: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=_utcnow, nullable=False
    )
    last_updated: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=_utcnow, onupdate=_utcnow
    )

    # Relationships
    steps: Mapped[list["ProcedureStep"]] = relationship(
        "ProcedureStep",
        back_populates="procedure",
        cascade="all, delete-orphan",
        order_by="ProcedureStep.order",
    )
    requirements: Mapped[list["Requirement"]] = relationship(
        "Requirement",
        back_populates="procedure",
        cascade="all, delete-orphan",
        order_by="Requirement.order",
    )
    fees: Mapped[list["Fee"]] = relationship(
        "Fee", back_populates="procedure", cascade="all, delete-orphan"
    )
    office_links: Mapped[list["ProcedureOffice"]] = relationship(
        "ProcedureOffice", back_populates="procedure", cascade="all, delete-orphan"
    )


class ProcedureStep(Base):
    """One ordered step of a procedure."""

    __tablename__ = "procedure_steps"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    procedure_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("procedures.id", ondelete="CASCADE"), nullable=False
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    instruction: Mapped[str] = mapped_column(Text, nullable=False)
    instruction_si: Mapped[str | None] = mapped_column(Text, nullable=True)
    instruction_ta: Mapped[str | None] = mapped_column(Text, nullable=True)
    estimated_time: Mapped[str | None] = mapped_column(String, nullable=True)
    tips: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    required_docs: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)

    procedure: Mapped["Procedure"] = relationship("Procedure", back_populates="steps")


class Requirement(Base):
    """Document or condition needed for a procedure."""

    __tablename__ = "requirements"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    procedure_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("procedures.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    name_si: Mapped[str | None] = mapped_column(String, nullable=True)
    name_ta: Mapped[str | None] = mapped_column(String, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    procedure: Mapped["Procedure"] = relationship("Procedure", back_populates="requirements")


class Fee(Base):
    """Fee charged for a procedure."""

    __tablename__ = "fees"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    procedure_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("procedures.id", ondelete="CASCADE"), nullable=False
    )
    description: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String, nullable=False, default="LKR")
    is_optional: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    procedure: Mapped["Procedure"] = relationship("Procedure", back_populates="fees")


class Office(Base):
    """Government office that handles procedures."""

    __tablename__ = "offices"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    name_si: Mapped[str | None] = mapped_column(String, nullable=True)
    name_ta: Mapped[str | None] = mapped_column(String, nullable=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    district: Mapped[str] = mapped_column(String, nullable=False)
    province: Mapped[str] = mapped_column(String, nullable=False)
    contact_numbers: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    website: Mapped[str | None] = mapped_column(String, nullable=True)
    working_hours: Mapped[str | None] = mapped_column(String, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    procedure_links: Mapped[list["ProcedureOffice"]] = relationship(
        "ProcedureOffice", back_populates="office", cascade="all, delete-orphan"
    )


class ProcedureOffice(Base):
    """Link between a procedure and an office that handles it."""

    __tablename__ = "procedure_offices"

    procedure_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("procedures.id", ondelete="CASCADE"), primary_key=True
    )
    office_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("offices.id", ondelete="CASCADE"), primary_key=True
    )
    is_main: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    procedure: Mapped["Procedure"] = relationship("Procedure", back_populates="office_links")
    office: Mapped["Office"] = relationship("Office", back_populates="procedure_links")


class ChatSession(Base):
    """Conversation container, soft-deleted through ``is_active``."""

    __tablename__ = "chat_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), nullable=True, index=True
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=_utcnow, onupdate=_utcnow
    )

    messages: Mapped[list["ChatMessage"]] = relationship(
        "ChatMessage",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ChatMessage.timestamp",
    )


class ChatMessage(Base):
    """One question/answer exchange. Rows are never updated."""

    __tablename__ = "chat_messages"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    session_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("chat_sessions.id", ondelete="CASCADE"), nullable=False
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)
    confidence: Mapped[float] = mapped_column(Float, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, default="OTHER")
    language: Mapped[str] = mapped_column(String, nullable=False, default="EN")
    intent: Mapped[str | None] = mapped_column(String, nullable=True)
    entities: Mapped[list | None] = mapped_column(JSONB, nullable=True)
    procedure_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("procedures.id", ondelete="SET NULL"), nullable=True
    )
    timestamp: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), default=_utcnow, nullable=False, index=True
    )

    session: Mapped["ChatSession"] = relationship("ChatSession", back_populates="messages")
    procedure: Mapped["Procedure | None"] = relationship("Procedure")
