"""Repositories for chat sessions and messages."""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from govassist.database.models import ChatMessage, ChatSession
from govassist.repositories.base_repository import BaseRepository


class ChatSessionRepository(BaseRepository[ChatSession]):
    """Sessions are looked up only together with their owner."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ChatSession)

    def _owner_clause(self, user_id: Optional[UUID]):
        if user_id is None:
            return ChatSession.user_id.is_(None)
        return ChatSession.user_id == user_id

    async def find_owned(
        self,
        session_id: UUID,
        user_id: Optional[UUID],
        active_only: bool = True,
    ) -> Optional[ChatSession]:
        """Get a session only if it belongs to ``user_id``.

        Anonymous callers (``user_id`` None) can only reach anonymous sessions.
        """
        try:
            conditions = [ChatSession.id == session_id, self._owner_clause(user_id)]
            if active_only:
                conditions.append(ChatSession.is_active.is_(True))
            result = await self.session.execute(select(ChatSession).where(*conditions))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Error retrieving chat session {session_id}: {str(e)}", exc_info=True)
            raise

    async def list_summaries(
        self,
        user_id: UUID,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[list, int]:
        """Active sessions of a user, most recently updated first.

        Returns:
            Tuple of (rows, total) where each row carries the session, its
            message count, and the text and category of its latest message.
        """
        latest = (
            select(ChatMessage)
            .where(ChatMessage.session_id == ChatSession.id)
            .order_by(desc(ChatMessage.timestamp))
            .limit(1)
            .correlate(ChatSession)
        )
        message_count = (
            select(func.count(ChatMessage.id))
            .where(ChatMessage.session_id == ChatSession.id)
            .correlate(ChatSession)
            .scalar_subquery()
        )
        last_message = latest.with_only_columns(ChatMessage.message).scalar_subquery()
        last_category = latest.with_only_columns(ChatMessage.category).scalar_subquery()

        conditions = [ChatSession.user_id == user_id, ChatSession.is_active.is_(True)]
        try:
            stmt = (
                select(
                    ChatSession,
                    message_count.label("message_count"),
                    last_message.label("last_message"),
                    last_category.label("last_category"),
                )
                .where(*conditions)
                .order_by(desc(ChatSession.updated_at))
                .offset(offset)
                .limit(limit)
            )
            rows = (await self.session.execute(stmt)).all()
            total = await self.count({"user_id": user_id, "is_active": True})
            return list(rows), total
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing chat sessions for {user_id}: {str(e)}", exc_info=True)
            raise


class ChatMessageRepository(BaseRepository[ChatMessage]):
    """Append-only access to chat messages."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ChatMessage)

    def _scope(self, user_id: UUID, session_id: Optional[UUID]):
        conditions = [ChatSession.user_id == user_id, ChatSession.is_active.is_(True)]
        if session_id is not None:
            conditions.append(ChatMessage.session_id == session_id)
        return conditions

    async def list_for_user(
        self,
        user_id: UUID,
        session_id: Optional[UUID] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[ChatMessage], int]:
        """Page of a user's messages, newest first, plus the total count."""
        conditions = self._scope(user_id, session_id)
        try:
            stmt = (
                select(ChatMessage)
                .join(ChatSession, ChatSession.id == ChatMessage.session_id)
                .where(*conditions)
                .order_by(desc(ChatMessage.timestamp))
                .offset(offset)
                .limit(limit)
            )
            messages = list((await self.session.execute(stmt)).scalars().all())

            count_stmt = (
                select(func.count(ChatMessage.id))
                .join(ChatSession, ChatSession.id == ChatMessage.session_id)
                .where(*conditions)
            )
            total = (await self.session.execute(count_stmt)).scalar_one()
            return messages, total
        except SQLAlchemyError as e:
            self.logger.error(f"Error retrieving chat history for {user_id}: {str(e)}", exc_info=True)
            raise

    async def list_for_export(
        self,
        user_id: UUID,
        session_id: Optional[UUID] = None,
    ) -> List[ChatMessage]:
        """All of a user's messages in chronological order, with session and procedure loaded."""
        try:
            stmt = (
                select(ChatMessage)
                .join(ChatSession, ChatSession.id == ChatMessage.session_id)
                .where(*self._scope(user_id, session_id))
                .options(selectinload(ChatMessage.session), selectinload(ChatMessage.procedure))
                .order_by(ChatMessage.timestamp)
            )
            return list((await self.session.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error exporting chat history for {user_id}: {str(e)}", exc_info=True)
            raise
