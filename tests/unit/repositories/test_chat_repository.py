from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from govassist.repositories.chat_repository import ChatMessageRepository, ChatSessionRepository


def compile_statement(statement):
    compiled = statement.compile(dialect=postgresql.dialect())
    return str(compiled), compiled.params


@pytest.fixture
def session() -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = []
    result.scalar_one.return_value = 0
    result.scalar_one_or_none.return_value = None
    result.all.return_value = []

    session = MagicMock()
    session.execute = AsyncMock(return_value=result)
    return session


def executed(session, index: int = 0):
    return compile_statement(session.execute.await_args_list[index].args[0])


class TestSessionOwnership:

    @pytest.mark.asyncio
    async def test_owned_session_is_scoped_to_user(self, session, user_id):
        session_id = uuid4()

        await ChatSessionRepository(session).find_owned(session_id, user_id)

        sql, params = executed(session)
        assert "chat_sessions.id = %(id_1)s" in sql
        assert params["id_1"] == session_id
        assert "chat_sessions.user_id = %(user_id_1)s" in sql
        assert params["user_id_1"] == user_id
        assert "chat_sessions.is_active IS true" in sql

    @pytest.mark.asyncio
    async def test_anonymous_caller_only_reaches_anonymous_sessions(self, session):
        await ChatSessionRepository(session).find_owned(uuid4(), None)

        sql, params = executed(session)
        assert "chat_sessions.user_id IS NULL" in sql
        assert "user_id_1" not in params

    @pytest.mark.asyncio
    async def test_inactive_sessions_reachable_on_request(self, session, user_id):
        await ChatSessionRepository(session).find_owned(uuid4(), user_id, active_only=False)

        sql, _ = executed(session)
        assert "chat_sessions.user_id = %(user_id_1)s" in sql
        assert "is_active" not in sql

    @pytest.mark.asyncio
    async def test_summaries_list_only_own_active_sessions(self, session, user_id):
        await ChatSessionRepository(session).list_summaries(user_id, limit=20, offset=40)

        sql, params = executed(session, 0)
        assert "chat_sessions.user_id = %(user_id_1)s" in sql
        assert params["user_id_1"] == user_id
        assert "chat_sessions.is_active IS true" in sql
        assert "ORDER BY chat_sessions.updated_at DESC" in sql
        assert 20 in params.values()
        assert 40 in params.values()

        count_sql, count_params = executed(session, 1)
        assert "chat_sessions.user_id = %(user_id_1)s" in count_sql
        assert count_params["user_id_1"] == user_id


class TestMessageScoping:

    @pytest.mark.asyncio
    async def test_history_joins_owner_and_orders_newest_first(self, session, user_id):
        await ChatMessageRepository(session).list_for_user(user_id, limit=50, offset=0)

        sql, params = executed(session, 0)
        assert "JOIN chat_sessions ON chat_sessions.id = chat_messages.session_id" in sql
        assert "chat_sessions.user_id = %(user_id_1)s" in sql
        assert params["user_id_1"] == user_id
        assert "chat_sessions.is_active IS true" in sql
        assert "chat_messages.session_id = %(session_id_1)s" not in sql
        assert "ORDER BY chat_messages.timestamp DESC" in sql

        count_sql, count_params = executed(session, 1)
        assert "chat_sessions.user_id = %(user_id_1)s" in count_sql
        assert count_params["user_id_1"] == user_id

    @pytest.mark.asyncio
    async def test_history_for_one_session_keeps_owner_clause(self, session, user_id):
        session_id = uuid4()

        await ChatMessageRepository(session).list_for_user(user_id, session_id=session_id)

        sql, params = executed(session, 0)
        assert "chat_messages.session_id = %(session_id_1)s" in sql
        assert params["session_id_1"] == session_id
        assert "chat_sessions.user_id = %(user_id_1)s" in sql

    @pytest.mark.asyncio
    async def test_export_is_owner_scoped_and_chronological(self, session, other_user_id):
        await ChatMessageRepository(session).list_for_export(other_user_id)

        sql, params = executed(session)
        assert "chat_sessions.user_id = %(user_id_1)s" in sql
        assert params["user_id_1"] == other_user_id
        assert "chat_sessions.is_active IS true" in sql
        assert "ORDER BY chat_messages.timestamp" in sql
        assert "ORDER BY chat_messages.timestamp DESC" not in sql
        assert "LIMIT" not in sql
