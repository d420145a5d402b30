from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from govassist.core.dependencies import get_chat_service
from govassist.core.exceptions import ChatProcessingError, SessionNotFoundError
from govassist.main import app
from govassist.schemas.chat import ChatExport, ChatReply, ChatSessionList
from govassist.schemas.enums import ExportFormat, Language, ProcedureCategory


@pytest.fixture
def chat_service() -> AsyncMock:
    service = AsyncMock()
    app.dependency_overrides[get_chat_service] = lambda: service
    return service


def make_reply() -> ChatReply:
    return ChatReply(
        message_id=uuid4(),
        session_id=uuid4(),
        response="For Apply for New National Identity Card, you need to: Visit the office",
        confidence=0.6,
        category=ProcedureCategory.IDENTITY_DOCUMENTS,
        language=Language.EN,
        intent="procedure_inquiry",
        model_used="gpt-4",
        processing_time=85.0,
    )


class TestSendMessage:

    def test_anonymous_send(self, test_client, chat_service):
        reply = make_reply()
        chat_service.send_message.return_value = reply

        response = test_client.post("/api/v1/chat/send", json={"message": "  How do I get a new NIC?  "})

        assert response.status_code == 200
        assert response.json()["data"]["session_id"] == str(reply.session_id)
        chat_service.send_message.assert_awaited_once_with(
            "How do I get a new NIC?", user_id=None, session_id=None, language=None
        )

    def test_authenticated_send_passes_user(self, test_client, chat_service, auth_headers, user_id):
        chat_service.send_message.return_value = make_reply()

        response = test_client.post(
            "/api/v1/chat/send",
            json={"message": "passport fees", "language": "SI"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        kwargs = chat_service.send_message.await_args.kwargs
        assert kwargs["user_id"] == user_id
        assert kwargs["language"] == Language.SI

    @pytest.mark.parametrize("body", [{"message": ""}, {"message": "   "}, {}, {"message": "x" * 2001}])
    def test_invalid_message(self, test_client, chat_service, body):
        response = test_client.post("/api/v1/chat/send", json=body)
        assert response.status_code == 422
        chat_service.send_message.assert_not_awaited()

    def test_ai_failure_maps_to_bad_gateway(self, test_client, chat_service):
        chat_service.send_message.side_effect = ChatProcessingError("Failed to process message")

        response = test_client.post("/api/v1/chat/send", json={"message": "How do I get a new NIC?"})

        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to process message"


class TestSessions:

    def test_history_requires_auth(self, test_client, chat_service):
        response = test_client.get("/api/v1/chat/history")
        assert response.status_code == 401

    def test_expired_token_rejected(self, test_client, chat_service, token_factory):
        token = token_factory(expires_in=-60)
        response = test_client.get("/api/v1/chat/sessions", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_list_sessions(self, test_client, chat_service, auth_headers, user_id):
        chat_service.list_sessions.return_value = ChatSessionList(sessions=[], total=0)

        response = test_client.get("/api/v1/chat/sessions", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["data"] == {"sessions": [], "total": 0}
        chat_service.list_sessions.assert_awaited_once_with(user_id, limit=20, offset=0)

    def test_delete_session(self, test_client, chat_service, auth_headers, user_id):
        session_id = uuid4()

        response = test_client.delete(f"/api/v1/chat/sessions/{session_id}", headers=auth_headers)

        assert response.status_code == 200
        chat_service.delete_session.assert_awaited_once_with(session_id, user_id)

    def test_delete_foreign_session_is_not_found(self, test_client, chat_service, auth_headers):
        chat_service.delete_session.side_effect = SessionNotFoundError("Session not found or access denied")

        response = test_client.delete(f"/api/v1/chat/sessions/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found or access denied"


class TestExport:

    def test_csv_attachment(self, test_client, chat_service, auth_headers, user_id):
        chat_service.export_history.return_value = ChatExport(
            content="Timestamp,Session ID,Message,Response,Category,Confidence",
            media_type="text/csv",
            filename="chat-history-20240115090000.csv",
        )

        response = test_client.get("/api/v1/chat/export", params={"format": "csv"}, headers=auth_headers)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert response.headers["content-disposition"] == 'attachment; filename="chat-history-20240115090000.csv"'
        assert response.text.startswith("Timestamp,")
        chat_service.export_history.assert_awaited_once_with(
            user_id, export_format=ExportFormat.CSV, session_id=None
        )

    def test_unknown_format(self, test_client, chat_service, auth_headers):
        response = test_client.get("/api/v1/chat/export", params={"format": "xml"}, headers=auth_headers)
        assert response.status_code == 422
