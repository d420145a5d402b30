from unittest.mock import AsyncMock

import pytest

from govassist.core.exceptions import APIClientError, APITimeoutError
from govassist.schemas.ai import AIRequest, ChatContext
from govassist.schemas.enums import ActionType, EntityType, Language, ProcedureCategory
from govassist.services.ai.providers.huggingface_provider import HuggingFaceProvider
from govassist.services.ai.providers.openai_provider import EXTRACTION_TOOL, OpenAIProvider


@pytest.fixture
def search(nic_procedure) -> AsyncMock:
    search = AsyncMock()
    search.find_relevant.return_value = [nic_procedure]
    return search


@pytest.fixture
def empty_search() -> AsyncMock:
    search = AsyncMock()
    search.find_relevant.return_value = []
    return search


class TestOpenAIProvider:

    def test_disabled_without_client(self, search):
        assert OpenAIProvider(search, None).is_enabled is False

    @pytest.mark.asyncio
    async def test_answer_from_tool_call(self, search, nic_procedure):
        client = AsyncMock()
        client.call_tool.return_value = {
            "intent": "fee_inquiry",
            "category": "IDENTITY_DOCUMENTS",
            "confidence": 0.92,
            "entities": [
                {"type": "document_type", "value": "NIC", "confidence": 0.8},
                {"type": "phone_number", "value": "0771234567"},
            ],
        }
        provider = OpenAIProvider(search, client, model_name="gpt-4")

        result = await provider.generate_answer(
            AIRequest(message="How much is a NIC? call me on 0771234567", language=Language.EN)
        )

        assert result.success
        assert result.model_used == "gpt-4"
        response = result.response
        assert response.intent == "fee_inquiry"
        assert response.category == ProcedureCategory.IDENTITY_DOCUMENTS
        assert response.confidence == 0.92
        assert response.procedure_id == nic_procedure.id
        assert response.message.startswith("To apply for new national identity card:")
        assert [a.type for a in response.suggested_actions] == [ActionType.PROCEDURE, ActionType.SEARCH]

        # The regex phone match wins over the duplicate from the model
        phones = [e for e in response.entities if e.type == EntityType.PHONE_NUMBER]
        assert len(phones) == 1
        assert phones[0].position is not None
        assert any(e.type == EntityType.DOCUMENT_TYPE and e.value == "NIC" for e in response.entities)

        kwargs = client.call_tool.await_args.kwargs
        assert kwargs["tool"] is EXTRACTION_TOOL
        assert "Apply for New National Identity Card" in kwargs["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_missing_fields_use_defaults(self, empty_search):
        client = AsyncMock()
        client.call_tool.return_value = {"category": "NOT_A_CATEGORY"}
        provider = OpenAIProvider(empty_search, client)

        result = await provider.generate_answer(AIRequest(message="hello"))

        assert result.success
        assert result.response.intent == "unclear"
        assert result.response.category == ProcedureCategory.OTHER
        assert result.response.confidence == 0.5
        assert result.response.procedure_id is None
        assert result.response.message.startswith("I can help you")

    @pytest.mark.asyncio
    async def test_client_failure_becomes_unsuccessful_result(self, search):
        client = AsyncMock()
        client.call_tool.side_effect = APITimeoutError("OpenAI request timed out")
        provider = OpenAIProvider(search, client, model_name="gpt-4")

        result = await provider.generate_answer(AIRequest(message="passport"))

        assert not result.success
        assert result.error == "OpenAI request timed out"
        assert result.model_used == "gpt-4"

    def test_user_prompt_includes_previous_messages(self):
        request = AIRequest(
            message="and the fee?",
            context=ChatContext(previous_messages=["How do I get a NIC?"]),
        )
        prompt = OpenAIProvider._user_prompt(request)
        assert prompt.startswith("User question: and the fee?")
        assert "How do I get a NIC?" in prompt


class TestHuggingFaceProvider:

    @pytest.mark.asyncio
    async def test_nic_question(self, search, nic_procedure):
        client = AsyncMock()
        client.classify.return_value = [("procedure inquiry", 0.81), ("general help", 0.1)]
        client.generate.return_value = "  Visit your Divisional Secretariat.  "
        provider = HuggingFaceProvider(search, client)

        result = await provider.generate_answer(AIRequest(message="How do I get a new NIC?"))

        assert result.success
        assert result.model_used == "huggingface-multilingual"
        response = result.response
        assert response.language == Language.EN
        assert response.category == ProcedureCategory.IDENTITY_DOCUMENTS
        assert response.intent == "procedure_inquiry"
        assert response.confidence >= 0.4
        assert response.message == "Visit your Divisional Secretariat."
        assert response.procedure_id == nic_procedure.id

    @pytest.mark.asyncio
    async def test_classification_failure_defaults_to_general_help(self, search):
        client = AsyncMock()
        client.classify.side_effect = APIClientError("model loading")
        client.generate.return_value = "Some answer"
        provider = HuggingFaceProvider(search, client)

        result = await provider.generate_answer(AIRequest(message="How do I get a new NIC?"))

        assert result.success
        assert result.response.intent == "general_help"

    @pytest.mark.asyncio
    async def test_generation_failure_uses_first_step_template(self, search):
        client = AsyncMock()
        client.classify.return_value = [("fee inquiry", 0.7)]
        client.generate.side_effect = APIClientError("rate limited")
        provider = HuggingFaceProvider(search, client)

        result = await provider.generate_answer(
            AIRequest(message="NIC fee?", language=Language.SI)
        )

        assert result.success
        assert result.response.language == Language.SI
        assert result.response.message.startswith("නව ජාතික හැඳුනුම්පත සඳහා අයදුම් කිරීම සඳහා")

    @pytest.mark.asyncio
    async def test_detects_language_when_not_declared(self, empty_search):
        client = AsyncMock()
        client.classify.return_value = [("greeting", 0.9)]
        provider = HuggingFaceProvider(empty_search, client)

        result = await provider.generate_answer(AIRequest(message="வணக்கம்"))

        assert result.response.language == Language.TA
        assert result.response.confidence == 0.3
        assert result.response.suggested_actions == []
        client.generate.assert_not_awaited()
