"""OpenAI-backed provider adapter.

The model is used to classify the question (intent, category, entities and
confidence) through a forced tool call. The answer text itself is built from
the best matching procedure so that steps and fees are quoted verbatim.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from govassist.core.llm_client import OpenAIChatClient
from govassist.schemas.ai import AIRequest, AIResponse, ExtractedEntity, ProcessingResult
from govassist.schemas.enums import EntityType, IntentType, Language, ProcedureCategory
from govassist.schemas.procedure import ProcedureRead
from govassist.services.ai.providers.base import ProviderAdapter, elapsed_ms
from govassist.services.ai.text_analysis import (
    EntityExtractor,
    build_suggested_actions,
    generic_help_message,
    step_list_answer,
)
from govassist.services.procedure.search_service import ProcedureSearchService
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)

EXTRACTION_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "extract_intent_and_entities",
        "description": "Extract the user's intent, the procedure category and entities from the question",
        "parameters": {
            "type": "object",
            "properties": {
                "intent": {
                    "type": "string",
                    "enum": [intent.value for intent in IntentType],
                },
                "category": {
                    "type": "string",
                    "enum": [category.value for category in ProcedureCategory],
                },
                "entities": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "type": {"type": "string", "enum": [e.value for e in EntityType]},
                            "value": {"type": "string"},
                            "confidence": {"type": "number"},
                        },
                        "required": ["type", "value"],
                    },
                },
                "confidence": {"type": "number", "minimum": 0, "maximum": 1},
            },
            "required": ["intent", "category", "confidence"],
        },
    },
}

SYSTEM_PROMPT = """You are an AI assistant for Sri Lankan government services. Help users with:
- Government procedures and requirements
- Document applications (NIC, Passport, Birth Certificate, etc.)
- Office locations and contact information
- Fees and processing times

Language: {language}
Available procedures context:
{procedure_context}

Guidelines:
- Be helpful, accurate, and concise
- Always provide step-by-step guidance
- Include relevant fees and requirements
- Suggest nearest offices when applicable
- If unsure, ask for clarification
- Respond in the user's preferred language"""


class OpenAIProvider(ProviderAdapter):
    """Primary provider."""

    provider = "openai"

    def __init__(
        self,
        search: ProcedureSearchService,
        client: Optional[OpenAIChatClient],
        model_name: str = "gpt-4",
    ):
        super().__init__(search)
        self.client = client
        self.name = model_name
        self.entity_extractor = EntityExtractor()

    @property
    def is_enabled(self) -> bool:
        return self.client is not None

    async def _answer(self, request: AIRequest, language: Language, started: float) -> ProcessingResult:
        procedures = await self.relevant_procedures(request.message)

        extracted = await self.client.call_tool(
            messages=[
                {"role": "system", "content": self._system_prompt(language, procedures)},
                {"role": "user", "content": self._user_prompt(request)},
            ],
            tool=EXTRACTION_TOOL,
        )

        intent = extracted.get("intent") or IntentType.UNCLEAR.value
        category = self._parse_category(extracted.get("category"))
        confidence = self._parse_confidence(extracted.get("confidence"))

        entities = self.entity_extractor.extract(request.message)
        entities.extend(self._parse_entities(extracted.get("entities"), entities))

        message = step_list_answer(procedures[0], language) if procedures else generic_help_message(language)

        response = AIResponse(
            message=message,
            confidence=confidence,
            category=category,
            intent=intent,
            entities=entities,
            suggested_actions=build_suggested_actions(intent, procedures, category),
            procedure_id=procedures[0].id if procedures else None,
            language=language,
        )
        LOGGER.info(
            "OpenAI answer generated",
            extra={"intent": intent, "category": category.value, "procedures": len(procedures)},
        )
        return ProcessingResult(
            success=True,
            response=response,
            processing_time=elapsed_ms(started),
            model_used=self.name,
        )

    @staticmethod
    def _system_prompt(language: Language, procedures: List[ProcedureRead]) -> str:
        context = "\n".join(
            f"{p.title}: {p.steps[0].instruction if p.steps else 'No steps available'}"
            for p in procedures
        )
        return SYSTEM_PROMPT.format(language=language.value, procedure_context=context or "None")

    @staticmethod
    def _user_prompt(request: AIRequest) -> str:
        prompt = f"User question: {request.message}"
        if request.context and request.context.previous_messages:
            prompt += "\n\nPrevious conversation context:\n" + "\n".join(request.context.previous_messages)
        return prompt

    @staticmethod
    def _parse_category(value: Any) -> ProcedureCategory:
        try:
            return ProcedureCategory(value)
        except ValueError:
            return ProcedureCategory.OTHER

    @staticmethod
    def _parse_confidence(value: Any) -> float:
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
            return min(float(value), 1.0)
        return 0.5

    @staticmethod
    def _parse_entities(raw: Any, existing: List[ExtractedEntity]) -> List[ExtractedEntity]:
        """Entities named by the model, skipping ones the regexes already found."""
        if not isinstance(raw, list):
            return []

        seen = {(entity.type, entity.value) for entity in existing}
        parsed: List[ExtractedEntity] = []
        for item in raw:
            if not isinstance(item, dict):
                continue
            try:
                entity = ExtractedEntity(
                    type=item.get("type"),
                    value=str(item.get("value", "")),
                    confidence=min(max(float(item.get("confidence", 0.7)), 0.0), 1.0),
                )
            except (PydanticValidationError, TypeError, ValueError):
                LOGGER.debug("Skipping malformed entity from model", extra={"entity": item})
                continue
            if entity.value and (entity.type, entity.value) not in seen:
                seen.add((entity.type, entity.value))
                parsed.append(entity)
        return parsed
