"""HuggingFace-backed provider adapter."""

from typing import List, Optional, Tuple

from govassist.core.exceptions import APIClientError
from govassist.core.llm_client import HuggingFaceClient
from govassist.schemas.ai import AIRequest, AIResponse, ProcessingResult
from govassist.schemas.enums import IntentType, Language
from govassist.schemas.procedure import ProcedureRead
from govassist.services.ai.providers.base import ProviderAdapter, elapsed_ms
from govassist.services.ai.text_analysis import (
    EntityExtractor,
    RequestCategorizer,
    build_suggested_actions,
    first_step_answer,
    generic_help_message,
    overlap_confidence,
)
from govassist.services.procedure.search_service import ProcedureSearchService
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)

INTENT_LABELS = [
    "procedure inquiry",
    "document requirement",
    "fee inquiry",
    "office location",
    "status check",
    "general help",
    "greeting",
]

GENERATION_PROMPT = """Based on this government procedure information:
{context}

User question: {message}

Provide a helpful, concise response in {language} language:"""


class HuggingFaceProvider(ProviderAdapter):
    """Fallback provider.

    Intent comes from zero-shot classification, category from keywords and
    confidence from token overlap with the best matching procedure. If
    classification or generation fails, it falls back to neutral defaults
    instead of failing the whole answer.
    """

    provider = "huggingface"

    def __init__(
        self,
        search: ProcedureSearchService,
        client: Optional[HuggingFaceClient],
        model_name: str = "huggingface-multilingual",
        classifier_model: str = "facebook/bart-large-mnli",
        generation_model: str = "microsoft/DialoGPT-medium",
        max_new_tokens: int = 150,
        temperature: float = 0.7,
    ):
        super().__init__(search)
        self.client = client
        self.name = model_name
        self.classifier_model = classifier_model
        self.generation_model = generation_model
        self.max_new_tokens = max_new_tokens
        self.temperature = temperature
        self.entity_extractor = EntityExtractor()
        self.categorizer = RequestCategorizer()

    @property
    def is_enabled(self) -> bool:
        return self.client is not None

    async def _answer(self, request: AIRequest, language: Language, started: float) -> ProcessingResult:
        procedures = await self.relevant_procedures(request.message)
        intent, _ = await self.classify_intent(request.message)
        category = self.categorizer.categorize(request.message)

        response = AIResponse(
            message=await self.generate_text(request.message, procedures, language),
            confidence=overlap_confidence(request.message, procedures),
            category=category,
            intent=intent,
            entities=self.entity_extractor.extract(request.message),
            suggested_actions=build_suggested_actions(intent, procedures, category),
            procedure_id=procedures[0].id if procedures else None,
            language=language,
        )
        return ProcessingResult(
            success=True,
            response=response,
            processing_time=elapsed_ms(started),
            model_used=self.name,
        )

    async def classify_intent(self, message: str) -> Tuple[str, float]:
        try:
            ranked = await self.client.classify(message, INTENT_LABELS, model=self.classifier_model)
        except APIClientError as e:
            LOGGER.warning(f"Intent classification failed: {e}")
            return IntentType.GENERAL_HELP.value, 0.5

        if not ranked:
            return IntentType.GENERAL_HELP.value, 0.5
        label, score = ranked[0]
        return label.replace(" ", "_"), score

    async def generate_text(self, message: str, procedures: List[ProcedureRead], language: Language) -> str:
        if not procedures:
            return generic_help_message(language)

        procedure = procedures[0]
        steps = "\n".join(f"{i}. {step.instruction}" for i, step in enumerate(procedure.steps[:3], start=1))
        prompt = GENERATION_PROMPT.format(
            context=f"Procedure: {procedure.title}\nSteps: {steps}",
            message=message,
            language=language.value,
        )

        try:
            generated = await self.client.generate(
                prompt,
                model=self.generation_model,
                max_new_tokens=self.max_new_tokens,
                temperature=self.temperature,
            )
        except APIClientError as e:
            LOGGER.warning(f"Text generation failed, using template answer: {e}")
            return first_step_answer(procedure, language)

        return generated.strip() or first_step_answer(procedure, language)
