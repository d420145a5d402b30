"""Provider adapter contract."""

import time
from abc import ABC, abstractmethod
from typing import List

from govassist.schemas.ai import AIRequest, ProcessingResult
from govassist.schemas.enums import Language
from govassist.schemas.procedure import ProcedureRead
from govassist.services.procedure.search_service import ProcedureSearchService
from govassist.utils.logging import get_logger
from govassist.utils.text import detect_language

LOGGER = get_logger(__name__)


class ProviderAdapter(ABC):
    """A language-model provider that can answer a citizen's question.

    Subclasses implement ``_answer``; ``generate_answer`` times the call and
    turns any exception into an unsuccessful ``ProcessingResult`` so the
    orchestrator can fall back.
    """

    name: str = ""
    provider: str = ""

    def __init__(self, search: ProcedureSearchService):
        self.search = search

    @property
    @abstractmethod
    def is_enabled(self) -> bool:
        """Whether this provider is configured and may be called."""

    @abstractmethod
    async def _answer(self, request: AIRequest, language: Language, started: float) -> ProcessingResult:
        """Produce a successful result or raise."""

    async def generate_answer(self, request: AIRequest) -> ProcessingResult:
        started = time.perf_counter()
        language = request.language or detect_language(request.message)
        try:
            return await self._answer(request, language, started)
        except Exception as e:
            LOGGER.error(
                f"{self.name} failed to answer",
                exc_info=True,
                extra={"provider": self.provider, "error": str(e)},
            )
            return ProcessingResult(
                success=False,
                error=str(e) or e.__class__.__name__,
                processing_time=elapsed_ms(started),
                model_used=self.name,
            )

    async def relevant_procedures(self, message: str) -> List[ProcedureRead]:
        return await self.search.find_relevant(message)


def elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
