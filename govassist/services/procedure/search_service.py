"""Procedure search over the catalog.

Matching is boolean: a procedure either matches the query or it does not,
and matches are returned newest first. Storage failures never propagate;
they produce an empty result flagged as ``failed``.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from govassist.core.constants import (
    DEFAULT_SEARCH_LIMIT,
    GROUNDING_LIMIT,
    MAX_SUGGESTIONS,
    SUGGESTION_SOURCE_LIMIT,
)
from govassist.repositories.procedure_repository import ProcedureRepository, build_match_clause
from govassist.schemas.enums import Language, ProcedureCategory
from govassist.schemas.procedure import ProcedureRead, SearchResult
from govassist.utils.logging import get_logger
from govassist.utils.text import stem_tokens, tokenize

LOGGER = get_logger(__name__)


class ProcedureSearchService:
    """Keyword and stem based search over active procedures."""

    def __init__(self, repository: ProcedureRepository):
        self.repository = repository

    async def search(
        self,
        query: str,
        category: Optional[ProcedureCategory] = None,
        language: Optional[Language] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
        offset: int = 0,
    ) -> SearchResult:
        """Search the catalog for the public search endpoint.

        Besides the title, tag and keyword predicates this also matches the
        description and, for Sinhala or Tamil requests, the localized title.

        Args:
            query: Free-text query
            category: Optional exact category filter
            language: Request language
            limit: Maximum number of procedures to return
            offset: Number of matches to skip

        Returns:
            SearchResult with the page of procedures, the total match count
            and up to five related search terms
        """
        query = query.strip()
        if not query:
            return SearchResult()

        tokens = tokenize(query)
        match = build_match_clause(
            query,
            tokens,
            stem_tokens(tokens),
            language=language,
            include_description=True,
        )

        try:
            procedures, total = await self.repository.search(
                match,
                category=category.value if category else None,
                limit=limit,
                offset=offset,
            )
        except (SQLAlchemyError, OSError) as e:
            LOGGER.error(
                "Procedure search failed",
                exc_info=True,
                extra={"query": query[:100], "error": str(e)},
            )
            return SearchResult(failed=True)

        suggestions = await self.suggestions(query)

        LOGGER.info(
            "Procedure search completed",
            extra={"query": query[:100], "total": total, "returned": len(procedures)},
        )
        return SearchResult(
            procedures=[ProcedureRead.model_validate(p) for p in procedures],
            total=total,
            suggestions=suggestions,
        )

    async def find_relevant(self, text: str, limit: int = GROUNDING_LIMIT) -> List[ProcedureRead]:
        """Procedures used to ground an AI answer.

        Uses only the title substring, tag-stem overlap and keyword overlap
        predicates. Returns an empty list when storage is unavailable.
        """
        text = text.strip()
        if not text:
            return []

        tokens = tokenize(text)
        match = build_match_clause(text, tokens, stem_tokens(tokens))

        try:
            procedures, _ = await self.repository.search(match, limit=limit)
        except (SQLAlchemyError, OSError) as e:
            LOGGER.warning(
                "Grounding search failed, answering without procedures",
                extra={"error": str(e)},
            )
            return []

        return [ProcedureRead.model_validate(p) for p in procedures]

    async def suggestions(self, query: str) -> List[str]:
        """Related keywords and tags containing ``query``, excluding the query itself."""
        needle = query.strip().lower()
        if not needle:
            return []

        try:
            sources = await self.repository.find_suggestion_sources(needle, limit=SUGGESTION_SOURCE_LIMIT)
        except (SQLAlchemyError, OSError) as e:
            LOGGER.warning("Suggestion lookup failed", extra={"error": str(e)})
            return []

        suggestions: List[str] = []
        seen = set()
        for procedure in sources:
            for term in [*procedure.keywords, *procedure.search_tags]:
                lowered = term.lower()
                if needle in lowered and lowered != needle and lowered not in seen:
                    seen.add(lowered)
                    suggestions.append(term)
                if len(suggestions) >= MAX_SUGGESTIONS:
                    return suggestions
        return suggestions
