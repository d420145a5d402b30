from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import SQLAlchemyError

from govassist.repositories.procedure_repository import build_match_clause, like_pattern
from govassist.schemas.enums import Language, ProcedureCategory
from govassist.services.procedure.search_service import ProcedureSearchService


def compile_sql(clause) -> str:
    return str(clause.compile(dialect=postgresql.dialect()))


class TestMatchClause:

    def test_like_pattern_escapes_wildcards(self):
        assert like_pattern("100%_done") == "%100\\%\\_done%"

    def test_grounding_predicate(self):
        sql = compile_sql(build_match_clause("new nic", ["new", "nic"], ["new", "nic"]))

        assert "procedures.title ILIKE" in sql
        assert "procedures.search_tags &&" in sql
        assert "procedures.keywords &&" in sql
        assert "procedures.description" not in sql
        assert "title_si" not in sql

    def test_catalog_predicate_adds_description_and_localized_title(self):
        sql = compile_sql(
            build_match_clause("පාස්පෝට්", ["පාස්පෝට්"], ["පාස්පෝට්"], language=Language.SI, include_description=True)
        )

        assert "procedures.description ILIKE" in sql
        assert "procedures.title_si ILIKE" in sql
        assert "title_ta" not in sql


@pytest.fixture
def repository(nic_procedure) -> AsyncMock:
    repository = AsyncMock()
    repository.search.return_value = ([nic_procedure], 1)
    repository.find_suggestion_sources.return_value = [
        SimpleNamespace(
            keywords=["NIC", "nic renewal", "national identity card"],
            search_tags=["nic", "nic-lost", "identity"],
        ),
        SimpleNamespace(keywords=["nic renewal", "nic duplicate"], search_tags=["nicety"]),
    ]
    return repository


class TestProcedureSearchService:

    @pytest.mark.asyncio
    async def test_search_returns_page_and_suggestions(self, repository, nic_procedure):
        service = ProcedureSearchService(repository)

        result = await service.search(
            "nic",
            category=ProcedureCategory.IDENTITY_DOCUMENTS,
            language=Language.EN,
            limit=5,
            offset=10,
        )

        assert not result.failed
        assert result.total == 1
        assert result.procedures[0].id == nic_procedure.id
        assert result.suggestions == ["nic renewal", "nic-lost", "nic duplicate", "nicety"]

        kwargs = repository.search.await_args.kwargs
        assert kwargs == {"category": "IDENTITY_DOCUMENTS", "limit": 5, "offset": 10}

    @pytest.mark.asyncio
    async def test_suggestions_capped_at_five(self, repository):
        repository.find_suggestion_sources.return_value = [
            SimpleNamespace(keywords=[f"passport {i}" for i in range(8)], search_tags=[])
        ]
        suggestions = await ProcedureSearchService(repository).suggestions("passport")
        assert suggestions == [f"passport {i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_suggestions_ignore_case_duplicates(self, repository):
        repository.find_suggestion_sources.return_value = [
            SimpleNamespace(keywords=["NIC Renewal", "nic renewal", "NIC"], search_tags=["nic renewal"]),
        ]
        suggestions = await ProcedureSearchService(repository).suggestions("nic")
        assert suggestions == ["NIC Renewal"]

    @pytest.mark.asyncio
    async def test_storage_failure_yields_failed_empty_result(self, repository):
        repository.search.side_effect = SQLAlchemyError("connection refused")

        result = await ProcedureSearchService(repository).search("passport")

        assert result.failed
        assert result.procedures == []
        assert result.total == 0
        repository.find_suggestion_sources.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_blank_query_short_circuits(self, repository):
        result = await ProcedureSearchService(repository).search("   ")

        assert result.total == 0
        assert not result.failed
        repository.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_suggestion_failure_keeps_results(self, repository):
        repository.find_suggestion_sources.side_effect = SQLAlchemyError("timeout")

        result = await ProcedureSearchService(repository).search("nic")

        assert result.total == 1
        assert result.suggestions == []

    @pytest.mark.asyncio
    async def test_find_relevant_uses_grounding_limit(self, repository, nic_procedure):
        procedures = await ProcedureSearchService(repository).find_relevant("How do I get a new NIC?")

        assert [p.id for p in procedures] == [nic_procedure.id]
        assert repository.search.await_args.kwargs == {"limit": 3}

    @pytest.mark.asyncio
    async def test_find_relevant_swallows_storage_errors(self, repository):
        repository.search.side_effect = OSError("network unreachable")
        assert await ProcedureSearchService(repository).find_relevant("passport") == []
