from types import SimpleNamespace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from govassist.core.exceptions import ProcedureNotFoundError
from govassist.schemas.enums import ProcedureCategory
from govassist.services.procedure.procedure_service import ProcedureService


def make_office(name: str) -> SimpleNamespace:
    return SimpleNamespace(
        id=uuid4(),
        name=name,
        name_si=None,
        name_ta=None,
        address="No. 7, Independence Avenue, Colombo 07",
        district="Colombo",
        province="Western",
        contact_numbers=["+94112691185"],
        email=None,
        website=None,
        working_hours="Monday to Friday: 8:30 AM - 4:15 PM",
        latitude=6.9147,
        longitude=79.8774,
    )


@pytest.fixture
def repository() -> AsyncMock:
    return AsyncMock()


class TestProcedureService:

    @pytest.mark.asyncio
    async def test_get_procedure_not_found(self, repository):
        repository.get_with_details.return_value = None
        with pytest.raises(ProcedureNotFoundError):
            await ProcedureService(repository).get_procedure(uuid4())

    @pytest.mark.asyncio
    async def test_get_by_slug(self, repository, nic_procedure):
        repository.get_by_slug.return_value = nic_procedure
        procedure = await ProcedureService(repository).get_by_slug(nic_procedure.slug)
        assert procedure.id == nic_procedure.id

    @pytest.mark.asyncio
    async def test_categories_include_empty_ones(self, repository):
        repository.category_counts.return_value = [("IDENTITY_DOCUMENTS", 2), ("PASSPORTS", 1)]

        categories = await ProcedureService(repository).list_categories()

        counts = {c.category: c.count for c in categories}
        assert len(categories) == len(ProcedureCategory)
        assert counts[ProcedureCategory.IDENTITY_DOCUMENTS] == 2
        assert counts[ProcedureCategory.VEHICLE] == 0

    @pytest.mark.asyncio
    async def test_list_procedures_paginates(self, repository, nic_procedure):
        repository.list_active.return_value = ([nic_procedure], 21)

        result = await ProcedureService(repository).list_procedures(
            category=ProcedureCategory.IDENTITY_DOCUMENTS, limit=10, offset=10
        )

        repository.list_active.assert_awaited_once_with(category="IDENTITY_DOCUMENTS", limit=10, offset=10)
        assert result.pagination.page == 2
        assert result.pagination.total_pages == 3

    @pytest.mark.asyncio
    async def test_offices_main_flag(self, repository):
        repository.get_with_details.return_value = SimpleNamespace(id=uuid4())
        repository.get_offices.return_value = [
            (make_office("Registrar General's Department"), True),
            (make_office("District Secretariat - Kandy"), False),
        ]

        offices = await ProcedureService(repository).get_offices(uuid4())

        assert [(o.office.name, o.is_main) for o in offices] == [
            ("Registrar General's Department", True),
            ("District Secretariat - Kandy", False),
        ]

    @pytest.mark.asyncio
    async def test_offices_of_inactive_procedure_not_found(self, repository):
        repository.get_with_details.return_value = None

        with pytest.raises(ProcedureNotFoundError):
            await ProcedureService(repository).get_offices(uuid4())
        repository.get_offices.assert_not_awaited()
        repository.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_related_requires_existing_procedure(self, repository):
        repository.get_with_details.return_value = None
        with pytest.raises(ProcedureNotFoundError):
            await ProcedureService(repository).get_related(uuid4())
        repository.get_related.assert_not_awaited()
