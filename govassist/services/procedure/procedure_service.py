"""Catalog reads other than search."""

from typing import List, Optional
from uuid import UUID

from govassist.core.exceptions import ProcedureNotFoundError
from govassist.repositories.procedure_repository import ProcedureRepository
from govassist.schemas.enums import ProcedureCategory
from govassist.schemas.procedure import (
    CategoryCount,
    OfficeRead,
    Pagination,
    ProcedureListResponse,
    ProcedureOfficeRead,
    ProcedureRead,
)
from govassist.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ProcedureService:
    """Read-only access to active procedures."""

    def __init__(self, repository: ProcedureRepository):
        self.repository = repository

    async def get_procedure(self, procedure_id: UUID) -> ProcedureRead:
        procedure = await self.repository.get_with_details(procedure_id)
        if not procedure:
            raise ProcedureNotFoundError(f"Procedure {procedure_id} not found")
        return ProcedureRead.model_validate(procedure)

    async def get_by_slug(self, slug: str) -> ProcedureRead:
        procedure = await self.repository.get_by_slug(slug)
        if not procedure:
            raise ProcedureNotFoundError(f"Procedure '{slug}' not found")
        return ProcedureRead.model_validate(procedure)

    async def list_procedures(
        self,
        category: Optional[ProcedureCategory] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> ProcedureListResponse:
        procedures, total = await self.repository.list_active(
            category=category.value if category else None,
            limit=limit,
            offset=offset,
        )
        return ProcedureListResponse(
            procedures=[ProcedureRead.model_validate(p) for p in procedures],
            total=total,
            pagination=Pagination.build(limit=limit, offset=offset, total=total),
        )

    async def list_categories(self) -> List[CategoryCount]:
        """Every category with its number of active procedures, zero included."""
        counts = dict(await self.repository.category_counts())
        return [
            CategoryCount(category=category, count=counts.get(category.value, 0))
            for category in ProcedureCategory
        ]

    async def get_related(self, procedure_id: UUID, limit: int = 5) -> List[ProcedureRead]:
        procedure = await self.repository.get_with_details(procedure_id)
        if not procedure:
            raise ProcedureNotFoundError(f"Procedure {procedure_id} not found")
        related = await self.repository.get_related(procedure, limit=limit)
        return [ProcedureRead.model_validate(p) for p in related]

    async def get_offices(self, procedure_id: UUID) -> List[ProcedureOfficeRead]:
        if not await self.repository.get_with_details(procedure_id):
            raise ProcedureNotFoundError(f"Procedure {procedure_id} not found")
        rows = await self.repository.get_offices(procedure_id)
        return [
            ProcedureOfficeRead(is_main=is_main, office=OfficeRead.model_validate(office))
            for office, is_main in rows
        ]

    async def get_popular(self, limit: int = 10) -> List[ProcedureRead]:
        procedures = await self.repository.get_popular(limit=limit)
        LOGGER.debug("Popular procedures loaded", extra={"count": len(procedures)})
        return [ProcedureRead.model_validate(p) for p in procedures]
