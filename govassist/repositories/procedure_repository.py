"""Repository for procedure catalog reads."""

from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import ColumnElement, desc, false, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from govassist.database.models import ChatMessage, Office, Procedure, ProcedureOffice
from govassist.repositories.base_repository import BaseRepository
from govassist.schemas.enums import Language, ProcedureStatus

ACTIVE = ProcedureStatus.ACTIVE.value


def like_pattern(text: str) -> str:
    """Wrap ``text`` for a substring ILIKE with its wildcards escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_match_clause(
    query: str,
    tokens: Sequence[str],
    stems: Sequence[str],
    language: Optional[Language] = None,
    include_description: bool = False,
) -> ColumnElement[bool]:
    """Build the boolean match predicate for a search query.

    A procedure matches when the raw query is a case-insensitive substring of
    its title, when its search tags share a stem with the query, or when its
    keywords share a raw token with the query. The catalog endpoint also
    matches the description and the title in the requested language.

    Args:
        query: Raw query text
        tokens: Lower-cased query tokens
        stems: Porter stems of ``tokens``
        language: Request language selecting a localized title column
        include_description: Whether to also match the description

    Returns:
        SQL boolean expression
    """
    pattern = like_pattern(query)
    conditions: List[ColumnElement[bool]] = [Procedure.title.ilike(pattern, escape="\\")]

    if stems:
        conditions.append(Procedure.search_tags.overlap(list(stems)))
    if tokens:
        conditions.append(Procedure.keywords.overlap(list(tokens)))

    if include_description:
        conditions.append(Procedure.description.ilike(pattern, escape="\\"))
    if language == Language.SI:
        conditions.append(Procedure.title_si.ilike(pattern, escape="\\"))
    elif language == Language.TA:
        conditions.append(Procedure.title_ta.ilike(pattern, escape="\\"))

    return or_(*conditions) if conditions else false()


class ProcedureRepository(BaseRepository[Procedure]):
    """Read access to procedures with their ordered child collections."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Procedure)

    @staticmethod
    def _detail_options():
        return (
            selectinload(Procedure.steps),
            selectinload(Procedure.requirements),
            selectinload(Procedure.fees),
            selectinload(Procedure.office_links).selectinload(ProcedureOffice.office),
        )

    async def search(
        self,
        match: ColumnElement[bool],
        category: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Procedure], int]:
        """Return one page of active procedures matching ``match`` plus the total.

        Results are ordered by creation time, newest first.
        """
        conditions = [Procedure.status == ACTIVE, match]
        if category:
            conditions.append(Procedure.category == category)

        try:
            query = (
                select(Procedure)
                .where(*conditions)
                .options(*self._detail_options())
                .order_by(desc(Procedure.created_at))
                .offset(offset)
                .limit(limit)
            )
            result = await self.session.execute(query)
            procedures = list(result.scalars().all())

            count_query = select(func.count()).select_from(Procedure).where(*conditions)
            total = (await self.session.execute(count_query)).scalar_one()
            return procedures, total
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching procedures: {str(e)}", exc_info=True)
            raise

    async def find_suggestion_sources(self, query: str, limit: int = 10) -> List[Procedure]:
        """Active procedures whose keywords or tags contain ``query`` as a substring."""
        pattern = like_pattern(query.lower())
        try:
            stmt = (
                select(Procedure)
                .where(
                    Procedure.status == ACTIVE,
                    or_(
                        func.lower(func.array_to_string(Procedure.keywords, " ")).like(pattern, escape="\\"),
                        func.array_to_string(Procedure.search_tags, " ").like(pattern, escape="\\"),
                    ),
                )
                .limit(limit)
            )
            result = await self.session.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading suggestion sources: {str(e)}", exc_info=True)
            raise

    async def get_with_details(self, procedure_id: UUID) -> Optional[Procedure]:
        try:
            stmt = (
                select(Procedure)
                .where(Procedure.id == procedure_id, Procedure.status == ACTIVE)
                .options(*self._detail_options())
            )
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Error retrieving procedure {procedure_id}: {str(e)}", exc_info=True)
            raise

    async def get_by_slug(self, slug: str) -> Optional[Procedure]:
        try:
            stmt = (
                select(Procedure)
                .where(Procedure.slug == slug, Procedure.status == ACTIVE)
                .options(*self._detail_options())
            )
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error(f"Error retrieving procedure by slug {slug}: {str(e)}", exc_info=True)
            raise

    async def list_active(
        self,
        category: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> Tuple[List[Procedure], int]:
        """Page through active procedures ordered by title."""
        conditions = [Procedure.status == ACTIVE]
        if category:
            conditions.append(Procedure.category == category)

        try:
            stmt = (
                select(Procedure)
                .where(*conditions)
                .options(*self._detail_options())
                .order_by(Procedure.title)
                .offset(offset)
                .limit(limit)
            )
            result = await self.session.execute(stmt)
            procedures = list(result.scalars().all())
            filters = {"status": ACTIVE}
            if category:
                filters["category"] = category
            total = await self.count(filters)
            return procedures, total
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing procedures: {str(e)}", exc_info=True)
            raise

    async def category_counts(self) -> List[Tuple[str, int]]:
        try:
            stmt = (
                select(Procedure.category, func.count(Procedure.id))
                .where(Procedure.status == ACTIVE)
                .group_by(Procedure.category)
                .order_by(Procedure.category)
            )
            result = await self.session.execute(stmt)
            return [(row[0], row[1]) for row in result.all()]
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting categories: {str(e)}", exc_info=True)
            raise

    async def get_related(self, procedure: Procedure, limit: int = 5) -> List[Procedure]:
        """Other active procedures in the same category."""
        try:
            stmt = (
                select(Procedure)
                .where(
                    Procedure.status == ACTIVE,
                    Procedure.category == procedure.category,
                    Procedure.id != procedure.id,
                )
                .options(*self._detail_options())
                .order_by(Procedure.title)
                .limit(limit)
            )
            result = await self.session.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error retrieving related procedures: {str(e)}", exc_info=True)
            raise

    async def get_offices(self, procedure_id: UUID) -> List[Tuple[Office, bool]]:
        """Active offices handling a procedure, main office first."""
        try:
            stmt = (
                select(Office, ProcedureOffice.is_main)
                .join(ProcedureOffice, ProcedureOffice.office_id == Office.id)
                .where(ProcedureOffice.procedure_id == procedure_id, Office.is_active.is_(True))
                .order_by(desc(ProcedureOffice.is_main), Office.name)
            )
            result = await self.session.execute(stmt)
            return [(row[0], row[1]) for row in result.all()]
        except SQLAlchemyError as e:
            self.logger.error(f"Error retrieving offices for {procedure_id}: {str(e)}", exc_info=True)
            raise

    async def get_popular(self, limit: int = 10) -> List[Procedure]:
        """Active procedures most often used to ground chat answers."""
        try:
            usage = (
                select(ChatMessage.procedure_id, func.count(ChatMessage.id).label("uses"))
                .where(ChatMessage.procedure_id.is_not(None))
                .group_by(ChatMessage.procedure_id)
                .subquery()
            )
            stmt = (
                select(Procedure)
                .join(usage, usage.c.procedure_id == Procedure.id)
                .where(Procedure.status == ACTIVE)
                .options(*self._detail_options())
                .order_by(desc(usage.c.uses), Procedure.title)
                .limit(limit)
            )
            result = await self.session.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error retrieving popular procedures: {str(e)}", exc_info=True)
            raise
