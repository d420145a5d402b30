"""Procedure catalog schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from govassist.schemas.enums import Language, ProcedureCategory, ProcedureDifficulty


class ProcedureStepRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    order: int
    instruction: str
    instruction_si: Optional[str] = None
    instruction_ta: Optional[str] = None
    estimated_time: Optional[str] = None
    tips: list[str] = Field(default_factory=list)
    required_docs: list[str] = Field(default_factory=list)

    def localized(self, language: Language) -> str:
        """Instruction text in ``language``, falling back to English."""
        if language == Language.SI and self.instruction_si:
            return self.instruction_si
        if language == Language.TA and self.instruction_ta:
            return self.instruction_ta
        return self.instruction


class RequirementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    name_si: Optional[str] = None
    name_ta: Optional[str] = None
    description: Optional[str] = None
    is_required: bool = True
    order: int = 0


class FeeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    description: str
    amount: Decimal
    currency: str = "LKR"
    is_optional: bool = False


class OfficeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    name_si: Optional[str] = None
    name_ta: Optional[str] = None
    address: str
    district: str
    province: str
    contact_numbers: list[str] = Field(default_factory=list)
    email: Optional[str] = None
    website: Optional[str] = None
    working_hours: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class ProcedureOfficeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_main: bool = False
    office: OfficeRead


class ProcedureRead(BaseModel):
    """Procedure with its ordered steps, requirements, fees and offices."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    title: str
    title_si: Optional[str] = None
    title_ta: Optional[str] = None
    description: str = ""
    category: ProcedureCategory
    status: str
    difficulty: ProcedureDifficulty
    estimated_duration: Optional[str] = None
    version: int = 1
    slug: str
    keywords: list[str] = Field(default_factory=list)
    search_tags: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    steps: list[ProcedureStepRead] = Field(default_factory=list)
    requirements: list[RequirementRead] = Field(default_factory=list)
    fees: list[FeeRead] = Field(default_factory=list)
    offices: list[ProcedureOfficeRead] = Field(
        default_factory=list,
        validation_alias=AliasChoices("offices", "office_links"),
    )

    def localized_title(self, language: Language) -> str:
        if language == Language.SI and self.title_si:
            return self.title_si
        if language == Language.TA and self.title_ta:
            return self.title_ta
        return self.title


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, limit: int, offset: int, total: int) -> "Pagination":
        return cls(
            page=offset // limit + 1 if limit else 1,
            limit=limit,
            total=total,
            total_pages=-(-total // limit) if limit else 0,
        )


class SearchResult(BaseModel):
    """Outcome of a catalog search.

    ``failed`` is set when storage could not be queried, which distinguishes
    a degraded search from a search with no matches.
    """

    procedures: list[ProcedureRead] = Field(default_factory=list)
    total: int = 0
    suggestions: list[str] = Field(default_factory=list)
    failed: bool = False


class SearchResponse(BaseModel):
    procedures: list[ProcedureRead]
    total: int
    suggestions: list[str]
    pagination: Pagination


class ProcedureListResponse(BaseModel):
    procedures: list[ProcedureRead]
    total: int
    pagination: Pagination


class CategoryCount(BaseModel):
    category: ProcedureCategory
    count: int
