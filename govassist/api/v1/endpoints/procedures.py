"""Procedure catalog endpoints."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from govassist.core.constants import DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT
from govassist.core.dependencies import get_procedure_service, get_search_service
from govassist.core.exceptions import ProcedureNotFoundError
from govassist.schemas.common import ApiResponse
from govassist.schemas.enums import Language, ProcedureCategory
from govassist.schemas.procedure import Pagination, SearchResponse
from govassist.services.procedure.procedure_service import ProcedureService
from govassist.services.procedure.search_service import ProcedureSearchService
from govassist.utils.logging import get_logger
from govassist.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


def _not_found(e: ProcedureNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)


@router.get(
    "/search",
    response_model=ApiResponse,
    summary="Search procedures",
    operation_id="search_procedures",
)
async def search_procedures(
    request: Request,
    search_service: Annotated[ProcedureSearchService, Depends(get_search_service)],
    query: str = Query(..., min_length=1, max_length=200, description="Search text"),
    category: Optional[ProcedureCategory] = Query(None),
    language: Optional[Language] = Query(None),
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_SEARCH_LIMIT),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    """Search active procedures by title, description, keywords and tags."""
    result = await search_service.search(
        query,
        category=category,
        language=language,
        limit=limit,
        offset=offset,
    )
    if result.failed:
        LOGGER.warning("Search served a degraded empty result", extra={"query": query[:100]})

    payload = SearchResponse(
        procedures=result.procedures,
        total=result.total,
        suggestions=result.suggestions,
        pagination=Pagination.build(limit=limit, offset=offset, total=result.total),
    )
    return create_api_response(
        data=payload,
        message="Search completed" if not result.failed else "Search temporarily unavailable",
        request=request,
    )


@router.get(
    "/categories",
    response_model=ApiResponse,
    summary="List procedure categories",
    operation_id="list_procedure_categories",
)
async def list_categories(
    request: Request,
    procedure_service: Annotated[ProcedureService, Depends(get_procedure_service)],
) -> ApiResponse:
    categories = await procedure_service.list_categories()
    return create_api_response(data=categories, message="Categories retrieved successfully", request=request)


@router.get(
    "/popular",
    response_model=ApiResponse,
    summary="Most asked-about procedures",
    operation_id="list_popular_procedures",
)
async def list_popular(
    request: Request,
    procedure_service: Annotated[ProcedureService, Depends(get_procedure_service)],
    limit: int = Query(10, ge=1, le=50),
) -> ApiResponse:
    procedures = await procedure_service.get_popular(limit=limit)
    return create_api_response(data=procedures, message="Popular procedures retrieved successfully", request=request)


@router.get(
    "/slug/{slug}",
    response_model=ApiResponse,
    summary="Get procedure by slug",
    operation_id="get_procedure_by_slug",
)
async def get_procedure_by_slug(
    request: Request,
    slug: str,
    procedure_service: Annotated[ProcedureService, Depends(get_procedure_service)],
) -> ApiResponse:
    try:
        procedure = await procedure_service.get_by_slug(slug)
    except ProcedureNotFoundError as e:
        raise _not_found(e)
    return create_api_response(data=procedure, message="Procedure retrieved successfully", request=request)


@router.get(
    "/",
    response_model=ApiResponse,
    summary="List procedures",
    operation_id="list_procedures",
)
async def list_procedures(
    request: Request,
    procedure_service: Annotated[ProcedureService, Depends(get_procedure_service)],
    category: Optional[ProcedureCategory] = Query(None),
    limit: int = Query(DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_SEARCH_LIMIT),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    """List active procedures alphabetically, optionally within one category."""
    result = await procedure_service.list_procedures(category=category, limit=limit, offset=offset)
    return create_api_response(data=result, message="Procedures retrieved successfully", request=request)


@router.get(
    "/{procedure_id}",
    response_model=ApiResponse,
    summary="Get procedure details",
    operation_id="get_procedure",
)
async def get_procedure(
    request: Request,
    procedure_id: UUID,
    procedure_service: Annotated[ProcedureService, Depends(get_procedure_service)],
) -> ApiResponse:
    try:
        procedure = await procedure_service.get_procedure(procedure_id)
    except ProcedureNotFoundError as e:
        raise _not_found(e)
    return create_api_response(data=procedure, message="Procedure retrieved successfully", request=request)


@router.get(
    "/{procedure_id}/related",
    response_model=ApiResponse,
    summary="Related procedures",
    operation_id="list_related_procedures",
)
async def list_related(
    request: Request,
    procedure_id: UUID,
    procedure_service: Annotated[ProcedureService, Depends(get_procedure_service)],
    limit: int = Query(5, ge=1, le=20),
) -> ApiResponse:
    try:
        related = await procedure_service.get_related(procedure_id, limit=limit)
    except ProcedureNotFoundError as e:
        raise _not_found(e)
    return create_api_response(data=related, message="Related procedures retrieved successfully", request=request)


@router.get(
    "/{procedure_id}/offices",
    response_model=ApiResponse,
    summary="Offices handling a procedure",
    operation_id="list_procedure_offices",
)
async def list_offices(
    request: Request,
    procedure_id: UUID,
    procedure_service: Annotated[ProcedureService, Depends(get_procedure_service)],
) -> ApiResponse:
    try:
        offices = await procedure_service.get_offices(procedure_id)
    except ProcedureNotFoundError as e:
        raise _not_found(e)
    return create_api_response(data=offices, message="Offices retrieved successfully", request=request)
