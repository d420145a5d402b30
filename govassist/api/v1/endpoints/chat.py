"""Chat endpoints."""

from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from govassist.core.auth import get_current_user, get_current_user_optional
from govassist.core.constants import CHAT_PROCESSING_ERROR, DEFAULT_HISTORY_LIMIT, DEFAULT_SESSIONS_LIMIT
from govassist.core.dependencies import get_chat_service
from govassist.core.exceptions import ChatProcessingError, SessionNotFoundError
from govassist.schemas.auth import CurrentUser
from govassist.schemas.chat import ChatSendRequest
from govassist.schemas.common import ApiResponse
from govassist.schemas.enums import ExportFormat
from govassist.services.chat.chat_service import ChatService
from govassist.utils.logging import get_logger
from govassist.utils.responses import create_api_response

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "/send",
    response_model=ApiResponse,
    summary="Send a chat message",
    operation_id="send_chat_message",
)
async def send_message(
    request: Request,
    body: ChatSendRequest,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
    current_user: Annotated[Optional[CurrentUser], Depends(get_current_user_optional)],
) -> ApiResponse:
    """Answer a question, continuing ``session_id`` when the caller owns it.

    Anonymous callers are allowed; their sessions have no owner.
    """
    try:
        reply = await chat_service.send_message(
            body.message,
            user_id=current_user.id if current_user else None,
            session_id=body.session_id,
            language=body.language,
        )
    except ChatProcessingError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=CHAT_PROCESSING_ERROR)

    return create_api_response(data=reply, message="Message processed successfully", request=request)


@router.get(
    "/history",
    response_model=ApiResponse,
    summary="Get chat history",
    operation_id="get_chat_history",
)
async def get_history(
    request: Request,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    session_id: Optional[UUID] = Query(None),
    limit: int = Query(DEFAULT_HISTORY_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    history = await chat_service.get_history(current_user.id, session_id=session_id, limit=limit, offset=offset)
    return create_api_response(data=history, message="Chat history retrieved successfully", request=request)


@router.get(
    "/sessions",
    response_model=ApiResponse,
    summary="List chat sessions",
    operation_id="list_chat_sessions",
)
async def list_sessions(
    request: Request,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    limit: int = Query(DEFAULT_SESSIONS_LIMIT, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ApiResponse:
    sessions = await chat_service.list_sessions(current_user.id, limit=limit, offset=offset)
    return create_api_response(data=sessions, message="Chat sessions retrieved successfully", request=request)


@router.delete(
    "/sessions/{session_id}",
    response_model=ApiResponse,
    summary="Delete a chat session",
    operation_id="delete_chat_session",
)
async def delete_session(
    request: Request,
    session_id: UUID,
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ApiResponse:
    try:
        await chat_service.delete_session(session_id, current_user.id)
    except SessionNotFoundError as e:
        LOGGER.warning(
            "Rejected session delete",
            extra={"session_id": str(session_id), "user_id": str(current_user.id)},
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

    return create_api_response(data={"session_id": str(session_id)}, message="Session deleted successfully", request=request)


@router.get(
    "/export",
    summary="Export chat history",
    operation_id="export_chat_history",
    response_class=Response,
)
async def export_history(
    chat_service: Annotated[ChatService, Depends(get_chat_service)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    format: ExportFormat = Query(ExportFormat.JSON),
    session_id: Optional[UUID] = Query(None),
) -> Response:
    """Download history as a JSON or CSV attachment."""
    export = await chat_service.export_history(current_user.id, export_format=format, session_id=session_id)
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )
