"""Chat API endpoint for the shipment assistant."""

from fastapi import APIRouter, Depends, Request

from freightdesk.core.deps import DBSession
from freightdesk.core.errors import UnauthorizedError
from freightdesk.core.rate_limit import CHAT_RATE_LIMIT, limiter
from freightdesk.schemas.chat import ChatRequest, ChatResponse
from freightdesk.schemas.common import ErrorResponse
from freightdesk.services.chat_service import ChatService
from freightdesk.services.graph.planner import Planner, get_planner

router = APIRouter()


@router.post(
    "",
    response_model=ChatResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Send a message to the shipment assistant",
    description="""
    Send a natural-language request about the caller's shipments.

    The assistant may list, look up, update, or delete shipments owned by
    ``userId`` before answering. Every tool call it made is returned in
    ``tools_used`` in the order it ran.
    """,
)
@limiter.limit(CHAT_RATE_LIMIT)
async def send_message(
    request: Request,  # noqa: ARG001 (slowapi reads it)
    data: ChatRequest,
    db: DBSession,
    planner: Planner = Depends(get_planner),
) -> ChatResponse:
    if not data.user_id:
        raise UnauthorizedError("User ID required")

    service = ChatService(db, planner=planner)
    return await service.process_message(data.user_id, data.message)
