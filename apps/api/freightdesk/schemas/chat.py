"""Pydantic schemas for the assistant chat endpoint."""

from typing import Any

from pydantic import Field

from freightdesk.schemas.common import BaseSchema


class ChatRequest(BaseSchema):
    """Request for sending a chat message.

    ``userId`` is optional at the schema level so that a missing owner is
    reported as 401 rather than a validation error.
    """

    message: str = Field(..., min_length=1, max_length=4000)
    user_id: str | None = Field(None, alias="userId")


class ToolCallRecord(BaseSchema):
    """One tool invocation made while answering."""

    id: str
    name: str
    args: dict[str, Any]
    result: str


class ChatResponse(BaseSchema):
    """Response from the chat endpoint."""

    response: str
    tools_used: list[ToolCallRecord] = Field(default_factory=list)
