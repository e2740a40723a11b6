"""Pydantic schemas for request/response validation."""

from freightdesk.schemas.common import ErrorResponse, HealthResponse, PaginatedResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "PaginatedResponse",
]
