"""Dependency injection for FastAPI routes."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from freightdesk.core.database import get_async_session
from freightdesk.services.extraction_service import ExtractionService
from freightdesk.services.shipment_service import ShipmentService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Alias for get_async_session so tests can override one name."""
    async for session in get_async_session():
        yield session


# Database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]


def get_shipment_service(db: DBSession) -> ShipmentService:
    return ShipmentService(db)


def get_extraction_service() -> ExtractionService:
    """Build the extraction client; overridden in tests."""
    return ExtractionService()


ShipmentServiceDep = Annotated[ShipmentService, Depends(get_shipment_service)]
ExtractionServiceDep = Annotated[ExtractionService, Depends(get_extraction_service)]

# Owner of the shipments a dashboard request reads or changes.
OwnerId = Annotated[str, Query(min_length=1, max_length=255, description="Owner user ID")]


__all__ = [
    "DBSession",
    "ExtractionServiceDep",
    "OwnerId",
    "ShipmentServiceDep",
    "get_db",
    "get_extraction_service",
    "get_shipment_service",
]
