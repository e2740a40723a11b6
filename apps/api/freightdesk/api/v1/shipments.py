"""Shipment CRUD and dashboard statistics endpoints.

Every endpoint is scoped to ``user_id``; another owner's shipment is
reported exactly like a missing one.
"""

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from freightdesk.core.deps import OwnerId, ShipmentServiceDep
from freightdesk.core.errors import NotFoundError
from freightdesk.models.shipment import ShipmentStatus
from freightdesk.schemas.common import ErrorResponse, PaginatedResponse
from freightdesk.schemas.shipment import (
    ShipmentCreate,
    ShipmentResponse,
    ShipmentStats,
    ShipmentStatusUpdate,
)

router = APIRouter()

NOT_FOUND = {404: {"model": ErrorResponse}}


@router.get("", response_model=PaginatedResponse[ShipmentResponse])
async def list_shipments(
    user_id: OwnerId,
    service: ShipmentServiceDep,
    status_filter: ShipmentStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=255, description="City name, partial match"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
) -> PaginatedResponse[ShipmentResponse]:
    """List the owner's shipments, newest first."""
    total = await service.count_shipments(user_id, status=status_filter, search=search)

    offset = (page - 1) * page_size
    shipments = await service.list_shipments(
        user_id,
        status=status_filter,
        limit=page_size,
        search=search,
        offset=offset,
    )

    pages = (total + page_size - 1) // page_size

    return PaginatedResponse[ShipmentResponse](
        items=[ShipmentResponse.model_validate(s) for s in shipments],
        total=total,
        page=page,
        page_size=page_size,
        pages=pages,
    )


@router.post("", response_model=ShipmentResponse, status_code=status.HTTP_201_CREATED)
async def create_shipment(
    data: ShipmentCreate,
    service: ShipmentServiceDep,
) -> ShipmentResponse:
    shipment = await service.create_shipment(data.user_id, data.model_dump(exclude={"user_id"}))
    return ShipmentResponse.model_validate(shipment)


@router.get("/stats", response_model=ShipmentStats)
async def get_shipment_stats(
    user_id: OwnerId,
    service: ShipmentServiceDep,
) -> ShipmentStats:
    """Totals, per-status counts, total weight and the heaviest shipment."""
    return await service.get_stats(user_id)


@router.get("/{shipment_id}", response_model=ShipmentResponse, responses=NOT_FOUND)
async def get_shipment(
    shipment_id: UUID,
    user_id: OwnerId,
    service: ShipmentServiceDep,
) -> ShipmentResponse:
    shipment = await service.get_shipment(user_id, shipment_id)
    if not shipment:
        raise NotFoundError("Shipment not found")
    return ShipmentResponse.model_validate(shipment)


@router.patch("/{shipment_id}", response_model=ShipmentResponse, responses=NOT_FOUND)
async def update_shipment_status(
    shipment_id: UUID,
    data: ShipmentStatusUpdate,
    user_id: OwnerId,
    service: ShipmentServiceDep,
) -> ShipmentResponse:
    shipment = await service.update_status(user_id, shipment_id, data.status)
    if not shipment:
        raise NotFoundError("Shipment not found")
    return ShipmentResponse.model_validate(shipment)


@router.delete(
    "/{shipment_id}", status_code=status.HTTP_204_NO_CONTENT, responses=NOT_FOUND
)
async def delete_shipment(
    shipment_id: UUID,
    user_id: OwnerId,
    service: ShipmentServiceDep,
) -> Response:
    if not await service.delete_shipment(user_id, shipment_id):
        raise NotFoundError("Shipment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
