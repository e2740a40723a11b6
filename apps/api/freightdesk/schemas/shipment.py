"""Shipment request/response schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from freightdesk.models.shipment import ShipmentStatus
from freightdesk.schemas.common import BaseSchema


class ShipmentCreate(BaseSchema):
    """Payload for creating a shipment."""

    user_id: str = Field(..., min_length=1, max_length=255)
    origin_city: str = Field(..., min_length=1, max_length=255)
    origin_state: str = Field(..., min_length=2, max_length=2)
    destination_city: str = Field(..., min_length=1, max_length=255)
    destination_state: str = Field(..., min_length=2, max_length=2)
    shipper_name: str = Field(..., min_length=1, max_length=255)
    consignee_name: str = Field(..., min_length=1, max_length=255)
    weight: float | None = Field(None, ge=0, description="Weight in pounds")
    status: ShipmentStatus = ShipmentStatus.PENDING

    @field_validator("origin_state", "destination_state")
    @classmethod
    def _upper_state(cls, v: str) -> str:
        return v.upper()


class ShipmentStatusUpdate(BaseSchema):
    """Payload for changing a shipment's status."""

    status: ShipmentStatus


class ShipmentResponse(BaseSchema):
    """A shipment as returned by the API."""

    id: UUID
    user_id: str
    origin_city: str
    origin_state: str
    destination_city: str
    destination_state: str
    shipper_name: str
    consignee_name: str
    weight: float | None
    status: ShipmentStatus
    created_at: datetime
    updated_at: datetime


class HeaviestShipment(BaseSchema):
    """The heaviest shipment in a stats snapshot."""

    id: UUID
    origin_city: str
    destination_city: str
    weight: float


class ShipmentStats(BaseSchema):
    """Aggregate statistics over one owner's shipments."""

    total: int = 0
    by_status: dict[ShipmentStatus, int] = Field(
        default_factory=lambda: {s: 0 for s in ShipmentStatus}
    )
    total_weight: float = 0.0
    heaviest: HeaviestShipment | None = None
