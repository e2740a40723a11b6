"""SQLAlchemy models."""

from freightdesk.models.base import Base
from freightdesk.models.shipment import Shipment, ShipmentStatus

__all__ = [
    # Base
    "Base",
    # Shipments
    "Shipment",
    "ShipmentStatus",
]
