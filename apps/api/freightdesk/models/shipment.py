"""Shipment model, the only domain entity."""

import enum

from sqlalchemy import CheckConstraint, Enum, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from freightdesk.models.base import Base


class ShipmentStatus(str, enum.Enum):
    """Lifecycle states of a shipment."""

    PENDING = "pending"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Shipment(Base):
    """A freight shipment between two cities.

    Every shipment belongs to exactly one user (``user_id``). All reads and
    writes go through owner-scoped queries; that scoping is the only
    authorization boundary in the system.
    """

    __tablename__ = "shipments"
    __table_args__ = (
        CheckConstraint("weight IS NULL OR weight >= 0", name="weight_non_negative"),
        Index("ix_shipments_user_id_created_at", "user_id", "created_at"),
    )

    # Owner (identity service user id)
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    # Lane
    origin_city: Mapped[str] = mapped_column(String(255), nullable=False)
    origin_state: Mapped[str] = mapped_column(String(2), nullable=False)
    destination_city: Mapped[str] = mapped_column(String(255), nullable=False)
    destination_state: Mapped[str] = mapped_column(String(2), nullable=False)

    # Parties
    shipper_name: Mapped[str] = mapped_column(String(255), nullable=False)
    consignee_name: Mapped[str] = mapped_column(String(255), nullable=False)

    # Pounds
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)

    status: Mapped[ShipmentStatus] = mapped_column(
        Enum(
            ShipmentStatus,
            name="shipment_status",
            values_callable=lambda x: [e.value for e in x],
        ),
        default=ShipmentStatus.PENDING,
        nullable=False,
        index=True,
    )

    @property
    def origin(self) -> str:
        return f"{self.origin_city}, {self.origin_state}"

    @property
    def destination(self) -> str:
        return f"{self.destination_city}, {self.destination_state}"

    @property
    def route(self) -> str:
        """Human-readable lane, e.g. ``Chicago, IL → Detroit, MI``."""
        return f"{self.origin} → {self.destination}"

    def __repr__(self) -> str:
        return f"<Shipment {self.route} ({self.status.value})>"
