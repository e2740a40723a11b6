"""Owner-scoped data access for shipments.

Every query filters on ``Shipment.user_id``. A shipment owned by someone else
behaves exactly like a shipment that does not exist: lookups return ``None``,
mutations report that nothing was touched.
"""

import logging
import uuid
from datetime import timedelta
from typing import Any
from uuid import UUID

from sqlalchemy import ColumnElement, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from freightdesk.models.base import utc_now
from freightdesk.models.shipment import Shipment, ShipmentStatus
from freightdesk.schemas.shipment import HeaviestShipment, ShipmentStats

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 10


def _escape_like(term: str) -> str:
    """Escape LIKE special characters to prevent wildcard injection."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _coerce_id(shipment_id: UUID | str) -> UUID | None:
    if isinstance(shipment_id, UUID):
        return shipment_id
    try:
        return uuid.UUID(str(shipment_id))
    except ValueError:
        return None


def _city_match(term: str) -> ColumnElement[bool]:
    pattern = f"%{_escape_like(term.strip())}%"
    return or_(
        Shipment.origin_city.ilike(pattern, escape="\\"),
        Shipment.destination_city.ilike(pattern, escape="\\"),
    )


class ShipmentService:
    """Query and mutation interface over one database session."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _owned(self, owner_id: str) -> Any:
        # Newest first is the default store order everywhere.
        return (
            select(Shipment)
            .where(Shipment.user_id == owner_id)
            .order_by(Shipment.created_at.desc(), Shipment.id)
        )

    async def list_shipments(
        self,
        owner_id: str,
        status: ShipmentStatus | None = None,
        limit: int = DEFAULT_LIST_LIMIT,
        search: str | None = None,
        offset: int = 0,
    ) -> list[Shipment]:
        """List an owner's shipments, newest first."""
        query = self._owned(owner_id)
        if status:
            query = query.where(Shipment.status == status)
        if search:
            query = query.where(_city_match(search))
        query = query.offset(offset).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_shipments(
        self,
        owner_id: str,
        status: ShipmentStatus | None = None,
        search: str | None = None,
    ) -> int:
        """Count an owner's shipments matching the same filters as list_shipments."""
        query = select(func.count()).select_from(Shipment).where(Shipment.user_id == owner_id)
        if status:
            query = query.where(Shipment.status == status)
        if search:
            query = query.where(_city_match(search))
        return (await self.db.execute(query)).scalar() or 0

    async def all_for_owner(self, owner_id: str) -> list[Shipment]:
        """Every shipment the owner has, in store order."""
        result = await self.db.execute(self._owned(owner_id))
        return list(result.scalars().all())

    async def get_shipment(self, owner_id: str, shipment_id: UUID | str) -> Shipment | None:
        """Fetch one shipment by id. Malformed ids are treated as not found."""
        sid = _coerce_id(shipment_id)
        if sid is None:
            return None

        query = select(Shipment).where(
            Shipment.id == sid,
            Shipment.user_id == owner_id,
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_city(self, owner_id: str, term: str, limit: int = 1) -> list[Shipment]:
        """Case-insensitive partial match on origin or destination city."""
        if not term.strip():
            return []
        query = self._owned(owner_id).where(_city_match(term)).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_shipment(self, owner_id: str, data: dict[str, Any]) -> Shipment:
        """Create a shipment owned by ``owner_id``."""
        fields = {k: v for k, v in data.items() if k not in ("id", "user_id")}
        shipment = Shipment(user_id=owner_id, **fields)
        self.db.add(shipment)
        await self.db.commit()
        logger.info("Created shipment %s for owner %s", shipment.id, owner_id)
        return shipment

    async def update_status(
        self,
        owner_id: str,
        shipment_id: UUID | str,
        status: ShipmentStatus | str,
    ) -> Shipment | None:
        """Set a new status and refresh ``updated_at``.

        Returns None when no shipment with that id belongs to the owner.
        """
        shipment = await self.get_shipment(owner_id, shipment_id)
        if shipment is None:
            return None

        now = utc_now()
        # Keep updated_at strictly increasing even if the clock has not moved.
        previous = shipment.updated_at
        if previous is not None:
            if previous.tzinfo is None:
                previous = previous.replace(tzinfo=now.tzinfo)
            if now <= previous:
                now = previous + timedelta(microseconds=1)

        shipment.status = ShipmentStatus(status)
        shipment.updated_at = now
        await self.db.commit()
        logger.info("Shipment %s status -> %s", shipment.id, shipment.status.value)
        return shipment

    async def delete_shipment(self, owner_id: str, shipment_id: UUID | str) -> bool:
        """Permanently delete a shipment. Returns False when nothing matched."""
        sid = _coerce_id(shipment_id)
        if sid is None:
            return False

        stmt = delete(Shipment).where(
            Shipment.id == sid,
            Shipment.user_id == owner_id,
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        deleted = bool(result.rowcount)
        if deleted:
            logger.info("Deleted shipment %s for owner %s", sid, owner_id)
        return deleted

    async def get_stats(self, owner_id: str) -> ShipmentStats:
        """Aggregate counts and weights over all of the owner's shipments."""
        shipments = await self.all_for_owner(owner_id)

        stats = ShipmentStats(total=len(shipments))
        heaviest: Shipment | None = None
        for s in shipments:
            stats.by_status[s.status] += 1
            stats.total_weight += s.weight or 0
            # Zero is a real weight; strict comparison keeps the first-seen shipment on ties.
            if s.weight is not None and (heaviest is None or s.weight > (heaviest.weight or 0)):
                heaviest = s

        if heaviest is not None and heaviest.weight is not None:
            stats.heaviest = HeaviestShipment(
                id=heaviest.id,
                origin_city=heaviest.origin_city,
                destination_city=heaviest.destination_city,
                weight=heaviest.weight,
            )
        return stats
