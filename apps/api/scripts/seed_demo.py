"""Seed demo shipments for one user.

Creates 20 shipments across all four statuses (5 pending, 8 in transit,
5 delivered, 2 cancelled). Creation times are staggered one day apart and
update times half a day apart, so newest-first ordering follows the list.
Existing shipments for the user are removed first.

Usage:
    cd apps/api && uv run python -m scripts.seed_demo <user_id>
"""

import asyncio
import sys
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from freightdesk.core.database import async_session_maker
from freightdesk.models.shipment import Shipment, ShipmentStatus

P = ShipmentStatus.PENDING
T = ShipmentStatus.IN_TRANSIT
D = ShipmentStatus.DELIVERED
C = ShipmentStatus.CANCELLED

# (origin city, state, destination city, state, shipper, consignee, lbs, status)
DEMO_SHIPMENTS: list[tuple[str, str, str, str, str, str, float, ShipmentStatus]] = [
    ("Los Angeles", "CA", "Phoenix", "AZ", "West Coast Distributors", "Arizona Retail Co", 12500, P),
    ("Seattle", "WA", "Portland", "OR", "Pacific Northwest Supply", "Oregon Depot", 8200, P),
    ("Denver", "CO", "Salt Lake City", "UT", "Mountain Freight Inc", "Utah Warehousing", 15000, P),
    ("Minneapolis", "MN", "Milwaukee", "WI", "Midwest Manufacturing", "Great Lakes Storage", 9800, P),
    ("Boston", "MA", "Hartford", "CT", "New England Goods", "Connecticut Logistics", 6500, P),
    ("Chicago", "IL", "Detroit", "MI", "Windy City Exports", "Motor City Imports", 22000, T),
    ("Dallas", "TX", "Houston", "TX", "Lone Star Freight", "Gulf Coast Receiving", 18500, T),
    ("Atlanta", "GA", "Miami", "FL", "Southern Express", "Florida Distribution", 14200, T),
    ("New York", "NY", "Philadelphia", "PA", "Empire State Shipping", "Liberty Logistics", 11000, T),
    ("San Francisco", "CA", "Las Vegas", "NV", "Bay Area Transport", "Vegas Wholesale", 16800, T),
    ("Nashville", "TN", "Memphis", "TN", "Music City Movers", "Bluff City Warehouse", 7500, T),
    ("Kansas City", "MO", "St. Louis", "MO", "Gateway Freight", "Arch City Receiving", 13200, T),
    ("Indianapolis", "IN", "Columbus", "OH", "Crossroads Shipping", "Buckeye Distribution", 10500, T),
    ("Charlotte", "NC", "Raleigh", "NC", "Carolina Carriers", "Triangle Logistics", 8900, D),
    ("San Diego", "CA", "Tucson", "AZ", "Border Express", "Desert Depot", 11200, D),
    ("Pittsburgh", "PA", "Cleveland", "OH", "Steel City Transport", "Rock & Roll Receiving", 19500, D),
    ("Tampa", "FL", "Orlando", "FL", "Sunshine Shipping", "Theme Park Supply", 7200, D),
    ("Sacramento", "CA", "Reno", "NV", "Capital Freight", "Silver State Storage", 14800, D),
    ("Baltimore", "MD", "Washington", "DC", "Charm City Cargo", "DC Distribution", 5500, C),
    ("Austin", "TX", "San Antonio", "TX", "Capitol Express", "Alamo Logistics", 9100, C),
]


def build_demo_shipments(user_id: str, now: datetime | None = None) -> list[dict[str, Any]]:
    """Row dicts for the demo set, newest first."""
    now = now or datetime.now(UTC)
    rows = []
    for index, (oc, os_, dc, ds, shipper, consignee, weight, status) in enumerate(DEMO_SHIPMENTS):
        rows.append(
            {
                "user_id": user_id,
                "origin_city": oc,
                "origin_state": os_,
                "destination_city": dc,
                "destination_state": ds,
                "shipper_name": shipper,
                "consignee_name": consignee,
                "weight": weight,
                "status": status,
                "created_at": now - timedelta(days=index),
                "updated_at": now - timedelta(hours=12 * index),
            }
        )
    return rows


async def seed(session: AsyncSession, user_id: str) -> int:
    await session.execute(delete(Shipment).where(Shipment.user_id == user_id))
    rows = build_demo_shipments(user_id)
    session.add_all(Shipment(**row) for row in rows)
    await session.commit()
    return len(rows)


async def main(user_id: str) -> None:
    async with async_session_maker() as session:
        count = await seed(session, user_id)

    print("=" * 60)
    print(f"  Created {count} demo shipments for user {user_id}")
    print("=" * 60)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python -m scripts.seed_demo <user_id>", file=sys.stderr)
        sys.exit(1)
    asyncio.run(main(sys.argv[1]))
