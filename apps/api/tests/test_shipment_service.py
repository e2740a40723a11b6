"""Tests for the owner-scoped shipment store client."""

import uuid
from collections.abc import Callable
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from freightdesk.models.shipment import Shipment, ShipmentStatus
from freightdesk.services.shipment_service import ShipmentService

from conftest import OTHER_USER_ID, TEST_USER_ID


@pytest.fixture
def service(db_session: AsyncSession) -> ShipmentService:
    return ShipmentService(db_session)


class TestListShipments:
    async def test_newest_first(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        oldest = await shipment_factory(origin_city="Dallas")
        newest = await shipment_factory(
            origin_city="Atlanta", created_at=oldest.created_at.replace(year=2027)
        )

        result = await service.list_shipments(TEST_USER_ID)

        assert [s.id for s in result] == [newest.id, oldest.id]

    async def test_status_filter_and_limit(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        pending = [await shipment_factory(status=ShipmentStatus.PENDING) for _ in range(5)]
        for _ in range(8):
            await shipment_factory(status=ShipmentStatus.IN_TRANSIT)

        result = await service.list_shipments(TEST_USER_ID, status=ShipmentStatus.PENDING, limit=2)

        assert len(result) == 2
        assert all(s.status == ShipmentStatus.PENDING for s in result)
        # Factory creates each row an hour older than the last.
        assert [s.id for s in result] == [pending[0].id, pending[1].id]

    async def test_search_matches_origin_or_destination(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        await shipment_factory(origin_city="Chicago", destination_city="Detroit")
        await shipment_factory(origin_city="Dallas", destination_city="Houston")

        by_destination = await service.list_shipments(TEST_USER_ID, search="detr")
        by_origin = await service.list_shipments(TEST_USER_ID, search="DALLAS")

        assert [s.destination_city for s in by_destination] == ["Detroit"]
        assert [s.origin_city for s in by_origin] == ["Dallas"]

    async def test_search_treats_wildcards_literally(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        await shipment_factory()

        assert await service.list_shipments(TEST_USER_ID, search="%") == []
        assert await service.list_shipments(TEST_USER_ID, search="_hicago") == []

    async def test_offset_pages_through_results(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        created = [await shipment_factory() for _ in range(3)]

        page = await service.list_shipments(TEST_USER_ID, limit=2, offset=2)

        assert [s.id for s in page] == [created[2].id]
        assert await service.count_shipments(TEST_USER_ID) == 3


class TestOwnerIsolation:
    async def test_other_owner_sees_nothing(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        mine = await shipment_factory(user_id=TEST_USER_ID)

        assert await service.list_shipments(OTHER_USER_ID) == []
        assert await service.get_shipment(OTHER_USER_ID, mine.id) is None
        assert await service.find_by_city(OTHER_USER_ID, "Chicago") == []
        assert await service.update_status(OTHER_USER_ID, mine.id, ShipmentStatus.DELIVERED) is None
        assert await service.delete_shipment(OTHER_USER_ID, mine.id) is False

        stats = await service.get_stats(OTHER_USER_ID)
        assert stats.total == 0

        # The owner's record is untouched.
        still_mine = await service.get_shipment(TEST_USER_ID, mine.id)
        assert still_mine is not None
        assert still_mine.status == ShipmentStatus.IN_TRANSIT


class TestGetShipment:
    async def test_by_id(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        shipment = await shipment_factory()

        found = await service.get_shipment(TEST_USER_ID, str(shipment.id))

        assert found is not None
        assert found.id == shipment.id

    async def test_malformed_id_is_not_found(self, service: ShipmentService) -> None:
        assert await service.get_shipment(TEST_USER_ID, "not-a-uuid") is None

    async def test_unknown_id_is_not_found(self, service: ShipmentService) -> None:
        assert await service.get_shipment(TEST_USER_ID, uuid.uuid4()) is None


class TestFindByCity:
    async def test_first_match_is_newest(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        newer = await shipment_factory(origin_city="Chicago", destination_city="Detroit")
        await shipment_factory(origin_city="Chicago", destination_city="Milwaukee")

        matches = await service.find_by_city(TEST_USER_ID, "chicago")

        assert [s.id for s in matches] == [newer.id]

    async def test_limit_returns_several(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        await shipment_factory(origin_city="Chicago")
        await shipment_factory(origin_city="Chicago")

        assert len(await service.find_by_city(TEST_USER_ID, "Chicago", limit=5)) == 2

    async def test_blank_term_matches_nothing(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        await shipment_factory()

        assert await service.find_by_city(TEST_USER_ID, "   ") == []


class TestMutations:
    async def test_create_assigns_id_and_owner(self, service: ShipmentService) -> None:
        shipment = await service.create_shipment(
            TEST_USER_ID,
            {
                "user_id": "someone-else",
                "origin_city": "Boston",
                "origin_state": "MA",
                "destination_city": "Hartford",
                "destination_state": "CT",
                "shipper_name": "New England Goods",
                "consignee_name": "Connecticut Logistics",
                "weight": 6500,
            },
        )

        assert isinstance(shipment.id, uuid.UUID)
        assert shipment.user_id == TEST_USER_ID
        assert shipment.status == ShipmentStatus.PENDING

    async def test_update_then_get_reflects_status_and_newer_timestamp(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        shipment = await shipment_factory(status=ShipmentStatus.IN_TRANSIT)
        before = shipment.updated_at

        updated = await service.update_status(TEST_USER_ID, shipment.id, "delivered")
        fetched = await service.get_shipment(TEST_USER_ID, shipment.id)

        assert updated is not None
        assert fetched is not None
        assert fetched.status == ShipmentStatus.DELIVERED
        assert fetched.updated_at > before

    async def test_update_twice_keeps_timestamp_increasing(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        shipment = await shipment_factory()

        first = await service.update_status(TEST_USER_ID, shipment.id, ShipmentStatus.DELIVERED)
        assert first is not None
        first_stamp = first.updated_at
        second = await service.update_status(TEST_USER_ID, shipment.id, ShipmentStatus.CANCELLED)

        assert second is not None
        assert second.updated_at > first_stamp

    async def test_delete_then_get_is_not_found(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        shipment = await shipment_factory()

        assert await service.delete_shipment(TEST_USER_ID, shipment.id) is True
        assert await service.get_shipment(TEST_USER_ID, shipment.id) is None
        assert await service.delete_shipment(TEST_USER_ID, shipment.id) is False


class TestStats:
    async def test_empty_owner(self, service: ShipmentService) -> None:
        stats = await service.get_stats(TEST_USER_ID)

        assert stats.total == 0
        assert stats.total_weight == 0
        assert stats.heaviest is None
        assert set(stats.by_status.values()) == {0}
        assert set(stats.by_status) == set(ShipmentStatus)

    async def test_demo_set(
        self, service: ShipmentService, demo_shipments: list[Shipment]
    ) -> None:
        stats = await service.get_stats(TEST_USER_ID)

        assert stats.total == 20
        assert stats.by_status[ShipmentStatus.PENDING] == 5
        assert stats.by_status[ShipmentStatus.IN_TRANSIT] == 8
        assert stats.by_status[ShipmentStatus.DELIVERED] == 5
        assert stats.by_status[ShipmentStatus.CANCELLED] == 2
        assert stats.total_weight == sum(s.weight or 0 for s in demo_shipments)
        assert stats.heaviest is not None
        assert stats.heaviest.origin_city == "Chicago"
        assert stats.heaviest.weight == 22000

    async def test_missing_weights_count_as_zero(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        await shipment_factory(weight=None)
        await shipment_factory(weight=1000)

        stats = await service.get_stats(TEST_USER_ID)

        assert stats.total == 2
        assert stats.total_weight == 1000
        assert stats.heaviest is not None
        assert stats.heaviest.weight == 1000

    async def test_zero_weight_counts_as_heaviest(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        await shipment_factory(weight=None)
        zero = await shipment_factory(weight=0)

        stats = await service.get_stats(TEST_USER_ID)

        assert stats.heaviest is not None
        assert stats.heaviest.id == zero.id
        assert stats.heaviest.weight == 0

    async def test_heaviest_tie_keeps_newest(
        self, service: ShipmentService, shipment_factory: Callable[..., Any]
    ) -> None:
        newer = await shipment_factory(origin_city="Dallas", weight=5000)
        await shipment_factory(origin_city="Austin", weight=5000)

        stats = await service.get_stats(TEST_USER_ID)

        assert stats.heaviest is not None
        assert stats.heaviest.id == newer.id
