"""
Unit tests for ReleaseHoldUseCase and ConvertHoldUseCase

Test Focus:
1. release gives back exactly the hold's units; a second release changes nothing
2. convert moves units from held to booked once; a retry with the same reference is a no-op
3. Events only for transitions that actually happened
"""

import pytest
from uuid_utils import uuid7

from src.service.hold.app.dto import (
    ConvertOutcome,
    ReleaseOutcome,
    RequestHoldRequest,
)
from src.service.hold.domain.domain_event import HoldConvertedEvent, HoldReleasedEvent
from src.service.hold.domain.enum import HoldStatus, InventoryCategory, ReleaseReason, UnitStatus


@pytest.fixture
async def seat_hold(request_hold_use_case, publish_bus_inventory, mock_event_publisher):
    inventory = await publish_bus_inventory(seats=40)
    result = await request_hold_use_case.execute(
        RequestHoldRequest(
            inventory_id=inventory.id,
            held_by='user-1',
            category=InventoryCategory.BUS,
            unit_ids=['S001', 'S002', 'S003'],
        )
    )
    mock_event_publisher.reset_mock()
    return result.hold


@pytest.mark.unit
class TestReleaseHoldUseCase:
    @pytest.mark.asyncio
    async def test_release_restores_units(
        self, release_hold_use_case, seat_hold, hold_store, mock_event_publisher
    ):
        result = await release_hold_use_case.execute(
            hold_id=seat_hold.id, reason=ReleaseReason.CANCELLED
        )

        assert result.outcome == ReleaseOutcome.SUCCESS
        assert result.hold.status == HoldStatus.RELEASED
        assert result.hold.release_reason == ReleaseReason.CANCELLED

        inventory = hold_store.inventories[seat_hold.inventory_id]
        assert inventory.available_units == 40
        assert inventory.held_units == 0
        assert inventory.unit_status['S001'] == UnitStatus.AVAILABLE
        assert inventory.is_consistent

        event = mock_event_publisher.publish.call_args.kwargs['event']
        assert isinstance(event, HoldReleasedEvent)
        assert event.reason == ReleaseReason.CANCELLED

    @pytest.mark.asyncio
    async def test_second_release_is_already_terminal(
        self, release_hold_use_case, seat_hold, hold_store, mock_event_publisher
    ):
        await release_hold_use_case.execute(hold_id=seat_hold.id, reason=ReleaseReason.CANCELLED)
        before = hold_store.inventories[seat_hold.inventory_id]
        mock_event_publisher.reset_mock()

        result = await release_hold_use_case.execute(
            hold_id=seat_hold.id, reason=ReleaseReason.EXPIRED
        )

        assert result.outcome == ReleaseOutcome.ALREADY_TERMINAL
        assert result.hold.release_reason == ReleaseReason.CANCELLED
        after = hold_store.inventories[seat_hold.inventory_id]
        assert after.available_units == before.available_units
        assert after.held_units == before.held_units
        mock_event_publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_release_unknown_hold(self, release_hold_use_case):
        result = await release_hold_use_case.execute(
            hold_id=uuid7(), reason=ReleaseReason.CANCELLED
        )

        assert result.outcome == ReleaseOutcome.NOT_FOUND

    @pytest.mark.asyncio
    async def test_release_converted_hold_is_already_terminal(
        self, release_hold_use_case, convert_hold_use_case, seat_hold, hold_store
    ):
        await convert_hold_use_case.execute(hold_id=seat_hold.id, booking_reference='BK-1')

        result = await release_hold_use_case.execute(
            hold_id=seat_hold.id, reason=ReleaseReason.EXPIRED
        )

        assert result.outcome == ReleaseOutcome.ALREADY_TERMINAL
        assert hold_store.inventories[seat_hold.inventory_id].booked_units == 3


@pytest.mark.unit
class TestConvertHoldUseCase:
    @pytest.mark.asyncio
    async def test_convert_books_units(
        self, convert_hold_use_case, seat_hold, hold_store, mock_event_publisher
    ):
        result = await convert_hold_use_case.execute(
            hold_id=seat_hold.id, booking_reference='BK-2026-0001'
        )

        assert result.outcome == ConvertOutcome.SUCCESS
        assert not result.already_converted
        assert result.hold.status == HoldStatus.CONVERTED

        inventory = hold_store.inventories[seat_hold.inventory_id]
        assert inventory.held_units == 0
        assert inventory.booked_units == 3
        assert inventory.available_units == 37
        assert inventory.unit_status['S002'] == UnitStatus.BOOKED
        assert inventory.is_consistent

        event = mock_event_publisher.publish.call_args.kwargs['event']
        assert isinstance(event, HoldConvertedEvent)
        assert event.booking_reference == 'BK-2026-0001'

    @pytest.mark.asyncio
    async def test_retry_with_same_reference_does_not_double_book(
        self, convert_hold_use_case, seat_hold, hold_store, mock_event_publisher
    ):
        await convert_hold_use_case.execute(hold_id=seat_hold.id, booking_reference='BK-1')
        mock_event_publisher.reset_mock()

        result = await convert_hold_use_case.execute(hold_id=seat_hold.id, booking_reference='BK-1')

        assert result.outcome == ConvertOutcome.SUCCESS
        assert result.already_converted
        assert hold_store.inventories[seat_hold.inventory_id].booked_units == 3
        mock_event_publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_convert_with_other_reference_is_not_active(
        self, convert_hold_use_case, seat_hold, hold_store
    ):
        await convert_hold_use_case.execute(hold_id=seat_hold.id, booking_reference='BK-1')

        result = await convert_hold_use_case.execute(hold_id=seat_hold.id, booking_reference='BK-2')

        assert result.outcome == ConvertOutcome.NOT_ACTIVE
        assert hold_store.inventories[seat_hold.inventory_id].booked_units == 3

    @pytest.mark.asyncio
    async def test_convert_released_hold_is_not_active(
        self, convert_hold_use_case, release_hold_use_case, seat_hold
    ):
        await release_hold_use_case.execute(hold_id=seat_hold.id, reason=ReleaseReason.CANCELLED)

        result = await convert_hold_use_case.execute(hold_id=seat_hold.id, booking_reference='BK-1')

        assert result.outcome == ConvertOutcome.NOT_ACTIVE

    @pytest.mark.asyncio
    async def test_convert_expired_but_unswept_hold_succeeds(
        self, convert_hold_use_case, seat_hold, clock
    ):
        clock.advance(seat_hold.expires_at - clock.now)

        result = await convert_hold_use_case.execute(hold_id=seat_hold.id, booking_reference='BK-1')

        assert result.outcome == ConvertOutcome.SUCCESS

    @pytest.mark.asyncio
    async def test_convert_without_reference_is_invalid(self, convert_hold_use_case, seat_hold):
        result = await convert_hold_use_case.execute(hold_id=seat_hold.id, booking_reference='')

        assert result.outcome == ConvertOutcome.INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_convert_unknown_hold(self, convert_hold_use_case):
        result = await convert_hold_use_case.execute(hold_id=uuid7(), booking_reference='BK-1')

        assert result.outcome == ConvertOutcome.NOT_FOUND
