"""
Unit tests for InMemoryHoldEventBroadcasterImpl

Fan-out of committed hold events to per-inventory subscribers (the SSE endpoint).
"""

from datetime import datetime, timezone

from anyio import ClosedResourceError, fail_after, move_on_after
from anyio.streams.memory import MemoryObjectReceiveStream
import pytest
from uuid_utils import UUID, uuid7

from src.service.hold.domain.domain_event import HoldCreatedEvent
from src.service.hold.driven_adapter.event.in_memory_hold_event_broadcaster import (
    InMemoryHoldEventBroadcasterImpl,
)


def _created(inventory_id: UUID) -> HoldCreatedEvent:
    return HoldCreatedEvent(
        hold_id=uuid7(),
        inventory_id=inventory_id,
        held_by='user-1',
        quantity=1,
        unit_ids=['S001'],
        expires_at=datetime(2026, 1, 1, 8, 30, tzinfo=timezone.utc),
    )


@pytest.mark.unit
class TestInMemoryHoldEventBroadcaster:
    @pytest.fixture
    def inventory_id(self) -> UUID:
        return uuid7()

    @pytest.mark.asyncio
    async def test_subscribe_returns_stream(self, broadcaster, inventory_id):
        stream = await broadcaster.subscribe(inventory_id=inventory_id)

        assert isinstance(stream, MemoryObjectReceiveStream)
        assert broadcaster.subscriber_count(inventory_id=inventory_id) == 1

    @pytest.mark.asyncio
    async def test_publish_to_all_subscribers(self, broadcaster, inventory_id):
        stream1 = await broadcaster.subscribe(inventory_id=inventory_id)
        stream2 = await broadcaster.subscribe(inventory_id=inventory_id)
        event = _created(inventory_id)

        await broadcaster.publish(event=event)

        with fail_after(1.0):
            assert await stream1.receive() == event
            assert await stream2.receive() == event

    @pytest.mark.asyncio
    async def test_other_inventory_not_notified(self, broadcaster, inventory_id):
        stream = await broadcaster.subscribe(inventory_id=inventory_id)

        await broadcaster.publish(event=_created(uuid7()))

        received = None
        with move_on_after(0.1):
            received = await stream.receive()
        assert received is None

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self, broadcaster, inventory_id):
        await broadcaster.publish(event=_created(inventory_id))

    @pytest.mark.asyncio
    async def test_full_buffer_drops_instead_of_blocking(self, inventory_id):
        broadcaster = InMemoryHoldEventBroadcasterImpl(max_buffer_size=2)
        stream = await broadcaster.subscribe(inventory_id=inventory_id)
        events = [_created(inventory_id) for _ in range(5)]

        with fail_after(1.0):
            for event in events:
                await broadcaster.publish(event=event)

        assert await stream.receive() == events[0]
        assert await stream.receive() == events[1]
        received = None
        with move_on_after(0.1):
            received = await stream.receive()
        assert received is None

    @pytest.mark.asyncio
    async def test_unsubscribe_closes_stream(self, broadcaster, inventory_id):
        stream = await broadcaster.subscribe(inventory_id=inventory_id)

        await broadcaster.unsubscribe(inventory_id=inventory_id, stream=stream)
        await broadcaster.publish(event=_created(inventory_id))

        assert broadcaster.subscriber_count(inventory_id=inventory_id) == 0
        with pytest.raises(ClosedResourceError):
            await stream.receive()
