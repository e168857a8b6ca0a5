"""
In-memory Hold Event Broadcaster

Fan-out of committed hold events to in-process subscribers (the SSE endpoint),
keyed by inventory id.
"""

from typing import Dict, List

from anyio import BrokenResourceError, ClosedResourceError, WouldBlock, create_memory_object_stream
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.hold.app.interface.i_hold_event_publisher import IHoldEventPublisher
from src.service.hold.domain.domain_event.hold_domain_event import HoldDomainEvent


class InMemoryHoldEventBroadcasterImpl(IHoldEventPublisher):
    """
    Memory Management:
    - Stream max buffer: 10 events per subscriber
    - Drop policy: drop for a subscriber whose buffer is full (send_nowait raises WouldBlock)
    - Cleanup: remove empty subscriber lists on unsubscribe
    """

    def __init__(self, *, max_buffer_size: int = 10) -> None:
        self._max_buffer_size = max_buffer_size
        self._subscribers: Dict[
            UUID,
            List[
                tuple[
                    MemoryObjectSendStream[HoldDomainEvent],
                    MemoryObjectReceiveStream[HoldDomainEvent],
                ]
            ],
        ] = {}

    def subscriber_count(self, *, inventory_id: UUID) -> int:
        return len(self._subscribers.get(inventory_id, []))

    async def subscribe(self, *, inventory_id: UUID) -> MemoryObjectReceiveStream[HoldDomainEvent]:
        send_stream, receive_stream = create_memory_object_stream[HoldDomainEvent](
            max_buffer_size=self._max_buffer_size
        )
        self._subscribers.setdefault(inventory_id, []).append((send_stream, receive_stream))
        Logger.base.debug(
            f'📡 [BROADCASTER] Subscribed to inventory {inventory_id} '
            f'(total subscribers: {len(self._subscribers[inventory_id])})'
        )
        return receive_stream

    async def publish(self, *, event: HoldDomainEvent) -> None:
        subscribers = self._subscribers.get(event.inventory_id)
        if not subscribers:
            return

        delivered = 0
        dropped = 0
        for send_stream, _ in subscribers:
            try:
                send_stream.send_nowait(event)
                delivered += 1
            except WouldBlock:
                dropped += 1
                Logger.base.warning(
                    f'⚠️ [BROADCASTER] Stream full for inventory {event.inventory_id}, '
                    f'dropping {type(event).__name__}'
                )
            except (BrokenResourceError, ClosedResourceError):
                dropped += 1

        Logger.base.debug(
            f'📡 [BROADCASTER] {type(event).__name__} for inventory {event.inventory_id}: '
            f'delivered={delivered}, dropped={dropped}'
        )

    async def unsubscribe(
        self, *, inventory_id: UUID, stream: MemoryObjectReceiveStream[HoldDomainEvent]
    ) -> None:
        subscribers = self._subscribers.get(inventory_id)
        if not subscribers:
            return

        for i, (send_stream, receive_stream) in enumerate(subscribers):
            if receive_stream is stream:
                await send_stream.aclose()
                await receive_stream.aclose()
                subscribers.pop(i)
                break

        if not subscribers:
            del self._subscribers[inventory_id]
