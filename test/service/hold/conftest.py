"""
Hold test fixtures

In-memory store and unit of work factory, a controllable clock, and builders
for published inventories and partner overrides.
"""

from collections.abc import Awaitable, Callable, Generator
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from src.service.hold.app.command.convert_hold_use_case import ConvertHoldUseCase
from src.service.hold.app.command.publish_inventory_use_case import PublishInventoryUseCase
from src.service.hold.app.command.release_hold_use_case import ReleaseHoldUseCase
from src.service.hold.app.command.request_hold_use_case import RequestHoldUseCase
from src.service.hold.app.dto import PublishInventoryRequest
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.domain.entity import Partner, ScheduleInventory
from src.service.hold.domain.enum import InventoryCategory
from src.service.hold.domain.value_object.inventory_key import InventoryKey
from src.service.hold.driven_adapter.event.in_memory_hold_event_broadcaster import (
    InMemoryHoldEventBroadcasterImpl,
)
from src.service.hold.driven_adapter.policy.partner_policy_provider_impl import (
    PartnerPolicyProviderImpl,
)
from src.service.hold.driven_adapter.state.in_memory_hold_store import InMemoryHoldStore
from src.service.hold.driven_adapter.state.in_memory_hold_unit_of_work import (
    InMemoryHoldUnitOfWork,
)


BUS_PARTNER_ID = 'kuo-kuang-bus'
HOTEL_PARTNER_ID = 'grand-hotel'


class FakeClock:
    """Callable clock the tests move forward by hand"""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


def seat_ids(count: int) -> list[str]:
    return [f'S{i:03d}' for i in range(1, count + 1)]


@pytest.fixture
def hold_store() -> Generator[InMemoryHoldStore, None, None]:
    store = InMemoryHoldStore()
    yield store
    store.clear()


@pytest.fixture
def uow_factory(hold_store: InMemoryHoldStore) -> HoldUnitOfWorkFactory:
    return partial(InMemoryHoldUnitOfWork, store=hold_store)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def policy_provider(uow_factory: HoldUnitOfWorkFactory) -> PartnerPolicyProviderImpl:
    return PartnerPolicyProviderImpl(
        uow_factory=uow_factory, default_quota_percentage=25.0, default_expiry_minutes=30
    )


@pytest.fixture
def broadcaster() -> InMemoryHoldEventBroadcasterImpl:
    return InMemoryHoldEventBroadcasterImpl()


@pytest.fixture
def mock_event_publisher() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def request_hold_use_case(
    uow_factory: HoldUnitOfWorkFactory,
    policy_provider: PartnerPolicyProviderImpl,
    mock_event_publisher: AsyncMock,
    clock: FakeClock,
) -> RequestHoldUseCase:
    return RequestHoldUseCase(
        uow_factory=uow_factory,
        policy_provider=policy_provider,
        event_publisher=mock_event_publisher,
        clock=clock,
    )


@pytest.fixture
def release_hold_use_case(
    uow_factory: HoldUnitOfWorkFactory, mock_event_publisher: AsyncMock, clock: FakeClock
) -> ReleaseHoldUseCase:
    return ReleaseHoldUseCase(
        uow_factory=uow_factory, event_publisher=mock_event_publisher, clock=clock
    )


@pytest.fixture
def convert_hold_use_case(
    uow_factory: HoldUnitOfWorkFactory, mock_event_publisher: AsyncMock, clock: FakeClock
) -> ConvertHoldUseCase:
    return ConvertHoldUseCase(
        uow_factory=uow_factory, event_publisher=mock_event_publisher, clock=clock
    )


@pytest.fixture
def publish_bus_inventory(
    uow_factory: HoldUnitOfWorkFactory,
) -> Callable[..., Awaitable[ScheduleInventory]]:
    async def _publish(
        *, seats: int = 40, schedule_id: str = 'BUS-TPE-KHH-0800', partner_id: str = BUS_PARTNER_ID
    ) -> ScheduleInventory:
        return await PublishInventoryUseCase(uow_factory=uow_factory).execute(
            PublishInventoryRequest(
                key=InventoryKey(category=InventoryCategory.BUS, schedule_id=schedule_id),
                partner_id=partner_id,
                unit_ids=seat_ids(seats),
            )
        )

    return _publish


@pytest.fixture
def publish_hotel_inventory(
    uow_factory: HoldUnitOfWorkFactory,
) -> Callable[..., Awaitable[ScheduleInventory]]:
    async def _publish(
        *,
        rooms: int = 100,
        schedule_id: str = 'HOTEL-2026-01-01',
        sub_key: str = 'deluxe-twin',
        partner_id: str = HOTEL_PARTNER_ID,
    ) -> ScheduleInventory:
        return await PublishInventoryUseCase(uow_factory=uow_factory).execute(
            PublishInventoryRequest(
                key=InventoryKey(
                    category=InventoryCategory.HOTEL, schedule_id=schedule_id, sub_key=sub_key
                ),
                partner_id=partner_id,
                unit_count=rooms,
            )
        )

    return _publish


@pytest.fixture
def set_partner_policy(hold_store: InMemoryHoldStore) -> Callable[..., None]:
    """Write a partner override straight into the store"""

    def _set(
        partner_id: str,
        *,
        hold_enabled: bool = True,
        quota_percentage: Optional[float] = None,
        expiry_minutes: Optional[int] = None,
    ) -> None:
        hold_store.partners[partner_id] = Partner(
            id=partner_id,
            hold_enabled=hold_enabled,
            hold_quota_percentage=quota_percentage,
            hold_expiry_minutes=expiry_minutes,
        )

    return _set
