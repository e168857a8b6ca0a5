"""
Hold Unit of Work Interface

One instance is one atomic section against the inventory store.

Usage:
    async with uow_factory() as uow:
        inventory = await uow.inventory_repo.get_for_update(inventory_id=...)
        ...
        await uow.commit()

Leaving the block without commit() rolls everything back and releases every lock.
Lock order inside one unit of work is always inventory first, then hold.
"""

from __future__ import annotations

import abc
from typing import Callable

from src.service.hold.app.interface.i_hold_record_repo import IHoldRecordRepo
from src.service.hold.app.interface.i_partner_repo import IPartnerRepo
from src.service.hold.app.interface.i_schedule_inventory_repo import IScheduleInventoryRepo


class IHoldUnitOfWork(abc.ABC):
    inventory_repo: IScheduleInventoryRepo
    hold_repo: IHoldRecordRepo
    partner_repo: IPartnerRepo

    async def __aenter__(self) -> IHoldUnitOfWork:
        return self

    async def __aexit__(self, *args) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        """Discard uncommitted changes; a no-op after commit"""
        raise NotImplementedError


HoldUnitOfWorkFactory = Callable[[], IHoldUnitOfWork]
