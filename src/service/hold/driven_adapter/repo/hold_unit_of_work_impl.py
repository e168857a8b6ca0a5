"""
SQLAlchemy Hold Unit of Work

One session transaction per unit of work. Inventory rows are locked with
SELECT ... FOR UPDATE before any check, hold rows after their inventory row.
READ COMMITTED is enough: every conflicting writer queues on the inventory row lock.
"""

from __future__ import annotations

from contextlib import AsyncExitStack
from typing import AsyncContextManager, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from src.service.hold.app.interface.i_hold_unit_of_work import IHoldUnitOfWork
from src.service.hold.driven_adapter.repo.hold_record_repo_impl import HoldRecordRepoImpl
from src.service.hold.driven_adapter.repo.partner_repo_impl import PartnerRepoImpl
from src.service.hold.driven_adapter.repo.schedule_inventory_repo_impl import (
    ScheduleInventoryRepoImpl,
)


class SqlAlchemyHoldUnitOfWork(IHoldUnitOfWork):
    def __init__(self, *, session_factory: Callable[[], AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory
        self._exit_stack: AsyncExitStack | None = None
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> SqlAlchemyHoldUnitOfWork:
        self._exit_stack = AsyncExitStack()
        self.session = await self._exit_stack.enter_async_context(self.session_factory())

        # Repositories share the unit of work's session
        self.inventory_repo = ScheduleInventoryRepoImpl(session=self.session)
        self.hold_repo = HoldRecordRepoImpl(session=self.session)
        self.partner_repo = PartnerRepoImpl(session=self.session)

        await super().__aenter__()
        return self

    async def __aexit__(self, *args) -> None:
        assert self._exit_stack is not None
        try:
            await super().__aexit__(*args)
        finally:
            # Closing the session returns the connection and drops every row lock
            await self._exit_stack.aclose()
            self._exit_stack = None
            self.session = None

    async def _commit(self) -> None:
        assert self.session is not None
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
