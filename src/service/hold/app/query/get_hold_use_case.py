from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.hold_errors import HoldNotFoundError


class GetHoldUseCase:
    def __init__(self, *, uow_factory: HoldUnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: HoldUnitOfWorkFactory = Depends(Provide[Container.hold_unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def get_hold(self, *, hold_id: UUID) -> HoldRecord:
        async with self.uow_factory() as uow:
            hold = await uow.hold_repo.get(hold_id=hold_id)
        if hold is None:
            raise HoldNotFoundError(hold_id)
        return hold

    @Logger.io
    async def find_active_hold(self, *, inventory_id: UUID, held_by: str) -> HoldRecord:
        """The hold a confirmed booking converts: the holder's latest ACTIVE one"""
        async with self.uow_factory() as uow:
            hold = await uow.hold_repo.find_active_by_holder(
                inventory_id=inventory_id, held_by=held_by
            )
        if hold is None:
            raise HoldNotFoundError(
                None, f'No active hold for {held_by} on inventory {inventory_id}'
            )
        return hold
