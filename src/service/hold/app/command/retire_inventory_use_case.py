from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.domain.entity.schedule_inventory_entity import ScheduleInventory
from src.service.hold.domain.hold_errors import InventoryNotFoundError


class RetireInventoryUseCase:
    """
    Soft-retire an inventory.

    New holds are refused from then on; existing holds can still be released
    or converted. The row itself is never deleted.
    """

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
    async def execute(self, *, inventory_id: UUID) -> ScheduleInventory:
        async with self.uow_factory() as uow:
            inventory = await uow.inventory_repo.get_for_update(inventory_id=inventory_id)
            if inventory is None:
                raise InventoryNotFoundError(inventory_id)
            retired = inventory.retire()
            await uow.inventory_repo.save(inventory=retired)
            await uow.commit()

        Logger.base.info(
            f'🗄️ [INVENTORY] Retired {retired.key} with {retired.held_units} units still held'
        )
        return retired
