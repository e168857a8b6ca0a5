from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.hold.app.dto.inventory_dto import PublishInventoryRequest
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.domain.entity.schedule_inventory_entity import ScheduleInventory


class PublishInventoryUseCase:
    """Create the inventory of a newly published schedule, every unit AVAILABLE"""

    def __init__(self, *, uow_factory: HoldUnitOfWorkFactory) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: HoldUnitOfWorkFactory = Depends(Provide[Container.hold_unit_of_work.provider]),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, request: PublishInventoryRequest) -> ScheduleInventory:
        with self.tracer.start_as_current_span(
            'use_case.publish_inventory',
            attributes={'inventory.key': str(request.key), 'partner.id': request.partner_id},
        ):
            inventory = ScheduleInventory.publish(
                key=request.key,
                partner_id=request.partner_id,
                unit_ids=request.unit_ids,
                unit_count=request.unit_count,
            )

            async with self.uow_factory() as uow:
                if await uow.inventory_repo.get_by_key(key=request.key) is not None:
                    raise ConflictError(f'Inventory {request.key} already exists')
                await uow.inventory_repo.add(inventory=inventory)
                await uow.commit()

            Logger.base.info(
                f'📦 [INVENTORY] Published {request.key} with {inventory.total_units} units '
                f'(id={inventory.id})'
            )
            return inventory
