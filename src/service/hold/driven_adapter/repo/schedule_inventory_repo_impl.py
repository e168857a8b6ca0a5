from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.hold.app.interface.i_schedule_inventory_repo import IScheduleInventoryRepo
from src.service.hold.domain.entity.schedule_inventory_entity import ScheduleInventory
from src.service.hold.domain.enum.inventory_category import InventoryCategory
from src.service.hold.domain.enum.inventory_status import InventoryStatus
from src.service.hold.domain.enum.unit_status import UnitStatus
from src.service.hold.domain.value_object.inventory_key import InventoryKey
from src.service.hold.driven_adapter.model.schedule_inventory_model import ScheduleInventoryModel
from src.service.hold.driven_adapter.repo.uuid_mapping import from_db_uuid, to_db_uuid


class ScheduleInventoryRepoImpl(IScheduleInventoryRepo):
    """Session is shared with the owning SqlAlchemyHoldUnitOfWork"""

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_inventory: ScheduleInventoryModel) -> ScheduleInventory:
        return ScheduleInventory(
            id=from_db_uuid(db_inventory.id),
            key=InventoryKey(
                category=InventoryCategory(db_inventory.category),
                schedule_id=db_inventory.schedule_id,
                sub_key=db_inventory.sub_key,
            ),
            partner_id=db_inventory.partner_id,
            total_units=db_inventory.total_units,
            available_units=db_inventory.available_units,
            held_units=db_inventory.held_units,
            booked_units=db_inventory.booked_units,
            unit_status=(
                {unit_id: UnitStatus(status) for unit_id, status in db_inventory.unit_status.items()}
                if db_inventory.unit_status is not None
                else None
            ),
            status=InventoryStatus(db_inventory.status),
            created_at=db_inventory.created_at,
            updated_at=db_inventory.updated_at,
        )

    @staticmethod
    def _unit_status_json(inventory: ScheduleInventory) -> dict[str, str] | None:
        if inventory.unit_status is None:
            return None
        return {unit_id: status.value for unit_id, status in inventory.unit_status.items()}

    @Logger.io
    async def get(self, *, inventory_id: UUID) -> ScheduleInventory | None:
        result = await self.session.execute(
            select(ScheduleInventoryModel).where(
                ScheduleInventoryModel.id == to_db_uuid(inventory_id)
            )
        )
        db_inventory = result.scalar_one_or_none()
        return self._to_entity(db_inventory) if db_inventory else None

    @Logger.io
    async def get_for_update(self, *, inventory_id: UUID) -> ScheduleInventory | None:
        # populate_existing: a row already in the identity map must be refreshed once locked
        result = await self.session.execute(
            select(ScheduleInventoryModel)
            .where(ScheduleInventoryModel.id == to_db_uuid(inventory_id))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        db_inventory = result.scalar_one_or_none()
        return self._to_entity(db_inventory) if db_inventory else None

    @Logger.io
    async def get_by_key(self, *, key: InventoryKey) -> ScheduleInventory | None:
        result = await self.session.execute(
            select(ScheduleInventoryModel).where(
                ScheduleInventoryModel.category == key.category.value,
                ScheduleInventoryModel.schedule_id == key.schedule_id,
                ScheduleInventoryModel.sub_key == key.sub_key,
            )
        )
        db_inventory = result.scalar_one_or_none()
        return self._to_entity(db_inventory) if db_inventory else None

    @Logger.io
    async def add(self, *, inventory: ScheduleInventory) -> None:
        self.session.add(
            ScheduleInventoryModel(
                id=to_db_uuid(inventory.id),
                category=inventory.key.category.value,
                schedule_id=inventory.key.schedule_id,
                sub_key=inventory.key.sub_key,
                partner_id=inventory.partner_id,
                total_units=inventory.total_units,
                available_units=inventory.available_units,
                held_units=inventory.held_units,
                booked_units=inventory.booked_units,
                unit_status=self._unit_status_json(inventory),
                status=inventory.status.value,
                created_at=inventory.created_at,
                updated_at=inventory.updated_at,
            )
        )
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f'Inventory {inventory.key} already exists') from e

    @Logger.io
    async def save(self, *, inventory: ScheduleInventory) -> None:
        await self.session.execute(
            update(ScheduleInventoryModel)
            .where(ScheduleInventoryModel.id == to_db_uuid(inventory.id))
            .values(
                available_units=inventory.available_units,
                held_units=inventory.held_units,
                booked_units=inventory.booked_units,
                unit_status=self._unit_status_json(inventory),
                status=inventory.status.value,
                updated_at=inventory.updated_at,
            )
        )
