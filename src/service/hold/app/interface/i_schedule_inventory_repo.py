from abc import ABC, abstractmethod

from uuid_utils import UUID

from src.service.hold.domain.entity.schedule_inventory_entity import ScheduleInventory
from src.service.hold.domain.value_object.inventory_key import InventoryKey


class IScheduleInventoryRepo(ABC):
    @abstractmethod
    async def get(self, *, inventory_id: UUID) -> ScheduleInventory | None:
        """Read without locking"""
        pass

    @abstractmethod
    async def get_for_update(self, *, inventory_id: UUID) -> ScheduleInventory | None:
        """
        Read and lock the inventory until the unit of work ends.

        Every read-then-write of counts or unit status goes through this method.
        """
        pass

    @abstractmethod
    async def get_by_key(self, *, key: InventoryKey) -> ScheduleInventory | None:
        pass

    @abstractmethod
    async def add(self, *, inventory: ScheduleInventory) -> None:
        """Insert a new inventory; a duplicate key raises ConflictError"""
        pass

    @abstractmethod
    async def save(self, *, inventory: ScheduleInventory) -> None:
        """Persist an inventory previously read with get_for_update"""
        pass
