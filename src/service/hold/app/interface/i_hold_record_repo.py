from abc import ABC, abstractmethod
from datetime import datetime

from uuid_utils import UUID

from src.service.hold.domain.entity.hold_record_entity import HoldRecord


class IHoldRecordRepo(ABC):
    @abstractmethod
    async def get(self, *, hold_id: UUID) -> HoldRecord | None:
        """Read without locking"""
        pass

    @abstractmethod
    async def get_for_update(self, *, hold_id: UUID) -> HoldRecord | None:
        """Read and lock; only call after the owning inventory is locked"""
        pass

    @abstractmethod
    async def add(self, *, hold: HoldRecord) -> None:
        pass

    @abstractmethod
    async def save(self, *, hold: HoldRecord) -> None:
        pass

    @abstractmethod
    async def count_active(self, *, inventory_id: UUID) -> int:
        pass

    @abstractmethod
    async def list_expired_active_ids(self, *, now: datetime, limit: int) -> list[UUID]:
        """ACTIVE holds with expires_at <= now, oldest expiry first"""
        pass

    @abstractmethod
    async def find_active_by_holder(self, *, inventory_id: UUID, held_by: str) -> HoldRecord | None:
        """Most recent ACTIVE hold of a holder on one inventory"""
        pass
