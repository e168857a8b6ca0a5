"""
In-memory Unit of Work

Atomicity per inventory comes from the store's asyncio.Lock, taken in
get_for_update and released when the unit of work exits. Reads return
snapshots; writes stay pending until commit swaps them into the store.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Dict

from uuid_utils import UUID

from src.platform.exception.exceptions import ConflictError
from src.service.hold.app.interface.i_hold_record_repo import IHoldRecordRepo
from src.service.hold.app.interface.i_hold_unit_of_work import IHoldUnitOfWork
from src.service.hold.app.interface.i_partner_repo import IPartnerRepo
from src.service.hold.app.interface.i_schedule_inventory_repo import IScheduleInventoryRepo
from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.entity.partner_entity import Partner
from src.service.hold.domain.entity.schedule_inventory_entity import ScheduleInventory
from src.service.hold.domain.enum.hold_status import HoldStatus
from src.service.hold.domain.value_object.inventory_key import InventoryKey
from src.service.hold.driven_adapter.state.in_memory_hold_store import (
    InMemoryHoldStore,
    snapshot_hold,
    snapshot_inventory,
)


class InMemoryScheduleInventoryRepo(IScheduleInventoryRepo):
    def __init__(self, *, uow: InMemoryHoldUnitOfWork) -> None:
        self.uow = uow

    async def get(self, *, inventory_id: UUID) -> ScheduleInventory | None:
        inventory = self.uow.pending_inventories.get(inventory_id) or self.uow.store.inventories.get(
            inventory_id
        )
        return snapshot_inventory(inventory) if inventory else None

    async def get_for_update(self, *, inventory_id: UUID) -> ScheduleInventory | None:
        if inventory_id not in self.uow.store.inventories:
            return None
        await self.uow.acquire_inventory_lock(inventory_id)
        # Read after the lock is held so the snapshot is the latest committed state
        return await self.get(inventory_id=inventory_id)

    async def get_by_key(self, *, key: InventoryKey) -> ScheduleInventory | None:
        for inventory in (*self.uow.pending_inventories.values(), *self.uow.store.inventories.values()):
            if inventory.key == key:
                return snapshot_inventory(inventory)
        return None

    async def add(self, *, inventory: ScheduleInventory) -> None:
        self.uow.pending_inventories[inventory.id] = snapshot_inventory(inventory)

    async def save(self, *, inventory: ScheduleInventory) -> None:
        if inventory.id not in self.uow.locked_inventory_ids:
            raise RuntimeError(f'Inventory {inventory.id} saved without get_for_update')
        self.uow.pending_inventories[inventory.id] = snapshot_inventory(inventory)


class InMemoryHoldRecordRepo(IHoldRecordRepo):
    def __init__(self, *, uow: InMemoryHoldUnitOfWork) -> None:
        self.uow = uow

    def _all_holds(self) -> Dict[UUID, HoldRecord]:
        return {**self.uow.store.holds, **self.uow.pending_holds}

    async def get(self, *, hold_id: UUID) -> HoldRecord | None:
        hold = self._all_holds().get(hold_id)
        return snapshot_hold(hold) if hold else None

    async def get_for_update(self, *, hold_id: UUID) -> HoldRecord | None:
        hold = self._all_holds().get(hold_id)
        if hold is None:
            return None
        if hold.inventory_id not in self.uow.locked_inventory_ids:
            raise RuntimeError(f'Hold {hold_id} locked before its inventory {hold.inventory_id}')
        return snapshot_hold(hold)

    async def add(self, *, hold: HoldRecord) -> None:
        self.uow.pending_holds[hold.id] = snapshot_hold(hold)

    async def save(self, *, hold: HoldRecord) -> None:
        self.uow.pending_holds[hold.id] = snapshot_hold(hold)

    async def count_active(self, *, inventory_id: UUID) -> int:
        return sum(
            1
            for hold in self._all_holds().values()
            if hold.inventory_id == inventory_id and hold.status == HoldStatus.ACTIVE
        )

    async def list_expired_active_ids(self, *, now: datetime, limit: int) -> list[UUID]:
        expired = sorted(
            (
                hold
                for hold in self._all_holds().values()
                if hold.status == HoldStatus.ACTIVE and hold.expires_at <= now
            ),
            key=lambda hold: hold.expires_at,
        )
        return [hold.id for hold in expired[:limit]]

    async def find_active_by_holder(self, *, inventory_id: UUID, held_by: str) -> HoldRecord | None:
        candidates = [
            hold
            for hold in self._all_holds().values()
            if hold.inventory_id == inventory_id
            and hold.held_by == held_by
            and hold.status == HoldStatus.ACTIVE
        ]
        if not candidates:
            return None
        return snapshot_hold(max(candidates, key=lambda hold: hold.created_at))


class InMemoryPartnerRepo(IPartnerRepo):
    def __init__(self, *, uow: InMemoryHoldUnitOfWork) -> None:
        self.uow = uow

    async def get(self, *, partner_id: str) -> Partner | None:
        return self.uow.pending_partners.get(partner_id) or self.uow.store.partners.get(partner_id)

    async def save(self, *, partner: Partner) -> None:
        self.uow.pending_partners[partner.id] = partner


class InMemoryHoldUnitOfWork(IHoldUnitOfWork):
    def __init__(self, *, store: InMemoryHoldStore) -> None:
        self.store = store
        self.pending_inventories: Dict[UUID, ScheduleInventory] = {}
        self.pending_holds: Dict[UUID, HoldRecord] = {}
        self.pending_partners: Dict[str, Partner] = {}
        self.locked_inventory_ids: set[UUID] = set()
        self._locks: list[asyncio.Lock] = []

        self.inventory_repo = InMemoryScheduleInventoryRepo(uow=self)
        self.hold_repo = InMemoryHoldRecordRepo(uow=self)
        self.partner_repo = InMemoryPartnerRepo(uow=self)

    async def acquire_inventory_lock(self, inventory_id: UUID) -> None:
        if inventory_id in self.locked_inventory_ids:
            return
        lock = self.store.inventory_lock(inventory_id)
        await lock.acquire()
        self._locks.append(lock)
        self.locked_inventory_ids.add(inventory_id)

    async def __aexit__(self, *args) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            for lock in reversed(self._locks):
                lock.release()
            self._locks.clear()
            self.locked_inventory_ids.clear()

    async def _commit(self) -> None:
        for inventory_id, inventory in self.pending_inventories.items():
            existing = self.store.inventories.get(inventory_id)
            if existing is None and any(
                other.key == inventory.key for other in self.store.inventories.values()
            ):
                raise ConflictError(f'Inventory {inventory.key} already exists')

        # No await from the checks to the swap, so other tasks never see a partial commit
        self.store.inventories.update(self.pending_inventories)
        self.store.holds.update(self.pending_holds)
        self.store.partners.update(self.pending_partners)
        self._discard_pending()

    async def rollback(self) -> None:
        self._discard_pending()

    def _discard_pending(self) -> None:
        self.pending_inventories = {}
        self.pending_holds = {}
        self.pending_partners = {}
