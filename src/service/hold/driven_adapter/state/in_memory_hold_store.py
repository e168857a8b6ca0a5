"""
In-memory Hold Store

Process-local inventory store used by tests and HOLD_STORE_BACKEND=memory.
Committed state lives here; units of work read snapshot copies and write
them back on commit.
"""

import asyncio
from typing import Dict

import attrs
from uuid_utils import UUID

from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.entity.partner_entity import Partner
from src.service.hold.domain.entity.schedule_inventory_entity import ScheduleInventory


def snapshot_inventory(inventory: ScheduleInventory) -> ScheduleInventory:
    return attrs.evolve(
        inventory,
        unit_status=dict(inventory.unit_status) if inventory.unit_status is not None else None,
    )


def snapshot_hold(hold: HoldRecord) -> HoldRecord:
    return attrs.evolve(hold, unit_ids=list(hold.unit_ids))


class InMemoryHoldStore:
    def __init__(self) -> None:
        self.inventories: Dict[UUID, ScheduleInventory] = {}
        self.holds: Dict[UUID, HoldRecord] = {}
        self.partners: Dict[str, Partner] = {}
        self._inventory_locks: Dict[UUID, asyncio.Lock] = {}

    def inventory_lock(self, inventory_id: UUID) -> asyncio.Lock:
        """One lock per inventory; every read-then-write of that inventory runs under it"""
        lock = self._inventory_locks.get(inventory_id)
        if lock is None:
            lock = self._inventory_locks[inventory_id] = asyncio.Lock()
        return lock

    def clear(self) -> None:
        self.inventories.clear()
        self.holds.clear()
        self.partners.clear()
        self._inventory_locks.clear()
