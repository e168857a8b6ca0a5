from datetime import datetime, timezone
from typing import Dict, List, Optional

import attrs
from uuid_utils import UUID, uuid7

from src.platform.logging.loguru_io import Logger
from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.enum.inventory_status import InventoryStatus
from src.service.hold.domain.enum.unit_status import UnitStatus
from src.service.hold.domain.hold_errors import (
    InactiveScheduleError,
    InvalidHoldRequestError,
    QuotaExceededError,
    UnitUnavailableError,
)
from src.service.hold.domain.value_object.inventory_key import InventoryKey


@attrs.define
class ScheduleInventory:
    """
    Units of one schedule (bus seats, hotel rooms) and how many are held or booked.

    available_units + held_units + booked_units == total_units holds in every state.
    unit_status is set for addressable inventory (seats) and None for count-only
    inventory (rooms). Every mutation returns a new instance.
    """

    id: UUID
    key: InventoryKey
    partner_id: str
    total_units: int
    available_units: int
    held_units: int = 0
    booked_units: int = 0
    unit_status: Optional[Dict[str, UnitStatus]] = None
    status: InventoryStatus = InventoryStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def publish(
        cls,
        *,
        key: InventoryKey,
        partner_id: str,
        unit_ids: Optional[List[str]] = None,
        unit_count: Optional[int] = None,
    ) -> 'ScheduleInventory':
        if (unit_ids is None) == (unit_count is None):
            raise InvalidHoldRequestError('Provide either unit_ids or unit_count, not both')

        unit_status: Optional[Dict[str, UnitStatus]] = None
        if unit_ids is not None:
            if not unit_ids:
                raise InvalidHoldRequestError('unit_ids must not be empty')
            if len(set(unit_ids)) != len(unit_ids):
                raise InvalidHoldRequestError('unit_ids must be unique')
            unit_status = {unit_id: UnitStatus.AVAILABLE for unit_id in unit_ids}
            total = len(unit_ids)
        else:
            assert unit_count is not None
            if unit_count < 1:
                raise InvalidHoldRequestError('unit_count must be at least 1')
            total = unit_count

        now = datetime.now(timezone.utc)
        return cls(
            id=uuid7(),
            key=key,
            partner_id=partner_id,
            total_units=total,
            available_units=total,
            unit_status=unit_status,
            status=InventoryStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_addressable(self) -> bool:
        return self.unit_status is not None

    @property
    def is_consistent(self) -> bool:
        counts_match = (
            self.available_units + self.held_units + self.booked_units == self.total_units
            and 0 <= self.available_units <= self.total_units
            and self.held_units >= 0
            and self.booked_units >= 0
        )
        if not counts_match or self.unit_status is None:
            return counts_match
        statuses = list(self.unit_status.values())
        return (
            statuses.count(UnitStatus.AVAILABLE) == self.available_units
            and statuses.count(UnitStatus.HELD) == self.held_units
            and statuses.count(UnitStatus.BOOKED) == self.booked_units
        )

    def ensure_accepts_holds(self) -> None:
        if self.status != InventoryStatus.ACTIVE:
            raise InactiveScheduleError(self.id, self.status.value)

    def resolve_hold_quantity(self, *, unit_ids: Optional[List[str]], quantity: Optional[int]) -> int:
        """Requested quantity, checked against the inventory's addressing mode."""
        if self.is_addressable:
            if not unit_ids:
                raise InvalidHoldRequestError('unit_ids are required for seat inventory')
            if len(set(unit_ids)) != len(unit_ids):
                raise InvalidHoldRequestError('unit_ids must be unique')
            if quantity is not None and quantity != len(unit_ids):
                raise InvalidHoldRequestError('quantity must match the number of unit_ids')
            return len(unit_ids)

        if unit_ids:
            raise InvalidHoldRequestError('Count-only inventory does not take unit_ids')
        if quantity is None or quantity < 1:
            raise InvalidHoldRequestError('quantity must be at least 1')
        return quantity

    @Logger.io
    def place_hold(self, *, unit_ids: List[str], quantity: int, max_holdable: int) -> 'ScheduleInventory':
        """Quota check, availability check and mutation; the caller holds the inventory lock."""
        self.ensure_accepts_holds()

        if self.held_units + quantity > max_holdable:
            raise QuotaExceededError(
                max_allowed=max_holdable, currently_held=self.held_units, requested=quantity
            )

        new_status = self.unit_status
        if self.unit_status is not None:
            unavailable = [
                unit_id
                for unit_id in unit_ids
                if self.unit_status.get(unit_id) != UnitStatus.AVAILABLE
            ]
            if unavailable:
                raise UnitUnavailableError(unavailable)
            new_status = {**self.unit_status, **{u: UnitStatus.HELD for u in unit_ids}}
        elif quantity > self.available_units:
            raise UnitUnavailableError(
                [], f'Only {self.available_units} units available, requested {quantity}'
            )

        return attrs.evolve(
            self,
            available_units=self.available_units - quantity,
            held_units=self.held_units + quantity,
            unit_status=new_status,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def release_units(self, *, hold: HoldRecord) -> 'ScheduleInventory':
        """HELD -> AVAILABLE for the hold's units; allowed on retired inventory."""
        new_status = self.unit_status
        if self.unit_status is not None:
            new_status = dict(self.unit_status)
            for unit_id in hold.unit_ids:
                if new_status.get(unit_id) == UnitStatus.HELD:
                    new_status[unit_id] = UnitStatus.AVAILABLE

        return attrs.evolve(
            self,
            available_units=self.available_units + hold.quantity,
            held_units=self.held_units - hold.quantity,
            unit_status=new_status,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def book_units(self, *, hold: HoldRecord) -> 'ScheduleInventory':
        """HELD -> BOOKED for the hold's units; allowed on retired inventory."""
        new_status = self.unit_status
        if self.unit_status is not None:
            new_status = {**self.unit_status, **{u: UnitStatus.BOOKED for u in hold.unit_ids}}

        return attrs.evolve(
            self,
            held_units=self.held_units - hold.quantity,
            booked_units=self.booked_units + hold.quantity,
            unit_status=new_status,
            updated_at=datetime.now(timezone.utc),
        )

    def retire(self) -> 'ScheduleInventory':
        return attrs.evolve(
            self, status=InventoryStatus.RETIRED, updated_at=datetime.now(timezone.utc)
        )
