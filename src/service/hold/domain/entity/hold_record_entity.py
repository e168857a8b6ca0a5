from datetime import datetime, timedelta
from typing import List, Optional

import attrs
from uuid_utils import UUID, uuid7

from src.platform.logging.loguru_io import Logger
from src.service.hold.domain.enum.hold_status import HoldStatus, ReleaseReason
from src.service.hold.domain.hold_errors import HoldNotActiveError, InvalidHoldRequestError


@attrs.define
class HoldRecord:
    id: UUID
    inventory_id: UUID
    held_by: str
    quantity: int
    created_at: datetime
    expires_at: datetime
    unit_ids: List[str] = attrs.field(factory=list)  # empty for count-only inventory
    status: HoldStatus = HoldStatus.ACTIVE
    released_at: Optional[datetime] = None
    release_reason: Optional[ReleaseReason] = None
    booking_reference: Optional[str] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        inventory_id: UUID,
        held_by: str,
        unit_ids: List[str],
        quantity: int,
        hold_expiry: timedelta,
        now: datetime,
    ) -> 'HoldRecord':
        if quantity < 1:
            raise InvalidHoldRequestError('Hold quantity must be at least 1')
        if unit_ids and len(unit_ids) != quantity:
            raise InvalidHoldRequestError('Hold quantity must match the number of unit ids')
        if hold_expiry <= timedelta(0):
            raise InvalidHoldRequestError('Hold expiry must be positive')
        if not held_by:
            raise InvalidHoldRequestError('held_by is required')

        return cls(
            id=uuid7(),
            inventory_id=inventory_id,
            held_by=held_by,
            quantity=quantity,
            unit_ids=list(unit_ids),
            created_at=now,
            expires_at=now + hold_expiry,
            status=HoldStatus.ACTIVE,
        )

    @property
    def is_active(self) -> bool:
        return self.status == HoldStatus.ACTIVE

    def is_expired(self, *, now: datetime) -> bool:
        return self.expires_at <= now

    def _ensure_active(self) -> None:
        if not self.is_active:
            raise HoldNotActiveError(self.id, self.status.value)

    @Logger.io
    def release(self, *, reason: ReleaseReason, now: datetime) -> 'HoldRecord':
        self._ensure_active()
        return attrs.evolve(
            self, status=HoldStatus.RELEASED, released_at=now, release_reason=reason
        )

    @Logger.io
    def convert(self, *, booking_reference: str, now: datetime) -> 'HoldRecord':
        self._ensure_active()
        if not booking_reference:
            raise InvalidHoldRequestError('booking_reference is required to convert a hold')
        return attrs.evolve(
            self,
            status=HoldStatus.CONVERTED,
            released_at=now,
            booking_reference=booking_reference,
        )
