"""
Hold Domain Events

Published after the unit of work commits, never from inside the atomic section.
"""

from datetime import datetime

import attrs
from uuid_utils import UUID

from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.enum.hold_status import ReleaseReason


@attrs.define
class HoldCreatedEvent:
    hold_id: UUID
    inventory_id: UUID
    held_by: str
    quantity: int
    unit_ids: list[str]
    expires_at: datetime

    @classmethod
    def from_hold(cls, *, hold: HoldRecord) -> 'HoldCreatedEvent':
        return cls(
            hold_id=hold.id,
            inventory_id=hold.inventory_id,
            held_by=hold.held_by,
            quantity=hold.quantity,
            unit_ids=list(hold.unit_ids),
            expires_at=hold.expires_at,
        )


@attrs.define
class HoldReleasedEvent:
    hold_id: UUID
    inventory_id: UUID
    reason: ReleaseReason
    quantity: int
    unit_ids: list[str]
    released_at: datetime

    @classmethod
    def from_hold(cls, *, hold: HoldRecord) -> 'HoldReleasedEvent':
        assert hold.release_reason is not None and hold.released_at is not None
        return cls(
            hold_id=hold.id,
            inventory_id=hold.inventory_id,
            reason=hold.release_reason,
            quantity=hold.quantity,
            unit_ids=list(hold.unit_ids),
            released_at=hold.released_at,
        )


@attrs.define
class HoldConvertedEvent:
    hold_id: UUID
    inventory_id: UUID
    booking_reference: str
    quantity: int
    converted_at: datetime

    @classmethod
    def from_hold(cls, *, hold: HoldRecord) -> 'HoldConvertedEvent':
        assert hold.booking_reference is not None and hold.released_at is not None
        return cls(
            hold_id=hold.id,
            inventory_id=hold.inventory_id,
            booking_reference=hold.booking_reference,
            quantity=hold.quantity,
            converted_at=hold.released_at,
        )


HoldDomainEvent = HoldCreatedEvent | HoldReleasedEvent | HoldConvertedEvent
