"""
Request Hold DTOs

Every failure of a hold request is an explicit outcome, never an exception.
"""

from datetime import timedelta
from enum import StrEnum
from typing import Optional

import attrs
from uuid_utils import UUID

from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.enum.inventory_category import InventoryCategory


class HoldOutcome(StrEnum):
    SUCCESS = 'success'
    QUOTA_EXCEEDED = 'quota_exceeded'
    UNIT_UNAVAILABLE = 'unit_unavailable'
    NOT_FOUND = 'not_found'
    INACTIVE_SCHEDULE = 'inactive_schedule'
    POLICY_DISABLED = 'policy_disabled'
    INVALID_REQUEST = 'invalid_request'


@attrs.define
class RequestHoldRequest:
    inventory_id: UUID
    held_by: str  # user id or checkout session id
    category: InventoryCategory
    unit_ids: Optional[list[str]] = None  # addressable inventory (seats)
    quantity: Optional[int] = None  # count-only inventory (rooms)
    expiry_override: Optional[timedelta] = None


@attrs.define
class RequestHoldResult:
    outcome: HoldOutcome
    hold: Optional[HoldRecord] = None
    error_message: Optional[str] = None
    max_allowed: Optional[int] = None  # set on QUOTA_EXCEEDED
    currently_held: Optional[int] = None  # set on QUOTA_EXCEEDED
    unavailable_units: list[str] = attrs.field(factory=list)  # set on UNIT_UNAVAILABLE

    @property
    def success(self) -> bool:
        return self.outcome == HoldOutcome.SUCCESS

    @classmethod
    def success_result(cls, hold: HoldRecord) -> 'RequestHoldResult':
        return cls(outcome=HoldOutcome.SUCCESS, hold=hold)

    @classmethod
    def failure_result(cls, outcome: HoldOutcome, error_message: str) -> 'RequestHoldResult':
        return cls(outcome=outcome, error_message=error_message)
