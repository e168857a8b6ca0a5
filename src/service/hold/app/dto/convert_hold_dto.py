from enum import StrEnum
from typing import Optional

import attrs

from src.service.hold.domain.entity.hold_record_entity import HoldRecord


class ConvertOutcome(StrEnum):
    SUCCESS = 'success'
    NOT_ACTIVE = 'not_active'
    NOT_FOUND = 'not_found'
    INVALID_REQUEST = 'invalid_request'


@attrs.define
class ConvertHoldResult:
    outcome: ConvertOutcome
    hold: Optional[HoldRecord] = None
    already_converted: bool = False  # retried conversion with the same booking reference
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome == ConvertOutcome.SUCCESS
