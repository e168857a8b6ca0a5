from enum import StrEnum
from typing import Optional

import attrs

from src.service.hold.domain.entity.hold_record_entity import HoldRecord


class ReleaseOutcome(StrEnum):
    SUCCESS = 'success'
    ALREADY_TERMINAL = 'already_terminal'  # benign race with the sweeper or a conversion
    NOT_FOUND = 'not_found'


@attrs.define
class ReleaseHoldResult:
    outcome: ReleaseOutcome
    hold: Optional[HoldRecord] = None
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome == ReleaseOutcome.SUCCESS


@attrs.define
class ReleaseExpiredHoldsResult:
    """One sweep pass"""

    scanned: int = 0
    released: int = 0
    already_terminal: int = 0
    failed: int = 0
