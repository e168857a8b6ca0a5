from datetime import timedelta

import attrs
from uuid_utils import UUID


@attrs.define
class QuotaStatus:
    inventory_id: UUID
    total_units: int
    max_holdable: int
    currently_held: int
    available_for_hold: int  # max(0, max_holdable - currently_held)
    hold_expiry: timedelta
    hold_enabled: bool
    quota_percentage: float
    active_hold_records: int
    available_units: int
    booked_units: int
