from typing import Optional

import attrs

from src.service.hold.domain.value_object.inventory_key import InventoryKey


@attrs.define
class PublishInventoryRequest:
    key: InventoryKey
    partner_id: str
    unit_ids: Optional[list[str]] = None  # bus seats
    unit_count: Optional[int] = None  # hotel rooms


@attrs.define
class UpdatePartnerHoldPolicyRequest:
    """Fields left as None keep their stored value"""

    partner_id: str
    hold_enabled: Optional[bool] = None
    quota_percentage: Optional[float] = None
    hold_expiry_minutes: Optional[int] = None
