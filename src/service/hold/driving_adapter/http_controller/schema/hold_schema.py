from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from src.platform.types import UtilsUUID7


class HoldCreateRequest(BaseModel):
    model_config = {
        'json_schema_extra': {
            'examples': [
                {
                    'inventory_id': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                    'held_by': 'user-42',
                    'category': 'bus',
                    'unit_ids': ['1A', '1B'],
                },
                {
                    'inventory_id': '01936d8f-5e73-7c4e-a9c5-123456789abd',
                    'held_by': 'checkout-9f1c',
                    'category': 'hotel',
                    'quantity': 2,
                    'expiry_minutes': 10,
                },
            ]
        },
    }

    inventory_id: UtilsUUID7
    held_by: str = Field(min_length=1, max_length=128)
    category: Literal['bus', 'hotel', 'flight']
    unit_ids: Optional[List[str]] = None  # seats
    quantity: Optional[int] = Field(default=None, ge=1)  # rooms
    expiry_minutes: Optional[int] = Field(default=None, ge=1)  # overrides the partner policy

    @model_validator(mode='after')
    def check_units_or_quantity(self) -> 'HoldCreateRequest':
        if not self.unit_ids and self.quantity is None:
            raise ValueError('Either unit_ids or quantity is required')
        return self


class HoldResponse(BaseModel):
    id: UtilsUUID7
    inventory_id: UtilsUUID7
    held_by: str
    quantity: int
    unit_ids: List[str]
    status: str
    created_at: datetime
    expires_at: datetime
    released_at: Optional[datetime] = None
    release_reason: Optional[str] = None
    booking_reference: Optional[str] = None


class HoldReleaseResponse(BaseModel):
    outcome: str
    hold: HoldResponse


class HoldConvertRequest(BaseModel):
    booking_reference: str = Field(min_length=1, max_length=128)


class HoldConvertResponse(BaseModel):
    outcome: str
    already_converted: bool
    hold: HoldResponse


class QuotaStatusResponse(BaseModel):
    inventory_id: UtilsUUID7
    total_units: int
    max_holdable: int
    currently_held: int
    available_for_hold: int
    hold_expiry_minutes: float
    hold_enabled: bool
    quota_percentage: float
    active_hold_records: int
    available_units: int
    booked_units: int


class InventoryPublishRequest(BaseModel):
    category: Literal['bus', 'hotel', 'flight']
    schedule_id: str = Field(min_length=1, max_length=64)
    sub_key: str = Field(default='default', min_length=1, max_length=64)
    partner_id: str = Field(min_length=1, max_length=64)
    unit_ids: Optional[List[str]] = None
    unit_count: Optional[int] = Field(default=None, ge=1)


class InventoryResponse(BaseModel):
    id: UtilsUUID7
    category: str
    schedule_id: str
    sub_key: str
    partner_id: str
    status: str
    total_units: int
    available_units: int
    held_units: int
    booked_units: int


class PartnerHoldPolicyUpdateRequest(BaseModel):
    hold_enabled: Optional[bool] = None
    quota_percentage: Optional[float] = None
    hold_expiry_minutes: Optional[int] = None


class PartnerHoldPolicyResponse(BaseModel):
    partner_id: str
    hold_enabled: bool
    hold_quota_percentage: Optional[float] = None
    hold_expiry_minutes: Optional[int] = None
