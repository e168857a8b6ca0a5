"""Hold Application DTOs"""

from src.service.hold.app.dto.convert_hold_dto import ConvertHoldResult, ConvertOutcome
from src.service.hold.app.dto.inventory_dto import (
    PublishInventoryRequest,
    UpdatePartnerHoldPolicyRequest,
)
from src.service.hold.app.dto.quota_status_dto import QuotaStatus
from src.service.hold.app.dto.release_hold_dto import (
    ReleaseExpiredHoldsResult,
    ReleaseHoldResult,
    ReleaseOutcome,
)
from src.service.hold.app.dto.request_hold_dto import HoldOutcome, RequestHoldRequest, RequestHoldResult


__all__ = [
    'ConvertHoldResult',
    'ConvertOutcome',
    'HoldOutcome',
    'PublishInventoryRequest',
    'QuotaStatus',
    'ReleaseExpiredHoldsResult',
    'ReleaseHoldResult',
    'ReleaseOutcome',
    'RequestHoldRequest',
    'RequestHoldResult',
    'UpdatePartnerHoldPolicyRequest',
]
