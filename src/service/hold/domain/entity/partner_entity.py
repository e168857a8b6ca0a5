from datetime import datetime, timedelta, timezone
from typing import Optional

import attrs

from src.service.hold.domain.value_object.partner_policy import PartnerPolicy


@attrs.define
class Partner:
    """
    Stored hold configuration of a bus operator or hotel.

    None in hold_quota_percentage or hold_expiry_minutes means "use the service default".
    """

    id: str
    hold_enabled: bool = True
    hold_quota_percentage: Optional[float] = None
    hold_expiry_minutes: Optional[int] = None
    updated_at: Optional[datetime] = None

    def to_policy(
        self, *, default_quota_percentage: float, default_expiry_minutes: int
    ) -> PartnerPolicy:
        return PartnerPolicy(
            partner_id=self.id,
            hold_enabled=self.hold_enabled,
            quota_percentage=(
                self.hold_quota_percentage
                if self.hold_quota_percentage is not None
                else default_quota_percentage
            ),
            hold_expiry=timedelta(
                minutes=self.hold_expiry_minutes
                if self.hold_expiry_minutes is not None
                else default_expiry_minutes
            ),
        )

    def update_hold_settings(
        self,
        *,
        hold_enabled: Optional[bool] = None,
        hold_quota_percentage: Optional[float] = None,
        hold_expiry_minutes: Optional[int] = None,
    ) -> 'Partner':
        return attrs.evolve(
            self,
            hold_enabled=self.hold_enabled if hold_enabled is None else hold_enabled,
            hold_quota_percentage=(
                self.hold_quota_percentage
                if hold_quota_percentage is None
                else hold_quota_percentage
            ),
            hold_expiry_minutes=(
                self.hold_expiry_minutes if hold_expiry_minutes is None else hold_expiry_minutes
            ),
            updated_at=datetime.now(timezone.utc),
        )
