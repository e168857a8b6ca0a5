from abc import ABC, abstractmethod

from src.service.hold.domain.value_object.partner_policy import PartnerPolicy


class IPartnerPolicyProvider(ABC):
    """
    Source of per-partner hold policy.

    Never called while an inventory lock is held. Cached implementations may serve
    a policy up to PARTNER_POLICY_CACHE_TTL_SECONDS old.
    """

    @abstractmethod
    async def get_policy(self, *, partner_id: str) -> PartnerPolicy:
        pass

    @abstractmethod
    def invalidate(self, *, partner_id: str | None = None) -> None:
        """Drop one cached policy, or all of them when partner_id is None"""
        pass
