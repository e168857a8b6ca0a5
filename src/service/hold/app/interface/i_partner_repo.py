from abc import ABC, abstractmethod

from src.service.hold.domain.entity.partner_entity import Partner


class IPartnerRepo(ABC):
    @abstractmethod
    async def get(self, *, partner_id: str) -> Partner | None:
        pass

    @abstractmethod
    async def save(self, *, partner: Partner) -> None:
        """Insert or update"""
        pass
