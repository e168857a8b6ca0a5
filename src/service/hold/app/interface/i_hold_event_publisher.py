from abc import ABC, abstractmethod

from src.service.hold.domain.domain_event.hold_domain_event import HoldDomainEvent


class IHoldEventPublisher(ABC):
    @abstractmethod
    async def publish(self, *, event: HoldDomainEvent) -> None:
        """Publish a committed hold lifecycle event; must not raise on slow consumers"""
        pass
