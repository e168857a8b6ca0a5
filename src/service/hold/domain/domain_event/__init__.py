"""Hold Domain Events"""

from src.service.hold.domain.domain_event.hold_domain_event import (
    HoldConvertedEvent,
    HoldCreatedEvent,
    HoldDomainEvent,
    HoldReleasedEvent,
)

__all__ = ['HoldConvertedEvent', 'HoldCreatedEvent', 'HoldDomainEvent', 'HoldReleasedEvent']
