from enum import StrEnum


class HoldStatus(StrEnum):
    """Hold lifecycle: ACTIVE -> RELEASED | CONVERTED, terminal states never go back"""

    ACTIVE = 'active'
    RELEASED = 'released'
    CONVERTED = 'converted'


class ReleaseReason(StrEnum):
    EXPIRED = 'expired'
    CANCELLED = 'cancelled'
