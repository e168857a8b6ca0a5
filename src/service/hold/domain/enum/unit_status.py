from enum import StrEnum


class UnitStatus(StrEnum):
    """Status of one addressable unit (bus seat) inside a schedule inventory"""

    AVAILABLE = 'available'
    HELD = 'held'
    BOOKED = 'booked'
