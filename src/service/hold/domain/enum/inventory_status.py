from enum import StrEnum


class InventoryStatus(StrEnum):
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    RETIRED = 'retired'  # soft-retired, kept while bookings reference it
