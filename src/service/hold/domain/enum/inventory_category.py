from enum import StrEnum


class InventoryCategory(StrEnum):
    BUS = 'bus'
    HOTEL = 'hotel'
    FLIGHT = 'flight'  # keyed by cabin class, holds not supported yet
