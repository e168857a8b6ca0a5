"""Hold Domain Enums"""

from src.service.hold.domain.enum.hold_status import HoldStatus, ReleaseReason
from src.service.hold.domain.enum.inventory_category import InventoryCategory
from src.service.hold.domain.enum.inventory_status import InventoryStatus
from src.service.hold.domain.enum.unit_status import UnitStatus

__all__ = ['HoldStatus', 'InventoryCategory', 'InventoryStatus', 'ReleaseReason', 'UnitStatus']
