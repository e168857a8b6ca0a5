"""Hold Domain Value Objects"""

from src.service.hold.domain.value_object.inventory_key import InventoryKey
from src.service.hold.domain.value_object.partner_policy import PartnerPolicy

__all__ = ['InventoryKey', 'PartnerPolicy']
