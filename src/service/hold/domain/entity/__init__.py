"""Hold Domain Entities"""

from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.entity.partner_entity import Partner
from src.service.hold.domain.entity.schedule_inventory_entity import ScheduleInventory

__all__ = ['HoldRecord', 'Partner', 'ScheduleInventory']
