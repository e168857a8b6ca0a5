"""Hold Service ORM Models"""

from src.service.hold.driven_adapter.model.hold_record_model import HoldRecordModel
from src.service.hold.driven_adapter.model.partner_model import PartnerModel
from src.service.hold.driven_adapter.model.schedule_inventory_model import ScheduleInventoryModel

__all__ = ['HoldRecordModel', 'PartnerModel', 'ScheduleInventoryModel']
