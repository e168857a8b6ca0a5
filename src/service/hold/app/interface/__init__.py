"""Hold Service Interfaces (Ports)"""

from src.service.hold.app.interface.i_hold_event_publisher import IHoldEventPublisher
from src.service.hold.app.interface.i_hold_record_repo import IHoldRecordRepo
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory, IHoldUnitOfWork
from src.service.hold.app.interface.i_partner_policy_provider import IPartnerPolicyProvider
from src.service.hold.app.interface.i_partner_repo import IPartnerRepo
from src.service.hold.app.interface.i_schedule_inventory_repo import IScheduleInventoryRepo

__all__ = [
    'HoldUnitOfWorkFactory',
    'IHoldEventPublisher',
    'IHoldRecordRepo',
    'IHoldUnitOfWork',
    'IPartnerPolicyProvider',
    'IPartnerRepo',
    'IScheduleInventoryRepo',
]
