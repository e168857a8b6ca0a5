"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.hold.app.command import (
    convert_hold_use_case,
    publish_inventory_use_case,
    release_hold_use_case,
    request_hold_use_case,
    retire_inventory_use_case,
    update_partner_hold_policy_use_case,
)
from src.service.hold.app.query import get_hold_use_case, get_quota_status_use_case
from src.service.hold.driving_adapter.http_controller import hold_controller


WIRE_MODULES: list[ModuleType] = [
    request_hold_use_case,
    release_hold_use_case,
    convert_hold_use_case,
    publish_inventory_use_case,
    retire_inventory_use_case,
    update_partner_hold_policy_use_case,
    get_quota_status_use_case,
    get_hold_use_case,
    hold_controller,
]
