from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.hold.app.dto.quota_status_dto import QuotaStatus
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.app.interface.i_partner_policy_provider import IPartnerPolicyProvider
from src.service.hold.domain.hold_errors import InventoryNotFoundError
from src.service.hold.domain.quota_calculator import max_holdable_units


class GetQuotaStatusUseCase:
    def __init__(
        self, *, uow_factory: HoldUnitOfWorkFactory, policy_provider: IPartnerPolicyProvider
    ) -> None:
        self.uow_factory = uow_factory
        self.policy_provider = policy_provider
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: HoldUnitOfWorkFactory = Depends(Provide[Container.hold_unit_of_work.provider]),
        policy_provider: IPartnerPolicyProvider = Depends(
            Provide[Container.partner_policy_provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory, policy_provider=policy_provider)

    @Logger.io
    async def execute(self, *, inventory_id: UUID) -> QuotaStatus:
        with self.tracer.start_as_current_span(
            'use_case.quota_status', attributes={'inventory.id': str(inventory_id)}
        ):
            async with self.uow_factory() as uow:
                inventory = await uow.inventory_repo.get(inventory_id=inventory_id)
                if inventory is None:
                    raise InventoryNotFoundError(inventory_id)
                active_hold_records = await uow.hold_repo.count_active(inventory_id=inventory_id)

            policy = await self.policy_provider.get_policy(partner_id=inventory.partner_id)
            max_holdable = max_holdable_units(inventory.total_units, policy.quota_percentage)

            return QuotaStatus(
                inventory_id=inventory.id,
                total_units=inventory.total_units,
                max_holdable=max_holdable,
                currently_held=inventory.held_units,
                available_for_hold=max(0, max_holdable - inventory.held_units),
                hold_expiry=policy.hold_expiry,
                hold_enabled=policy.hold_enabled,
                quota_percentage=policy.quota_percentage,
                active_hold_records=active_hold_records,
                available_units=inventory.available_units,
                booked_units=inventory.booked_units,
            )
