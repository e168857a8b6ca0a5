"""
Request Hold Use Case - quota-checked, atomic hold creation

Flow:
1. Peek the inventory (no lock) to find its partner and addressing mode
2. Fetch the partner policy, outside any lock
3. Lock the inventory, check quota and unit availability, mutate, create the hold
4. Commit, then publish HoldCreatedEvent
"""

import time
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import CustomBaseError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.hold_metrics import metrics
from src.platform.observability.tracing import mark_span_outcome
from src.service.hold.app.clock import Clock, utc_now
from src.service.hold.app.dto.request_hold_dto import (
    HoldOutcome,
    RequestHoldRequest,
    RequestHoldResult,
)
from src.service.hold.app.interface.i_hold_event_publisher import IHoldEventPublisher
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.app.interface.i_partner_policy_provider import IPartnerPolicyProvider
from src.service.hold.domain.domain_event.hold_domain_event import HoldCreatedEvent
from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.enum.inventory_category import InventoryCategory
from src.service.hold.domain.hold_errors import (
    HoldPolicyDisabledError,
    InactiveScheduleError,
    InvalidHoldRequestError,
    InventoryNotFoundError,
    QuotaExceededError,
    UnitUnavailableError,
    UnsupportedHoldCategoryError,
)
from src.service.hold.domain.quota_calculator import max_holdable_units


class RequestHoldUseCase:
    def __init__(
        self,
        *,
        uow_factory: HoldUnitOfWorkFactory,
        policy_provider: IPartnerPolicyProvider,
        event_publisher: IHoldEventPublisher,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.policy_provider = policy_provider
        self.event_publisher = event_publisher
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: HoldUnitOfWorkFactory = Depends(Provide[Container.hold_unit_of_work.provider]),
        policy_provider: IPartnerPolicyProvider = Depends(
            Provide[Container.partner_policy_provider]
        ),
        event_publisher: IHoldEventPublisher = Depends(Provide[Container.hold_event_publisher]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            policy_provider=policy_provider,
            event_publisher=event_publisher,
        )

    @Logger.io
    async def execute(self, request: RequestHoldRequest) -> RequestHoldResult:
        with self.tracer.start_as_current_span(
            'use_case.request_hold',
            attributes={
                'inventory.id': str(request.inventory_id),
                'hold.category': request.category.value,
                'hold.held_by': request.held_by,
                'hold.unit_count': len(request.unit_ids or []) or (request.quantity or 0),
            },
        ) as span:
            started = time.perf_counter()
            try:
                hold = await self._place_hold(request)
                result = RequestHoldResult.success_result(hold)
            except QuotaExceededError as e:
                result = RequestHoldResult(
                    outcome=HoldOutcome.QUOTA_EXCEEDED,
                    error_message=e.message,
                    max_allowed=e.max_allowed,
                    currently_held=e.currently_held,
                )
            except UnitUnavailableError as e:
                result = RequestHoldResult(
                    outcome=HoldOutcome.UNIT_UNAVAILABLE,
                    error_message=e.message,
                    unavailable_units=e.unit_ids,
                )
            except CustomBaseError as e:
                result = RequestHoldResult.failure_result(self._outcome_for(e), e.message)

            mark_span_outcome(span, outcome=result.outcome.value, error_message=result.error_message)
            metrics.record_hold_request(
                category=request.category.value,
                outcome=result.outcome.value,
                duration=time.perf_counter() - started,
            )

            if result.hold is None:
                Logger.base.warning(
                    f'⚠️ [HOLD] {result.outcome.value} on inventory {request.inventory_id} '
                    f'for {request.held_by}: {result.error_message}'
                )
                return result

            span.set_attribute('hold.id', str(result.hold.id))
            Logger.base.info(
                f'✅ [HOLD] {result.hold.quantity} units held on inventory {request.inventory_id} '
                f'by {request.held_by} until {result.hold.expires_at.isoformat()}'
            )
            await self.event_publisher.publish(event=HoldCreatedEvent.from_hold(hold=result.hold))
            return result

    @staticmethod
    def _outcome_for(error: CustomBaseError) -> HoldOutcome:
        if isinstance(error, InventoryNotFoundError):
            return HoldOutcome.NOT_FOUND
        if isinstance(error, InactiveScheduleError):
            return HoldOutcome.INACTIVE_SCHEDULE
        if isinstance(error, HoldPolicyDisabledError):
            return HoldOutcome.POLICY_DISABLED
        # InvalidHoldRequestError, UnsupportedHoldCategoryError, publish-time conflicts
        return HoldOutcome.INVALID_REQUEST

    async def _place_hold(self, request: RequestHoldRequest) -> HoldRecord:
        if request.category == InventoryCategory.FLIGHT:
            raise UnsupportedHoldCategoryError(request.category.value)

        # Step 1: peek; partner and addressing mode never change after publishing
        async with self.uow_factory() as uow:
            inventory = await uow.inventory_repo.get(inventory_id=request.inventory_id)
        if inventory is None:
            raise InventoryNotFoundError(request.inventory_id)
        if inventory.key.category != request.category:
            raise InvalidHoldRequestError(
                f'Inventory {request.inventory_id} is {inventory.key.category}, '
                f'not {request.category}'
            )
        inventory.ensure_accepts_holds()
        quantity = inventory.resolve_hold_quantity(
            unit_ids=request.unit_ids, quantity=request.quantity
        )

        # Step 2: policy, no lock held
        policy = await self.policy_provider.get_policy(partner_id=inventory.partner_id)
        if not policy.hold_enabled:
            raise HoldPolicyDisabledError(inventory.partner_id)
        hold_expiry = request.expiry_override or policy.hold_expiry
        max_holdable = max_holdable_units(inventory.total_units, policy.quota_percentage)

        # Step 3: atomic section
        async with self.uow_factory() as uow:
            locked = await uow.inventory_repo.get_for_update(inventory_id=request.inventory_id)
            if locked is None:
                raise InventoryNotFoundError(request.inventory_id)

            updated = locked.place_hold(
                unit_ids=list(request.unit_ids or []),
                quantity=quantity,
                max_holdable=max_holdable,
            )
            hold = HoldRecord.create(
                inventory_id=locked.id,
                held_by=request.held_by,
                unit_ids=list(request.unit_ids or []),
                quantity=quantity,
                hold_expiry=hold_expiry,
                now=self.clock(),
            )
            await uow.inventory_repo.save(inventory=updated)
            await uow.hold_repo.add(hold=hold)
            await uow.commit()

        return hold
