"""
Release Hold Use Case - give held units back to availability

Shared by explicit user cancellation and the expiry sweeper. Only an ACTIVE hold
can be released, so whichever of sweeper, cancellation or conversion locks the
hold first wins and the others see ALREADY_TERMINAL.
"""

from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from uuid_utils import UUID

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.hold_metrics import metrics
from src.platform.observability.tracing import mark_span_outcome
from src.service.hold.app.clock import Clock, utc_now
from src.service.hold.app.dto.release_hold_dto import ReleaseHoldResult, ReleaseOutcome
from src.service.hold.app.interface.i_hold_event_publisher import IHoldEventPublisher
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.domain.domain_event.hold_domain_event import HoldReleasedEvent
from src.service.hold.domain.enum.hold_status import ReleaseReason
from src.service.hold.domain.hold_errors import HoldNotFoundError, InventoryNotFoundError


class ReleaseHoldUseCase:
    def __init__(
        self,
        *,
        uow_factory: HoldUnitOfWorkFactory,
        event_publisher: IHoldEventPublisher,
        clock: Clock = utc_now,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_publisher = event_publisher
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: HoldUnitOfWorkFactory = Depends(Provide[Container.hold_unit_of_work.provider]),
        event_publisher: IHoldEventPublisher = Depends(Provide[Container.hold_event_publisher]),
    ) -> Self:
        return cls(uow_factory=uow_factory, event_publisher=event_publisher)

    @Logger.io
    async def execute(self, *, hold_id: UUID, reason: ReleaseReason) -> ReleaseHoldResult:
        with self.tracer.start_as_current_span(
            'use_case.release_hold',
            attributes={'hold.id': str(hold_id), 'hold.release_reason': reason.value},
        ) as span:
            try:
                result = await self._release(hold_id=hold_id, reason=reason)
            except (HoldNotFoundError, InventoryNotFoundError) as e:
                result = ReleaseHoldResult(outcome=ReleaseOutcome.NOT_FOUND, error_message=e.message)

            mark_span_outcome(
                span,
                outcome=result.outcome.value,
                error_message=None if result.success else result.error_message,
            )
            metrics.record_release(reason=reason.value, outcome=result.outcome.value)

            if not result.success:
                # The sweeper losing a race is routine, keep it out of the warning stream
                log = Logger.base.debug if reason == ReleaseReason.EXPIRED else Logger.base.info
                log(f'ℹ️ [RELEASE] {result.outcome.value} for hold {hold_id}: {result.error_message}')
                return result

            assert result.hold is not None
            Logger.base.info(
                f'🔓 [RELEASE] Hold {hold_id} released ({reason.value}), '
                f'{result.hold.quantity} units back on inventory {result.hold.inventory_id}'
            )
            await self.event_publisher.publish(event=HoldReleasedEvent.from_hold(hold=result.hold))
            return result

    async def _release(self, *, hold_id: UUID, reason: ReleaseReason) -> ReleaseHoldResult:
        async with self.uow_factory() as uow:
            peeked = await uow.hold_repo.get(hold_id=hold_id)
            if peeked is None:
                raise HoldNotFoundError(hold_id)

            # Lock order: inventory, then hold
            inventory = await uow.inventory_repo.get_for_update(inventory_id=peeked.inventory_id)
            if inventory is None:
                raise InventoryNotFoundError(peeked.inventory_id)
            hold = await uow.hold_repo.get_for_update(hold_id=hold_id)
            if hold is None:
                raise HoldNotFoundError(hold_id)

            if not hold.is_active:
                return ReleaseHoldResult(
                    outcome=ReleaseOutcome.ALREADY_TERMINAL,
                    hold=hold,
                    error_message=f'Hold {hold_id} is already {hold.status.value}',
                )

            released = hold.release(reason=reason, now=self.clock())
            await uow.inventory_repo.save(inventory=inventory.release_units(hold=hold))
            await uow.hold_repo.save(hold=released)
            await uow.commit()

        return ReleaseHoldResult(outcome=ReleaseOutcome.SUCCESS, hold=released)
