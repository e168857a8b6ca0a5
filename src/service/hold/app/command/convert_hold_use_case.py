"""
Convert Hold Use Case - turn a paid hold into booked units

Called only after payment has durably succeeded, so it must be safe to retry:
a second call with the same booking reference reports success without booking twice.
A hold past expires_at that the sweeper has not released yet still converts.
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
from src.service.hold.app.dto.convert_hold_dto import ConvertHoldResult, ConvertOutcome
from src.service.hold.app.interface.i_hold_event_publisher import IHoldEventPublisher
from src.service.hold.app.interface.i_hold_unit_of_work import HoldUnitOfWorkFactory
from src.service.hold.domain.domain_event.hold_domain_event import HoldConvertedEvent
from src.service.hold.domain.enum.hold_status import HoldStatus
from src.service.hold.domain.hold_errors import (
    HoldNotFoundError,
    InvalidHoldRequestError,
    InventoryNotFoundError,
)


class ConvertHoldUseCase:
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
    async def execute(self, *, hold_id: UUID, booking_reference: str) -> ConvertHoldResult:
        with self.tracer.start_as_current_span(
            'use_case.convert_hold',
            attributes={'hold.id': str(hold_id), 'booking.reference': booking_reference},
        ) as span:
            try:
                result = await self._convert(hold_id=hold_id, booking_reference=booking_reference)
            except (HoldNotFoundError, InventoryNotFoundError) as e:
                result = ConvertHoldResult(outcome=ConvertOutcome.NOT_FOUND, error_message=e.message)
            except InvalidHoldRequestError as e:
                result = ConvertHoldResult(
                    outcome=ConvertOutcome.INVALID_REQUEST, error_message=e.message
                )

            mark_span_outcome(span, outcome=result.outcome.value, error_message=result.error_message)
            metrics.record_conversion(outcome=result.outcome.value)

            if not result.success:
                Logger.base.warning(
                    f'⚠️ [CONVERT] {result.outcome.value} for hold {hold_id}: {result.error_message}'
                )
                return result

            assert result.hold is not None
            if result.already_converted:
                Logger.base.info(
                    f'🔁 [CONVERT] Hold {hold_id} already converted to {booking_reference}'
                )
                return result

            Logger.base.info(
                f'🎫 [CONVERT] Hold {hold_id} -> booking {booking_reference}, '
                f'{result.hold.quantity} units booked on inventory {result.hold.inventory_id}'
            )
            await self.event_publisher.publish(
                event=HoldConvertedEvent.from_hold(hold=result.hold)
            )
            return result

    async def _convert(self, *, hold_id: UUID, booking_reference: str) -> ConvertHoldResult:
        if not booking_reference:
            raise InvalidHoldRequestError('booking_reference is required to convert a hold')

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

            if (
                hold.status == HoldStatus.CONVERTED
                and hold.booking_reference == booking_reference
            ):
                return ConvertHoldResult(
                    outcome=ConvertOutcome.SUCCESS, hold=hold, already_converted=True
                )
            if not hold.is_active:
                return ConvertHoldResult(
                    outcome=ConvertOutcome.NOT_ACTIVE,
                    hold=hold,
                    error_message=f'Hold {hold_id} is already {hold.status.value}',
                )

            converted = hold.convert(booking_reference=booking_reference, now=self.clock())
            await uow.inventory_repo.save(inventory=inventory.book_units(hold=hold))
            await uow.hold_repo.save(hold=converted)
            await uow.commit()

        return ConvertHoldResult(outcome=ConvertOutcome.SUCCESS, hold=converted)
