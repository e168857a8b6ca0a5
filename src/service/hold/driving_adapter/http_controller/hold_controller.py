from collections.abc import AsyncIterator
from datetime import timedelta
from typing import Any

import anyio
import attrs
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from opentelemetry import trace
import orjson
from sse_starlette.sse import EventSourceResponse

from src.platform.config.di import container
from src.platform.logging.loguru_io import Logger
from src.platform.types import UtilsUUID7
from src.service.hold.app.command.convert_hold_use_case import ConvertHoldUseCase
from src.service.hold.app.command.publish_inventory_use_case import PublishInventoryUseCase
from src.service.hold.app.command.release_hold_use_case import ReleaseHoldUseCase
from src.service.hold.app.command.request_hold_use_case import RequestHoldUseCase
from src.service.hold.app.command.retire_inventory_use_case import RetireInventoryUseCase
from src.service.hold.app.command.update_partner_hold_policy_use_case import (
    UpdatePartnerHoldPolicyUseCase,
)
from src.service.hold.app.dto import (
    ConvertOutcome,
    HoldOutcome,
    PublishInventoryRequest,
    ReleaseOutcome,
    RequestHoldRequest,
    UpdatePartnerHoldPolicyRequest,
)
from src.service.hold.app.query.get_hold_use_case import GetHoldUseCase
from src.service.hold.app.query.get_quota_status_use_case import GetQuotaStatusUseCase
from src.service.hold.domain.domain_event import (
    HoldConvertedEvent,
    HoldCreatedEvent,
    HoldDomainEvent,
    HoldReleasedEvent,
)
from src.service.hold.domain.entity import HoldRecord, ScheduleInventory
from src.service.hold.domain.enum import InventoryCategory, ReleaseReason
from src.service.hold.domain.value_object.inventory_key import InventoryKey
from src.service.hold.driving_adapter.http_controller.schema.hold_schema import (
    HoldConvertRequest,
    HoldConvertResponse,
    HoldCreateRequest,
    HoldReleaseResponse,
    HoldResponse,
    InventoryPublishRequest,
    InventoryResponse,
    PartnerHoldPolicyResponse,
    PartnerHoldPolicyUpdateRequest,
    QuotaStatusResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)

HOLD_OUTCOME_STATUS = {
    HoldOutcome.QUOTA_EXCEEDED: status.HTTP_409_CONFLICT,
    HoldOutcome.UNIT_UNAVAILABLE: status.HTTP_409_CONFLICT,
    HoldOutcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    HoldOutcome.INACTIVE_SCHEDULE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    HoldOutcome.POLICY_DISABLED: status.HTTP_422_UNPROCESSABLE_ENTITY,
    HoldOutcome.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
}

SSE_EVENT_NAMES = {
    HoldCreatedEvent: 'hold_created',
    HoldReleasedEvent: 'hold_released',
    HoldConvertedEvent: 'hold_converted',
}


def _hold_response(hold: HoldRecord) -> HoldResponse:
    return HoldResponse(
        id=hold.id,
        inventory_id=hold.inventory_id,
        held_by=hold.held_by,
        quantity=hold.quantity,
        unit_ids=list(hold.unit_ids),
        status=hold.status.value,
        created_at=hold.created_at,
        expires_at=hold.expires_at,
        released_at=hold.released_at,
        release_reason=hold.release_reason.value if hold.release_reason else None,
        booking_reference=hold.booking_reference,
    )


def _inventory_response(inventory: ScheduleInventory) -> InventoryResponse:
    return InventoryResponse(
        id=inventory.id,
        category=inventory.key.category.value,
        schedule_id=inventory.key.schedule_id,
        sub_key=inventory.key.sub_key,
        partner_id=inventory.partner_id,
        status=inventory.status.value,
        total_units=inventory.total_units,
        available_units=inventory.available_units,
        held_units=inventory.held_units,
        booked_units=inventory.booked_units,
    )


# ============================ Holds ============================


@router.post('/holds', status_code=status.HTTP_201_CREATED, response_model=HoldResponse)
@Logger.io
async def request_hold(
    request: HoldCreateRequest,
    use_case: RequestHoldUseCase = Depends(RequestHoldUseCase.depends),
) -> Any:
    with tracer.start_as_current_span('controller.request_hold') as span:
        span.set_attribute('inventory.id', str(request.inventory_id))
        span.set_attribute('hold.held_by', request.held_by)

        result = await use_case.execute(
            RequestHoldRequest(
                inventory_id=request.inventory_id,
                held_by=request.held_by,
                category=InventoryCategory(request.category),
                unit_ids=request.unit_ids,
                quantity=request.quantity,
                expiry_override=(
                    timedelta(minutes=request.expiry_minutes) if request.expiry_minutes else None
                ),
            )
        )

        if result.hold is None:
            return JSONResponse(
                status_code=HOLD_OUTCOME_STATUS[result.outcome],
                content={
                    'detail': result.error_message,
                    'outcome': result.outcome.value,
                    'max_allowed': result.max_allowed,
                    'currently_held': result.currently_held,
                    'unavailable_units': result.unavailable_units,
                },
            )
        return _hold_response(result.hold)


@router.get('/holds/{hold_id}')
@Logger.io
async def get_hold(
    hold_id: UtilsUUID7,
    use_case: GetHoldUseCase = Depends(GetHoldUseCase.depends),
) -> HoldResponse:
    return _hold_response(await use_case.get_hold(hold_id=hold_id))


@router.post('/holds/{hold_id}/release', response_model=HoldReleaseResponse)
@Logger.io
async def release_hold(
    hold_id: UtilsUUID7,
    use_case: ReleaseHoldUseCase = Depends(ReleaseHoldUseCase.depends),
) -> Any:
    """Cancel a hold before checkout. Expired holds are released by the sweeper."""
    result = await use_case.execute(hold_id=hold_id, reason=ReleaseReason.CANCELLED)

    if result.outcome == ReleaseOutcome.NOT_FOUND:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={'detail': result.error_message, 'outcome': result.outcome.value},
        )
    assert result.hold is not None
    if result.outcome == ReleaseOutcome.ALREADY_TERMINAL:
        # Informational: the hold was already released or converted
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={
                'detail': f'Hold {hold_id} is already {result.hold.status.value}',
                'outcome': result.outcome.value,
                'hold': _hold_response(result.hold).model_dump(mode='json'),
            },
        )
    return HoldReleaseResponse(outcome=result.outcome.value, hold=_hold_response(result.hold))


@router.post('/holds/{hold_id}/convert', response_model=HoldConvertResponse)
@Logger.io
async def convert_hold(
    hold_id: UtilsUUID7,
    request: HoldConvertRequest,
    use_case: ConvertHoldUseCase = Depends(ConvertHoldUseCase.depends),
) -> Any:
    result = await use_case.execute(hold_id=hold_id, booking_reference=request.booking_reference)

    if not result.success:
        status_code = {
            ConvertOutcome.NOT_FOUND: status.HTTP_404_NOT_FOUND,
            ConvertOutcome.NOT_ACTIVE: status.HTTP_409_CONFLICT,
            ConvertOutcome.INVALID_REQUEST: status.HTTP_400_BAD_REQUEST,
        }[result.outcome]
        return JSONResponse(
            status_code=status_code,
            content={'detail': result.error_message, 'outcome': result.outcome.value},
        )
    assert result.hold is not None
    return HoldConvertResponse(
        outcome=result.outcome.value,
        already_converted=result.already_converted,
        hold=_hold_response(result.hold),
    )


# ============================ Inventory ============================


@router.post(
    '/inventory', status_code=status.HTTP_201_CREATED, response_model=InventoryResponse
)
@Logger.io
async def publish_inventory(
    request: InventoryPublishRequest,
    use_case: PublishInventoryUseCase = Depends(PublishInventoryUseCase.depends),
) -> InventoryResponse:
    inventory = await use_case.execute(
        PublishInventoryRequest(
            key=InventoryKey(
                category=InventoryCategory(request.category),
                schedule_id=request.schedule_id,
                sub_key=request.sub_key,
            ),
            partner_id=request.partner_id,
            unit_ids=request.unit_ids,
            unit_count=request.unit_count,
        )
    )
    return _inventory_response(inventory)


@router.post('/inventory/{inventory_id}/retire')
@Logger.io
async def retire_inventory(
    inventory_id: UtilsUUID7,
    use_case: RetireInventoryUseCase = Depends(RetireInventoryUseCase.depends),
) -> InventoryResponse:
    return _inventory_response(await use_case.execute(inventory_id=inventory_id))


@router.get('/inventory/{inventory_id}/quota')
@Logger.io
async def get_quota_status(
    inventory_id: UtilsUUID7,
    use_case: GetQuotaStatusUseCase = Depends(GetQuotaStatusUseCase.depends),
) -> QuotaStatusResponse:
    quota = await use_case.execute(inventory_id=inventory_id)
    return QuotaStatusResponse(
        inventory_id=quota.inventory_id,
        total_units=quota.total_units,
        max_holdable=quota.max_holdable,
        currently_held=quota.currently_held,
        available_for_hold=quota.available_for_hold,
        hold_expiry_minutes=quota.hold_expiry.total_seconds() / 60,
        hold_enabled=quota.hold_enabled,
        quota_percentage=quota.quota_percentage,
        active_hold_records=quota.active_hold_records,
        available_units=quota.available_units,
        booked_units=quota.booked_units,
    )


@router.get('/inventory/{inventory_id}/holds/active')
@Logger.io
async def get_active_hold(
    inventory_id: UtilsUUID7,
    held_by: str,
    use_case: GetHoldUseCase = Depends(GetHoldUseCase.depends),
) -> HoldResponse:
    """Lets a returning client resume its checkout instead of holding twice."""
    return _hold_response(
        await use_case.find_active_hold(inventory_id=inventory_id, held_by=held_by)
    )


# ============================ Partner policy ============================


@router.patch('/partners/{partner_id}/hold-policy')
@Logger.io
async def update_partner_hold_policy(
    partner_id: str,
    request: PartnerHoldPolicyUpdateRequest,
    use_case: UpdatePartnerHoldPolicyUseCase = Depends(UpdatePartnerHoldPolicyUseCase.depends),
) -> PartnerHoldPolicyResponse:
    partner = await use_case.execute(
        UpdatePartnerHoldPolicyRequest(
            partner_id=partner_id,
            hold_enabled=request.hold_enabled,
            quota_percentage=request.quota_percentage,
            hold_expiry_minutes=request.hold_expiry_minutes,
        )
    )
    return PartnerHoldPolicyResponse(
        partner_id=partner.id,
        hold_enabled=partner.hold_enabled,
        hold_quota_percentage=partner.hold_quota_percentage,
        hold_expiry_minutes=partner.hold_expiry_minutes,
    )


# ============================ SSE Endpoint ============================


def _serialize_event(event: HoldDomainEvent) -> dict[str, str]:
    return {
        'event': SSE_EVENT_NAMES[type(event)],
        'data': orjson.dumps(attrs.asdict(event), default=str).decode(),
    }


@router.get('/inventory/{inventory_id}/events', status_code=status.HTTP_200_OK)
@Logger.io
async def stream_hold_events(inventory_id: UtilsUUID7) -> EventSourceResponse:
    """
    SSE stream of hold lifecycle events for one inventory

    Flow:
    1. Client connects, endpoint subscribes to the in-process broadcaster
    2. Every committed hold create / release / convert is pushed as it happens
    3. Slow clients lose events once their buffer is full; poll the quota endpoint to resync
    """
    broadcaster = container.hold_event_publisher()
    Logger.base.info(f'📡 [SSE] Client subscribing to inventory={inventory_id}')

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        stream = await broadcaster.subscribe(inventory_id=inventory_id)
        try:
            async for event in stream:
                yield _serialize_event(event)
        except anyio.get_cancelled_exc_class():
            Logger.base.info(f'🔌 [SSE] Client disconnected: inventory={inventory_id}')
            raise
        finally:
            await broadcaster.unsubscribe(inventory_id=inventory_id, stream=stream)

    return EventSourceResponse(event_generator())
