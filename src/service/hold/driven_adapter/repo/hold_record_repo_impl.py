from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from uuid_utils import UUID

from src.platform.logging.loguru_io import Logger
from src.service.hold.app.interface.i_hold_record_repo import IHoldRecordRepo
from src.service.hold.domain.entity.hold_record_entity import HoldRecord
from src.service.hold.domain.enum.hold_status import HoldStatus, ReleaseReason
from src.service.hold.driven_adapter.model.hold_record_model import HoldRecordModel
from src.service.hold.driven_adapter.repo.uuid_mapping import from_db_uuid, to_db_uuid


class HoldRecordRepoImpl(IHoldRecordRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(db_hold: HoldRecordModel) -> HoldRecord:
        return HoldRecord(
            id=from_db_uuid(db_hold.id),
            inventory_id=from_db_uuid(db_hold.inventory_id),
            held_by=db_hold.held_by,
            quantity=db_hold.quantity,
            unit_ids=list(db_hold.unit_ids or []),
            created_at=db_hold.created_at,
            expires_at=db_hold.expires_at,
            status=HoldStatus(db_hold.status),
            released_at=db_hold.released_at,
            release_reason=ReleaseReason(db_hold.release_reason) if db_hold.release_reason else None,
            booking_reference=db_hold.booking_reference,
        )

    @Logger.io
    async def get(self, *, hold_id: UUID) -> HoldRecord | None:
        result = await self.session.execute(
            select(HoldRecordModel).where(HoldRecordModel.id == to_db_uuid(hold_id))
        )
        db_hold = result.scalar_one_or_none()
        return self._to_entity(db_hold) if db_hold else None

    @Logger.io
    async def get_for_update(self, *, hold_id: UUID) -> HoldRecord | None:
        result = await self.session.execute(
            select(HoldRecordModel)
            .where(HoldRecordModel.id == to_db_uuid(hold_id))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        db_hold = result.scalar_one_or_none()
        return self._to_entity(db_hold) if db_hold else None

    @Logger.io
    async def add(self, *, hold: HoldRecord) -> None:
        self.session.add(
            HoldRecordModel(
                id=to_db_uuid(hold.id),
                inventory_id=to_db_uuid(hold.inventory_id),
                held_by=hold.held_by,
                quantity=hold.quantity,
                unit_ids=list(hold.unit_ids),
                status=hold.status.value,
                created_at=hold.created_at,
                expires_at=hold.expires_at,
            )
        )
        await self.session.flush()

    @Logger.io
    async def save(self, *, hold: HoldRecord) -> None:
        await self.session.execute(
            update(HoldRecordModel)
            .where(HoldRecordModel.id == to_db_uuid(hold.id))
            .values(
                status=hold.status.value,
                released_at=hold.released_at,
                release_reason=hold.release_reason.value if hold.release_reason else None,
                booking_reference=hold.booking_reference,
            )
        )

    @Logger.io
    async def count_active(self, *, inventory_id: UUID) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(HoldRecordModel)
            .where(
                HoldRecordModel.inventory_id == to_db_uuid(inventory_id),
                HoldRecordModel.status == HoldStatus.ACTIVE.value,
            )
        )
        return int(result.scalar_one())

    @Logger.io
    async def list_expired_active_ids(self, *, now: datetime, limit: int) -> list[UUID]:
        result = await self.session.execute(
            select(HoldRecordModel.id)
            .where(
                HoldRecordModel.status == HoldStatus.ACTIVE.value,
                HoldRecordModel.expires_at <= now,
            )
            .order_by(HoldRecordModel.expires_at)
            .limit(limit)
        )
        return [from_db_uuid(hold_id) for hold_id in result.scalars().all()]

    @Logger.io
    async def find_active_by_holder(self, *, inventory_id: UUID, held_by: str) -> HoldRecord | None:
        result = await self.session.execute(
            select(HoldRecordModel)
            .where(
                HoldRecordModel.inventory_id == to_db_uuid(inventory_id),
                HoldRecordModel.held_by == held_by,
                HoldRecordModel.status == HoldStatus.ACTIVE.value,
            )
            .order_by(HoldRecordModel.created_at.desc())
            .limit(1)
        )
        db_hold = result.scalar_one_or_none()
        return self._to_entity(db_hold) if db_hold else None
