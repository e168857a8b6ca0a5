from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.hold.app.interface.i_partner_repo import IPartnerRepo
from src.service.hold.domain.entity.partner_entity import Partner
from src.service.hold.driven_adapter.model.partner_model import PartnerModel


class PartnerRepoImpl(IPartnerRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get(self, *, partner_id: str) -> Partner | None:
        result = await self.session.execute(
            select(PartnerModel).where(PartnerModel.id == partner_id)
        )
        db_partner = result.scalar_one_or_none()
        if db_partner is None:
            return None
        return Partner(
            id=db_partner.id,
            hold_enabled=db_partner.hold_enabled,
            hold_quota_percentage=db_partner.hold_quota_percentage,
            hold_expiry_minutes=db_partner.hold_expiry_minutes,
            updated_at=db_partner.updated_at,
        )

    @Logger.io
    async def save(self, *, partner: Partner) -> None:
        values = {
            'hold_enabled': partner.hold_enabled,
            'hold_quota_percentage': partner.hold_quota_percentage,
            'hold_expiry_minutes': partner.hold_expiry_minutes,
        }
        stmt = insert(PartnerModel).values(id=partner.id, **values)
        await self.session.execute(
            stmt.on_conflict_do_update(index_elements=[PartnerModel.id], set_=values)
        )
