from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import CheckConstraint, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.db_setting import Base


class ScheduleInventoryModel(Base):
    __tablename__ = 'schedule_inventory'
    __table_args__ = (
        UniqueConstraint('category', 'schedule_id', 'sub_key', name='uq_schedule_inventory_key'),
        CheckConstraint(
            'available_units + held_units + booked_units = total_units',
            name='ck_schedule_inventory_units_balance',
        ),
        CheckConstraint(
            'available_units >= 0 AND held_units >= 0 AND booked_units >= 0',
            name='ck_schedule_inventory_units_non_negative',
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)  # UUID7
    category: Mapped[str] = mapped_column(String(10), nullable=False)
    schedule_id: Mapped[str] = mapped_column(String(64), nullable=False)
    sub_key: Mapped[str] = mapped_column(String(64), nullable=False)
    partner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    total_units: Mapped[int] = mapped_column(Integer, nullable=False)
    available_units: Mapped[int] = mapped_column(Integer, nullable=False)
    held_units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    booked_units: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # unit id -> available/held/booked, NULL for count-only inventory
    unit_status: Mapped[Optional[dict]] = mapped_column(JSONB, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
