from datetime import datetime
from typing import Optional
import uuid

from sqlalchemy import ARRAY, CheckConstraint, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class HoldRecordModel(Base):
    __tablename__ = 'hold_record'
    __table_args__ = (
        CheckConstraint('expires_at > created_at', name='ck_hold_record_expiry_after_creation'),
        CheckConstraint('quantity >= 1', name='ck_hold_record_quantity_positive'),
        # Expiry sweeper scan
        Index('ix_hold_record_status_expires_at', 'status', 'expires_at'),
        # Active hold lookup by holder
        Index('ix_hold_record_inventory_holder', 'inventory_id', 'held_by', 'status'),
    )

    id: Mapped[uuid.UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)  # UUID7
    inventory_id: Mapped[uuid.UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey('schedule_inventory.id'), nullable=False
    )
    held_by: Mapped[str] = mapped_column(String(128), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_ids: Mapped[list[str]] = mapped_column(ARRAY(String), nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default='active')
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    released_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    release_reason: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    booking_reference: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
