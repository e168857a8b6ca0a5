from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.db_setting import Base


class PartnerModel(Base):
    """Hold overrides per partner; NULL columns fall back to the service defaults"""

    __tablename__ = 'partner'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    hold_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    hold_quota_percentage: Mapped[Optional[float]] = mapped_column(
        Numeric(5, 2, asdecimal=False), nullable=True
    )
    hold_expiry_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
