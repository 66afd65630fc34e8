"""
CapTrack - Period Lock Model

Monthly accounting period status. A missing row means the period is open.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from captrack.models.base import BaseModel


class PeriodStatus(str, Enum):
    """Status of an accounting month."""
    OPEN = "open"
    SOFT_CLOSE = "soft_close"
    LOCKED = "locked"


class PeriodLock(BaseModel):
    """Lock state of one (year, month)."""

    __tablename__ = "period_locks"

    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[PeriodStatus] = mapped_column(
        SQLEnum(PeriodStatus),
        default=PeriodStatus.OPEN,
        nullable=False,
    )
    locked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    locked_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("developers.id", ondelete="SET NULL"),
        nullable=True,
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("year", "month", name="uq_period_lock"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_month_range"),
    )
