"""
CapTrack - Time Entry Models

Daily entries are produced by the estimation pipeline and confirmed by the
developer; manual entries are logged directly. Both share the lifecycle
columns defined on EntryLifecycleMixin.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from captrack.models.base import BaseModel
from captrack.models.project import ProjectPhase


class EntryStatus(str, Enum):
    """Lifecycle status shared by daily and manual entries."""
    PENDING = "pending"
    PENDING_APPROVAL = "pending_approval"
    CONFIRMED = "confirmed"
    APPROVED = "approved"
    REJECTED = "rejected"


class EntryKind(str, Enum):
    """Which entry table a record lives in."""
    DAILY = "daily"
    MANUAL = "manual"


class ConfirmationMethod(str, Enum):
    """How a daily entry's confirmed view was produced."""
    SINGLE = "single"
    BULK = "bulk"
    BULK_RANGE = "bulk_range"
    EMAIL = "email"


class EntryLifecycleMixin:
    """Identity, status, approval metadata and the revision sequence."""

    developer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("developers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    project_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
        comment="Null while the entry is unmatched",
    )
    entry_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)

    status: Mapped[EntryStatus] = mapped_column(
        SQLEnum(EntryStatus),
        default=EntryStatus.PENDING,
        nullable=False,
    )

    # Approval metadata
    approved_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("developers.id", ondelete="SET NULL"),
        nullable=True,
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("developers.id", ondelete="SET NULL"),
        nullable=True,
    )
    rejected_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    rejection_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    revision_count: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False,
        comment="Highest revision number written for this entry",
    )


class DailyEntry(BaseModel, EntryLifecycleMixin):
    """
    One developer-day of AI-suggested time on a project.

    The suggested view is written at ingestion. The confirmed view is empty
    until the developer confirms.
    """

    __tablename__ = "daily_entries"

    # Suggested view
    hours_estimated: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    phase_suggested: Mapped[Optional[ProjectPhase]] = mapped_column(
        SQLEnum(ProjectPhase), nullable=True,
    )
    description_suggested: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_session_ids: Mapped[Optional[List]] = mapped_column(JSON, nullable=True)
    source_commit_ids: Mapped[Optional[List]] = mapped_column(JSON, nullable=True)
    enhancement_suggested: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False,
        comment="Estimator thinks this work belongs to an enhancement project",
    )

    # Confirmed view
    hours_confirmed: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    phase_confirmed: Mapped[Optional[ProjectPhase]] = mapped_column(
        SQLEnum(ProjectPhase), nullable=True,
    )
    description_confirmed: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    confirmed_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("developers.id", ondelete="SET NULL"),
        nullable=True,
    )
    confirmation_method: Mapped[Optional[ConfirmationMethod]] = mapped_column(
        SQLEnum(ConfirmationMethod), nullable=True,
    )
    adjustment_reason: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    __table_args__ = (
        Index("ix_daily_entries_developer_date", "developer_id", "date"),
        CheckConstraint("hours_estimated >= 0", name="hours_estimated_non_negative"),
    )

    @property
    def effective_hours(self) -> Decimal:
        """Hours that count toward the developer's day."""
        if self.hours_confirmed is not None:
            return self.hours_confirmed
        return self.hours_estimated


class ManualEntry(BaseModel, EntryLifecycleMixin):
    """Time logged by hand, outside the estimation pipeline."""

    __tablename__ = "manual_entries"

    hours: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    phase: Mapped[ProjectPhase] = mapped_column(SQLEnum(ProjectPhase), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_manual_entries_developer_date", "developer_id", "date"),
        CheckConstraint("hours > 0", name="hours_positive"),
    )

    @property
    def effective_hours(self) -> Decimal:
        return self.hours
