"""
CapTrack - Revision Ledger Models

Append-only history of tracked field changes, one table per entry kind.
Rows are never updated or deleted.
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
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from captrack.database import Base


class AuthMethod(str, Enum):
    """How the actor behind a change was authenticated."""
    WEB_SESSION = "web_session"
    EMAIL_REPLY = "email_reply"
    API_KEY = "api_key"


class RevisionMixin:
    """Columns shared by both revision tables."""

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    revision: Mapped[int] = mapped_column(Integer, nullable=False)
    field: Mapped[str] = mapped_column(String(100), nullable=False)
    old_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    new_value: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    changed_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("developers.id"),
        nullable=False,
    )
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    auth_method: Mapped[AuthMethod] = mapped_column(
        SQLEnum(AuthMethod),
        default=AuthMethod.WEB_SESSION,
        nullable=False,
    )
    changed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(entry_id={self.entry_id}, revision={self.revision}, field={self.field})>"


class DailyEntryRevision(Base, RevisionMixin):
    """Revision record for a daily entry."""

    __tablename__ = "daily_entry_revisions"

    entry_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("daily_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("entry_id", "revision", name="uq_daily_entry_revision"),
        CheckConstraint("revision >= 1", name="revision_positive"),
    )


class ManualEntryRevision(Base, RevisionMixin):
    """Revision record for a manual entry."""

    __tablename__ = "manual_entry_revisions"

    entry_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("manual_entries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    __table_args__ = (
        UniqueConstraint("entry_id", "revision", name="uq_manual_entry_revision"),
        CheckConstraint("revision >= 1", name="revision_positive"),
    )
