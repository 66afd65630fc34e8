"""
CapTrack - Database Models

Import every model here so Base.metadata knows all tables.
"""

from captrack.models.base import BaseModel, TimestampMixin
from captrack.models.developer import Developer, DeveloperRole
from captrack.models.project import Project, ProjectPhase
from captrack.models.entry import (
    ConfirmationMethod,
    DailyEntry,
    EntryKind,
    EntryStatus,
    ManualEntry,
)
from captrack.models.revision import AuthMethod, DailyEntryRevision, ManualEntryRevision
from captrack.models.period_lock import PeriodLock, PeriodStatus

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "Developer",
    "DeveloperRole",
    "Project",
    "ProjectPhase",
    "ConfirmationMethod",
    "DailyEntry",
    "EntryKind",
    "EntryStatus",
    "ManualEntry",
    "AuthMethod",
    "DailyEntryRevision",
    "ManualEntryRevision",
    "PeriodLock",
    "PeriodStatus",
]
