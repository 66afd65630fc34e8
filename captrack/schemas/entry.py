"""
CapTrack - Entry Schemas

Pydantic schemas for entry request/response validation.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from captrack.config import settings
from captrack.models.entry import ConfirmationMethod, EntryStatus
from captrack.models.project import ProjectPhase
from captrack.models.revision import AuthMethod


MAX_CONFIRM_RANGE_DAYS = 31
MAX_BULK_ENTRIES = settings.bulk_max_entries


# =============================================================================
# REQUESTS
# =============================================================================

class ConfirmEntryRequest(BaseModel):
    """Confirm a daily entry. Omitted phase, description and project keep the current values."""
    hours: Decimal = Field(..., gt=0, le=24)
    phase: Optional[ProjectPhase] = None
    description: Optional[str] = Field(None, max_length=5000)
    adjustment_reason: Optional[str] = Field(None, max_length=1000)
    project_id: Optional[UUID] = None


class ConfirmAllRequest(BaseModel):
    """Accept every pending suggestion for one day."""
    entry_date: date = Field(..., validation_alias="date")


class ConfirmRangeRequest(BaseModel):
    """Accept every pending suggestion in an inclusive date range."""
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_range(self) -> "ConfirmRangeRequest":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if (self.end_date - self.start_date).days + 1 > MAX_CONFIRM_RANGE_DAYS:
            raise ValueError(f"Range may cover at most {MAX_CONFIRM_RANGE_DAYS} days")
        return self

    def dates(self) -> List[date]:
        span = (self.end_date - self.start_date).days
        return [self.start_date + timedelta(days=offset) for offset in range(span + 1)]


class ReassignEntryRequest(BaseModel):
    new_project_id: UUID


class BulkReassignRequest(BaseModel):
    entry_ids: List[UUID] = Field(..., min_length=1, max_length=MAX_BULK_ENTRIES)
    new_project_id: UUID


class BulkApproveRequest(BaseModel):
    entry_ids: List[UUID] = Field(..., min_length=1, max_length=MAX_BULK_ENTRIES)


class RejectEntryRequest(BaseModel):
    reason: str = Field(..., min_length=10, max_length=2000)

    @field_validator("reason")
    @classmethod
    def strip_reason(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 10:
            raise ValueError("Rejection reason must be at least 10 characters")
        return value


class ManualEntryCreate(BaseModel):
    """Time logged by hand."""
    entry_date: date = Field(..., validation_alias="date")
    project_id: UUID
    hours: Decimal = Field(..., ge=Decimal("0.25"), le=24)
    phase: ProjectPhase
    description: str = Field(..., min_length=1, max_length=5000)


class SuggestionCreate(BaseModel):
    """Output of the estimation pipeline for one developer-day."""
    developer_id: UUID
    entry_date: date = Field(..., validation_alias="date")
    project_id: Optional[UUID] = None
    hours_estimated: Decimal = Field(..., ge=0, le=24)
    phase_suggested: Optional[ProjectPhase] = None
    description_suggested: Optional[str] = Field(None, max_length=5000)
    source_session_ids: List[str] = Field(default_factory=list)
    source_commit_ids: List[str] = Field(default_factory=list)
    enhancement_suggested: bool = False


# =============================================================================
# RESPONSES
# =============================================================================

class EntryBaseResponse(BaseModel):
    id: UUID
    developer_id: UUID
    project_id: Optional[UUID] = None
    entry_date: date = Field(..., serialization_alias="date")
    status: EntryStatus
    approved_by_id: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    rejected_by_id: Optional[UUID] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    revision_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DailyEntryResponse(EntryBaseResponse):
    hours_estimated: float
    phase_suggested: Optional[ProjectPhase] = None
    description_suggested: Optional[str] = None
    source_session_ids: Optional[List[str]] = None
    source_commit_ids: Optional[List[str]] = None
    enhancement_suggested: bool = False

    hours_confirmed: Optional[float] = None
    phase_confirmed: Optional[ProjectPhase] = None
    description_confirmed: Optional[str] = None
    confirmed_at: Optional[datetime] = None
    confirmed_by_id: Optional[UUID] = None
    confirmation_method: Optional[ConfirmationMethod] = None
    adjustment_reason: Optional[str] = None


class ManualEntryResponse(EntryBaseResponse):
    hours: float
    phase: ProjectPhase
    description: str


class RevisionResponse(BaseModel):
    entry_id: UUID
    revision: int
    field: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    changed_by_id: UUID
    reason: Optional[str] = None
    auth_method: AuthMethod
    changed_at: datetime

    class Config:
        from_attributes = True


class SkippedEntryResponse(BaseModel):
    id: UUID
    reason: str


class BulkConfirmResponse(BaseModel):
    confirmed: int
    by_date: Dict[str, int]
    skipped: List[SkippedEntryResponse] = Field(default_factory=list)


class BulkReassignResponse(BaseModel):
    reassigned: List[UUID]
    skipped: List[SkippedEntryResponse]
    reassigned_count: int
    skipped_count: int


class BulkApproveResponse(BaseModel):
    approved: List[UUID]
    skipped: List[SkippedEntryResponse]
    approved_count: int
    skipped_count: int


class EntriesForDateResponse(BaseModel):
    entry_date: date = Field(..., serialization_alias="date")
    entries: List[DailyEntryResponse]
    manual_entries: List[ManualEntryResponse]
    total_hours: float


class ApprovalQueueResponse(BaseModel):
    daily_entries: List[DailyEntryResponse]
    manual_entries: List[ManualEntryResponse]
