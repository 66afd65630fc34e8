"""
CapTrack - Entry Workflow Engine

State transitions for daily and manual entries.

Every operation loads its entry under a row lock, runs its guards (owner
or role, status, period lock, then operation-specific rules), mutates the
entry and appends revisions in the same transaction. Guards run before
any attribute is touched, so a refused operation leaves nothing to undo.

Bulk operations commit per entry: an entry that fails a guard is reported
in ``skipped`` with a readable reason and the rest of the batch proceeds.
Period locks for every date in a batch are read before the first write.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from captrack.config import settings
from captrack.models.developer import Developer, DeveloperRole
from captrack.models.entry import (
    ConfirmationMethod,
    DailyEntry,
    EntryKind,
    EntryStatus,
    ManualEntry,
)
from captrack.models.project import Project, ProjectPhase
from captrack.models.revision import AuthMethod
from captrack.services.entry_store import Entry, EntryStore
from captrack.services.period_lock_service import PeriodKey, PeriodLockGuard, period_of
from captrack.services.policy import (
    auto_approve_status,
    needs_adjustment_reason,
    requires_manager_approval,
    validate_rejection_reason,
)
from captrack.services.revision_ledger import FieldChange, RevisionLedger
from captrack.utils.error_handling import (
    AdjustmentReasonRequiredException,
    AuthorizationException,
    DailyHoursExceededException,
    DatabaseException,
    EntryNotFoundException,
    InsufficientPermissionsException,
    InvalidReassignmentTargetException,
    InvalidStateTransitionException,
    NotEntryOwnerException,
    NotFoundException,
    PeriodLockedException,
    ProjectNotFoundException,
    SelfApprovalForbiddenException,
    ValidationException,
)

logger = logging.getLogger(__name__)


# Statuses each operation may start from
ALLOWED_TRANSITIONS: Dict[str, Set[EntryStatus]] = {
    "confirm": {EntryStatus.PENDING, EntryStatus.PENDING_APPROVAL, EntryStatus.CONFIRMED},
    "bulk_confirm": {EntryStatus.PENDING},
    "approve": {EntryStatus.PENDING_APPROVAL},
    "reject": {EntryStatus.PENDING_APPROVAL},
    "reassign": {EntryStatus.PENDING, EntryStatus.PENDING_APPROVAL},
}

BULK_CONFIRM_REASON = "Accepted AI suggestion via bulk confirmation"
BULK_CONFIRM_DESCRIPTION = "Confirmed as-is"
REASSIGN_REASON = "Reassigned to enhancement project"

# Guard failures that become skip entries in bulk operations
GUARD_ERRORS = (
    AuthorizationException,
    NotFoundException,
    ValidationException,
    InvalidStateTransitionException,
    PeriodLockedException,
)


@dataclass
class Actor:
    """The authenticated developer behind a request."""
    developer: Developer
    auth_method: AuthMethod = AuthMethod.WEB_SESSION

    @property
    def id(self) -> uuid.UUID:
        return self.developer.id

    @property
    def role(self) -> DeveloperRole:
        return self.developer.role

    @property
    def is_reviewer(self) -> bool:
        return self.developer.is_reviewer


@dataclass
class ConfirmFields:
    """Values a developer confirms for a daily entry."""
    hours: Decimal
    phase: Optional[ProjectPhase] = None
    description: Optional[str] = None
    adjustment_reason: Optional[str] = None
    project_id: Optional[uuid.UUID] = None


@dataclass
class SkippedEntry:
    id: uuid.UUID
    reason: str

    def to_dict(self) -> dict:
        return {"id": str(self.id), "reason": self.reason}


@dataclass
class BulkConfirmResult:
    confirmed: int = 0
    by_date: Dict[str, int] = field(default_factory=dict)
    skipped: List[SkippedEntry] = field(default_factory=list)


@dataclass
class BulkApproveResult:
    approved: List[uuid.UUID] = field(default_factory=list)
    skipped: List[SkippedEntry] = field(default_factory=list)


@dataclass
class BulkReassignResult:
    reassigned: List[uuid.UUID] = field(default_factory=list)
    skipped: List[SkippedEntry] = field(default_factory=list)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _to_hours(value) -> Decimal:
    return Decimal(str(value))


def _unique(ids: Iterable[uuid.UUID]) -> List[uuid.UUID]:
    """Drop repeated ids, keeping first-seen order."""
    seen: Set[uuid.UUID] = set()
    ordered = []
    for entry_id in ids:
        if entry_id not in seen:
            seen.add(entry_id)
            ordered.append(entry_id)
    return ordered


class EntryWorkflow:
    """Lifecycle operations on daily and manual entries."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.store = EntryStore(db)
        self.guard = PeriodLockGuard(db)
        self.ledger = RevisionLedger(db)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _storage_errors(self, operation: str, entry_id: Optional[uuid.UUID] = None):
        """Roll back and surface storage failures as a generic DatabaseException."""
        try:
            yield
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error(
                f"Storage failure during {operation} for entry {entry_id}",
                extra={"entry_id": str(entry_id) if entry_id else None, "operation": operation},
                exc_info=True,
            )
            raise DatabaseException(original_error=exc) from exc

    async def _load(self, kind: EntryKind, entry_id: uuid.UUID) -> Entry:
        entry = await self.store.get_entry(kind, entry_id, for_update=True)
        if entry is None:
            raise EntryNotFoundException(entry_id)
        return entry

    @staticmethod
    def _require_owner_or_reviewer(entry: Entry, actor: Actor) -> None:
        if entry.developer_id != actor.id and not actor.is_reviewer:
            raise NotEntryOwnerException(entry.id)

    @staticmethod
    def _require_reviewer(actor: Actor) -> None:
        if not actor.is_reviewer:
            raise InsufficientPermissionsException(user_role=actor.role.value)

    @staticmethod
    def _require_status(entry: Entry, operation: str, status_code: int = 400) -> None:
        if entry.status not in ALLOWED_TRANSITIONS[operation]:
            raise InvalidStateTransitionException(
                message=f"Entry is {entry.status.value}",
                current_status=entry.status.value,
                operation=operation,
                status_code=status_code,
            )

    @staticmethod
    def _require_unlocked(locked: Set[PeriodKey], entry_date: date) -> None:
        key = period_of(entry_date)
        if key in locked:
            raise PeriodLockedException(*key)

    @staticmethod
    def _validate_reassign_target(entry: DailyEntry, target: Project) -> None:
        if not target.is_enhancement or target.parent_project_id != entry.project_id:
            raise InvalidReassignmentTargetException(
                "Enhancement is not a child of entry's project", target.id
            )
        if target.phase != ProjectPhase.APPLICATION_DEVELOPMENT:
            raise InvalidReassignmentTargetException(
                "Target project must be in the application_development phase", target.id
            )

    async def _check_daily_cap(
        self,
        developer_id: uuid.UUID,
        entry_date: date,
        hours: Decimal,
        exclude_daily_id: Optional[uuid.UUID] = None,
    ) -> None:
        existing = await self.store.hours_logged_on(developer_id, entry_date, exclude_daily_id)
        total = existing + hours
        cap = _to_hours(settings.daily_hours_cap)
        if total > cap:
            raise DailyHoursExceededException(entry_date.isoformat(), total, cap)

    async def _commit(self, *entries: Entry) -> None:
        await self.db.commit()
        for entry in entries:
            await self.db.refresh(entry)

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------

    async def confirm(self, entry_id: uuid.UUID, fields: ConfirmFields, actor: Actor) -> DailyEntry:
        """
        Confirm one daily entry.

        On the first confirmation the suggested values are the baseline for
        revisions; on a re-confirmation the previous confirmed values are.
        A project chosen here replaces the suggested one and decides whether
        the entry goes to a manager.
        """
        hours = _to_hours(fields.hours)
        if hours <= 0:
            raise ValidationException("Hours must be greater than zero", field="hours")

        async with self._storage_errors("confirm", entry_id):
            entry = await self._load(EntryKind.DAILY, entry_id)
            self._require_owner_or_reviewer(entry, actor)
            self._require_status(entry, "confirm", status_code=403)
            await self.guard.assert_open(entry.entry_date)

            reason = (fields.adjustment_reason or "").strip() or None
            if needs_adjustment_reason(entry.hours_estimated, hours) and not reason:
                raise AdjustmentReasonRequiredException(entry.hours_estimated, hours)

            first_confirmation = entry.hours_confirmed is None
            if first_confirmation:
                baseline = (entry.hours_estimated, entry.phase_suggested, entry.description_suggested)
            else:
                baseline = (entry.hours_confirmed, entry.phase_confirmed, entry.description_confirmed)
            phase = fields.phase or baseline[1]
            if phase is None:
                raise ValidationException("Phase is required to confirm an entry", field="phase")
            description = fields.description if fields.description is not None else baseline[2]

            project_id = entry.project_id
            if fields.project_id is not None and fields.project_id != entry.project_id:
                project = await self.store.get_project(fields.project_id)
                if project is None:
                    raise ProjectNotFoundException(fields.project_id)
                project_id = project.id

            await self._check_daily_cap(entry.developer_id, entry.entry_date, hours, entry.id)

            new_status = requires_manager_approval(
                await self.store.project_requires_approval(project_id)
            )
            changes = [
                FieldChange("project_id", entry.project_id, project_id),
                FieldChange("hours_confirmed", baseline[0], hours),
                FieldChange("phase_confirmed", baseline[1], phase),
                FieldChange("description_confirmed", baseline[2], description),
                FieldChange("status", entry.status, new_status),
            ]

            entry.project_id = project_id
            entry.hours_confirmed = hours
            entry.phase_confirmed = phase
            entry.description_confirmed = description
            entry.confirmed_at = _utcnow()
            entry.confirmed_by_id = actor.id
            entry.confirmation_method = ConfirmationMethod.SINGLE
            entry.adjustment_reason = reason
            entry.status = new_status

            await self.ledger.append(
                EntryKind.DAILY, entry.id, changes, actor.id, actor.auth_method, reason=reason
            )
            await self._commit(entry)

        logger.info(f"Daily entry {entry_id} confirmed by {actor.id}: {new_status.value}")
        return entry

    async def bulk_confirm(
        self,
        dates: Sequence[date],
        actor: Actor,
        method: Optional[ConfirmationMethod] = None,
    ) -> BulkConfirmResult:
        """
        Accept the suggested values of all the actor's pending entries on the dates.

        A locked period on any requested date aborts the call before any write.
        """
        dates = sorted(set(dates))
        if not dates:
            raise ValidationException("At least one date is required", field="dates")
        if method is None:
            method = ConfirmationMethod.BULK if len(dates) == 1 else ConfirmationMethod.BULK_RANGE

        result = BulkConfirmResult(by_date={d.isoformat(): 0 for d in dates})
        await self.guard.assert_all_open(dates)

        pending = await self.store.list_pending_daily(actor.id, dates)
        projects: Dict[uuid.UUID, Optional[Project]] = {}

        for candidate in pending:
            entry_id = candidate.id
            async with self._storage_errors("bulk_confirm", entry_id):
                entry = await self.store.get_entry(EntryKind.DAILY, entry_id, for_update=True)
                if entry is None:
                    result.skipped.append(SkippedEntry(entry_id, "Entry not found"))
                    continue
                try:
                    self._require_status(entry, "bulk_confirm")
                except InvalidStateTransitionException as exc:
                    result.skipped.append(SkippedEntry(entry_id, exc.message))
                    continue

                if entry.project_id is not None and entry.project_id not in projects:
                    projects[entry.project_id] = await self.store.get_project(entry.project_id)
                project = projects.get(entry.project_id)
                new_status = requires_manager_approval(bool(project and project.requires_manager_approval))

                phase = (
                    entry.phase_suggested
                    or (project.phase if project else None)
                    or ProjectPhase.APPLICATION_DEVELOPMENT
                )
                description = entry.description_suggested or BULK_CONFIRM_DESCRIPTION

                changes = [
                    FieldChange("hours_confirmed", entry.hours_estimated, entry.hours_estimated),
                    FieldChange("phase_confirmed", entry.phase_suggested, phase),
                    FieldChange("description_confirmed", entry.description_suggested, description),
                    FieldChange("status", entry.status, new_status),
                ]
                entry.hours_confirmed = entry.hours_estimated
                entry.phase_confirmed = phase
                entry.description_confirmed = description
                entry.confirmed_at = _utcnow()
                entry.confirmed_by_id = actor.id
                entry.confirmation_method = method
                entry.status = new_status

                await self.ledger.append(
                    EntryKind.DAILY, entry.id, changes, actor.id, actor.auth_method,
                    reason=BULK_CONFIRM_REASON,
                )
                await self.db.commit()

            result.confirmed += 1
            key = entry.entry_date.isoformat()
            result.by_date[key] = result.by_date.get(key, 0) + 1

        logger.info(
            f"Bulk confirm by {actor.id} over {len(dates)} date(s): "
            f"{result.confirmed} confirmed, {len(result.skipped)} skipped"
        )
        return result

    # ------------------------------------------------------------------
    # Approval
    # ------------------------------------------------------------------

    async def _apply_review(
        self,
        kind: EntryKind,
        entry: Entry,
        actor: Actor,
        new_status: EntryStatus,
        reason: Optional[str] = None,
    ) -> None:
        changes = [FieldChange("status", entry.status, new_status)]
        now = _utcnow()
        if new_status == EntryStatus.APPROVED:
            entry.approved_by_id = actor.id
            entry.approved_at = now
        else:
            entry.rejected_by_id = actor.id
            entry.rejected_at = now
            entry.rejection_reason = reason
        entry.status = new_status
        await self.ledger.append(kind, entry.id, changes, actor.id, actor.auth_method, reason=reason)

    async def _review(
        self,
        kind: EntryKind,
        entry_id: uuid.UUID,
        actor: Actor,
        operation: str,
        new_status: EntryStatus,
        reason: Optional[str] = None,
    ) -> Entry:
        self._require_reviewer(actor)
        async with self._storage_errors(operation, entry_id):
            entry = await self._load(kind, entry_id)
            if entry.developer_id == actor.id:
                raise SelfApprovalForbiddenException(entry.id)
            self._require_status(entry, operation)
            await self.guard.assert_open(entry.entry_date)

            await self._apply_review(kind, entry, actor, new_status, reason)
            await self._commit(entry)

        logger.info(f"{kind.value.title()} entry {entry_id} {new_status.value} by {actor.id}")
        return entry

    async def approve(self, kind: EntryKind, entry_id: uuid.UUID, actor: Actor) -> Entry:
        """Approve an entry awaiting review. Managers and admins only, never their own."""
        return await self._review(kind, entry_id, actor, "approve", EntryStatus.APPROVED)

    async def reject(self, kind: EntryKind, entry_id: uuid.UUID, actor: Actor, reason: str) -> Entry:
        """Reject an entry awaiting review, with a reason."""
        cleaned = validate_rejection_reason(reason)
        return await self._review(kind, entry_id, actor, "reject", EntryStatus.REJECTED, cleaned)

    async def bulk_approve(self, entry_ids: Sequence[uuid.UUID], actor: Actor) -> BulkApproveResult:
        """Approve many daily entries, skipping the ones a single approve would refuse."""
        self._require_reviewer(actor)
        ids = _unique(entry_ids)
        result = BulkApproveResult()

        found = await self.store.get_daily_entries(ids)
        locked = await self.guard.locked_periods(entry.entry_date for entry in found.values())

        for entry_id in ids:
            async with self._storage_errors("bulk_approve", entry_id):
                entry = await self.store.get_entry(EntryKind.DAILY, entry_id, for_update=True)
                if entry is None:
                    result.skipped.append(SkippedEntry(entry_id, "Entry not found"))
                    continue
                try:
                    if entry.developer_id == actor.id:
                        raise SelfApprovalForbiddenException(entry.id)
                    self._require_status(entry, "approve")
                    self._require_unlocked(locked, entry.entry_date)
                except GUARD_ERRORS as exc:
                    result.skipped.append(SkippedEntry(entry_id, exc.message))
                    continue

                await self._apply_review(EntryKind.DAILY, entry, actor, EntryStatus.APPROVED)
                await self.db.commit()
            result.approved.append(entry_id)

        logger.info(
            f"Bulk approve by {actor.id}: {len(result.approved)} approved, {len(result.skipped)} skipped"
        )
        return result

    # ------------------------------------------------------------------
    # Reassignment
    # ------------------------------------------------------------------

    async def _apply_reassign(self, entry: DailyEntry, target: Project, actor: Actor) -> None:
        changes = [
            FieldChange("project_id", entry.project_id, target.id),
            FieldChange("phase_suggested", entry.phase_suggested, ProjectPhase.APPLICATION_DEVELOPMENT),
            FieldChange("hours_confirmed", entry.hours_confirmed, None),
            FieldChange("phase_confirmed", entry.phase_confirmed, None),
            FieldChange("description_confirmed", entry.description_confirmed, None),
            FieldChange("status", entry.status, EntryStatus.PENDING),
        ]

        entry.project_id = target.id
        entry.phase_suggested = ProjectPhase.APPLICATION_DEVELOPMENT
        entry.enhancement_suggested = False
        entry.status = EntryStatus.PENDING
        entry.hours_confirmed = None
        entry.phase_confirmed = None
        entry.description_confirmed = None
        entry.confirmed_at = None
        entry.confirmed_by_id = None
        entry.confirmation_method = None
        entry.adjustment_reason = None

        await self.ledger.append(
            EntryKind.DAILY, entry.id, changes, actor.id, actor.auth_method, reason=REASSIGN_REASON
        )

    async def reassign(self, entry_id: uuid.UUID, new_project_id: uuid.UUID, actor: Actor) -> DailyEntry:
        """
        Move a daily entry onto an enhancement child of its current project.

        The entry returns to pending with its confirmation discarded.
        """
        async with self._storage_errors("reassign", entry_id):
            entry = await self._load(EntryKind.DAILY, entry_id)
            self._require_owner_or_reviewer(entry, actor)
            self._require_status(entry, "reassign", status_code=403)
            await self.guard.assert_open(entry.entry_date)

            target = await self.store.get_project(new_project_id)
            if target is None:
                raise ProjectNotFoundException(new_project_id)
            self._validate_reassign_target(entry, target)

            await self._apply_reassign(entry, target, actor)
            await self._commit(entry)

        logger.info(f"Daily entry {entry_id} reassigned to project {new_project_id} by {actor.id}")
        return entry

    async def bulk_reassign(
        self,
        entry_ids: Sequence[uuid.UUID],
        new_project_id: uuid.UUID,
        actor: Actor,
    ) -> BulkReassignResult:
        """Reassign each entry independently; refused entries are skipped with a reason."""
        target = await self.store.get_project(new_project_id)
        if target is None:
            raise ProjectNotFoundException(new_project_id)
        if target.phase != ProjectPhase.APPLICATION_DEVELOPMENT:
            raise InvalidReassignmentTargetException(
                "Target project must be in the application_development phase", target.id
            )
        if not target.is_enhancement:
            raise InvalidReassignmentTargetException(
                "Target project is not an enhancement project", target.id
            )

        ids = _unique(entry_ids)
        result = BulkReassignResult()

        found = await self.store.get_daily_entries(ids)
        locked = await self.guard.locked_periods(entry.entry_date for entry in found.values())

        for entry_id in ids:
            async with self._storage_errors("bulk_reassign", entry_id):
                entry = await self.store.get_entry(EntryKind.DAILY, entry_id, for_update=True)
                if entry is None:
                    result.skipped.append(SkippedEntry(entry_id, "Entry not found"))
                    continue
                try:
                    self._require_owner_or_reviewer(entry, actor)
                    self._require_status(entry, "reassign", status_code=403)
                    self._require_unlocked(locked, entry.entry_date)
                    self._validate_reassign_target(entry, target)
                except GUARD_ERRORS as exc:
                    result.skipped.append(SkippedEntry(entry_id, exc.message))
                    continue

                await self._apply_reassign(entry, target, actor)
                await self.db.commit()
            result.reassigned.append(entry_id)

        logger.info(
            f"Bulk reassign to {new_project_id} by {actor.id}: "
            f"{len(result.reassigned)} reassigned, {len(result.skipped)} skipped"
        )
        return result

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_manual_entry(
        self,
        actor: Actor,
        entry_date: date,
        project_id: uuid.UUID,
        hours,
        phase: ProjectPhase,
        description: str,
    ) -> ManualEntry:
        """Log time by hand; small entries are confirmed straight away."""
        hours = _to_hours(hours)
        low, high = _to_hours(settings.manual_min_hours), _to_hours(settings.manual_max_hours)
        if hours < low or hours > high:
            raise ValidationException(
                f"Hours must be between {low} and {high}",
                field="hours",
                details={"min": str(low), "max": str(high)},
            )
        if not description or not description.strip():
            raise ValidationException("Description is required", field="description")

        async with self._storage_errors("create_manual_entry"):
            project = await self.store.get_project(project_id)
            if project is None:
                raise ProjectNotFoundException(project_id)
            await self.guard.assert_open(entry_date)
            await self._check_daily_cap(actor.id, entry_date, hours)

            entry = ManualEntry(
                developer_id=actor.id,
                project_id=project.id,
                entry_date=entry_date,
                hours=hours,
                phase=phase,
                description=description.strip(),
                status=auto_approve_status(EntryKind.MANUAL, hours, project.requires_manager_approval),
            )
            self.db.add(entry)
            await self._commit(entry)

        logger.info(f"Manual entry {entry.id} logged by {actor.id}: {hours}h, {entry.status.value}")
        return entry

    async def record_suggestion(
        self,
        actor: Actor,
        developer_id: uuid.UUID,
        entry_date: date,
        hours_estimated,
        project_id: Optional[uuid.UUID] = None,
        phase_suggested: Optional[ProjectPhase] = None,
        description_suggested: Optional[str] = None,
        source_session_ids: Optional[List[str]] = None,
        source_commit_ids: Optional[List[str]] = None,
        enhancement_suggested: bool = False,
    ) -> DailyEntry:
        """Store the estimator's output as a pending daily entry."""
        self._require_reviewer(actor)
        hours = _to_hours(hours_estimated)
        if hours < 0:
            raise ValidationException("Estimated hours cannot be negative", field="hours_estimated")

        async with self._storage_errors("record_suggestion"):
            if await self.store.get_developer(developer_id) is None:
                raise NotFoundException("Developer", developer_id)
            if project_id is not None and await self.store.get_project(project_id) is None:
                raise ProjectNotFoundException(project_id)
            await self.guard.assert_open(entry_date)

            entry = DailyEntry(
                developer_id=developer_id,
                project_id=project_id,
                entry_date=entry_date,
                hours_estimated=hours,
                phase_suggested=phase_suggested,
                description_suggested=description_suggested,
                source_session_ids=list(source_session_ids or []),
                source_commit_ids=list(source_commit_ids or []),
                enhancement_suggested=enhancement_suggested,
                status=EntryStatus.PENDING,
            )
            self.db.add(entry)
            await self._commit(entry)

        logger.info(f"Suggestion stored as daily entry {entry.id} for developer {developer_id}")
        return entry

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_visible_entry(self, kind: EntryKind, entry_id: uuid.UUID, actor: Actor) -> Entry:
        entry = await self.store.get_entry(kind, entry_id)
        if entry is None:
            raise EntryNotFoundException(entry_id)
        self._require_owner_or_reviewer(entry, actor)
        return entry

    async def revisions(self, kind: EntryKind, entry_id: uuid.UUID, actor: Actor) -> list:
        await self.get_visible_entry(kind, entry_id, actor)
        return await self.ledger.history(kind, entry_id)

    async def entries_for_date(self, actor: Actor, entry_date: date) -> dict:
        return {
            "daily": await self.store.list_daily_for_date(actor.id, entry_date),
            "manual": await self.store.list_manual_for_date(actor.id, entry_date),
        }

    async def approval_queue(self, actor: Actor) -> dict:
        self._require_reviewer(actor)
        return {
            "daily": await self.store.list_awaiting_approval(EntryKind.DAILY),
            "manual": await self.store.list_awaiting_approval(EntryKind.MANUAL),
        }
