"""
CapTrack - Enhancement Reassignment Tests

Moving daily entries from a shipped project onto one of its enhancement
projects, singly and in bulk.
"""

from uuid import uuid4

import pytest
import pytest_asyncio

from captrack.models.entry import EntryKind, EntryStatus
from captrack.models.project import Project, ProjectPhase
from captrack.services.entry_workflow import Actor, EntryWorkflow
from captrack.services.revision_ledger import RevisionLedger
from captrack.utils.error_handling import (
    InvalidReassignmentTargetException,
    InvalidStateTransitionException,
    NotEntryOwnerException,
    PeriodLockedException,
    ProjectNotFoundException,
)

from tests.conftest import LOCKED_DATE


@pytest_asyncio.fixture
async def preliminary_child(db_session, parent_project) -> Project:
    """A child of the parent project that has not reached development."""
    project = Project(
        id=uuid4(),
        name="Billing Platform - Tax Research",
        phase=ProjectPhase.PRELIMINARY,
        parent_project_id=parent_project.id,
    )
    db_session.add(project)
    await db_session.commit()
    return project


class TestReassign:

    @pytest.mark.asyncio
    async def test_moves_entry_to_enhancement(self, db_session, make_entry, enhancement_project, developer_actor):
        entry = await make_entry(
            status=EntryStatus.PENDING_APPROVAL,
            hours_confirmed="5",
            phase_suggested=ProjectPhase.POST_IMPLEMENTATION,
            enhancement_suggested=True,
        )
        old_project_id = entry.project_id
        workflow = EntryWorkflow(db_session)

        moved = await workflow.reassign(entry.id, enhancement_project.id, developer_actor)

        assert moved.project_id == enhancement_project.id
        assert moved.phase_suggested == ProjectPhase.APPLICATION_DEVELOPMENT
        assert moved.status == EntryStatus.PENDING
        assert moved.enhancement_suggested is False
        assert moved.hours_confirmed is None
        assert moved.phase_confirmed is None
        assert moved.description_confirmed is None
        assert moved.confirmed_at is None
        assert moved.confirmation_method is None

        history = await RevisionLedger(db_session).history(EntryKind.DAILY, entry.id)
        fields = {r.field: r for r in history}
        assert list(fields) == [
            "project_id",
            "phase_suggested",
            "hours_confirmed",
            "phase_confirmed",
            "description_confirmed",
            "status",
        ]
        assert fields["project_id"].old_value == str(old_project_id)
        assert fields["project_id"].new_value == str(enhancement_project.id)
        assert fields["status"].new_value == "pending"
        assert all(r.reason == "Reassigned to enhancement project" for r in history)

    @pytest.mark.asyncio
    async def test_pending_entry_records_only_real_changes(
        self, db_session, make_entry, enhancement_project, developer_actor
    ):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        await workflow.reassign(entry.id, enhancement_project.id, developer_actor)

        history = await RevisionLedger(db_session).history(EntryKind.DAILY, entry.id)
        assert [r.field for r in history] == ["project_id"]

    @pytest.mark.asyncio
    async def test_target_must_be_child_of_current_project(
        self, db_session, make_entry, unrelated_enhancement, developer_actor
    ):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        with pytest.raises(InvalidReassignmentTargetException) as exc_info:
            await workflow.reassign(entry.id, unrelated_enhancement.id, developer_actor)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Enhancement is not a child of entry's project"

    @pytest.mark.asyncio
    async def test_target_must_be_in_development(
        self, db_session, make_entry, preliminary_child, developer_actor
    ):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        with pytest.raises(InvalidReassignmentTargetException) as exc_info:
            await workflow.reassign(entry.id, preliminary_child.id, developer_actor)
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_target(self, db_session, make_entry, developer_actor):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        with pytest.raises(ProjectNotFoundException):
            await workflow.reassign(entry.id, uuid4(), developer_actor)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [EntryStatus.CONFIRMED, EntryStatus.APPROVED, EntryStatus.REJECTED])
    async def test_only_open_entries_move(
        self, db_session, make_entry, enhancement_project, developer_actor, status
    ):
        entry = await make_entry(status=status, hours_confirmed="5")
        workflow = EntryWorkflow(db_session)

        with pytest.raises(InvalidStateTransitionException) as exc_info:
            await workflow.reassign(entry.id, enhancement_project.id, developer_actor)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_other_developer_is_refused(self, db_session, make_entry, enhancement_project, other_developer):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        with pytest.raises(NotEntryOwnerException):
            await workflow.reassign(entry.id, enhancement_project.id, Actor(other_developer))

    @pytest.mark.asyncio
    async def test_manager_may_reassign(self, db_session, make_entry, enhancement_project, manager_actor):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        moved = await workflow.reassign(entry.id, enhancement_project.id, manager_actor)
        assert moved.project_id == enhancement_project.id

    @pytest.mark.asyncio
    async def test_locked_period(self, db_session, make_entry, enhancement_project, developer_actor, locked_january):
        entry = await make_entry(entry_date=LOCKED_DATE)
        original_project = entry.project_id
        workflow = EntryWorkflow(db_session)

        with pytest.raises(PeriodLockedException):
            await workflow.reassign(entry.id, enhancement_project.id, developer_actor)

        await db_session.refresh(entry)
        assert entry.project_id == original_project
        assert entry.revision_count == 0


class TestBulkReassign:

    @pytest.mark.asyncio
    async def test_partial_success(
        self, db_session, make_entry, enhancement_project, other_developer, developer_actor
    ):
        mine = await make_entry()
        theirs = await make_entry(owner=other_developer)
        confirmed = await make_entry(status=EntryStatus.CONFIRMED, hours_confirmed="5")
        workflow = EntryWorkflow(db_session)

        result = await workflow.bulk_reassign(
            [mine.id, theirs.id, confirmed.id], enhancement_project.id, developer_actor
        )

        assert result.reassigned == [mine.id]
        assert [s.to_dict() for s in result.skipped] == [
            {"id": str(theirs.id), "reason": "Not your entry"},
            {"id": str(confirmed.id), "reason": "Entry is confirmed"},
        ]

        await db_session.refresh(theirs)
        assert theirs.project_id != enhancement_project.id

    @pytest.mark.asyncio
    async def test_locked_and_missing_entries_are_skipped(
        self, db_session, make_entry, enhancement_project, developer_actor, locked_january
    ):
        open_entry = await make_entry()
        locked_entry = await make_entry(entry_date=LOCKED_DATE)
        missing = uuid4()
        workflow = EntryWorkflow(db_session)

        result = await workflow.bulk_reassign(
            [locked_entry.id, missing, open_entry.id], enhancement_project.id, developer_actor
        )

        assert result.reassigned == [open_entry.id]
        assert [(s.id, s.reason) for s in result.skipped] == [
            (locked_entry.id, "Period 2026-01 is locked and cannot be modified"),
            (missing, "Entry not found"),
        ]

    @pytest.mark.asyncio
    async def test_entry_under_another_parent_is_skipped(
        self, db_session, make_entry, enhancement_project, unrelated_enhancement, developer_actor
    ):
        elsewhere = await make_entry(project=unrelated_enhancement)
        workflow = EntryWorkflow(db_session)

        result = await workflow.bulk_reassign([elsewhere.id], enhancement_project.id, developer_actor)
        assert result.reassigned == []
        assert result.skipped[0].reason == "Enhancement is not a child of entry's project"

    @pytest.mark.asyncio
    async def test_target_not_in_development_fails_whole_call(
        self, db_session, make_entry, preliminary_child, developer_actor
    ):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        with pytest.raises(InvalidReassignmentTargetException):
            await workflow.bulk_reassign([entry.id], preliminary_child.id, developer_actor)

    @pytest.mark.asyncio
    async def test_target_without_parent_fails_whole_call(
        self, db_session, make_entry, approval_project, developer_actor
    ):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        with pytest.raises(InvalidReassignmentTargetException) as exc_info:
            await workflow.bulk_reassign([entry.id], approval_project.id, developer_actor)
        assert exc_info.value.message == "Target project is not an enhancement project"

    @pytest.mark.asyncio
    async def test_missing_target(self, db_session, make_entry, developer_actor):
        entry = await make_entry()
        workflow = EntryWorkflow(db_session)

        with pytest.raises(ProjectNotFoundException):
            await workflow.bulk_reassign([entry.id], uuid4(), developer_actor)
