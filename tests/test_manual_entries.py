"""
CapTrack - Manual Entry Tests
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from captrack.models.entry import EntryStatus
from captrack.models.project import ProjectPhase
from captrack.services.entry_workflow import EntryWorkflow
from captrack.utils.error_handling import (
    DailyHoursExceededException,
    PeriodLockedException,
    ProjectNotFoundException,
    ValidationException,
)

from tests.conftest import LOCKED_DATE, OPEN_DATE


async def _create(workflow, actor, project, hours, entry_date=OPEN_DATE, description="Architecture review"):
    return await workflow.create_manual_entry(
        actor=actor,
        entry_date=entry_date,
        project_id=project.id,
        hours=hours,
        phase=ProjectPhase.APPLICATION_DEVELOPMENT,
        description=description,
    )


class TestCreateManualEntry:

    @pytest.mark.asyncio
    async def test_small_entry_is_confirmed(self, db_session, parent_project, developer_actor):
        entry = await _create(EntryWorkflow(db_session), developer_actor, parent_project, Decimal("1.5"))

        assert entry.status == EntryStatus.CONFIRMED
        assert entry.hours == Decimal("1.5")
        assert entry.developer_id == developer_actor.id
        assert entry.revision_count == 0

    @pytest.mark.asyncio
    async def test_threshold_is_inclusive(self, db_session, parent_project, developer_actor):
        entry = await _create(EntryWorkflow(db_session), developer_actor, parent_project, Decimal("4.0"))
        assert entry.status == EntryStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_large_entry_needs_approval(self, db_session, parent_project, developer_actor):
        entry = await _create(EntryWorkflow(db_session), developer_actor, parent_project, Decimal("8"))
        assert entry.status == EntryStatus.PENDING_APPROVAL

    @pytest.mark.asyncio
    async def test_project_flag_does_not_gate_manual_entries(self, db_session, approval_project, developer_actor):
        entry = await _create(EntryWorkflow(db_session), developer_actor, approval_project, Decimal("2"))
        assert entry.status == EntryStatus.CONFIRMED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("hours", ["0.1", "0", "24.5"])
    async def test_hours_out_of_range(self, db_session, parent_project, developer_actor, hours):
        with pytest.raises(ValidationException) as exc_info:
            await _create(EntryWorkflow(db_session), developer_actor, parent_project, Decimal(hours))
        assert exc_info.value.field == "hours"

    @pytest.mark.asyncio
    async def test_blank_description(self, db_session, parent_project, developer_actor):
        with pytest.raises(ValidationException):
            await _create(EntryWorkflow(db_session), developer_actor, parent_project, Decimal("2"), description="  ")

    @pytest.mark.asyncio
    async def test_unknown_project(self, db_session, developer_actor):
        workflow = EntryWorkflow(db_session)
        with pytest.raises(ProjectNotFoundException):
            await workflow.create_manual_entry(
                actor=developer_actor,
                entry_date=OPEN_DATE,
                project_id=uuid4(),
                hours=Decimal("2"),
                phase=ProjectPhase.APPLICATION_DEVELOPMENT,
                description="Architecture review",
            )

    @pytest.mark.asyncio
    async def test_locked_period(self, db_session, parent_project, developer_actor, locked_january):
        with pytest.raises(PeriodLockedException):
            await _create(
                EntryWorkflow(db_session), developer_actor, parent_project, Decimal("2"), entry_date=LOCKED_DATE
            )

    @pytest.mark.asyncio
    async def test_daily_cap_counts_existing_entries(self, db_session, make_entry, parent_project, developer_actor):
        await make_entry(hours_estimated="10")
        workflow = EntryWorkflow(db_session)

        await _create(workflow, developer_actor, parent_project, Decimal("4"))
        with pytest.raises(DailyHoursExceededException):
            await _create(workflow, developer_actor, parent_project, Decimal("0.5"))

        # Another day is unaffected
        other_day = await _create(workflow, developer_actor, parent_project, Decimal("3"), entry_date=date(2026, 3, 11))
        assert other_day.status == EntryStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_entries_for_date(self, db_session, make_entry, parent_project, developer_actor):
        daily = await make_entry()
        manual = await _create(EntryWorkflow(db_session), developer_actor, parent_project, Decimal("2"))

        listed = await EntryWorkflow(db_session).entries_for_date(developer_actor, OPEN_DATE)
        assert [e.id for e in listed["daily"]] == [daily.id]
        assert [e.id for e in listed["manual"]] == [manual.id]
