"""
CapTrack - Entry Store

Queries over daily entries, manual entries, projects and developers.
Loads used ahead of a mutation take a row lock (SELECT ... FOR UPDATE)
and refresh any copy already held by the session.
"""

import uuid
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from captrack.models.developer import Developer
from captrack.models.entry import DailyEntry, EntryKind, EntryStatus, ManualEntry
from captrack.models.project import Project
from captrack.services.revision_ledger import ENTRY_MODELS

Entry = Union[DailyEntry, ManualEntry]


class EntryStore:
    """Data access for entries and the records they reference."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_entry(
        self,
        kind: EntryKind,
        entry_id: uuid.UUID,
        for_update: bool = False,
    ) -> Optional[Entry]:
        model = ENTRY_MODELS[kind]
        query = select(model).where(model.id == entry_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_daily_entries(self, entry_ids: Sequence[uuid.UUID]) -> dict:
        """
        Map of id -> DailyEntry for the ids that exist.

        Unlocked read used to collect batch dates; each entry is locked again
        with get_entry before it is written.
        """
        if not entry_ids:
            return {}
        query = select(DailyEntry).where(DailyEntry.id.in_(list(entry_ids)))
        result = await self.db.execute(query)
        return {entry.id: entry for entry in result.scalars().all()}

    async def get_project(self, project_id: uuid.UUID) -> Optional[Project]:
        return await self.db.get(Project, project_id)

    async def get_developer(self, developer_id: uuid.UUID) -> Optional[Developer]:
        return await self.db.get(Developer, developer_id)

    async def project_requires_approval(self, project_id: Optional[uuid.UUID]) -> bool:
        """Unmatched entries and unknown projects never require approval."""
        if project_id is None:
            return False
        project = await self.get_project(project_id)
        return bool(project and project.requires_manager_approval)

    async def list_pending_daily(
        self,
        developer_id: uuid.UUID,
        dates: Iterable[date],
    ) -> List[DailyEntry]:
        """The developer's pending daily entries on any of the dates."""
        dates = sorted(set(dates))
        result = await self.db.execute(
            select(DailyEntry)
            .where(
                DailyEntry.developer_id == developer_id,
                DailyEntry.entry_date.in_(dates),
                DailyEntry.status == EntryStatus.PENDING,
            )
            .order_by(DailyEntry.entry_date, DailyEntry.created_at)
        )
        return list(result.scalars().all())

    async def list_daily_for_date(self, developer_id: uuid.UUID, entry_date: date) -> List[DailyEntry]:
        result = await self.db.execute(
            select(DailyEntry)
            .where(DailyEntry.developer_id == developer_id, DailyEntry.entry_date == entry_date)
            .order_by(DailyEntry.created_at)
        )
        return list(result.scalars().all())

    async def list_manual_for_date(self, developer_id: uuid.UUID, entry_date: date) -> List[ManualEntry]:
        result = await self.db.execute(
            select(ManualEntry)
            .where(ManualEntry.developer_id == developer_id, ManualEntry.entry_date == entry_date)
            .order_by(ManualEntry.created_at)
        )
        return list(result.scalars().all())

    async def hours_logged_on(
        self,
        developer_id: uuid.UUID,
        entry_date: date,
        exclude_daily_id: Optional[uuid.UUID] = None,
    ) -> Decimal:
        """
        Hours already counted against the developer's day.

        Daily entries count at their confirmed hours, falling back to the
        estimate; rejected entries do not count.
        """
        total = Decimal("0")
        for entry in await self.list_daily_for_date(developer_id, entry_date):
            if entry.id == exclude_daily_id or entry.status == EntryStatus.REJECTED:
                continue
            total += entry.effective_hours
        for manual in await self.list_manual_for_date(developer_id, entry_date):
            if manual.status == EntryStatus.REJECTED:
                continue
            total += manual.hours
        return total

    async def list_awaiting_approval(self, kind: EntryKind) -> List[Entry]:
        """Entries in pending_approval, oldest date first."""
        model = ENTRY_MODELS[kind]
        result = await self.db.execute(
            select(model)
            .where(model.status == EntryStatus.PENDING_APPROVAL)
            .order_by(model.entry_date, model.created_at)
        )
        return list(result.scalars().all())
