"""
CapTrack - Revision Ledger

Append-only, per-entry history of tracked field changes.

Revision numbers for an entry start at 1 and are contiguous. A block of
numbers is reserved with one atomic UPDATE ... RETURNING on the entry's
revision_count column, so two writers to the same entry serialize on the
entry row and can never hand out the same number. The unique constraint on
(entry_id, revision) backs this up.
"""

import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Sequence, Union

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from captrack.models.entry import DailyEntry, EntryKind, ManualEntry
from captrack.models.revision import AuthMethod, DailyEntryRevision, ManualEntryRevision
from captrack.utils.error_handling import EntryNotFoundException

logger = logging.getLogger(__name__)

ENTRY_MODELS = {
    EntryKind.DAILY: DailyEntry,
    EntryKind.MANUAL: ManualEntry,
}

REVISION_MODELS = {
    EntryKind.DAILY: DailyEntryRevision,
    EntryKind.MANUAL: ManualEntryRevision,
}


def stringify(value: Any) -> Optional[str]:
    """Text form stored in old_value/new_value."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    if isinstance(value, float):
        return stringify(Decimal(str(value)))
    return str(value)


@dataclass
class FieldChange:
    """One tracked field moving from old to new."""
    field: str
    old: Any
    new: Any

    @property
    def old_text(self) -> Optional[str]:
        return stringify(self.old)

    @property
    def new_text(self) -> Optional[str]:
        return stringify(self.new)

    @property
    def is_noop(self) -> bool:
        return self.old_text == self.new_text


class RevisionLedger:
    """Writes and reads revision records for daily and manual entries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _reserve(self, kind: EntryKind, entry_id: uuid.UUID, count: int) -> int:
        """Bump revision_count by count and return the first reserved number."""
        model = ENTRY_MODELS[kind]
        result = await self.db.execute(
            update(model)
            .where(model.id == entry_id)
            .values(revision_count=model.revision_count + count)
            .returning(model.revision_count)
        )
        new_count = result.scalar_one_or_none()
        if new_count is None:
            raise EntryNotFoundException(entry_id)
        return new_count - count + 1

    async def append(
        self,
        kind: EntryKind,
        entry_id: uuid.UUID,
        changes: Sequence[FieldChange],
        actor_id: uuid.UUID,
        auth_method: AuthMethod = AuthMethod.WEB_SESSION,
        reason: Optional[str] = None,
    ) -> List[Union[DailyEntryRevision, ManualEntryRevision]]:
        """
        Record every change whose value actually moved.

        Unchanged fields are skipped; if nothing changed, nothing is written.
        Runs inside the caller's transaction, which must also carry the
        entry write so both commit together.

        Returns:
            The revision rows added to the session, in revision order
        """
        effective = [change for change in changes if not change.is_noop]
        if not effective:
            return []

        first = await self._reserve(kind, entry_id, len(effective))
        revision_model = REVISION_MODELS[kind]

        records = []
        for offset, change in enumerate(effective):
            record = revision_model(
                entry_id=entry_id,
                revision=first + offset,
                field=change.field,
                old_value=change.old_text,
                new_value=change.new_text,
                changed_by_id=actor_id,
                reason=reason,
                auth_method=auth_method,
            )
            self.db.add(record)
            records.append(record)

        logger.debug(
            f"Reserved revisions {first}..{first + len(effective) - 1} for {kind.value} entry {entry_id}"
        )
        return records

    async def history(
        self,
        kind: EntryKind,
        entry_id: uuid.UUID,
    ) -> List[Union[DailyEntryRevision, ManualEntryRevision]]:
        """All revisions of an entry in order."""
        revision_model = REVISION_MODELS[kind]
        result = await self.db.execute(
            select(revision_model)
            .where(revision_model.entry_id == entry_id)
            .order_by(revision_model.revision)
        )
        return list(result.scalars().all())
