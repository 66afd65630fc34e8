"""
CapTrack - Period Lock Guard

Every write to an entry checks the accounting month of the entry's date
first. Only LOCKED periods refuse writes; SOFT_CLOSE is informational and
a month with no row is open.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Iterable, List, Optional, Set, Tuple, Union

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from captrack.models.period_lock import PeriodLock, PeriodStatus
from captrack.utils.error_handling import PeriodLockedException

logger = logging.getLogger(__name__)

PeriodKey = Tuple[int, int]


def period_of(value: Union[date, datetime]) -> PeriodKey:
    """(year, month) of a date; datetimes are read in UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.year, value.month
    return value.year, value.month


@dataclass
class PeriodView:
    """Read view of a period, including months without a stored row."""
    year: int
    month: int
    status: PeriodStatus
    locked_at: Optional[datetime] = None
    note: Optional[str] = None

    @classmethod
    def from_row(cls, row: PeriodLock) -> "PeriodView":
        return cls(
            year=row.year,
            month=row.month,
            status=row.status,
            locked_at=row.locked_at,
            note=row.note,
        )

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def is_locked(self) -> bool:
        return self.status == PeriodStatus.LOCKED


class PeriodLockGuard:
    """Reads period locks and refuses writes into locked months."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _fetch(self, keys: Iterable[PeriodKey]) -> List[PeriodLock]:
        keys = set(keys)
        if not keys:
            return []
        conditions = [
            and_(PeriodLock.year == year, PeriodLock.month == month)
            for year, month in keys
        ]
        result = await self.db.execute(select(PeriodLock).where(or_(*conditions)))
        return list(result.scalars().all())

    async def locked_periods(self, dates: Iterable[Union[date, datetime]]) -> Set[PeriodKey]:
        """Locked (year, month) keys among the months the dates fall in."""
        rows = await self._fetch(period_of(d) for d in dates)
        return {(row.year, row.month) for row in rows if row.status == PeriodStatus.LOCKED}

    async def assert_open(self, value: Union[date, datetime]) -> None:
        """Raise PeriodLockedException if the date's month is locked."""
        await self.assert_all_open([value])

    async def assert_all_open(self, dates: Iterable[Union[date, datetime]]) -> None:
        """
        Check every distinct month touched by the dates before any write.

        The earliest locked month is reported.
        """
        locked = await self.locked_periods(dates)
        if locked:
            year, month = min(locked)
            logger.warning(f"Write refused: period {year:04d}-{month:02d} is locked")
            raise PeriodLockedException(year, month)

    async def get_period(self, year: int, month: int) -> PeriodView:
        rows = await self._fetch([(year, month)])
        if not rows:
            return PeriodView(year=year, month=month, status=PeriodStatus.OPEN)
        return PeriodView.from_row(rows[0])

    async def list_periods(self) -> List[PeriodView]:
        """Stored periods, newest first."""
        result = await self.db.execute(
            select(PeriodLock).order_by(PeriodLock.year.desc(), PeriodLock.month.desc())
        )
        return [PeriodView.from_row(row) for row in result.scalars().all()]
