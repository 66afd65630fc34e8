"""
CapTrack - Periods Router

Read-only view of accounting period locks. Locking and unlocking happen
in the period administration tooling, not here.
"""

from typing import List

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from captrack.database import get_db
from captrack.dependencies import get_current_actor
from captrack.schemas.period import PeriodResponse
from captrack.services.entry_workflow import Actor
from captrack.services.period_lock_service import PeriodLockGuard, PeriodView

router = APIRouter(prefix="/periods", tags=["Periods"])


def _to_response(view: PeriodView) -> dict:
    return {
        "year": view.year,
        "month": view.month,
        "period": view.period,
        "status": view.status,
        "is_locked": view.is_locked,
        "locked_at": view.locked_at,
        "note": view.note,
    }


@router.get("", response_model=List[PeriodResponse])
async def list_periods(
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Periods with a stored status, newest first. Months not listed are open."""
    guard = PeriodLockGuard(db)
    return [_to_response(view) for view in await guard.list_periods()]


@router.get("/{year}/{month}", response_model=PeriodResponse)
async def get_period(
    year: int = Path(..., ge=1970, le=9999),
    month: int = Path(..., ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    guard = PeriodLockGuard(db)
    return _to_response(await guard.get_period(year, month))
