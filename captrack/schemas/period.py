"""
CapTrack - Period Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from captrack.models.period_lock import PeriodStatus


class PeriodResponse(BaseModel):
    """Lock state of one accounting month."""
    year: int
    month: int
    period: str
    status: PeriodStatus
    is_locked: bool
    locked_at: Optional[datetime] = None
    note: Optional[str] = None

    class Config:
        from_attributes = True
