"""
CapTrack - Approval Policy

Pure rules deciding where an entry lands after confirmation or logging.
Nothing here touches the database.
"""

from decimal import Decimal
from typing import Optional, Union

from captrack.config import settings
from captrack.models.entry import EntryKind, EntryStatus
from captrack.utils.error_handling import ValidationException

Number = Union[Decimal, float, int]


def auto_approve_status(
    kind: EntryKind,
    amount: Optional[Number],
    project_requires_approval: bool,
    threshold: Optional[Number] = None,
) -> EntryStatus:
    """
    Resulting status for a newly confirmed or logged entry.

    Manual entries at or under the auto-approve threshold are confirmed,
    larger ones wait for a manager. Daily entries only wait when their
    project asks for manager approval.
    """
    if kind == EntryKind.MANUAL:
        limit = Decimal(str(settings.manual_auto_approve_hours if threshold is None else threshold))
        if amount is not None and Decimal(str(amount)) <= limit:
            return EntryStatus.CONFIRMED
        return EntryStatus.PENDING_APPROVAL
    return requires_manager_approval(project_requires_approval)


def requires_manager_approval(project_requires_approval: bool) -> EntryStatus:
    if project_requires_approval:
        return EntryStatus.PENDING_APPROVAL
    return EntryStatus.CONFIRMED


def needs_adjustment_reason(
    estimated: Optional[Number],
    confirmed: Optional[Number],
    threshold: Optional[Number] = None,
) -> bool:
    """True iff |confirmed - estimated| / estimated exceeds the threshold."""
    if estimated is None or confirmed is None:
        return False
    estimated = Decimal(str(estimated))
    if estimated <= 0:
        return False
    limit = Decimal(str(settings.adjustment_reason_threshold if threshold is None else threshold))
    delta = abs(Decimal(str(confirmed)) - estimated) / estimated
    return delta > limit


def validate_rejection_reason(reason: Optional[str], min_length: Optional[int] = None) -> str:
    """Return the stripped reason or raise ValidationException."""
    min_length = settings.rejection_reason_min_length if min_length is None else min_length
    cleaned = (reason or "").strip()
    if len(cleaned) < min_length:
        raise ValidationException(
            message=f"Rejection reason must be at least {min_length} characters",
            field="reason",
            details={"min_length": min_length},
        )
    return cleaned
