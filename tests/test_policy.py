"""
CapTrack - Approval Policy Unit Tests

Pure rules, no database needed.
"""

from decimal import Decimal

import pytest

from captrack.models.entry import EntryKind, EntryStatus
from captrack.services.policy import (
    auto_approve_status,
    needs_adjustment_reason,
    requires_manager_approval,
    validate_rejection_reason,
)
from captrack.utils.error_handling import ValidationException


class TestAutoApproveStatus:
    """Where a new entry lands."""

    def test_small_manual_entry_is_confirmed(self):
        assert auto_approve_status(EntryKind.MANUAL, Decimal("1.5"), False) == EntryStatus.CONFIRMED

    def test_manual_entry_at_threshold_is_confirmed(self):
        assert auto_approve_status(EntryKind.MANUAL, Decimal("4.0"), False) == EntryStatus.CONFIRMED

    def test_large_manual_entry_needs_approval(self):
        assert auto_approve_status(EntryKind.MANUAL, Decimal("8"), False) == EntryStatus.PENDING_APPROVAL

    def test_manual_threshold_is_overridable(self):
        assert auto_approve_status(EntryKind.MANUAL, 6, False, threshold=8) == EntryStatus.CONFIRMED

    def test_daily_entry_follows_project_flag(self):
        assert auto_approve_status(EntryKind.DAILY, Decimal("12"), False) == EntryStatus.CONFIRMED
        assert auto_approve_status(EntryKind.DAILY, Decimal("1"), True) == EntryStatus.PENDING_APPROVAL

    def test_requires_manager_approval(self):
        assert requires_manager_approval(True) == EntryStatus.PENDING_APPROVAL
        assert requires_manager_approval(False) == EntryStatus.CONFIRMED


class TestAdjustmentReason:
    """Relative change from the estimate above 20% needs a reason."""

    @pytest.mark.parametrize(
        "estimated,confirmed,expected",
        [
            ("5", "6.5", True),    # +30%
            ("5", "6", False),     # +20% exactly
            ("5", "3.5", True),    # -30%
            ("5", "4.5", False),   # -10%
            ("8", "8", False),
        ],
    )
    def test_threshold(self, estimated, confirmed, expected):
        assert needs_adjustment_reason(Decimal(estimated), Decimal(confirmed)) is expected

    def test_zero_or_missing_estimate_never_requires_reason(self):
        assert needs_adjustment_reason(Decimal("0"), Decimal("3")) is False
        assert needs_adjustment_reason(None, Decimal("3")) is False

    def test_accepts_floats(self):
        assert needs_adjustment_reason(5.0, 6.5) is True


class TestRejectionReason:

    def test_short_reason_is_rejected(self):
        with pytest.raises(ValidationException) as exc_info:
            validate_rejection_reason("too short")
        assert exc_info.value.status_code == 400
        assert exc_info.value.field == "reason"

    def test_whitespace_does_not_count(self):
        with pytest.raises(ValidationException):
            validate_rejection_reason("   short    ")

    def test_valid_reason_is_stripped(self):
        assert validate_rejection_reason("  Hours not supported by commits  ") == "Hours not supported by commits"
