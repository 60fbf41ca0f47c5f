"""Tests for unpaid leave adjustment."""

from datetime import date

import pytest

from motorph_payroll.calculators.leave import LeaveAdjuster, count_unpaid_days
from motorph_payroll.calculators.types import LeaveRequest, PayPeriod
from motorph_payroll.errors import ValidationError
from motorph_payroll.repositories import MemoryLeaveRepository

JUNE = PayPeriod(date(2024, 6, 1), date(2024, 6, 30))


class TestLeaveRequest:
    """LeaveRequest defaults and predicates."""

    def test_leave_days_default_to_inclusive_range(self):
        request = LeaveRequest(1, "Unpaid", "Approved", date(2024, 6, 3), date(2024, 6, 5))
        assert request.leave_days == 3

    def test_explicit_leave_days_kept(self):
        request = LeaveRequest(
            1, "Unpaid", "Approved", date(2024, 6, 3), date(2024, 6, 5), leave_days=1
        )
        assert request.leave_days == 1

    def test_predicates_ignore_case(self):
        request = LeaveRequest(1, " unpaid ", "APPROVED", date(2024, 6, 3), date(2024, 6, 3))
        assert request.is_unpaid
        assert request.is_approved

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            LeaveRequest(1, "Unpaid", "Approved", date(2024, 6, 5), date(2024, 6, 3))


class TestCountUnpaidDays:
    """Only approved unpaid leave counts."""

    def test_mixed_requests(self):
        requests = [
            LeaveRequest(1, "Unpaid", "Approved", date(2024, 6, 3), date(2024, 6, 4)),
            LeaveRequest(1, "Sick", "Approved", date(2024, 6, 10), date(2024, 6, 10)),
            LeaveRequest(1, "Unpaid", "Pending", date(2024, 6, 12), date(2024, 6, 14)),
            LeaveRequest(1, "Unpaid", "Approved", date(2024, 6, 20), date(2024, 6, 20)),
        ]
        assert count_unpaid_days(requests) == 3

    def test_empty(self):
        assert count_unpaid_days([]) == 0


class TestLeaveAdjuster:
    """Repository-backed adjustment."""

    async def test_adjust(self):
        repo = MemoryLeaveRepository(
            [LeaveRequest(1, "Unpaid", "Approved", date(2024, 6, 3), date(2024, 6, 4))]
        )
        adjustment = await LeaveAdjuster(repo).adjust(1, JUNE)

        assert adjustment.unpaid_days == 2
        assert not adjustment.degraded

    async def test_other_periods_ignored(self):
        repo = MemoryLeaveRepository(
            [LeaveRequest(1, "Unpaid", "Approved", date(2024, 7, 3), date(2024, 7, 4))]
        )
        adjustment = await LeaveAdjuster(repo).adjust(1, JUNE)

        assert adjustment.unpaid_days == 0

    async def test_overlapping_request_not_clipped(self):
        """A request straddling the period counts all of its days."""
        repo = MemoryLeaveRepository(
            [LeaveRequest(1, "Unpaid", "Approved", date(2024, 5, 30), date(2024, 6, 2))]
        )
        adjustment = await LeaveAdjuster(repo).adjust(1, JUNE)

        assert adjustment.unpaid_days == 4

    async def test_outage_returns_warning(self):
        repo = MemoryLeaveRepository()
        repo.available = False

        adjustment = await LeaveAdjuster(repo).adjust(1, JUNE)

        assert adjustment.unpaid_days == 0
        assert adjustment.degraded
        assert adjustment.warning.source == "leave"
        assert str(adjustment.warning).startswith("leave: Leave data unavailable")
