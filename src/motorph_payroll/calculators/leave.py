"""Unpaid leave adjustment."""

from __future__ import annotations

from collections.abc import Iterable

from motorph_payroll.calculators.types import LeaveAdjustment, LeaveRequest, PayPeriod
from motorph_payroll.errors import PartialDataWarning, RepositoryUnavailableError
from motorph_payroll.repositories.protocols import LeaveRepository


def count_unpaid_days(requests: Iterable[LeaveRequest]) -> int:
    """Sum leave days of approved requests whose type is unpaid."""
    return sum(r.leave_days for r in requests if r.is_approved and r.is_unpaid)


class LeaveAdjuster:
    """Reduces approved leave in a period to an unpaid-day count.

    A leave store outage does not fail payroll: the adjustment comes
    back as zero days carrying a PartialDataWarning for the caller to log.
    """

    SOURCE = "leave"

    def __init__(self, leave_repository: LeaveRepository):
        self.leave_repository = leave_repository

    async def adjust(self, employee_id: int, period: PayPeriod) -> LeaveAdjustment:
        try:
            requests = await self.leave_repository.get_approved_by_employee_and_range(
                employee_id, period.start, period.end
            )
        except RepositoryUnavailableError as e:
            return LeaveAdjustment(
                unpaid_days=0,
                warning=PartialDataWarning(
                    source=self.SOURCE,
                    message=f"Leave data unavailable, unpaid leave not deducted ({e})",
                ),
            )

        return LeaveAdjustment(unpaid_days=count_unpaid_days(requests))
