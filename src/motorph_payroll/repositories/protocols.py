"""Collaborator interfaces consumed by the payroll engine.

Structural typing: any object with matching async methods satisfies a
protocol, so SQL stores, in-memory fakes and test doubles are
interchangeable.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol, runtime_checkable

from motorph_payroll.calculators.types import AttendancePunch, EmployeeProfile, LeaveRequest


@runtime_checkable
class EmployeeRepository(Protocol):
    """Employee master data lookup."""

    async def get_by_id(self, employee_id: int) -> EmployeeProfile | None: ...


@runtime_checkable
class AttendanceRepository(Protocol):
    """Daily attendance punches for an employee over an inclusive range."""

    async def get_by_employee_and_range(
        self, employee_id: int, start: date, end: date
    ) -> list[AttendancePunch]: ...


@runtime_checkable
class LeaveRepository(Protocol):
    """Approved leave requests overlapping an inclusive range."""

    async def get_approved_by_employee_and_range(
        self, employee_id: int, start: date, end: date
    ) -> list[LeaveRequest]: ...
