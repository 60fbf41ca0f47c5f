"""In-memory repositories - dict-backed fakes for tests and demos."""

from __future__ import annotations

from collections import defaultdict
from datetime import date

from motorph_payroll.calculators.types import AttendancePunch, EmployeeProfile, LeaveRequest
from motorph_payroll.errors import RepositoryUnavailableError


class MemoryEmployeeRepository:
    """Dict-backed EmployeeRepository."""

    def __init__(self, profiles: list[EmployeeProfile] | None = None) -> None:
        self._profiles: dict[int, EmployeeProfile] = {}
        for profile in profiles or []:
            self.add(profile)

    def add(self, profile: EmployeeProfile) -> None:
        self._profiles[profile.employee_id] = profile

    async def get_by_id(self, employee_id: int) -> EmployeeProfile | None:
        return self._profiles.get(employee_id)


class MemoryAttendanceRepository:
    """Dict-backed AttendanceRepository."""

    def __init__(self, punches: list[AttendancePunch] | None = None) -> None:
        self._punches: dict[int, list[AttendancePunch]] = defaultdict(list)
        for punch in punches or []:
            self.add(punch)

    def add(self, punch: AttendancePunch) -> None:
        self._punches[punch.employee_id].append(punch)

    async def get_by_employee_and_range(
        self, employee_id: int, start: date, end: date
    ) -> list[AttendancePunch]:
        return sorted(
            (p for p in self._punches.get(employee_id, []) if start <= p.work_date <= end),
            key=lambda p: p.work_date,
        )


class MemoryLeaveRepository:
    """Dict-backed LeaveRepository.

    Set ``available = False`` to simulate a leave store outage.
    """

    def __init__(self, requests: list[LeaveRequest] | None = None) -> None:
        self._requests: dict[int, list[LeaveRequest]] = defaultdict(list)
        self.available = True
        for request in requests or []:
            self.add(request)

    def add(self, request: LeaveRequest) -> None:
        self._requests[request.employee_id].append(request)

    async def get_approved_by_employee_and_range(
        self, employee_id: int, start: date, end: date
    ) -> list[LeaveRequest]:
        if not self.available:
            raise RepositoryUnavailableError("leave", "in-memory store marked unavailable")
        return [
            r
            for r in self._requests.get(employee_id, [])
            if r.is_approved and r.start_date <= end and r.end_date >= start
        ]
