"""Repositories backing employee, attendance and leave lookups."""

from motorph_payroll.repositories.memory import (
    MemoryAttendanceRepository,
    MemoryEmployeeRepository,
    MemoryLeaveRepository,
)
from motorph_payroll.repositories.protocols import (
    AttendanceRepository,
    EmployeeRepository,
    LeaveRepository,
)
from motorph_payroll.repositories.sql import (
    SqlAttendanceRepository,
    SqlEmployeeRepository,
    SqlLeaveRepository,
)

__all__ = [
    "AttendanceRepository",
    "EmployeeRepository",
    "LeaveRepository",
    "MemoryAttendanceRepository",
    "MemoryEmployeeRepository",
    "MemoryLeaveRepository",
    "SqlAttendanceRepository",
    "SqlEmployeeRepository",
    "SqlLeaveRepository",
]
