"""ORM models for payroll source data."""

from motorph_payroll.models.attendance import AttendanceRecord, LeaveRequestRecord
from motorph_payroll.models.base import Base, TimestampMixin
from motorph_payroll.models.employee import Employee

__all__ = [
    "AttendanceRecord",
    "Base",
    "Employee",
    "LeaveRequestRecord",
    "TimestampMixin",
]
