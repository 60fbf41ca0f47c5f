"""SQLAlchemy-backed repositories.

Rows are mapped to frozen domain records so the engine never sees ORM
objects. SQLAlchemy errors and socket-level failures the driver raises
unwrapped (a refused connection is a plain OSError) both surface as
RepositoryUnavailableError.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from motorph_payroll.calculators.types import (
    AttendancePunch,
    EmployeeProfile,
    EmploymentClassification,
    LeaveRequest,
)
from motorph_payroll.errors import RepositoryUnavailableError
from motorph_payroll.models import AttendanceRecord, Employee, LeaveRequestRecord


def _money(value: Decimal | None) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def employee_to_profile(row: Employee) -> EmployeeProfile:
    """Map an Employee row to an EmployeeProfile."""
    return EmployeeProfile(
        employee_id=row.employee_id,
        monthly_salary=_money(row.basic_salary),
        classification=EmploymentClassification.parse(row.status),
        rice_subsidy=_money(row.rice_subsidy),
        phone_allowance=_money(row.phone_allowance),
        clothing_allowance=_money(row.clothing_allowance),
        first_name=row.first_name,
        last_name=row.last_name,
        position=row.position or "",
    )


class SqlEmployeeRepository:
    """EmployeeRepository over the employee table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, employee_id: int) -> EmployeeProfile | None:
        try:
            row = await self.session.get(Employee, employee_id)
        except (SQLAlchemyError, OSError) as e:
            raise RepositoryUnavailableError("employee", str(e)) from e
        return employee_to_profile(row) if row is not None else None


class SqlAttendanceRepository:
    """AttendanceRepository over the attendance table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_employee_and_range(
        self, employee_id: int, start: date, end: date
    ) -> list[AttendancePunch]:
        try:
            result = await self.session.execute(
                select(AttendanceRecord)
                .where(
                    AttendanceRecord.employee_id == employee_id,
                    AttendanceRecord.work_date >= start,
                    AttendanceRecord.work_date <= end,
                )
                .order_by(AttendanceRecord.work_date)
            )
        except (SQLAlchemyError, OSError) as e:
            raise RepositoryUnavailableError("attendance", str(e)) from e

        return [
            AttendancePunch(
                employee_id=row.employee_id,
                work_date=row.work_date,
                time_in=row.log_in,
                time_out=row.log_out,
            )
            for row in result.scalars().all()
        ]


class SqlLeaveRepository:
    """LeaveRepository over the leave_request table."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_approved_by_employee_and_range(
        self, employee_id: int, start: date, end: date
    ) -> list[LeaveRequest]:
        try:
            result = await self.session.execute(
                select(LeaveRequestRecord)
                .where(
                    LeaveRequestRecord.employee_id == employee_id,
                    LeaveRequestRecord.status == "Approved",
                    LeaveRequestRecord.start_date <= end,
                    LeaveRequestRecord.end_date >= start,
                )
                .order_by(LeaveRequestRecord.start_date)
            )
        except (SQLAlchemyError, OSError) as e:
            raise RepositoryUnavailableError("leave", str(e)) from e

        return [
            LeaveRequest(
                employee_id=row.employee_id,
                leave_type=row.leave_type,
                status=row.status,
                start_date=row.start_date,
                end_date=row.end_date,
                leave_days=row.leave_days,
            )
            for row in result.scalars().all()
        ]
