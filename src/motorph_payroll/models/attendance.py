"""Attendance and leave request models."""

from __future__ import annotations

from datetime import date, time
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motorph_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from motorph_payroll.models.employee import Employee


class AttendanceRecord(Base, TimestampMixin):
    """One day's log-in/log-out for an employee."""

    __tablename__ = "attendance"

    attendance_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    log_in: Mapped[time | None] = mapped_column(Time, nullable=True)
    log_out: Mapped[time | None] = mapped_column(Time, nullable=True)

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="attendance")

    __table_args__ = (
        UniqueConstraint("employee_id", "work_date", name="attendance_employee_date_uq"),
        CheckConstraint(
            "log_in IS NULL OR log_out IS NULL OR log_out >= log_in",
            name="times_check",
        ),
    )


class LeaveRequestRecord(Base, TimestampMixin):
    """Leave request with approval status."""

    __tablename__ = "leave_request"

    leave_request_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("employee.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    leave_type: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False, default="Pending")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    leave_days: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="leave_requests")

    __table_args__ = (
        CheckConstraint(
            "status IN ('Pending', 'Approved', 'Rejected')",
            name="status_check",
        ),
        CheckConstraint("end_date >= start_date", name="dates_check"),
    )
