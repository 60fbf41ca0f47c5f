"""Employee master data model."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motorph_payroll.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from motorph_payroll.models.attendance import AttendanceRecord, LeaveRequestRecord


class Employee(Base, TimestampMixin):
    """Employee with position salary and fixed monthly allowances."""

    __tablename__ = "employee"

    employee_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    position: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="Regular")
    basic_salary: Mapped[Decimal] = mapped_column(nullable=False)
    rice_subsidy: Mapped[Decimal] = mapped_column(nullable=False, default=0)
    phone_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=0)
    clothing_allowance: Mapped[Decimal] = mapped_column(nullable=False, default=0)

    # Relationships
    attendance: Mapped[list[AttendanceRecord]] = relationship(back_populates="employee")
    leave_requests: Mapped[list[LeaveRequestRecord]] = relationship(back_populates="employee")

    __table_args__ = (
        CheckConstraint(
            "status IN ('Regular', 'Probationary', 'Contractual')",
            name="status_check",
        ),
        CheckConstraint("basic_salary >= 0", name="salary_check"),
        CheckConstraint(
            "rice_subsidy >= 0 AND phone_allowance >= 0 AND clothing_allowance >= 0",
            name="allowance_check",
        ),
    )

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"
