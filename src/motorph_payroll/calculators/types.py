"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from motorph_payroll.errors import PartialDataWarning, ValidationError

ZERO = Decimal("0")


class EmploymentClassification(str, Enum):
    """Employment classifications recognised by payroll."""

    REGULAR = "Regular"
    PROBATIONARY = "Probationary"
    CONTRACTUAL = "Contractual"

    @classmethod
    def parse(cls, value: str) -> EmploymentClassification:
        """Parse a stored classification, ignoring case and surrounding space."""
        normalized = value.strip().lower()
        for member in cls:
            if member.value.lower() == normalized:
                return member
        raise ValidationError(
            f"Unknown employment classification: {value!r}", field="classification"
        )


class DeductionKind(str, Enum):
    """Government deductions that a classification may be subject to."""

    SSS = "SSS"
    PHILHEALTH = "PHILHEALTH"
    PAGIBIG = "PAGIBIG"
    TAX = "TAX"


class LineType(str, Enum):
    """Payslip line item types."""

    EARNING = "EARNING"
    ALLOWANCE = "ALLOWANCE"
    CONTRIBUTION = "CONTRIBUTION"
    TAX = "TAX"
    DEDUCTION = "DEDUCTION"


@dataclass(frozen=True)
class ClassificationPolicy:
    """Pay rules that vary by employment classification."""

    overtime_multiplier: Decimal
    allowance_eligible: bool
    deductions: frozenset[DeductionKind]


FULL_DEDUCTIONS = frozenset(DeductionKind)

CLASSIFICATION_POLICIES: dict[EmploymentClassification, ClassificationPolicy] = {
    EmploymentClassification.REGULAR: ClassificationPolicy(
        overtime_multiplier=Decimal("1.25"),
        allowance_eligible=True,
        deductions=FULL_DEDUCTIONS,
    ),
    EmploymentClassification.PROBATIONARY: ClassificationPolicy(
        overtime_multiplier=Decimal("1.15"),
        allowance_eligible=True,
        deductions=FULL_DEDUCTIONS,
    ),
    # Contractuals are paid for days worked only
    EmploymentClassification.CONTRACTUAL: ClassificationPolicy(
        overtime_multiplier=ZERO,
        allowance_eligible=False,
        deductions=frozenset({DeductionKind.SSS, DeductionKind.PHILHEALTH}),
    ),
}


def policy_for(classification: EmploymentClassification) -> ClassificationPolicy:
    """Look up the pay policy for a classification."""
    return CLASSIFICATION_POLICIES[classification]


@dataclass(frozen=True)
class EmployeeProfile:
    """Employee master data, read-only to the engine."""

    employee_id: int
    monthly_salary: Decimal
    classification: EmploymentClassification
    rice_subsidy: Decimal = ZERO
    phone_allowance: Decimal = ZERO
    clothing_allowance: Decimal = ZERO
    first_name: str = ""
    last_name: str = ""
    position: str = ""

    def __post_init__(self) -> None:
        for name in ("monthly_salary", "rice_subsidy", "phone_allowance", "clothing_allowance"):
            if getattr(self, name) < 0:
                raise ValidationError(f"{name} cannot be negative", field=name)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def allowance_total(self) -> Decimal:
        return self.rice_subsidy + self.phone_allowance + self.clothing_allowance


@dataclass(frozen=True)
class AttendancePunch:
    """One day's time-in/time-out record.

    A punch spanning midnight is not modeled: when both times are
    present, time-out must not precede time-in.
    """

    employee_id: int
    work_date: date
    time_in: time | None = None
    time_out: time | None = None

    def __post_init__(self) -> None:
        if (
            self.time_in is not None
            and self.time_out is not None
            and self.time_out < self.time_in
        ):
            raise ValidationError(
                f"Time-out {self.time_out} precedes time-in {self.time_in} "
                f"on {self.work_date}",
                field="time_out",
            )

    @property
    def worked_hours(self) -> Decimal:
        """Hours between time-in and time-out (0 if either is missing)."""
        if self.time_in is None or self.time_out is None:
            return ZERO
        return minutes_between(self.time_in, self.time_out) / 60


def minutes_between(start: time, end: time) -> Decimal:
    """Minutes from start to end on the same day."""
    delta = datetime.combine(date.min, end) - datetime.combine(date.min, start)
    return Decimal(int(delta.total_seconds())) / 60


@dataclass(frozen=True)
class LeaveRequest:
    """A leave request for one employee over an inclusive date range."""

    employee_id: int
    leave_type: str
    status: str
    start_date: date
    end_date: date
    leave_days: int | None = None

    def __post_init__(self) -> None:
        if self.end_date < self.start_date:
            raise ValidationError("Leave end date cannot be before start date", field="end_date")
        if self.leave_days is None:
            object.__setattr__(self, "leave_days", (self.end_date - self.start_date).days + 1)

    @property
    def is_approved(self) -> bool:
        return self.status.strip().lower() == "approved"

    @property
    def is_unpaid(self) -> bool:
        return self.leave_type.strip().lower() == "unpaid"


@dataclass(frozen=True)
class PayPeriod:
    """Inclusive pay period."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start is None or self.end is None:
            raise ValidationError("Period dates cannot be null", field="period")
        if self.end < self.start:
            raise ValidationError("Period end cannot be before period start", field="period_end")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class AttendanceSummary:
    """Attendance for one employee reduced over a period."""

    days_worked: int = 0
    total_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO
    late_minutes: Decimal = ZERO
    undertime_minutes: Decimal = ZERO


@dataclass(frozen=True)
class LeaveAdjustment:
    """Unpaid leave days, or zero with a warning when leave data was unavailable."""

    unpaid_days: int = 0
    warning: PartialDataWarning | None = None

    @property
    def degraded(self) -> bool:
        return self.warning is not None


@dataclass(frozen=True)
class PayslipLine:
    """An itemized payslip line (signed per conventions in LineItemBuilder)."""

    line_type: LineType
    code: str
    amount: Decimal
    quantity: Decimal | None = None
    rate: Decimal | None = None
    explanation: str | None = None

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "line_type": self.line_type.value,
            "code": self.code,
            "quantity": str(self.quantity) if self.quantity is not None else None,
            "rate": str(self.rate) if self.rate is not None else None,
            "amount": str(self.amount),
        }


@dataclass(frozen=True)
class PayrollResult:
    """Payroll for one employee and one period. Never mutated."""

    employee_id: int
    period: PayPeriod
    classification: EmploymentClassification
    calculation_id: UUID
    inputs_fingerprint: str

    # Attendance
    days_worked: int
    total_hours: Decimal
    overtime_hours: Decimal
    late_minutes: Decimal
    undertime_minutes: Decimal
    unpaid_leave_days: int

    # Rates
    monthly_salary: Decimal
    daily_rate: Decimal
    hourly_rate: Decimal

    # Earnings
    basic_pay: Decimal
    overtime_pay: Decimal
    gross_pay: Decimal

    # Allowances
    rice_subsidy: Decimal
    phone_allowance: Decimal
    clothing_allowance: Decimal
    allowance_total: Decimal

    # Deductions
    sss: Decimal
    philhealth: Decimal
    pagibig: Decimal
    tax: Decimal
    late_deduction: Decimal
    undertime_deduction: Decimal
    unpaid_leave_deduction: Decimal
    total_deductions: Decimal

    net_pay: Decimal

    lines: tuple[PayslipLine, ...] = ()
    warnings: tuple[PartialDataWarning, ...] = ()
    # Profile the result was computed from, for payslip headers
    profile: EmployeeProfile | None = None

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def government_contributions(self) -> Decimal:
        return self.sss + self.philhealth + self.pagibig

    @property
    def attendance_deductions(self) -> Decimal:
        return self.late_deduction + self.undertime_deduction + self.unpaid_leave_deduction


@dataclass
class PayrollRunResult:
    """Result of calculating payroll for several employees over one period."""

    period: PayPeriod
    results: dict[int, PayrollResult] = field(default_factory=dict)
    errors: dict[int, str] = field(default_factory=dict)
    total_gross: Decimal = ZERO
    total_net: Decimal = ZERO

    @property
    def error_count(self) -> int:
        return len(self.errors)
