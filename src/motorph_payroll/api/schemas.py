"""Pydantic schemas for API request/response models."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from motorph_payroll.calculators.line_builder import LineItemBuilder
from motorph_payroll.calculators.types import PayrollResult, PayrollRunResult


class ErrorResponse(BaseModel):
    """Error body returned by exception handlers."""

    detail: str
    code: str
    field: str | None = None


class PayslipLineResponse(BaseModel):
    """Schema for an itemized payslip line."""

    line_type: str
    code: str
    amount: Decimal
    quantity: Decimal | None = None
    rate: Decimal | None = None
    explanation: str | None = None
    line_hash: str


class WarningResponse(BaseModel):
    """A caveat on a result computed from partial data."""

    source: str
    message: str


class PayrollResultResponse(BaseModel):
    """Schema for a calculated payroll result."""

    employee_id: int
    period_start: date
    period_end: date
    classification: str
    calculation_id: UUID

    days_worked: int
    total_hours: Decimal
    overtime_hours: Decimal
    late_minutes: Decimal
    undertime_minutes: Decimal
    unpaid_leave_days: int

    monthly_salary: Decimal
    daily_rate: Decimal
    hourly_rate: Decimal

    basic_pay: Decimal
    overtime_pay: Decimal
    gross_pay: Decimal

    rice_subsidy: Decimal
    phone_allowance: Decimal
    clothing_allowance: Decimal
    allowance_total: Decimal

    sss: Decimal
    philhealth: Decimal
    pagibig: Decimal
    tax: Decimal
    late_deduction: Decimal
    undertime_deduction: Decimal
    unpaid_leave_deduction: Decimal
    total_deductions: Decimal

    net_pay: Decimal

    # "computed with caveats" when non-empty
    partial: bool = False
    warnings: list[WarningResponse] = Field(default_factory=list)
    lines: list[PayslipLineResponse] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: PayrollResult) -> PayrollResultResponse:
        return cls(
            employee_id=result.employee_id,
            period_start=result.period.start,
            period_end=result.period.end,
            classification=result.classification.value,
            calculation_id=result.calculation_id,
            days_worked=result.days_worked,
            total_hours=result.total_hours,
            overtime_hours=result.overtime_hours,
            late_minutes=result.late_minutes,
            undertime_minutes=result.undertime_minutes,
            unpaid_leave_days=result.unpaid_leave_days,
            monthly_salary=result.monthly_salary,
            daily_rate=result.daily_rate,
            hourly_rate=result.hourly_rate,
            basic_pay=result.basic_pay,
            overtime_pay=result.overtime_pay,
            gross_pay=result.gross_pay,
            rice_subsidy=result.rice_subsidy,
            phone_allowance=result.phone_allowance,
            clothing_allowance=result.clothing_allowance,
            allowance_total=result.allowance_total,
            sss=result.sss,
            philhealth=result.philhealth,
            pagibig=result.pagibig,
            tax=result.tax,
            late_deduction=result.late_deduction,
            undertime_deduction=result.undertime_deduction,
            unpaid_leave_deduction=result.unpaid_leave_deduction,
            total_deductions=result.total_deductions,
            net_pay=result.net_pay,
            partial=result.has_warnings,
            warnings=[
                WarningResponse(source=w.source, message=w.message) for w in result.warnings
            ],
            lines=[
                PayslipLineResponse(
                    line_type=line.line_type.value,
                    code=line.code,
                    amount=line.amount,
                    quantity=line.quantity,
                    rate=line.rate,
                    explanation=line.explanation,
                    line_hash=LineItemBuilder.compute_line_hash(line),
                )
                for line in result.lines
            ],
        )


class BatchRequest(BaseModel):
    """Schema for calculating several employees over one period."""

    employee_ids: list[int] = Field(min_length=1)
    period_start: date
    period_end: date

    @model_validator(mode="after")
    def check_period(self) -> BatchRequest:
        if self.period_end < self.period_start:
            raise ValueError("period_end cannot be before period_start")
        return self


class BatchResponse(BaseModel):
    """Schema for a batch calculation."""

    period_start: date
    period_end: date
    results: list[PayrollResultResponse]
    errors: dict[int, str]
    total_gross: Decimal
    total_net: Decimal
    error_count: int

    @classmethod
    def from_run(cls, run: PayrollRunResult) -> BatchResponse:
        return cls(
            period_start=run.period.start,
            period_end=run.period.end,
            results=[PayrollResultResponse.from_result(r) for r in run.results.values()],
            errors=run.errors,
            total_gross=run.total_gross,
            total_net=run.total_net,
            error_count=run.error_count,
        )
