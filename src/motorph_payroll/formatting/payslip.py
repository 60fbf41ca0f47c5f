"""Payslip rendering for calculated payroll results."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from motorph_payroll.calculators.types import EmployeeProfile, PayrollResult
from motorph_payroll.config import Settings, get_settings

WIDTH = 60


@dataclass(frozen=True)
class Payslip:
    """Display-ready payslip for one employee and period."""

    payslip_no: str
    employee_id: int
    employee_name: str
    position: str
    classification: str
    period_start: date
    period_end: date
    company_name: str
    company_address: str

    # Earnings
    monthly_rate: Decimal
    daily_rate: Decimal
    days_worked: int
    overtime: Decimal
    gross_income: Decimal

    # Benefits
    rice_subsidy: Decimal
    phone_allowance: Decimal
    clothing_allowance: Decimal
    total_benefits: Decimal

    # Deductions
    sss: Decimal
    philhealth: Decimal
    pagibig: Decimal
    withholding_tax: Decimal
    late: Decimal
    undertime: Decimal
    unpaid_leave: Decimal
    total_deductions: Decimal

    take_home_pay: Decimal
    notes: tuple[str, ...] = ()


def format_amount(amount: Decimal) -> str:
    """Format a peso amount with thousands separators."""
    return f"PHP {amount:,.2f}"


def payslip_number(result: PayrollResult) -> str:
    """Deterministic payslip number: PS-<period end>-<employee id>."""
    return f"PS-{result.period.end:%Y%m%d}-{result.employee_id}"


class PayslipFormatter:
    """Turns a PayrollResult into a payslip, plain text or CSV."""

    CSV_HEADER = [
        "Payslip No",
        "Employee ID",
        "Employee Name",
        "Period Start",
        "Period End",
        "Days Worked",
        "Gross Income",
        "Total Benefits",
        "Total Deductions",
        "Take Home Pay",
    ]

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def build(self, result: PayrollResult, profile: EmployeeProfile | None = None) -> Payslip:
        """Combine a result with profile details into a Payslip.

        The profile defaults to the one the result was computed from.
        """
        profile = profile or result.profile
        return Payslip(
            payslip_no=payslip_number(result),
            employee_id=result.employee_id,
            employee_name=profile.full_name if profile else "",
            position=profile.position if profile else "",
            classification=result.classification.value,
            period_start=result.period.start,
            period_end=result.period.end,
            company_name=self.settings.company_name,
            company_address=self.settings.company_address,
            monthly_rate=result.monthly_salary,
            daily_rate=result.daily_rate,
            days_worked=result.days_worked,
            overtime=result.overtime_pay,
            gross_income=result.gross_pay,
            rice_subsidy=result.rice_subsidy,
            phone_allowance=result.phone_allowance,
            clothing_allowance=result.clothing_allowance,
            total_benefits=result.allowance_total,
            sss=result.sss,
            philhealth=result.philhealth,
            pagibig=result.pagibig,
            withholding_tax=result.tax,
            late=result.late_deduction,
            undertime=result.undertime_deduction,
            unpaid_leave=result.unpaid_leave_deduction,
            total_deductions=result.total_deductions,
            take_home_pay=result.net_pay,
            notes=tuple(str(w) for w in result.warnings),
        )

    def render_text(self, payslip: Payslip) -> str:
        """Render a fixed-width plain text payslip."""
        rows: list[str] = [
            payslip.company_name.center(WIDTH),
            payslip.company_address.center(WIDTH),
            "EMPLOYEE PAYSLIP".center(WIDTH),
            "=" * WIDTH,
            _pair("Payslip No", payslip.payslip_no),
            _pair("Employee ID", str(payslip.employee_id)),
        ]
        if payslip.employee_name:
            rows.append(_pair("Employee Name", payslip.employee_name))
        if payslip.position:
            rows.append(_pair("Position", payslip.position))
        rows += [
            _pair("Classification", payslip.classification),
            _pair(
                "Pay Period",
                f"{payslip.period_start:%b %d, %Y} - {payslip.period_end:%b %d, %Y}",
            ),
            "-" * WIDTH,
            "EARNINGS",
            _pair("Monthly Rate", format_amount(payslip.monthly_rate)),
            _pair("Daily Rate", format_amount(payslip.daily_rate)),
            _pair("Days Worked", str(payslip.days_worked)),
            _pair("Overtime", format_amount(payslip.overtime)),
            _pair("GROSS INCOME", format_amount(payslip.gross_income)),
            "-" * WIDTH,
            "BENEFITS",
            _pair("Rice Subsidy", format_amount(payslip.rice_subsidy)),
            _pair("Phone Allowance", format_amount(payslip.phone_allowance)),
            _pair("Clothing Allowance", format_amount(payslip.clothing_allowance)),
            _pair("TOTAL BENEFITS", format_amount(payslip.total_benefits)),
            "-" * WIDTH,
            "DEDUCTIONS",
            _pair("Social Security System", format_amount(payslip.sss)),
            _pair("PhilHealth", format_amount(payslip.philhealth)),
            _pair("Pag-IBIG", format_amount(payslip.pagibig)),
            _pair("Withholding Tax", format_amount(payslip.withholding_tax)),
            _pair("Late", format_amount(payslip.late)),
            _pair("Undertime", format_amount(payslip.undertime)),
            _pair("Unpaid Leave", format_amount(payslip.unpaid_leave)),
            _pair("TOTAL DEDUCTIONS", format_amount(payslip.total_deductions)),
            "=" * WIDTH,
            _pair("TAKE HOME PAY", format_amount(payslip.take_home_pay)),
        ]
        for note in payslip.notes:
            rows.append(f"Note: {note}")
        return "\n".join(rows) + "\n"

    def to_csv(self, payslips: Iterable[Payslip]) -> str:
        """Export a payslip summary, one row per payslip.

        Returns CSV content as a string.
        """
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(self.CSV_HEADER)
        for p in payslips:
            writer.writerow([
                p.payslip_no,
                p.employee_id,
                p.employee_name,
                p.period_start.isoformat(),
                p.period_end.isoformat(),
                p.days_worked,
                str(p.gross_income),
                str(p.total_benefits),
                str(p.total_deductions),
                str(p.take_home_pay),
            ])
        return output.getvalue()


def _pair(label: str, value: str) -> str:
    return f"{label:<28}{value:>{WIDTH - 28}}"
