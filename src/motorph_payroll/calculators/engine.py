"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from collections.abc import Iterable
from contextlib import nullcontext
from datetime import date
from decimal import Decimal
from typing import Any
from uuid import UUID

from motorph_payroll.calculators.attendance import AttendanceAggregator
from motorph_payroll.calculators.contributions import ContributionSchedule
from motorph_payroll.calculators.leave import LeaveAdjuster
from motorph_payroll.calculators.line_builder import LineItemBuilder
from motorph_payroll.calculators.tax_calculator import TaxSchedule
from motorph_payroll.calculators.types import (
    ZERO,
    AttendancePunch,
    AttendanceSummary,
    DeductionKind,
    EmployeeProfile,
    LeaveAdjustment,
    LineType,
    PayPeriod,
    PayrollResult,
    PayrollRunResult,
    PayslipLine,
    policy_for,
)
from motorph_payroll.config import Settings, get_settings
from motorph_payroll.errors import NotFoundError, PayrollError, ValidationError
from motorph_payroll.repositories.protocols import (
    AttendanceRepository,
    EmployeeRepository,
    LeaveRepository,
)

logger = logging.getLogger(__name__)

STANDARD_WORKING_DAYS_PER_MONTH = Decimal("22")
MINUTES_PER_HOUR = Decimal("60")


class PayrollEngine:
    """Main payroll calculation engine.

    Calculation pipeline (stable order per employee):
    1) Validate employee id and period
    2) Resolve the employee profile
    3) Aggregate attendance over the period
    4) Basic pay = daily rate x days worked (daily rate = monthly / 22)
    5) Overtime pay at the classification's multiplier
    6) Allowances, when the classification is eligible
    7) Government contributions and withholding tax on monthly salary
    8) Late, undertime and unpaid-leave deductions
    9) Net = gross + allowances - total deductions, summed from lines

    The engine holds no state between calls. Collaborator lookups are
    awaited directly so cancellation and timeouts applied by the caller
    propagate unchanged.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leave: LeaveRepository,
        settings: Settings | None = None,
        tax_schedule: TaxSchedule | None = None,
        max_concurrency: int | None = None,
    ):
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.employees = employees
        self.attendance = attendance
        self.settings = settings or get_settings()
        self.aggregator = AttendanceAggregator.from_settings(self.settings)
        self.leave_adjuster = LeaveAdjuster(leave)
        self.tax_schedule = tax_schedule or TaxSchedule()
        self.max_concurrency = max_concurrency

    async def calculate(
        self, employee_id: int, period_start: date, period_end: date
    ) -> PayrollResult:
        """Calculate payroll for one employee over an inclusive period.

        Raises:
            ValidationError: Non-positive id, missing dates or inverted period
            NotFoundError: Employee profile cannot be resolved
        """
        period = self._validate_inputs(employee_id, period_start, period_end)

        profile = await self.employees.get_by_id(employee_id)
        if profile is None:
            raise NotFoundError(employee_id)

        punches = await self.attendance.get_by_employee_and_range(
            employee_id, period.start, period.end
        )
        punches = [
            p for p in punches if p.employee_id == employee_id and period.contains(p.work_date)
        ]
        summary = self.aggregator.aggregate(punches)

        logger.info(
            "Employee %d worked %d days, %s total hours, %s overtime hours",
            employee_id,
            summary.days_worked,
            LineItemBuilder.round_to_cents(summary.total_hours),
            LineItemBuilder.round_to_cents(summary.overtime_hours),
        )

        leave = await self.leave_adjuster.adjust(employee_id, period)
        if leave.warning is not None:
            logger.warning(
                "Payroll for employee %d computed with partial data: %s",
                employee_id,
                leave.warning,
            )

        inputs_fingerprint = self._compute_inputs_fingerprint(profile, punches, leave)
        result = self._build_result(
            profile,
            period,
            summary,
            leave,
            calculation_id=self._generate_calculation_id(employee_id, period, inputs_fingerprint),
            inputs_fingerprint=inputs_fingerprint,
        )

        if result.net_pay < 0:
            logger.warning(
                "Negative net pay for employee %d: %s", employee_id, result.net_pay
            )
        logger.info(
            "Payroll calculated for employee %d: Net Pay = %s", employee_id, result.net_pay
        )
        return result

    async def calculate_many(
        self, employee_ids: Iterable[int], period_start: date, period_end: date
    ) -> PayrollRunResult:
        """Calculate payroll for several employees concurrently.

        At most ``max_concurrency`` employees are in flight at once (no limit
        when None); repositories sharing one database session need 1.
        Per-employee PayrollErrors are recorded on the run result; anything
        else propagates.
        """
        period = self._validate_period(period_start, period_end)
        ids = list(dict.fromkeys(employee_ids))
        limiter = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency is not None else None
        )

        outcomes = await asyncio.gather(
            *(self._calculate_or_error(eid, period, limiter) for eid in ids)
        )

        run = PayrollRunResult(period=period)
        for employee_id, outcome in zip(ids, outcomes):
            if isinstance(outcome, PayrollResult):
                run.results[employee_id] = outcome
                run.total_gross += outcome.gross_pay
                run.total_net += outcome.net_pay
            else:
                run.errors[employee_id] = outcome

        if run.error_count:
            logger.warning(
                "Payroll run %s..%s finished with %d error(s)",
                period.start,
                period.end,
                run.error_count,
            )
        return run

    async def _calculate_or_error(
        self, employee_id: int, period: PayPeriod, limiter: asyncio.Semaphore | None
    ) -> PayrollResult | str:
        try:
            async with limiter if limiter is not None else nullcontext():
                return await self.calculate(employee_id, period.start, period.end)
        except PayrollError as e:
            logger.warning("Failed to calculate payroll for employee %s: %s", employee_id, e)
            return str(e)

    def _build_result(
        self,
        profile: EmployeeProfile,
        period: PayPeriod,
        summary: AttendanceSummary,
        leave: LeaveAdjustment,
        calculation_id: UUID,
        inputs_fingerprint: str,
    ) -> PayrollResult:
        """Apply the pay rules to resolved inputs. Pure."""
        round_to_cents = LineItemBuilder.round_to_cents
        policy = policy_for(profile.classification)
        salary = profile.monthly_salary

        daily_rate = salary / STANDARD_WORKING_DAYS_PER_MONTH
        hourly_rate = daily_rate / self.settings.hours_per_day

        basic_pay = round_to_cents(daily_rate * summary.days_worked)
        overtime_rate = hourly_rate * policy.overtime_multiplier
        overtime_pay = round_to_cents(overtime_rate * summary.overtime_hours)

        if policy.allowance_eligible:
            rice = round_to_cents(profile.rice_subsidy)
            phone = round_to_cents(profile.phone_allowance)
            clothing = round_to_cents(profile.clothing_allowance)
        else:
            rice = phone = clothing = round_to_cents(ZERO)

        contributions = ContributionSchedule.for_salary(salary)
        sss = contributions.sss if DeductionKind.SSS in policy.deductions else round_to_cents(ZERO)
        philhealth = (
            contributions.philhealth
            if DeductionKind.PHILHEALTH in policy.deductions
            else round_to_cents(ZERO)
        )
        pagibig = (
            contributions.pagibig
            if DeductionKind.PAGIBIG in policy.deductions
            else round_to_cents(ZERO)
        )
        tax = (
            self.tax_schedule.monthly_withholding(salary)
            if DeductionKind.TAX in policy.deductions
            else round_to_cents(ZERO)
        )

        late_deduction = round_to_cents(summary.late_minutes / MINUTES_PER_HOUR * hourly_rate)
        undertime_deduction = round_to_cents(
            summary.undertime_minutes / MINUTES_PER_HOUR * hourly_rate
        )
        unpaid_leave_deduction = round_to_cents(leave.unpaid_days * daily_rate)

        lines = self._build_lines(
            summary=summary,
            leave=leave,
            daily_rate=round_to_cents(daily_rate),
            hourly_rate=round_to_cents(hourly_rate),
            overtime_rate=round_to_cents(overtime_rate),
            amounts={
                "BASIC": basic_pay,
                "OVERTIME": overtime_pay,
                "RICE": rice,
                "PHONE": phone,
                "CLOTHING": clothing,
                "SSS": sss,
                "PHILHEALTH": philhealth,
                "PAGIBIG": pagibig,
                "TAX": tax,
                "LATE": late_deduction,
                "UNDERTIME": undertime_deduction,
                "UNPAID_LEAVE": unpaid_leave_deduction,
            },
        )

        sign_errors = LineItemBuilder.validate_line_signs(lines)
        if sign_errors:
            raise PayrollError("; ".join(sign_errors))

        totals = LineItemBuilder.sum_by_type(lines)
        gross_pay = LineItemBuilder.calculate_gross_from_lines(lines)
        allowance_total = round_to_cents(totals[LineType.ALLOWANCE])
        total_deductions = round_to_cents(
            -(totals[LineType.CONTRIBUTION] + totals[LineType.TAX] + totals[LineType.DEDUCTION])
        )
        net_pay = LineItemBuilder.calculate_net_from_lines(lines)

        return PayrollResult(
            employee_id=profile.employee_id,
            period=period,
            classification=profile.classification,
            calculation_id=calculation_id,
            inputs_fingerprint=inputs_fingerprint,
            days_worked=summary.days_worked,
            total_hours=round_to_cents(summary.total_hours),
            overtime_hours=round_to_cents(summary.overtime_hours),
            late_minutes=round_to_cents(summary.late_minutes),
            undertime_minutes=round_to_cents(summary.undertime_minutes),
            unpaid_leave_days=leave.unpaid_days,
            monthly_salary=round_to_cents(salary),
            daily_rate=round_to_cents(daily_rate),
            hourly_rate=round_to_cents(hourly_rate),
            basic_pay=basic_pay,
            overtime_pay=overtime_pay,
            gross_pay=gross_pay,
            rice_subsidy=rice,
            phone_allowance=phone,
            clothing_allowance=clothing,
            allowance_total=allowance_total,
            sss=sss,
            philhealth=philhealth,
            pagibig=pagibig,
            tax=tax,
            late_deduction=late_deduction,
            undertime_deduction=undertime_deduction,
            unpaid_leave_deduction=unpaid_leave_deduction,
            total_deductions=total_deductions,
            net_pay=net_pay,
            lines=tuple(lines),
            warnings=(leave.warning,) if leave.warning is not None else (),
            profile=profile,
        )

    def _build_lines(
        self,
        summary: AttendanceSummary,
        leave: LeaveAdjustment,
        daily_rate: Decimal,
        hourly_rate: Decimal,
        overtime_rate: Decimal,
        amounts: dict[str, Decimal],
    ) -> list[PayslipLine]:
        """Build itemized lines, skipping zero amounts."""
        candidates = [
            LineItemBuilder.create_earning_line(
                "BASIC",
                amounts["BASIC"],
                quantity=Decimal(summary.days_worked),
                rate=daily_rate,
                explanation=f"Basic pay: {summary.days_worked} days @ {daily_rate}",
            ),
            LineItemBuilder.create_earning_line(
                "OVERTIME",
                amounts["OVERTIME"],
                quantity=LineItemBuilder.round_to_cents(summary.overtime_hours),
                rate=overtime_rate,
                explanation="Overtime pay",
            ),
            LineItemBuilder.create_allowance_line("RICE", amounts["RICE"], "Rice subsidy"),
            LineItemBuilder.create_allowance_line("PHONE", amounts["PHONE"], "Phone allowance"),
            LineItemBuilder.create_allowance_line(
                "CLOTHING", amounts["CLOTHING"], "Clothing allowance"
            ),
            LineItemBuilder.create_contribution_line("SSS", amounts["SSS"], "Social Security System"),
            LineItemBuilder.create_contribution_line("PHILHEALTH", amounts["PHILHEALTH"], "PhilHealth"),
            LineItemBuilder.create_contribution_line("PAGIBIG", amounts["PAGIBIG"], "Pag-IBIG"),
            LineItemBuilder.create_tax_line(amounts["TAX"], "Withholding tax"),
            LineItemBuilder.create_deduction_line(
                "LATE",
                amounts["LATE"],
                quantity=LineItemBuilder.round_to_cents(summary.late_minutes),
                rate=hourly_rate,
                explanation="Late (minutes)",
            ),
            LineItemBuilder.create_deduction_line(
                "UNDERTIME",
                amounts["UNDERTIME"],
                quantity=LineItemBuilder.round_to_cents(summary.undertime_minutes),
                rate=hourly_rate,
                explanation="Undertime (minutes)",
            ),
            LineItemBuilder.create_deduction_line(
                "UNPAID_LEAVE",
                amounts["UNPAID_LEAVE"],
                quantity=Decimal(leave.unpaid_days),
                rate=daily_rate,
                explanation="Unpaid leave (days)",
            ),
        ]
        return [line for line in candidates if line.amount != 0]

    def _validate_inputs(
        self, employee_id: int, period_start: date | None, period_end: date | None
    ) -> PayPeriod:
        if employee_id is None or employee_id <= 0:
            raise ValidationError(f"Invalid employee ID: {employee_id}", field="employee_id")
        return self._validate_period(period_start, period_end)

    def _validate_period(self, period_start: date | None, period_end: date | None) -> PayPeriod:
        if period_start is None or period_end is None:
            raise ValidationError("Period dates cannot be null", field="period")
        return PayPeriod(start=period_start, end=period_end)

    def _generate_calculation_id(
        self, employee_id: int, period: PayPeriod, inputs_fingerprint: str
    ) -> UUID:
        """Generate deterministic calculation ID."""
        data = {
            "employee_id": employee_id,
            "period_start": period.start.isoformat(),
            "period_end": period.end.isoformat(),
            "engine_version": self.settings.engine_version,
            "inputs_fingerprint": inputs_fingerprint,
        }
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])

    def _compute_inputs_fingerprint(
        self,
        profile: EmployeeProfile,
        punches: list[AttendancePunch],
        leave: LeaveAdjustment,
    ) -> str:
        """Compute fingerprint of all inputs used in calculation."""
        inputs_data: dict[str, Any] = {
            "profile": {
                "classification": profile.classification.value,
                "monthly_salary": str(profile.monthly_salary),
                "rice_subsidy": str(profile.rice_subsidy),
                "phone_allowance": str(profile.phone_allowance),
                "clothing_allowance": str(profile.clothing_allowance),
            },
            "punches": sorted(
                [
                    p.work_date.isoformat(),
                    p.time_in.isoformat() if p.time_in else "",
                    p.time_out.isoformat() if p.time_out else "",
                ]
                for p in punches
            ),
            "unpaid_leave_days": leave.unpaid_days,
            "leave_degraded": leave.degraded,
        }
        json_str = json.dumps(inputs_data, sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]
