"""Payroll calculation engine."""

from motorph_payroll.calculators.attendance import AttendanceAggregator
from motorph_payroll.calculators.contributions import ContributionSchedule
from motorph_payroll.calculators.engine import PayrollEngine
from motorph_payroll.calculators.leave import LeaveAdjuster
from motorph_payroll.calculators.line_builder import LineItemBuilder
from motorph_payroll.calculators.tax_calculator import TaxSchedule
from motorph_payroll.calculators.types import PayrollResult, PayrollRunResult

__all__ = [
    "AttendanceAggregator",
    "ContributionSchedule",
    "LeaveAdjuster",
    "LineItemBuilder",
    "PayrollEngine",
    "PayrollResult",
    "PayrollRunResult",
    "TaxSchedule",
]
