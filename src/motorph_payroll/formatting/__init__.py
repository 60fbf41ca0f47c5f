"""Payslip formatting."""

from motorph_payroll.formatting.payslip import Payslip, PayslipFormatter

__all__ = ["Payslip", "PayslipFormatter"]
