"""Withholding tax using a progressive annual bracket table."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

MONTHS_PER_YEAR = Decimal("12")


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for progressive taxation.

    Covers annual salaries in (min_amount, max_amount]. Tax within the
    bracket is ``flat_amount + (salary - min_amount) * rate``.
    """

    min_amount: Decimal
    max_amount: Decimal | None  # None = no upper limit
    rate: Decimal  # As decimal, e.g., 0.20 for 20%
    flat_amount: Decimal = Decimal("0")  # Tax accumulated below min_amount

    def contains(self, annual_salary: Decimal) -> bool:
        if annual_salary <= self.min_amount:
            return False
        return self.max_amount is None or annual_salary <= self.max_amount

    def tax_for(self, annual_salary: Decimal) -> Decimal:
        return self.flat_amount + (annual_salary - self.min_amount) * self.rate


ANNUAL_TAX_BRACKETS: tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"), Decimal("250000"), Decimal("0")),
    TaxBracket(Decimal("250000"), Decimal("400000"), Decimal("0.15")),
    TaxBracket(Decimal("400000"), Decimal("800000"), Decimal("0.20"), Decimal("22500")),
    TaxBracket(Decimal("800000"), Decimal("2000000"), Decimal("0.25"), Decimal("102500")),
    TaxBracket(Decimal("2000000"), Decimal("8000000"), Decimal("0.30"), Decimal("402500")),
    TaxBracket(Decimal("8000000"), None, Decimal("0.35"), Decimal("2202500")),
)


class TaxSchedule:
    """Computes monthly withholding tax from a monthly basic salary.

    The monthly salary is annualized, taxed against the bracket table
    and the annual tax spread evenly over twelve months. Each bracket's
    flat amount equals the tax at its lower bound, so the schedule has
    no cliffs at bracket boundaries.
    """

    def __init__(self, brackets: tuple[TaxBracket, ...] = ANNUAL_TAX_BRACKETS):
        self.brackets = tuple(sorted(brackets, key=lambda b: b.min_amount))

    def annual_tax(self, annual_salary: Decimal) -> Decimal:
        """Unrounded annual tax for an annual salary."""
        if annual_salary <= 0:
            return Decimal("0")
        for bracket in self.brackets:
            if bracket.contains(annual_salary):
                return bracket.tax_for(annual_salary)
        return Decimal("0")

    def monthly_withholding(self, monthly_salary: Decimal) -> Decimal:
        """Monthly withholding rounded to cents."""
        annual = self.annual_tax(monthly_salary * MONTHS_PER_YEAR)
        return (annual / MONTHS_PER_YEAR).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def bracket_for(self, annual_salary: Decimal) -> TaxBracket | None:
        """Bracket that applies to an annual salary (None for zero or less)."""
        for bracket in self.brackets:
            if bracket.contains(annual_salary):
                return bracket
        return None
