"""Government contribution schedules (SSS, PhilHealth, Pag-IBIG)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ContributionBracket:
    """One tier of a contribution table.

    Applies to salaries up to and including ``max_salary`` (None = no
    upper limit). The amount is ``flat_amount`` when set, otherwise
    ``salary * rate``, clamped to ``cap`` when set.
    """

    max_salary: Decimal | None
    rate: Decimal = Decimal("0")
    flat_amount: Decimal | None = None
    cap: Decimal | None = None

    def applies_to(self, salary: Decimal) -> bool:
        return self.max_salary is None or salary <= self.max_salary

    def amount_for(self, salary: Decimal) -> Decimal:
        amount = self.flat_amount if self.flat_amount is not None else salary * self.rate
        if self.cap is not None:
            amount = min(amount, self.cap)
        return amount


SSS_TABLE: tuple[ContributionBracket, ...] = (
    ContributionBracket(max_salary=Decimal("3250"), flat_amount=Decimal("135.00")),
    ContributionBracket(max_salary=Decimal("25000"), rate=Decimal("0.045")),
    ContributionBracket(max_salary=None, flat_amount=Decimal("1125.00")),
)

PHILHEALTH_TABLE: tuple[ContributionBracket, ...] = (
    ContributionBracket(max_salary=None, rate=Decimal("0.025"), cap=Decimal("1800.00")),
)

PAGIBIG_TABLE: tuple[ContributionBracket, ...] = (
    ContributionBracket(max_salary=Decimal("1500"), rate=Decimal("0.01")),
    ContributionBracket(max_salary=None, rate=Decimal("0.02"), cap=Decimal("100.00")),
)


def lookup(table: tuple[ContributionBracket, ...], salary: Decimal) -> Decimal:
    """Evaluate an ordered contribution table for a monthly salary."""
    if salary <= 0:
        return Decimal("0.00")
    for bracket in table:
        if bracket.applies_to(salary):
            return bracket.amount_for(salary).quantize(CENTS, rounding=ROUND_HALF_UP)
    raise ValueError("Contribution table has no open-ended final bracket")


@dataclass(frozen=True)
class Contributions:
    """Monthly employee contributions for one salary."""

    sss: Decimal
    philhealth: Decimal
    pagibig: Decimal

    @property
    def total(self) -> Decimal:
        return self.sss + self.philhealth + self.pagibig


class ContributionSchedule:
    """Maps a monthly basic salary to government contribution amounts.

    Each contribution is deterministic and non-decreasing in salary.
    """

    @staticmethod
    def sss(monthly_salary: Decimal) -> Decimal:
        """SSS: flat minimum up to 3,250, 4.5% up to 25,000, flat maximum above."""
        return lookup(SSS_TABLE, monthly_salary)

    @staticmethod
    def philhealth(monthly_salary: Decimal) -> Decimal:
        """PhilHealth: 2.5% capped at 1,800."""
        return lookup(PHILHEALTH_TABLE, monthly_salary)

    @staticmethod
    def pagibig(monthly_salary: Decimal) -> Decimal:
        """Pag-IBIG: 1% up to 1,500, then 2% capped at 100."""
        return lookup(PAGIBIG_TABLE, monthly_salary)

    @classmethod
    def for_salary(cls, monthly_salary: Decimal) -> Contributions:
        return Contributions(
            sss=cls.sss(monthly_salary),
            philhealth=cls.philhealth(monthly_salary),
            pagibig=cls.pagibig(monthly_salary),
        )
