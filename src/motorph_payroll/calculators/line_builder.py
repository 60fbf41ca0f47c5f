"""Payslip line items: signs, centavo rounding and totals."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from motorph_payroll.calculators.types import ZERO, LineType, PayslipLine

# +1 adds to take-home pay, -1 takes away from it
LINE_SIGNS: dict[LineType, int] = {
    LineType.EARNING: 1,
    LineType.ALLOWANCE: 1,
    LineType.CONTRIBUTION: -1,
    LineType.TAX: -1,
    LineType.DEDUCTION: -1,
}


class LineItemBuilder:
    """Creates signed payslip lines and totals them.

    Every line amount is rounded half-up to centavos when the line is
    created; intermediate rates keep full Decimal precision. Gross, net
    and deduction totals are sums of rounded lines, so they reconcile
    to the centavo with the itemized payslip.
    """

    CENTAVO = Decimal("0.01")

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        return amount.quantize(LineItemBuilder.CENTAVO, rounding=ROUND_HALF_UP)

    @staticmethod
    def compute_line_hash(line: PayslipLine) -> str:
        """Stable digest of a line's canonical form."""
        payload = json.dumps(line.to_canonical_dict(), sort_keys=True)
        return hashlib.sha256(payload.encode()).hexdigest()[:32]

    @staticmethod
    def _signed(
        line_type: LineType,
        code: str,
        amount: Decimal,
        quantity: Decimal | None = None,
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> PayslipLine:
        magnitude = LineItemBuilder.round_to_cents(abs(amount))
        return PayslipLine(
            line_type=line_type,
            code=code,
            amount=magnitude if LINE_SIGNS[line_type] > 0 else -magnitude,
            quantity=quantity,
            rate=rate,
            explanation=explanation,
        )

    @staticmethod
    def create_earning_line(
        code: str,
        amount: Decimal,
        quantity: Decimal | None = None,
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> PayslipLine:
        """Basic or overtime pay."""
        return LineItemBuilder._signed(LineType.EARNING, code, amount, quantity, rate, explanation)

    @staticmethod
    def create_allowance_line(
        code: str, amount: Decimal, explanation: str | None = None
    ) -> PayslipLine:
        """Rice, phone or clothing allowance."""
        return LineItemBuilder._signed(LineType.ALLOWANCE, code, amount, explanation=explanation)

    @staticmethod
    def create_contribution_line(
        code: str, amount: Decimal, explanation: str | None = None
    ) -> PayslipLine:
        """SSS, PhilHealth or Pag-IBIG employee share."""
        return LineItemBuilder._signed(LineType.CONTRIBUTION, code, amount, explanation=explanation)

    @staticmethod
    def create_tax_line(amount: Decimal, explanation: str | None = None) -> PayslipLine:
        return LineItemBuilder._signed(LineType.TAX, "TAX", amount, explanation=explanation)

    @staticmethod
    def create_deduction_line(
        code: str,
        amount: Decimal,
        quantity: Decimal | None = None,
        rate: Decimal | None = None,
        explanation: str | None = None,
    ) -> PayslipLine:
        """Late, undertime or unpaid leave."""
        return LineItemBuilder._signed(
            LineType.DEDUCTION, code, amount, quantity, rate, explanation
        )

    @staticmethod
    def calculate_net_from_lines(lines: Iterable[PayslipLine]) -> Decimal:
        """Take-home pay: the signed sum of every line."""
        return LineItemBuilder.round_to_cents(sum((line.amount for line in lines), ZERO))

    @staticmethod
    def calculate_gross_from_lines(lines: Iterable[PayslipLine]) -> Decimal:
        """Gross pay: earnings only, allowances are reported separately."""
        earnings = (line.amount for line in lines if line.line_type == LineType.EARNING)
        return LineItemBuilder.round_to_cents(sum(earnings, ZERO))

    @staticmethod
    def validate_line_signs(lines: Iterable[PayslipLine]) -> list[str]:
        """Describe every line whose sign disagrees with its type."""
        problems: list[str] = []
        for index, line in enumerate(lines):
            expected = LINE_SIGNS[line.line_type]
            if line.amount * expected < 0:
                problems.append(
                    f"Line {index} ({line.code}, {line.line_type.value}) has amount "
                    f"{line.amount}, expected {'positive' if expected > 0 else 'negative'}"
                )
        return problems

    @staticmethod
    def sum_by_type(lines: Iterable[PayslipLine]) -> dict[LineType, Decimal]:
        totals = dict.fromkeys(LineType, ZERO)
        for line in lines:
            totals[line.line_type] += line.amount
        return totals
