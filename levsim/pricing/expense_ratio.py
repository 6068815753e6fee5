from dataclasses import dataclass

from levsim.numbers import Percent
from levsim.pricing.period import Period


@dataclass(frozen=True)
class ExpenseRatio:
    """
    Per-day cost drag derived from an annualized expense ratio.

    `amount` is already negative: an annual 0.93% over a one-year period
    becomes -(0.0093 / 253) per trading day.
    """
    amount: Percent

    @classmethod
    def from_annual(cls, annual: Percent, period: Period) -> 'ExpenseRatio':
        per_day = -Percent.from_decimal(annual.as_decimal() / period.as_days())
        return cls(amount=per_day)

    @classmethod
    def zero(cls) -> 'ExpenseRatio':
        return cls(amount=Percent.zero())

    def is_zero(self) -> bool:
        return self.amount.as_decimal() == 0.0
