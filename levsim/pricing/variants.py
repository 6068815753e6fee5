from dataclasses import dataclass
from typing import List, Tuple

from levsim.pricing.expense_ratio import ExpenseRatio
from levsim.pricing.leverage import Leverage
from levsim.pricing.period import Period
from levsim.pricing.price_change import TotalPriceChange
from levsim.pricing.price_history import (
    PriceHistory, leverage_modifier, expense_ratio_modifier
)


@dataclass(frozen=True, order=True)
class PriceHistoryDescriptor:
    """Key of one (leverage, holding period) result bucket."""
    leverage: Leverage
    period: Period

    def __str__(self):
        return f"{self.leverage} / {self.period.as_years():.1f}Y"


def expense_ratio_for_leverage(leverage: Leverage, study_config=None) -> ExpenseRatio:
    """
    Expense ratio charged at a given leverage.

    Unleveraged and de-leveraged positions are free; anything above the
    threshold pays the leveraged-product annual ratio spread over one
    trading year.
    """
    if study_config is None:
        from levsim.config import get_study_config
        study_config = get_study_config()

    if leverage.amount > study_config.expense_leverage_threshold:
        return ExpenseRatio.from_annual(study_config.leveraged_expense_ratio, Period.years(1))
    return ExpenseRatio.zero()


class PriceHistoryVariants:
    """
    Total return of one simulated path at every studied leverage.

    descriptors[i] and total_price_changes[i] are aligned by index and all
    descriptors share the same period.
    """

    __slots__ = ('_descriptors', '_total_price_changes')

    def __init__(self, descriptors: List[PriceHistoryDescriptor],
                 total_price_changes: List[TotalPriceChange]):
        if len(descriptors) != len(total_price_changes):
            raise ValueError(
                f"{len(descriptors)} descriptors for {len(total_price_changes)} price changes"
            )
        self._descriptors = tuple(descriptors)
        self._total_price_changes = tuple(total_price_changes)

    @classmethod
    def from_price_history(cls, price_history: PriceHistory, period: Period,
                           study_config=None) -> 'PriceHistoryVariants':
        if study_config is None:
            from levsim.config import get_study_config
            study_config = get_study_config()

        descriptors = []
        totals = []
        for leverage in study_config.leverage_amounts:
            expense_ratio = expense_ratio_for_leverage(leverage, study_config)
            variant = (
                price_history.copy()
                .apply_modifier(leverage_modifier(leverage))
                .apply_modifier(expense_ratio_modifier(expense_ratio))
            )
            descriptors.append(PriceHistoryDescriptor(leverage, period))
            totals.append(variant.total())

        return cls(descriptors, totals)

    @property
    def descriptors(self) -> Tuple[PriceHistoryDescriptor, ...]:
        return self._descriptors

    @property
    def total_price_changes(self) -> Tuple[TotalPriceChange, ...]:
        return self._total_price_changes

    def __len__(self):
        return len(self._descriptors)

    def items(self):
        return zip(self._descriptors, self._total_price_changes)

