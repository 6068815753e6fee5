import numpy as np
from abc import ABC, abstractmethod
from typing import Iterable, Iterator

from levsim.numbers import Percent
from levsim.pricing.expense_ratio import ExpenseRatio
from levsim.pricing.leverage import Leverage
from levsim.pricing.price_change import DailyPriceChange, TotalPriceChange


class PriceHistory:
    """
    Ordered sequence of daily price changes for one simulated path.

    Changes are stored as a float64 array of decimals. add() is the builder
    used while a strategy generates the path; modifiers then rewrite the
    array in place, and total() folds it into one compounded change.
    """

    def __init__(self, decimals: Iterable[float] = ()):
        if not isinstance(decimals, np.ndarray):
            decimals = list(decimals)
        self._decimals = np.array(decimals, dtype=np.float64)
        self._pending = []

    @classmethod
    def from_price_changes(cls, price_changes: Iterable[DailyPriceChange]) -> 'PriceHistory':
        return cls(price_change.as_decimal() for price_change in price_changes)

    @classmethod
    def from_array(cls, decimals: np.ndarray) -> 'PriceHistory':
        return cls(decimals)

    def _flush(self):
        if self._pending:
            self._decimals = np.concatenate([self._decimals, np.asarray(self._pending, dtype=np.float64)])
            self._pending = []

    def add(self, price_change: DailyPriceChange) -> 'PriceHistory':
        self._pending.append(price_change.as_decimal())
        return self

    def as_array(self) -> np.ndarray:
        """Read-only view of the decimals."""
        self._flush()
        view = self._decimals.view()
        view.flags.writeable = False
        return view

    def copy(self) -> 'PriceHistory':
        self._flush()
        return PriceHistory(self._decimals)

    def apply_modifier(self, modifier: 'PriceHistoryModifier') -> 'PriceHistory':
        """Rewrite every change in place, skipping modifiers that are no-ops."""
        if modifier.needed():
            self._flush()
            self._decimals = modifier.modify_array(self._decimals)
        return self

    def total(self) -> TotalPriceChange:
        """
        Compound every change in encounter order.

        multiply.accumulate runs strictly left to right, which keeps the
        result bit-identical to a sequential fold.
        """
        self._flush()
        if len(self._decimals) == 0:
            return TotalPriceChange.zero()
        multiplier = float(np.multiply.accumulate(self._decimals + 1.0)[-1])
        return TotalPriceChange(Percent.from_multiplier(multiplier))

    def __len__(self) -> int:
        return len(self._decimals) + len(self._pending)

    def __iter__(self) -> Iterator[DailyPriceChange]:
        self._flush()
        for decimal in self._decimals:
            yield DailyPriceChange.from_decimal(float(decimal))

    def __getitem__(self, index):
        self._flush()
        if isinstance(index, slice):
            return PriceHistory(self._decimals[index])
        return DailyPriceChange.from_decimal(float(self._decimals[index]))

    def __str__(self) -> str:
        return "[" + ", ".join(str(price_change) for price_change in self) + "]"

    def __repr__(self) -> str:
        return f"PriceHistory(days={len(self)})"


# ============================================================================
# MODIFIERS
# ============================================================================

class PriceHistoryModifier(ABC):
    """One transformation step applied to every change of a path."""

    @abstractmethod
    def modify(self, price_change: DailyPriceChange) -> DailyPriceChange:
        ...

    @abstractmethod
    def modify_array(self, decimals: np.ndarray) -> np.ndarray:
        ...

    @abstractmethod
    def needed(self) -> bool:
        ...


class LeverageModifier(PriceHistoryModifier):
    """
    Scale each daily change by the leverage factor.

    This is the simple daily-multiple model of a leveraged fund: it does not
    model borrowing cost or rebalancing error beyond what compounding the
    scaled daily changes produces.
    """

    def __init__(self, leverage: Leverage):
        self.leverage = leverage

    def modify(self, price_change: DailyPriceChange) -> DailyPriceChange:
        return DailyPriceChange.from_decimal(self.leverage.amount * price_change.as_decimal())

    def modify_array(self, decimals: np.ndarray) -> np.ndarray:
        return self.leverage.amount * decimals

    def needed(self) -> bool:
        return not self.leverage.is_identity()

    def __repr__(self):
        return f"LeverageModifier({self.leverage!r})"


class ExpenseRatioModifier(PriceHistoryModifier):
    """Compose each daily change with the daily expense drag."""

    def __init__(self, expense_ratio: ExpenseRatio):
        self.expense_ratio = expense_ratio

    def modify(self, price_change: DailyPriceChange) -> DailyPriceChange:
        return DailyPriceChange(price_change.percent_change.compose(self.expense_ratio.amount))

    def modify_array(self, decimals: np.ndarray) -> np.ndarray:
        multipliers = (decimals + 1.0) * self.expense_ratio.amount.as_multiplier()
        # same clamp as Percent.from_multiplier
        return np.where(multipliers < 0.0, -1.0, multipliers - 1.0)

    def needed(self) -> bool:
        return abs(self.expense_ratio.amount.as_decimal()) > np.finfo(np.float64).eps

    def __repr__(self):
        return f"ExpenseRatioModifier({self.expense_ratio.amount})"


def leverage_modifier(leverage: Leverage) -> LeverageModifier:
    return LeverageModifier(leverage)


def expense_ratio_modifier(expense_ratio: ExpenseRatio) -> ExpenseRatioModifier:
    return ExpenseRatioModifier(expense_ratio)
