import heapq
import math
from typing import Iterable, List

from levsim.numbers import Percent
from levsim.pricing.price_change import PriceChange, TotalPriceChange
from levsim.stats.framework import PriceHistoryStatisticValue


class MedianPriceChange(PriceHistoryStatisticValue):
    """
    Every total return of a descriptor, kept sorted.

    reduce() is a linear ordered merge of two already-sorted sequences, so
    the population is never re-sorted. The order-statistic queries read
    straight off the sorted sequence.
    """

    def __init__(self, decimals: Iterable[float] = ()):
        self._decimals = sorted(decimals)

    @classmethod
    def _from_sorted(cls, decimals: List[float]) -> 'MedianPriceChange':
        median = cls()
        median._decimals = decimals
        return median

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def from_sample(cls, price_change, descriptor, context=None):
        return cls._from_sorted([price_change.as_decimal()])

    @classmethod
    def from_price_changes(cls, price_changes: Iterable[PriceChange]) -> 'MedianPriceChange':
        return cls(price_change.as_decimal() for price_change in price_changes)

    @classmethod
    def reduce(cls, a, b, context=None):
        return cls._from_sorted(list(heapq.merge(a._decimals, b._decimals)))

    @property
    def count(self) -> int:
        return len(self._decimals)

    def sorted_values(self) -> List[TotalPriceChange]:
        return [TotalPriceChange.from_decimal(decimal) for decimal in self._decimals]

    def _require_values(self):
        if not self._decimals:
            raise ValueError("No price changes have been accumulated")

    def min(self) -> TotalPriceChange:
        self._require_values()
        return TotalPriceChange.from_decimal(self._decimals[0])

    def max(self) -> TotalPriceChange:
        self._require_values()
        return TotalPriceChange.from_decimal(self._decimals[-1])

    def median(self) -> TotalPriceChange:
        self._require_values()
        half = self.count // 2
        if self.count % 2 == 1:
            return TotalPriceChange.from_decimal(self._decimals[half])
        return TotalPriceChange.from_decimal((self._decimals[half - 1] + self._decimals[half]) / 2.0)

    def percentile(self, percentile) -> TotalPriceChange:
        """
        Nearest-rank percentile: element floor(p * count), no interpolation.

        p is a Percent or a decimal fraction. A negative p clamps to the
        minimum; p >= 1.0 points past the last element and raises IndexError.
        """
        self._require_values()
        decimal = percentile.as_decimal() if isinstance(percentile, Percent) else float(percentile)
        index = max(0, int(math.floor(decimal * self.count)))
        if index >= self.count:
            raise IndexError(f"Percentile {decimal} out of range for {self.count} values")
        return TotalPriceChange.from_decimal(self._decimals[index])

    def inner_quartile_range(self) -> PriceChange:
        quartile_1 = self.percentile(0.25).percent_change
        quartile_3 = self.percentile(0.75).percent_change
        return PriceChange(quartile_3 - quartile_1)

    def __eq__(self, other):
        if not isinstance(other, MedianPriceChange):
            return NotImplemented
        return self._decimals == other._decimals

    def __repr__(self):
        return f"MedianPriceChange(count={self.count})"
