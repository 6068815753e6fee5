from dataclasses import dataclass
from typing import Callable

from levsim.numbers import Percent
from levsim.pricing.price_change import TotalPriceChange
from levsim.stats.framework import PriceHistoryStatisticValue


@dataclass(frozen=True)
class MatchingRatioContext:
    """Predicate a descriptor's total returns are tested against."""
    predicate: Callable[[TotalPriceChange], bool]


@dataclass
class MatchingPriceChangeRatio(PriceHistoryStatisticValue):
    """Share of paths whose total return satisfies the context predicate."""
    matching_count: int = 0
    count: int = 0

    requires_context = True

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def from_sample(cls, price_change, descriptor, context=None):
        if context is None:
            raise ValueError(f"MatchingPriceChangeRatio needs a predicate for {descriptor}")
        return cls(matching_count=1 if context.predicate(price_change) else 0, count=1)

    @classmethod
    def reduce(cls, a, b, context=None):
        return cls(matching_count=a.matching_count + b.matching_count, count=a.count + b.count)

    def success_percent(self) -> Percent:
        return Percent.from_decimal(self.matching_count / self.count)

    def failure_percent(self) -> Percent:
        return Percent.from_decimal(1.0 - self.matching_count / self.count)
