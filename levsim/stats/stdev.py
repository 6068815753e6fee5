import math
from dataclasses import dataclass

from levsim.numbers import Percent
from levsim.pricing.period import Period
from levsim.pricing.price_change import PriceChange
from levsim.stats.framework import PriceHistoryStatisticValue


@dataclass(frozen=True)
class StandardDeviationContext:
    """Population mean (decimal) of the descriptor, from a first AveragePriceChange pass."""
    average: float

    @classmethod
    def from_average(cls, average: PriceChange) -> 'StandardDeviationContext':
        return cls(average=average.as_decimal())


@dataclass
class StandardDeviationPriceChange(PriceHistoryStatisticValue):
    """Population standard deviation of total returns around a known mean."""
    variance_sum: float = 0.0
    count: int = 0

    requires_context = True

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def from_sample(cls, price_change, descriptor, context=None):
        if context is None:
            raise ValueError(f"StandardDeviationPriceChange needs the mean of {descriptor}")
        diff_from_mean = context.average - price_change.as_decimal()
        return cls(variance_sum=diff_from_mean ** 2, count=1)

    @classmethod
    def reduce(cls, a, b, context=None):
        return cls(variance_sum=a.variance_sum + b.variance_sum, count=a.count + b.count)

    def stdev(self) -> PriceChange:
        return PriceChange(Percent.from_decimal(math.sqrt(self.variance_sum / self.count)))

    def annualized_stdev(self, period: Period) -> PriceChange:
        # TODO: sqrt(years) scaling of a total-return stdev needs a domain review
        decimal = self.stdev().as_decimal() / math.sqrt(period.as_years())
        return PriceChange(Percent.from_decimal(decimal))
