from dataclasses import dataclass

from levsim.numbers import Percent
from levsim.pricing.price_change import AnnualizedPriceChange, TotalPriceChange
from levsim.stats.framework import PriceHistoryStatisticValue


@dataclass
class AveragePriceChange(PriceHistoryStatisticValue):
    """Running sums of raw and annualized total returns."""
    price_change_sum: float = 0.0
    annualized_price_change_sum: float = 0.0
    count: int = 0

    @classmethod
    def identity(cls):
        return cls()

    @classmethod
    def from_sample(cls, price_change, descriptor, context=None):
        return cls(
            price_change_sum=price_change.as_decimal(),
            annualized_price_change_sum=price_change.annualized_return(descriptor.period).as_decimal(),
            count=1,
        )

    @classmethod
    def reduce(cls, a, b, context=None):
        return cls(
            price_change_sum=a.price_change_sum + b.price_change_sum,
            annualized_price_change_sum=a.annualized_price_change_sum + b.annualized_price_change_sum,
            count=a.count + b.count,
        )

    def average(self) -> TotalPriceChange:
        return TotalPriceChange(Percent.from_decimal(self.price_change_sum / self.count))

    def annualized_average(self) -> AnnualizedPriceChange:
        return AnnualizedPriceChange(Percent.from_decimal(self.annualized_price_change_sum / self.count))
