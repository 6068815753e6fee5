"""
Price change value types.

A path is made of DailyPriceChange values; folding a path yields a
TotalPriceChange over its holding period; annualizing a total yields an
AnnualizedPriceChange. The only conversions between them are
TotalPriceChange.annualized_return() and AnnualizedPriceChange.total_return(),
and compose() refuses to mix kinds.
"""

from dataclasses import dataclass
from typing import Iterable

from levsim.numbers import Percent
from levsim.pricing.period import Period


@dataclass(frozen=True, order=True)
class PriceChange:
    percent_change: Percent

    @classmethod
    def from_percent(cls, percent_change: Percent):
        return cls(percent_change)

    @classmethod
    def from_decimal(cls, decimal: float):
        return cls(Percent.from_decimal(decimal))

    @classmethod
    def zero(cls):
        return cls(Percent.zero())

    @classmethod
    def total_loss(cls):
        return cls(Percent.from_percent(-100.0))

    def as_decimal(self) -> float:
        return self.percent_change.as_decimal()

    def compose(self, other: 'PriceChange'):
        if type(other) is not type(self):
            raise TypeError(
                f"Cannot compose {type(self).__name__} with {type(other).__name__}"
            )
        return type(self)(self.percent_change.compose(other.percent_change))

    @classmethod
    def compose_all(cls, price_changes: Iterable['PriceChange']):
        percents = []
        for price_change in price_changes:
            if not isinstance(price_change, cls):
                raise TypeError(
                    f"Cannot compose {type(price_change).__name__} into {cls.__name__}"
                )
            percents.append(price_change.percent_change)
        return cls(Percent.compose_all(percents))

    def __format__(self, format_spec: str) -> str:
        return format(self.percent_change, format_spec)

    def __str__(self) -> str:
        return str(self.percent_change)


@dataclass(frozen=True, order=True)
class DailyPriceChange(PriceChange):
    """Change over a single trading day."""


@dataclass(frozen=True, order=True)
class AnnualizedPriceChange(PriceChange):
    """Per-year equivalent of a total change."""

    def total_return(self, period: Period) -> 'TotalPriceChange':
        multiplier = self.percent_change.as_multiplier() ** period.as_years()
        return TotalPriceChange(Percent.from_multiplier(multiplier))


@dataclass(frozen=True, order=True)
class TotalPriceChange(PriceChange):
    """Compounded change over a whole holding period."""

    def annualized_return(self, period: Period) -> AnnualizedPriceChange:
        if period.as_days() == 0:
            raise ValueError("Cannot annualize a change over a zero-length period")
        multiplier = self.percent_change.as_multiplier() ** (1.0 / period.as_years())
        return AnnualizedPriceChange(Percent.from_multiplier(multiplier))

