from enum import Enum
from functools import total_ordering

from levsim.errors import InvalidConstructionError


TRADING_DAYS_PER_YEAR = 253


class PeriodUnit(Enum):
    DAYS = "days"
    YEARS = "years"


@total_ordering
class Period:
    """
    A holding period stored either as trading days or as whole years.

    Equality, hashing and ordering use the normalized day count, so
    Period.years(1) == Period.days(253).
    """

    __slots__ = ('_count', '_unit')

    def __init__(self, count: int, unit: PeriodUnit = PeriodUnit.DAYS):
        if count < 0:
            raise InvalidConstructionError(f"Invalid period length: {count}")
        self._count = int(count)
        self._unit = unit

    @classmethod
    def days(cls, count: int) -> 'Period':
        return cls(count, PeriodUnit.DAYS)

    @classmethod
    def years(cls, count: int) -> 'Period':
        return cls(count, PeriodUnit.YEARS)

    @property
    def unit(self) -> PeriodUnit:
        return self._unit

    @property
    def count(self) -> int:
        return self._count

    def as_days(self) -> int:
        if self._unit is PeriodUnit.YEARS:
            return self._count * TRADING_DAYS_PER_YEAR
        return self._count

    def as_years(self) -> float:
        if self._unit is PeriodUnit.YEARS:
            return float(self._count)
        return self._count / TRADING_DAYS_PER_YEAR

    def day_range(self) -> range:
        """Day indices 0..as_days()-1, as fed to a pricing strategy."""
        return range(self.as_days())

    def __eq__(self, other):
        if not isinstance(other, Period):
            return NotImplemented
        return self.as_days() == other.as_days()

    def __lt__(self, other):
        if not isinstance(other, Period):
            return NotImplemented
        return self.as_days() < other.as_days()

    def __hash__(self):
        return hash(self.as_days())

    def __repr__(self):
        return f"Period.{self._unit.value}({self._count})"
