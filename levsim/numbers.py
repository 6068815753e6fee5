from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, order=True)
class Percent:
    """
    A dimensionless fractional change stored as a decimal (0.01 = 1%).

    Sequential changes combine with compose()/compose_all(), which multiply
    the implied multipliers. The + operator is plain decimal addition and is
    only correct for same-period contributions (e.g. summing expense drag).
    """
    decimal: float

    @classmethod
    def zero(cls) -> 'Percent':
        return cls(0.0)

    @classmethod
    def from_percent(cls, percentage: float) -> 'Percent':
        return cls(percentage / 100.0)

    @classmethod
    def from_decimal(cls, decimal: float) -> 'Percent':
        return cls(float(decimal))

    @classmethod
    def from_multiplier(cls, multiplier: float) -> 'Percent':
        # A position can lose at most everything
        if multiplier < 0.0:
            return cls(-1.0)
        return cls(multiplier - 1.0)

    def as_multiplier(self) -> float:
        return self.decimal + 1.0

    def as_decimal(self) -> float:
        return self.decimal

    def as_percent(self) -> float:
        return self.decimal * 100.0

    def compose(self, other: 'Percent') -> 'Percent':
        return Percent.from_multiplier(self.as_multiplier() * other.as_multiplier())

    @staticmethod
    def compose_all(percents: Iterable['Percent']) -> 'Percent':
        multiplier = 1.0
        for percent in percents:
            multiplier *= percent.as_multiplier()
        return Percent.from_multiplier(multiplier)

    def __add__(self, other: 'Percent') -> 'Percent':
        return Percent(self.decimal + other.decimal)

    def __sub__(self, other: 'Percent') -> 'Percent':
        return Percent(self.decimal - other.decimal)

    def __mul__(self, other: 'Percent') -> 'Percent':
        return Percent(self.decimal * other.decimal)

    def __neg__(self) -> 'Percent':
        return Percent(-self.decimal)

    def __format__(self, format_spec: str) -> str:
        return f"{format(self.as_percent(), format_spec)}%"

    def __str__(self) -> str:
        return f"{self.as_percent()}%"
