import math
from functools import total_ordering

from levsim.errors import InvalidConstructionError

# Fixed point of 3 decimal places
FIXED_POINT_MULTIPLIER = 1000.0


@total_ordering
class Leverage:
    """
    Non-negative daily leverage multiplier (2.0 = 2x).

    Comparison and hashing use the amount rounded to 3 decimal places,
    halves rounding up, so Leverage(0.1 + 0.2) == Leverage(0.3) and
    Leverage(0.0025) == Leverage(0.003).
    """

    __slots__ = ('_amount', '_comparable_amount')

    def __init__(self, amount: float):
        if amount < 0.0:
            raise InvalidConstructionError(f"Invalid leverage amount: {amount}")
        self._amount = float(amount)
        self._comparable_amount = int(math.floor(amount * FIXED_POINT_MULTIPLIER + 0.5))

    @property
    def amount(self) -> float:
        return self._amount

    def is_identity(self) -> bool:
        return self._comparable_amount == int(FIXED_POINT_MULTIPLIER)

    def __eq__(self, other):
        if not isinstance(other, Leverage):
            return NotImplemented
        return self._comparable_amount == other._comparable_amount

    def __lt__(self, other):
        if not isinstance(other, Leverage):
            return NotImplemented
        return self._comparable_amount < other._comparable_amount

    def __hash__(self):
        return hash(self._comparable_amount)

    def __repr__(self):
        return f"Leverage({self._amount:g})"

    def __str__(self):
        return f"{self._amount:.1f}x"
