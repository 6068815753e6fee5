import numpy as np
from abc import ABC, abstractmethod
from typing import Iterable, Sequence

from levsim.errors import InvalidConstructionError
from levsim.pricing.price_change import DailyPriceChange
from levsim.pricing.price_history import PriceHistory


class PricingStrategy(ABC):
    """
    Produces one simulated sequence of daily price changes.

    Subclasses decide a single day's change; calculate_price_history()
    drives them day by day and hands each call the history built so far,
    so path-dependent strategies can look back at it.
    """

    @abstractmethod
    def calculate_price_change(self, day_index: int,
                               price_history: PriceHistory) -> DailyPriceChange:
        ...

    def calculate_price_history(self, day_range: Iterable[int]) -> PriceHistory:
        price_history = PriceHistory()
        for day_index in day_range:
            price_history.add(self.calculate_price_change(day_index, price_history))
        return price_history


def _as_pool(price_change_options: Sequence) -> np.ndarray:
    """Copy the historical changes into a decimal array, rejecting empty pools."""
    pool = np.array(
        [option.as_decimal() if hasattr(option, 'as_decimal') else float(option)
         for option in price_change_options],
        dtype=np.float64,
    )
    if len(pool) == 0:
        raise InvalidConstructionError("Pricing strategy needs at least one price change option")
    return pool


class SamplingStrategy(PricingStrategy):
    """
    Draw every day's change uniformly, with replacement, from a fixed pool.

    Each instance owns its numpy Generator. Workers must not share one
    instance; use spawn() or with_seed() to get independent streams.
    """

    def __init__(self, price_change_options: Sequence, rng: np.random.Generator = None):
        self.pool = _as_pool(price_change_options)
        self.rng = rng if rng is not None else np.random.default_rng()

    @classmethod
    def with_seed(cls, price_change_options: Sequence, seed) -> 'SamplingStrategy':
        return cls(price_change_options, rng=np.random.default_rng(seed))

    def spawn(self, n: int):
        """Independent strategies over the same pool, one per worker task."""
        return [SamplingStrategy(self.pool, rng=child) for child in self.rng.spawn(n)]

    def calculate_price_change(self, day_index: int,
                               price_history: PriceHistory) -> DailyPriceChange:
        choice = self.rng.integers(0, len(self.pool))
        return DailyPriceChange.from_decimal(float(self.pool[choice]))

    def calculate_price_history(self, day_range: Iterable[int]) -> PriceHistory:
        # Draws ignore the history, so the whole path can be sampled at once
        n_days = len(day_range) if hasattr(day_range, '__len__') else len(list(day_range))
        choices = self.rng.integers(0, len(self.pool), size=n_days)
        return PriceHistory.from_array(self.pool[choices])

    def __repr__(self):
        return f"SamplingStrategy(pool={len(self.pool)})"


class AlternatingStrategy(PricingStrategy):
    """
    Cycle through the pool in order: day i gets pool[i % len(pool)].

    Deterministic, for debugging and reproducible checks only.
    """

    def __init__(self, price_change_options: Sequence):
        self.pool = _as_pool(price_change_options)

    def spawn(self, n: int):
        return [self] * n

    def calculate_price_change(self, day_index: int,
                               price_history: PriceHistory) -> DailyPriceChange:
        return DailyPriceChange.from_decimal(float(self.pool[day_index % len(self.pool)]))

    def __repr__(self):
        return f"AlternatingStrategy(pool={len(self.pool)})"


STRATEGIES = {
    'sampling': SamplingStrategy,
    'alternating': AlternatingStrategy,
}


def create_pricing_strategy(name: str, price_change_options: Sequence, seed=None) -> PricingStrategy:
    """Build the strategy selected for a run."""
    if name not in STRATEGIES:
        raise InvalidConstructionError(
            f"Unknown pricing strategy '{name}' (expected one of {sorted(STRATEGIES)})"
        )
    if name == 'sampling':
        return SamplingStrategy.with_seed(price_change_options, seed)
    return STRATEGIES[name](price_change_options)
