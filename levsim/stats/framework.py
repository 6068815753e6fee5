"""
Generic map-reduce of per-path total returns into per-descriptor statistics.

Every simulated path contributes one accumulator per descriptor
(PriceHistoryStatisticValue.from_sample). Accumulator sets are then merged
pairwise, descriptor by descriptor, in a balanced tree until one set is
left. Merging relies only on reduce() being associative, so the values
that come out do not depend on worker count or chunking.

Statistics that need a first full pass (standard deviation needs the
mean) take a per-descriptor context mapping, threaded into both
from_sample() and reduce().
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Type

from joblib import Parallel, delayed

from levsim import config as cfg
from levsim.errors import StatisticReductionError
from levsim.pricing.price_change import TotalPriceChange
from levsim.pricing.variants import PriceHistoryDescriptor, PriceHistoryVariants


class PriceHistoryStatisticValue(ABC):
    """
    A mergeable aggregate over total returns.

    identity() is the empty accumulator, from_sample() folds one sample
    into a fresh accumulator and reduce() combines two accumulators.
    Subclasses that need outside information set requires_context and
    receive the descriptor's context value in both from_sample() and reduce().
    """

    requires_context = False

    @classmethod
    @abstractmethod
    def identity(cls):
        ...

    @classmethod
    @abstractmethod
    def from_sample(cls, price_change: TotalPriceChange, descriptor: PriceHistoryDescriptor,
                    context: Any = None):
        ...

    @classmethod
    @abstractmethod
    def reduce(cls, a, b, context: Any = None):
        ...


ContextMap = Optional[Mapping[PriceHistoryDescriptor, Any]]


def _context_for(context: ContextMap, descriptor: PriceHistoryDescriptor):
    if context is None:
        return None
    try:
        return context[descriptor]
    except KeyError:
        raise KeyError(f"No statistic context for descriptor {descriptor}") from None


class PriceHistoryStatistic:
    """One accumulator per descriptor, aligned by index."""

    __slots__ = ('stat_cls', 'descriptors', 'values')

    def __init__(self, stat_cls: Type[PriceHistoryStatisticValue],
                 descriptors: Sequence[PriceHistoryDescriptor], values: List[Any]):
        self.stat_cls = stat_cls
        self.descriptors = tuple(descriptors)
        self.values = values

    @property
    def depth(self) -> int:
        return len(self.descriptors)

    @classmethod
    def from_variants(cls, stat_cls: Type[PriceHistoryStatisticValue],
                      variants: PriceHistoryVariants, context: ContextMap = None) -> 'PriceHistoryStatistic':
        values = [
            stat_cls.from_sample(price_change, descriptor, _context_for(context, descriptor))
            for descriptor, price_change in variants.items()
        ]
        return cls(stat_cls, variants.descriptors, values)

    @classmethod
    def identity(cls, stat_cls: Type[PriceHistoryStatisticValue],
                 descriptors: Sequence[PriceHistoryDescriptor]) -> 'PriceHistoryStatistic':
        return cls(stat_cls, descriptors, [stat_cls.identity() for _ in descriptors])

    def merge(self, other: 'PriceHistoryStatistic', context: ContextMap = None) -> 'PriceHistoryStatistic':
        if self.descriptors != other.descriptors:
            raise StatisticReductionError(
                f"Cannot merge {self.stat_cls.__name__} sets with different descriptors: "
                f"{self.depth} vs {other.depth} entries, first mismatch at "
                f"{_first_mismatch(self.descriptors, other.descriptors)}"
            )
        reduce = self.stat_cls.reduce
        values = [
            reduce(value_a, value_b, _context_for(context, descriptor))
            for descriptor, value_a, value_b in zip(self.descriptors, self.values, other.values)
        ]
        return PriceHistoryStatistic(self.stat_cls, self.descriptors, values)


def _first_mismatch(a: Tuple, b: Tuple):
    for i, (left, right) in enumerate(zip(a, b)):
        if left != right:
            return f"index {i} ({left} != {right})"
    return f"index {min(len(a), len(b))} (length differs)"


@dataclass(frozen=True)
class ComputedStatistic:
    descriptor: PriceHistoryDescriptor
    statistic: Any


def tree_reduce(items: List[Any], merge: Callable[[Any, Any], Any]):
    """Merge adjacent pairs level by level until one item is left."""
    if not items:
        raise ValueError("Cannot reduce an empty sequence")
    level = list(items)
    while len(level) > 1:
        merged = [merge(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            merged.append(level[-1])
        level = merged
    return level[0]


def _reduce_chunk(stat_cls, variants: Sequence[PriceHistoryVariants], context: ContextMap):
    statistics = [PriceHistoryStatistic.from_variants(stat_cls, variant, context) for variant in variants]
    return tree_reduce(statistics, lambda a, b: a.merge(b, context))


def calculate_statistic(stat_cls: Type[PriceHistoryStatisticValue],
                        variants: Sequence[PriceHistoryVariants],
                        context: ContextMap = None,
                        n_workers: int = None,
                        chunk_size: int = None) -> Iterator[ComputedStatistic]:
    """
    Reduce every path's variants into one stat_cls accumulator per descriptor.

    Args:
        stat_cls: PriceHistoryStatisticValue subclass to compute
        variants: One PriceHistoryVariants per simulated path
        context: Per-descriptor context, required when stat_cls.requires_context
        n_workers: Threads in the reduction pool (defaults to config.N_WORKERS)
        chunk_size: Paths reduced per task (defaults to an even split over workers)

    Returns:
        Iterator of ComputedStatistic in the descriptor order of the variants

    Raises:
        ValueError: no variants, or a context-requiring statistic without context
        KeyError: context has no entry for one of the descriptors
        StatisticReductionError: paths disagree on their descriptors
    """
    if len(variants) == 0:
        raise ValueError(f"No price history variants to compute {stat_cls.__name__} over")
    if stat_cls.requires_context and context is None:
        raise ValueError(f"{stat_cls.__name__} requires a per-descriptor context")

    n_workers = n_workers or cfg.N_WORKERS
    if chunk_size is None:
        chunk_size = max(1, math.ceil(len(variants) / (n_workers * 4)))

    chunks = [variants[i:i + chunk_size] for i in range(0, len(variants), chunk_size)]

    with Parallel(n_jobs=n_workers, prefer='threads') as parallel:
        level = parallel(delayed(_reduce_chunk)(stat_cls, chunk, context) for chunk in chunks)

        while len(level) > 1:
            merged = parallel(
                delayed(level[i].merge)(level[i + 1], context)
                for i in range(0, len(level) - 1, 2)
            )
            if len(level) % 2:
                merged.append(level[-1])
            level = merged

    result = level[0]
    return (
        ComputedStatistic(descriptor, value)
        for descriptor, value in zip(result.descriptors, result.values)
    )


def statistics_by_descriptor(stat_cls: Type[PriceHistoryStatisticValue],
                             variants: Sequence[PriceHistoryVariants],
                             context: ContextMap = None,
                             n_workers: int = None) -> Dict[PriceHistoryDescriptor, Any]:
    """calculate_statistic() collected into a {descriptor: statistic} dict."""
    return {
        computed.descriptor: computed.statistic
        for computed in calculate_statistic(stat_cls, variants, context, n_workers=n_workers)
    }
