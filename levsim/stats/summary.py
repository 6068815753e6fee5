from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence

from levsim import config as cfg
from levsim.numbers import Percent
from levsim.pricing.price_change import AnnualizedPriceChange, PriceChange, TotalPriceChange
from levsim.pricing.variants import PriceHistoryDescriptor, PriceHistoryVariants
from levsim.stats.average import AveragePriceChange
from levsim.stats.framework import statistics_by_descriptor
from levsim.stats.median import MedianPriceChange
from levsim.stats.ratio import MatchingPriceChangeRatio, MatchingRatioContext
from levsim.stats.stdev import StandardDeviationContext, StandardDeviationPriceChange


@dataclass(order=True)
class StatGroup:
    """Every reported aggregate of one descriptor; ordered by descriptor."""
    descriptor: PriceHistoryDescriptor
    average: TotalPriceChange = field(compare=False)
    annualized_average: AnnualizedPriceChange = field(compare=False)
    stdev: PriceChange = field(compare=False)
    median: TotalPriceChange = field(compare=False)
    min: TotalPriceChange = field(compare=False)
    max: TotalPriceChange = field(compare=False)
    inner_quartile_range: PriceChange = field(compare=False)
    percentiles: List[TotalPriceChange] = field(compare=False)
    match_ratio: Percent = field(compare=False)

    def sharpe_ratio(self) -> float:
        stdev = self.stdev.as_decimal()
        if stdev == 0.0:
            return float('nan')
        return self.average.as_decimal() / stdev


def annualized_return_at_least(target: Percent, period) -> Callable[[TotalPriceChange], bool]:
    """Predicate: the total return annualizes to at least `target` over `period`."""
    def predicate(price_change: TotalPriceChange) -> bool:
        return price_change.annualized_return(period).percent_change >= target
    return predicate


def compute_stat_groups(variants: Sequence[PriceHistoryVariants],
                        target: Percent = None,
                        percentile_ladder: Sequence[float] = None,
                        n_workers: int = None) -> List[StatGroup]:
    """
    Two-phase aggregation of all simulated paths.

    Phase 1 computes averages; their means become the per-descriptor context
    for the standard deviation pass. Medians and the match ratio against
    `target` are independent passes over the same variants.
    """
    target = target if target is not None else cfg.TARGET_ANNUALIZED_RETURN
    percentile_ladder = percentile_ladder if percentile_ladder is not None else cfg.PERCENTILE_LADDER

    averages: Dict[PriceHistoryDescriptor, AveragePriceChange] = statistics_by_descriptor(
        AveragePriceChange, variants, n_workers=n_workers
    )

    stdev_context = {
        descriptor: StandardDeviationContext.from_average(average.average())
        for descriptor, average in averages.items()
    }
    stdevs = statistics_by_descriptor(
        StandardDeviationPriceChange, variants, stdev_context, n_workers=n_workers
    )

    medians = statistics_by_descriptor(MedianPriceChange, variants, n_workers=n_workers)

    ratio_context = {
        descriptor: MatchingRatioContext(annualized_return_at_least(target, descriptor.period))
        for descriptor in averages
    }
    ratios = statistics_by_descriptor(
        MatchingPriceChangeRatio, variants, ratio_context, n_workers=n_workers
    )

    groups = []
    for descriptor, average in averages.items():
        median = medians[descriptor]
        groups.append(StatGroup(
            descriptor=descriptor,
            average=average.average(),
            annualized_average=average.annualized_average(),
            stdev=stdevs[descriptor].stdev(),
            median=median.median(),
            min=median.min(),
            max=median.max(),
            inner_quartile_range=median.inner_quartile_range(),
            percentiles=[median.percentile(p) for p in percentile_ladder],
            match_ratio=ratios[descriptor].success_percent(),
        ))

    return sorted(groups)
