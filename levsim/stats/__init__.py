from levsim.stats.framework import (
    PriceHistoryStatisticValue, PriceHistoryStatistic, ComputedStatistic,
    calculate_statistic, statistics_by_descriptor, tree_reduce
)
from levsim.stats.average import AveragePriceChange
from levsim.stats.stdev import StandardDeviationPriceChange, StandardDeviationContext
from levsim.stats.median import MedianPriceChange
from levsim.stats.ratio import MatchingPriceChangeRatio, MatchingRatioContext
from levsim.stats.summary import StatGroup, compute_stat_groups, annualized_return_at_least
