"""
Validation module for levsim.

Sanity checks run before a simulation: the leveraged compounding pipeline
must reproduce the theoretical volatility drag, and the parallel statistics
reduction must agree with scipy/numpy computed on the materialized
population, for any worker count.
"""

import numpy as np
from scipy import stats
from typing import Dict, Sequence

from levsim import config as cfg
from levsim.pricing.leverage import Leverage
from levsim.pricing.period import Period
from levsim.pricing.variants import PriceHistoryVariants, expense_ratio_for_leverage
from levsim.simulation.runner import simulate_variants
from levsim.simulation.strategy import SamplingStrategy
from levsim.stats.average import AveragePriceChange
from levsim.stats.framework import statistics_by_descriptor
from levsim.stats.median import MedianPriceChange
from levsim.stats.stdev import StandardDeviationContext, StandardDeviationPriceChange


def validate_zero_drift_vol_drag(leverages=(1.0, 2.0, 3.0), n_sims: int = 2000,
                                 n_workers: int = 1, seed: int = 42) -> Dict:
    """
    Zero-drift volatility drag.

    Sampling from a demeaned pool with annual vol sigma, the median one-year
    total return at leverage L should sit near exp(-0.5*L^2*sigma^2) - 1,
    scaled by a year of daily expense drag when L is above the expense
    threshold. The tolerance widens to three standard errors of the sample
    median when that exceeds 1.5%.
    """
    print(f"\n{'='*80}")
    print("VALIDATION: ZERO-DRIFT VOLATILITY DRAG TEST")
    print(f"{'='*80}\n")

    annual_vol = 0.15
    period = Period.years(1)
    daily_std = annual_vol / np.sqrt(period.as_days())

    rng = np.random.default_rng(seed)
    pool = rng.normal(0, daily_std, 20_000)
    pool -= pool.mean()

    print(f"  Simulating {n_sims:,} one-year paths:")
    print(f"    Annual vol:   {annual_vol*100:.0f}%")
    print(f"    Drift:        0% (demeaned pool of {len(pool):,} days)")

    study_config = cfg.get_study_config()
    variants = simulate_variants(
        SamplingStrategy.with_seed(pool, seed), period, n_sims,
        n_workers=n_workers, study_config=study_config, show_progress=False,
    )
    medians = statistics_by_descriptor(MedianPriceChange, variants, n_workers=n_workers)
    by_leverage = {descriptor.leverage: median for descriptor, median in medians.items()}

    results = {}
    all_passed = True
    for amount in leverages:
        leverage = Leverage(amount)
        expense = expense_ratio_for_leverage(leverage, study_config)
        expense_drag = expense.amount.as_multiplier() ** period.as_days()
        expected = np.exp(-0.5 * amount ** 2 * annual_vol ** 2) * expense_drag - 1.0

        # Asymptotic stdev of a sample median of a lognormal total
        median_se = np.sqrt(np.pi / 2) * amount * annual_vol * (1.0 + expected) / np.sqrt(n_sims)
        tolerance = max(0.015, 3 * median_se)

        actual = by_leverage[leverage].median().as_decimal()
        error = abs(actual - expected)
        passed = error < tolerance
        all_passed = all_passed and passed

        print(f"\n    {amount}x:")
        print(f"      Expected (theory):  {expected*100:+.2f}%/year")
        print(f"      Simulated median:   {actual*100:+.2f}%/year")
        print(f"      Tolerance:          {tolerance*100:.2f}%")
        print(f"      {'PASSED' if passed else 'FAILED (error > tolerance)'}")

        results[f'{amount}x'] = {
            'expected': float(expected),
            'actual_median': float(actual),
            'error': float(error),
            'tolerance': float(tolerance),
            'passed': bool(passed),
        }

    print(f"{'='*80}\n")
    results['all_passed'] = all_passed
    return results


def validate_statistics_against_population(variants: Sequence[PriceHistoryVariants],
                                           worker_counts=(1, 4), tolerance: float = 1e-9) -> Dict:
    """
    Compare the reduction framework with statistics of the full population.

    The population of each descriptor is materialized once and described with
    scipy; mean, population stdev and median from the framework must match
    it for every worker count tried.
    """
    print(f"\n{'='*80}")
    print("VALIDATION: STATISTICS REDUCTION VS FULL POPULATION")
    print(f"{'='*80}\n")

    descriptors = variants[0].descriptors
    population = np.array([
        [change.as_decimal() for change in variant.total_price_changes]
        for variant in variants
    ])

    max_errors = {'mean': 0.0, 'stdev': 0.0, 'median': 0.0}
    for n_workers in worker_counts:
        averages = statistics_by_descriptor(AveragePriceChange, variants, n_workers=n_workers)
        context = {
            descriptor: StandardDeviationContext.from_average(average.average())
            for descriptor, average in averages.items()
        }
        stdevs = statistics_by_descriptor(StandardDeviationPriceChange, variants, context, n_workers=n_workers)
        medians = statistics_by_descriptor(MedianPriceChange, variants, n_workers=n_workers)

        for i, descriptor in enumerate(descriptors):
            column = population[:, i]
            described = stats.describe(column, ddof=0)
            checks = {
                'mean': (averages[descriptor].average().as_decimal(), described.mean),
                'stdev': (stdevs[descriptor].stdev().as_decimal(), np.sqrt(described.variance)),
                'median': (medians[descriptor].median().as_decimal(), np.median(column)),
            }
            for name, (actual, expected) in checks.items():
                max_errors[name] = max(max_errors[name], abs(actual - expected))

    passed = all(error <= tolerance for error in max_errors.values())
    print(f"  Paths: {len(variants):,}  Descriptors: {len(descriptors)}  Workers tried: {list(worker_counts)}")
    for name, error in max_errors.items():
        print(f"    Max |{name} error|: {error:.3e}")
    print(f"\n  {'PASSED' if passed else 'FAILED'}")
    print(f"{'='*80}\n")

    return {
        'max_errors': {name: float(error) for name, error in max_errors.items()},
        'all_passed': bool(passed),
    }


def run_validation_tests(n_sims: int = 2000, n_workers: int = 1) -> Dict:
    """Run all validation tests."""
    print(f"\n{'='*80}")
    print("RUNNING VALIDATION TESTS")
    print(f"{'='*80}\n")

    results = {}
    results['zero_drift_test'] = validate_zero_drift_vol_drag(n_sims=n_sims, n_workers=n_workers)

    rng = np.random.default_rng(7)
    pool = rng.normal(0.0004, 0.012, 5_000)
    variants = simulate_variants(
        SamplingStrategy.with_seed(pool, 7), Period.years(1), n_sims,
        n_workers=n_workers, show_progress=False,
    )
    results['reduction_test'] = validate_statistics_against_population(variants)

    print(f"\n{'='*80}")
    print("VALIDATION SUMMARY")
    print(f"{'='*80}\n")
    for name, result in results.items():
        print(f"  {name}: {'PASSED' if result['all_passed'] else 'FAILED'}")
    print(f"\n{'='*80}\n")

    results['all_passed'] = all(result['all_passed'] for result in results.values())
    return results
