from joblib import Parallel, delayed
from tqdm import tqdm
from typing import List

from levsim import config as cfg
from levsim.pricing.period import Period
from levsim.pricing.price_history import PriceHistory
from levsim.pricing.variants import PriceHistoryVariants
from levsim.simulation.strategy import PricingStrategy


def _batch_sizes(num_simulations: int, batch_size: int) -> List[int]:
    """Split the run into fixed-size batches (last one may be short)."""
    full, remainder = divmod(num_simulations, batch_size)
    sizes = [batch_size] * full
    if remainder:
        sizes.append(remainder)
    return sizes


def _simulate_histories(strategy: PricingStrategy, period: Period, n_paths: int) -> List[PriceHistory]:
    day_range = period.day_range()
    return [strategy.calculate_price_history(day_range) for _ in range(n_paths)]


def _simulate_variant_batch(strategy: PricingStrategy, period: Period, n_paths: int,
                            study_config) -> List[PriceHistoryVariants]:
    return [
        PriceHistoryVariants.from_price_history(history, period, study_config)
        for history in _simulate_histories(strategy, period, n_paths)
    ]


def _run_batches(task, strategy: PricingStrategy, period: Period, num_simulations: int,
                 n_workers: int, extra_args=(), show_progress: bool = True, backend: str = 'loky'):
    """
    Fan the batches out over the worker pool and flatten results in batch order.

    Every batch gets its own strategy from strategy.spawn(), so sampling
    streams are never shared between tasks. Batch boundaries depend only on
    SIMULATION_BATCH_SIZE, which keeps seeded runs identical for any worker
    count.
    """
    if num_simulations <= 0:
        raise ValueError(f"num_simulations must be positive, got {num_simulations}")
    if period.as_days() == 0:
        raise ValueError("Cannot simulate paths over a zero-length period")

    sizes = _batch_sizes(num_simulations, cfg.SIMULATION_BATCH_SIZE)
    strategies = strategy.spawn(len(sizes))

    jobs = zip(strategies, sizes)
    if show_progress:
        jobs = tqdm(jobs, total=len(sizes), desc=f"{period.as_years():.0f}Y MC", unit="batch")

    batches = Parallel(n_jobs=n_workers, backend=backend, verbose=0)(
        delayed(task)(batch_strategy, period, size, *extra_args)
        for batch_strategy, size in jobs
    )
    return [item for batch in batches for item in batch]


def simulate_price_histories(strategy: PricingStrategy, period: Period, num_simulations: int,
                             n_workers: int = None, show_progress: bool = False) -> List[PriceHistory]:
    """Generate num_simulations independent paths of period.as_days() days."""
    n_workers = n_workers or cfg.N_WORKERS
    return _run_batches(_simulate_histories, strategy, period, num_simulations,
                        n_workers, show_progress=show_progress)


def simulate_variants(strategy: PricingStrategy, period: Period, num_simulations: int,
                      n_workers: int = None, study_config=None,
                      show_progress: bool = True) -> List[PriceHistoryVariants]:
    """
    Monte Carlo over price paths, expanded to every studied leverage.

    Args:
        strategy: Pricing strategy producing one path per call
        period: Holding period of every path
        num_simulations: Number of independent paths
        n_workers: Worker processes (defaults to config.N_WORKERS)
        study_config: Leverage study configuration (defaults to get_study_config())
        show_progress: Show a tqdm progress bar over batches

    Returns:
        One PriceHistoryVariants per simulated path, in batch order
    """
    n_workers = n_workers or cfg.N_WORKERS
    study_config = study_config or cfg.get_study_config()

    if show_progress:
        print(f"\n{'='*80}")
        print(f"MONTE CARLO: {num_simulations:,} sims x {period.as_years():.1f}Y")
        print(f"{'='*80}")
        print(f"  Strategy: {strategy!r}")
        print(f"  Leverage variants per path: {len(study_config.leverage_amounts)}")
        print(f"  Using joblib with {n_workers} workers\n")

    return _run_batches(_simulate_variant_batch, strategy, period, num_simulations,
                        n_workers, extra_args=(study_config,), show_progress=show_progress)
