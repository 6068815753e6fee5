from pathlib import Path
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple
import multiprocessing
import os

from levsim.numbers import Percent
from levsim.pricing.leverage import Leverage
from levsim.pricing.period import Period

# ============================================================================
# CONFIGURATION
# ============================================================================

# Raw dataset: one decimal daily change per line (0.0123 = +1.23%)
DATA_PATH = Path("resources/daily-changes.csv")

# Optional CSV output of the aggregated results (None = print only)
OUTPUT_PATH = None

# Monte Carlo parameters
N_WORKERS = max(1, multiprocessing.cpu_count() - 2)
NUM_SIMULATIONS = 10_000

# Paths generated per worker task
SIMULATION_BATCH_SIZE = 250

# Holding period under study for a run
PERIOD_YEARS = 5

# Run every period in STUDY_PERIOD_YEARS instead of PERIOD_YEARS alone
RUN_ALL_PERIODS = False

# 'sampling' for production runs, 'alternating' for reproducible debugging
PRICING_STRATEGY = 'sampling'

# 'percentiles' prints min/max/IQR/percentile ladder,
# 'summary' prints median/average/stdev/Sharpe
REPORT_MODE = 'percentiles'

# Seed for the root SeedSequence (None = fresh entropy each run)
RANDOM_SEED = None

# Expense ratio charged by leveraged products (annual)
LEVERAGED_EXPENSE_RATIO = Percent.from_percent(0.93)

# Leverage at or below which no expense ratio is charged
EXPENSE_LEVERAGE_THRESHOLD = 1.0

# Annualized return a path must reach to count as a "match"
TARGET_ANNUALIZED_RETURN = Percent.from_percent(15.0)

# Leverage ladder: (upper bound, step) -- finer below 4x, coarser above
LEVERAGE_STEPS = [
    (4.0, 0.1),
    (5.0, 0.5),
    (10.0, 1.0),
]

STUDY_PERIOD_YEARS = [5, 10, 15, 20, 25, 30]

# Percentile ladder reported per descriptor: 0.00, 0.05, ... 0.45
PERCENTILE_LADDER = [i / 20.0 for i in range(10)]

# Run the pipeline sanity checks in levsim.validation before simulating
RUN_VALIDATION = True

# Debugging and logging
DEBUG = False


def _build_leverage_amounts() -> Tuple[Leverage, ...]:
    """
    Walk the leverage ladder from 0.0 to 10.0.

    Each value is the previous one plus the step for the band it sits in,
    so the ladder starts at 0.1 and ends at 10.0. Values are rounded to the
    same 3 decimal places Leverage compares on.
    """
    amounts = []
    leverage = 0.0
    while leverage < LEVERAGE_STEPS[-1][0]:
        for upper, step in LEVERAGE_STEPS:
            if leverage < upper:
                leverage = round(leverage + step, 3)
                break
        amounts.append(Leverage(leverage))
    return tuple(amounts)


@dataclass(frozen=True)
class StudyConfig:
    """Leverage levels and holding periods every simulated path is expanded into."""
    leverage_amounts: Tuple[Leverage, ...]
    periods: Tuple[Period, ...]
    leveraged_expense_ratio: Percent
    expense_leverage_threshold: float


@dataclass(frozen=True)
class RunConfig:
    """Per-run parameters fixed at the entry point."""
    num_simulations: int
    periods: Tuple[Period, ...]
    pricing_strategy: str
    n_workers: int
    data_path: Path
    output_path: Optional[Path]
    report_mode: str
    seed: Optional[int]


@lru_cache(maxsize=None)
def get_study_config() -> StudyConfig:
    """Return the study configuration, built once and shared read-only."""
    return StudyConfig(
        leverage_amounts=_build_leverage_amounts(),
        periods=tuple(Period.years(count) for count in STUDY_PERIOD_YEARS),
        leveraged_expense_ratio=LEVERAGED_EXPENSE_RATIO,
        expense_leverage_threshold=EXPENSE_LEVERAGE_THRESHOLD,
    )


def get_run_config() -> RunConfig:
    """
    Return the active run configuration in one canonical object.

    LEVSIM_* environment variables override the module defaults so that
    scripts and CI can shrink a run without editing this file.
    """
    output = os.getenv('LEVSIM_OUTPUT_PATH') or OUTPUT_PATH
    seed = os.getenv('LEVSIM_SEED')

    if RUN_ALL_PERIODS or os.getenv('LEVSIM_ALL_PERIODS'):
        periods = get_study_config().periods
    else:
        periods = (Period.years(int(os.getenv('LEVSIM_PERIOD_YEARS', PERIOD_YEARS))),)

    return RunConfig(
        num_simulations=int(os.getenv('LEVSIM_SIMULATIONS', NUM_SIMULATIONS)),
        periods=periods,
        pricing_strategy=os.getenv('LEVSIM_STRATEGY', PRICING_STRATEGY),
        n_workers=int(os.getenv('LEVSIM_WORKERS', N_WORKERS)),
        data_path=Path(os.getenv('LEVSIM_DATA_PATH', DATA_PATH)),
        output_path=Path(output) if output else None,
        report_mode=os.getenv('LEVSIM_REPORT_MODE', REPORT_MODE),
        seed=int(seed) if seed else RANDOM_SEED,
    )


def print_banner(run_config: RunConfig, study_config: StudyConfig):
    """Print the startup banner with the run parameters."""
    print(f"\n{'='*80}")
    print(f"LEVERAGED RETURN DISTRIBUTION SIMULATOR")
    print(f"{'='*80}")
    print(f"  Simulations:      {run_config.num_simulations:,}")
    horizons = ", ".join(f"{period.as_years():.0f}Y" for period in run_config.periods)
    print(f"  Holding periods:  {horizons}")
    print(f"  Pricing strategy: {run_config.pricing_strategy}")
    print(f"  Leverage levels:  {len(study_config.leverage_amounts)} "
          f"({study_config.leverage_amounts[0].amount:.1f}x - {study_config.leverage_amounts[-1].amount:.1f}x)")
    print(f"  Expense ratio:    {study_config.leveraged_expense_ratio:.2f} above "
          f"{study_config.expense_leverage_threshold:.1f}x")
    print(f"{'='*80}")
    print(f"System: {run_config.n_workers} workers")
    print(f"{'='*80}\n")
