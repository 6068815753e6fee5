"""
levsim - Monte Carlo distribution of leveraged long-run returns

Entry point: levsim.run()
"""

import time
from levsim import config as cfg


def run(run_config=None, study_config=None):
    """
    Main execution - simulate every configured holding period and report.

    Returns:
        Dict mapping each simulated Period to its sorted list of StatGroups
    """

    run_start = time.time()
    step_times = []

    # Lazy imports to keep package import cheap
    from levsim.utils import setup_logging, fmt_elapsed
    from levsim.data import load_daily_price_changes
    from levsim.simulation import create_pricing_strategy, simulate_variants
    from levsim.stats import compute_stat_groups
    from levsim.reporting import print_report, write_stat_groups
    from levsim.validation import run_validation_tests

    def _step(label):
        """Print step timing and record it."""
        now = time.time()
        if step_times:
            prev_label, prev_start = step_times[-1]
            print(f"  [{fmt_elapsed(now - prev_start)}] {prev_label}")
        step_times.append((label, now))

    setup_logging()
    run_config = run_config or cfg.get_run_config()
    study_config = study_config or cfg.get_study_config()
    cfg.print_banner(run_config, study_config)

    # ========================================================================
    # STEP 0: Validation
    # ========================================================================
    if cfg.RUN_VALIDATION:
        _step("Validation")
        run_validation_tests(n_workers=run_config.n_workers)

    # ========================================================================
    # STEP 1: Load historical daily changes
    # ========================================================================
    _step("Load daily changes")
    print(f"\nLoading daily changes from {run_config.data_path}...")
    price_change_options = load_daily_price_changes(run_config.data_path)

    pricing_strategy = create_pricing_strategy(
        run_config.pricing_strategy, price_change_options, seed=run_config.seed
    )

    # ========================================================================
    # STEP 2: Monte Carlo simulation and aggregation per period
    # ========================================================================
    results = {}
    for period in run_config.periods:
        _step(f"MC simulation {period.as_years():.0f}Y")
        variants = simulate_variants(
            pricing_strategy, period, run_config.num_simulations,
            n_workers=run_config.n_workers, study_config=study_config,
        )

        _step(f"Statistics {period.as_years():.0f}Y")
        groups = compute_stat_groups(variants, n_workers=run_config.n_workers)
        print_report(groups, run_config.report_mode)
        results[period] = groups

    if run_config.output_path is not None:
        _step("Write results")
        all_groups = [group for groups in results.values() for group in groups]
        write_stat_groups(run_config.output_path, all_groups, cfg.PERCENTILE_LADDER)

    _step("done")

    # ========================================================================
    # Timing Summary
    # ========================================================================
    total_elapsed = time.time() - run_start
    print("\n" + "=" * 80)
    print("TIMING SUMMARY")
    print("=" * 80)
    for i in range(len(step_times) - 1):
        label, start = step_times[i]
        _, end = step_times[i + 1]
        elapsed = end - start
        pct = (elapsed / total_elapsed) * 100 if total_elapsed > 0 else 0
        print(f"  {label:<40s} {fmt_elapsed(elapsed):>8s}  ({pct:5.1f}%)")
    print(f"  {'':->56s}")
    print(f"  {'TOTAL':<40s} {fmt_elapsed(total_elapsed):>8s}")
    print("=" * 80)

    return results
