"""Tests for pricing strategies, leverage variants and the Monte Carlo runner."""

import numpy as np
import pytest

from levsim import config as cfg
from levsim.errors import InvalidConstructionError
from levsim.numbers import Percent
from levsim.pricing import (
    DailyPriceChange, ExpenseRatio, Leverage, Period, PriceHistory,
    PriceHistoryDescriptor, PriceHistoryVariants, expense_ratio_for_leverage,
)
from levsim.simulation import (
    AlternatingStrategy, SamplingStrategy, create_pricing_strategy,
    simulate_price_histories, simulate_variants,
)


class TestStrategies:
    def test_empty_pool_rejected(self):
        with pytest.raises(InvalidConstructionError):
            SamplingStrategy([])
        with pytest.raises(InvalidConstructionError):
            AlternatingStrategy([])

    def test_alternating_cycles_pool(self):
        strategy = AlternatingStrategy([-0.02, 0.0205])
        history = strategy.calculate_price_history(Period.days(5).day_range())
        assert list(history.as_array()) == [-0.02, 0.0205, -0.02, 0.0205, -0.02]

    def test_alternating_two_day_total(self):
        strategy = AlternatingStrategy([DailyPriceChange.from_decimal(-0.02),
                                        DailyPriceChange.from_decimal(0.0205)])
        history = strategy.calculate_price_history(Period.days(2).day_range())
        assert history.total().as_decimal() == pytest.approx(0.98 * 1.0205 - 1.0)

    def test_sampling_draws_from_pool(self):
        pool = [0.01, -0.01, 0.02]
        history = SamplingStrategy.with_seed(pool, 1).calculate_price_history(range(200))
        assert len(history) == 200
        assert set(history.as_array()) <= set(pool)

    def test_sampling_seed_reproducible(self, daily_pool):
        a = SamplingStrategy.with_seed(daily_pool, 7).calculate_price_history(range(50))
        b = SamplingStrategy.with_seed(daily_pool, 7).calculate_price_history(range(50))
        assert np.array_equal(a.as_array(), b.as_array())

    def test_spawned_streams_differ(self, daily_pool):
        first, second = SamplingStrategy.with_seed(daily_pool, 7).spawn(2)
        a = first.calculate_price_history(range(50))
        b = second.calculate_price_history(range(50))
        assert not np.array_equal(a.as_array(), b.as_array())

    def test_default_history_sees_previous_days(self):
        class Momentum(AlternatingStrategy):
            def calculate_price_change(self, day_index, price_history):
                if len(price_history) == 0:
                    return DailyPriceChange.from_decimal(0.01)
                return price_history[len(price_history) - 1]

        history = Momentum([0.0]).calculate_price_history(range(3))
        assert list(history.as_array()) == [0.01, 0.01, 0.01]

    def test_create_unknown_strategy(self):
        with pytest.raises(InvalidConstructionError):
            create_pricing_strategy('bootstrap', [0.01])

    def test_create_known_strategies(self):
        assert isinstance(create_pricing_strategy('sampling', [0.01], seed=1), SamplingStrategy)
        assert isinstance(create_pricing_strategy('alternating', [0.01]), AlternatingStrategy)


class TestExpenseRatioForLeverage:
    def test_no_expense_at_threshold(self, small_study_config):
        assert expense_ratio_for_leverage(Leverage(1.0), small_study_config).is_zero()
        assert expense_ratio_for_leverage(Leverage(0.5), small_study_config).is_zero()

    def test_expense_just_above_threshold(self, small_study_config):
        expense = expense_ratio_for_leverage(Leverage(1.000001), small_study_config)
        expected = ExpenseRatio.from_annual(Percent.from_percent(0.93), Period.years(1))
        assert expense == expected


class TestPriceHistoryVariants:
    def test_one_total_per_leverage(self, small_study_config):
        history = PriceHistory([0.01, -0.005, 0.02])
        variants = PriceHistoryVariants.from_price_history(history, Period.days(3), small_study_config)
        assert len(variants) == 3
        assert [d.leverage for d in variants.descriptors] == list(small_study_config.leverage_amounts)
        assert all(d.period == Period.days(3) for d in variants.descriptors)

    def test_unleveraged_variant_is_raw_total(self, small_study_config):
        history = PriceHistory([0.01, -0.005, 0.02])
        variants = PriceHistoryVariants.from_price_history(history, Period.days(3), small_study_config)
        assert variants.total_price_changes[0] == history.total()

    def test_leveraged_variant_pays_expenses(self, small_study_config):
        history = PriceHistory([0.01, -0.005])
        variants = PriceHistoryVariants.from_price_history(history, Period.days(2), small_study_config)
        drag = 1.0 - 0.0093 / 253
        expected = (1.02 * drag) * (0.99 * drag) - 1.0
        assert variants.total_price_changes[1].as_decimal() == pytest.approx(expected)

    def test_source_history_untouched(self, small_study_config):
        history = PriceHistory([0.01, -0.005])
        PriceHistoryVariants.from_price_history(history, Period.days(2), small_study_config)
        assert list(history.as_array()) == [0.01, -0.005]

    def test_length_mismatch_rejected(self):
        descriptor = PriceHistoryDescriptor(Leverage(1.0), Period.days(1))
        with pytest.raises(ValueError):
            PriceHistoryVariants([descriptor], [])

    def test_descriptor_ordering(self):
        a = PriceHistoryDescriptor(Leverage(2.0), Period.years(1))
        b = PriceHistoryDescriptor(Leverage(1.0), Period.years(5))
        c = PriceHistoryDescriptor(Leverage(1.0), Period.years(1))
        assert sorted([a, b, c]) == [c, b, a]


class TestRunner:
    def test_path_count_and_length(self, daily_pool):
        histories = simulate_price_histories(
            SamplingStrategy.with_seed(daily_pool, 3), Period.days(20), 30, n_workers=1
        )
        assert len(histories) == 30
        assert all(len(history) == 20 for history in histories)

    def test_non_positive_simulations_rejected(self, daily_pool):
        with pytest.raises(ValueError):
            simulate_price_histories(SamplingStrategy(daily_pool), Period.days(5), 0, n_workers=1)

    def test_zero_length_period_rejected(self, daily_pool, small_study_config):
        with pytest.raises(ValueError):
            simulate_variants(SamplingStrategy(daily_pool), Period.days(0), 5, n_workers=1,
                              study_config=small_study_config, show_progress=False)

    def test_variants_per_path(self, daily_pool, small_study_config):
        variants = simulate_variants(
            SamplingStrategy.with_seed(daily_pool, 3), Period.days(20), 12,
            n_workers=1, study_config=small_study_config, show_progress=False,
        )
        assert len(variants) == 12
        assert all(len(variant) == 3 for variant in variants)

    def test_seeded_run_independent_of_worker_count(self, daily_pool, small_study_config, monkeypatch):
        monkeypatch.setattr(cfg, 'SIMULATION_BATCH_SIZE', 5)

        def totals(n_workers):
            variants = simulate_variants(
                SamplingStrategy.with_seed(daily_pool, 11), Period.days(10), 17,
                n_workers=n_workers, study_config=small_study_config, show_progress=False,
            )
            return [variant.total_price_changes for variant in variants]

        assert totals(1) == totals(2)

    def test_alternating_paths_identical(self, small_study_config):
        variants = simulate_variants(
            AlternatingStrategy([-0.02, 0.0205]), Period.days(2), 4,
            n_workers=1, study_config=small_study_config, show_progress=False,
        )
        expected = 0.98 * 1.0205 - 1.0
        for variant in variants:
            assert variant.total_price_changes[0].as_decimal() == pytest.approx(expected)
