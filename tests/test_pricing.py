"""Tests for periods, leverage, expense ratios, price changes and histories."""

import numpy as np
import pytest

from levsim.errors import InvalidConstructionError
from levsim.numbers import Percent
from levsim.pricing import (
    AnnualizedPriceChange, DailyPriceChange, ExpenseRatio, Leverage, Period,
    PriceHistory, TotalPriceChange, TRADING_DAYS_PER_YEAR,
    leverage_modifier, expense_ratio_modifier,
)


class TestPeriod:
    def test_years_equal_days(self):
        assert Period.years(1) == Period.days(TRADING_DAYS_PER_YEAR)
        assert hash(Period.years(2)) == hash(Period.days(2 * TRADING_DAYS_PER_YEAR))

    def test_as_years_from_days(self):
        assert Period.days(506).as_years() == pytest.approx(2.0)

    def test_ordering(self):
        assert Period.days(10) < Period.years(1) < Period.years(5)

    def test_negative_length_rejected(self):
        with pytest.raises(InvalidConstructionError):
            Period.days(-1)

    def test_day_range(self):
        assert list(Period.days(3).day_range()) == [0, 1, 2]


class TestLeverage:
    def test_three_decimal_equality(self):
        assert Leverage(0.1 + 0.2) == Leverage(0.3)
        assert Leverage(2.0001) == Leverage(2.0)
        assert Leverage(2.001) != Leverage(2.0)

    def test_hash_follows_equality(self):
        assert len({Leverage(1.0), Leverage(1.0000001), Leverage(1.5)}) == 2

    def test_negative_rejected(self):
        with pytest.raises(InvalidConstructionError):
            Leverage(-0.5)

    def test_zero_allowed(self):
        assert Leverage(0.0).amount == 0.0

    def test_identity(self):
        assert Leverage(1.0).is_identity()
        assert not Leverage(1.1).is_identity()

    def test_halves_round_up(self):
        assert Leverage(0.0025) == Leverage(0.003)
        assert Leverage(0.0025) != Leverage(0.002)
        assert Leverage(0.0005) != Leverage(0.0)
        assert hash(Leverage(0.0025)) == hash(Leverage(0.003))


class TestExpenseRatio:
    def test_daily_drag_is_negative(self):
        ratio = ExpenseRatio.from_annual(Percent.from_percent(0.93), Period.years(1))
        assert ratio.amount.as_decimal() == pytest.approx(-0.0093 / TRADING_DAYS_PER_YEAR)

    def test_zero(self):
        assert ExpenseRatio.zero().is_zero()


class TestPriceChange:
    def test_round_trip_through_decimal(self):
        change = DailyPriceChange.from_decimal(0.0123)
        assert DailyPriceChange.from_decimal(change.as_decimal()) == change

    def test_compose_same_kind(self):
        composed = DailyPriceChange.from_decimal(0.1).compose(DailyPriceChange.from_decimal(0.1))
        assert isinstance(composed, DailyPriceChange)
        assert composed.as_decimal() == pytest.approx(0.21)

    def test_compose_mixed_kinds_rejected(self):
        with pytest.raises(TypeError):
            DailyPriceChange.from_decimal(0.1).compose(TotalPriceChange.from_decimal(0.1))

    def test_compose_all_rejects_mixed_kinds(self):
        with pytest.raises(TypeError):
            TotalPriceChange.compose_all([TotalPriceChange.zero(), DailyPriceChange.zero()])

    def test_total_loss(self):
        assert TotalPriceChange.total_loss().as_decimal() == pytest.approx(-1.0)

    def test_annualize_and_back(self):
        period = Period.years(5)
        total = TotalPriceChange.from_decimal(0.75)
        annualized = total.annualized_return(period)
        assert isinstance(annualized, AnnualizedPriceChange)
        assert annualized.total_return(period).as_decimal() == pytest.approx(0.75)

    def test_annualize_over_zero_length_period_rejected(self):
        with pytest.raises(ValueError):
            TotalPriceChange.from_decimal(0.1).annualized_return(Period.days(0))

    def test_annualized_doubling(self):
        annual = AnnualizedPriceChange.from_decimal(1.0)
        assert annual.total_return(Period.years(3)).as_decimal() == pytest.approx(7.0)


class TestPriceHistory:
    def test_total_of_empty_history_is_zero(self):
        assert PriceHistory().total() == TotalPriceChange.zero()

    def test_total_compounds_in_order(self):
        history = PriceHistory.from_price_changes(
            DailyPriceChange.from_decimal(d) for d in (0.1, -0.1, 0.05)
        )
        assert history.total().as_decimal() == pytest.approx(1.1 * 0.9 * 1.05 - 1.0)

    def test_total_matches_sequential_fold_exactly(self, daily_pool):
        history = PriceHistory.from_array(daily_pool[:500])
        multiplier = 1.0
        for decimal in daily_pool[:500]:
            multiplier *= decimal + 1.0
        assert history.total().as_decimal() == multiplier - 1.0

    def test_add_builds_history(self):
        history = PriceHistory()
        history.add(DailyPriceChange.from_decimal(0.01)).add(DailyPriceChange.from_decimal(0.02))
        assert len(history) == 2
        assert history[1] == DailyPriceChange.from_decimal(0.02)
        assert list(history.as_array()) == [0.01, 0.02]

    def test_as_array_is_read_only(self):
        history = PriceHistory([0.01, 0.02])
        with pytest.raises(ValueError):
            history.as_array()[0] = 0.5

    def test_slice_returns_history(self):
        history = PriceHistory([0.01, 0.02, 0.03])
        assert isinstance(history[1:], PriceHistory)
        assert len(history[1:]) == 2

    def test_copy_is_independent(self):
        history = PriceHistory([0.01, 0.02])
        copy = history.copy().apply_modifier(leverage_modifier(Leverage(3.0)))
        assert list(history.as_array()) == [0.01, 0.02]
        assert copy.as_array() == pytest.approx([0.03, 0.06])


class TestModifiers:
    def test_leverage_scales_each_day(self):
        history = PriceHistory([0.01, -0.02]).apply_modifier(leverage_modifier(Leverage(2.0)))
        assert history.as_array() == pytest.approx([0.02, -0.04])

    def test_identity_leverage_not_needed(self):
        assert not leverage_modifier(Leverage(1.0)).needed()

    def test_zero_expense_not_needed(self):
        assert not expense_ratio_modifier(ExpenseRatio.zero()).needed()

    def test_expense_composes_each_day(self):
        ratio = ExpenseRatio(amount=Percent.from_decimal(-0.001))
        history = PriceHistory([0.01, 0.0]).apply_modifier(expense_ratio_modifier(ratio))
        assert history.as_array() == pytest.approx([1.01 * 0.999 - 1.0, -0.001])

    def test_array_and_scalar_paths_agree(self):
        ratio = ExpenseRatio(amount=Percent.from_decimal(-0.0005))
        modifier = expense_ratio_modifier(ratio)
        change = DailyPriceChange.from_decimal(0.013)
        array_result = modifier.modify_array(np.array([0.013]))[0]
        assert modifier.modify(change).as_decimal() == pytest.approx(array_result)

    def test_leverage_past_total_loss_clamps(self):
        history = PriceHistory([-0.4, 0.1]).apply_modifier(leverage_modifier(Leverage(3.0)))
        assert history.total().as_decimal() == -1.0
