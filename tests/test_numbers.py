"""Tests for the Percent value type."""

import pytest

from levsim.numbers import Percent


class TestPercentConstruction:
    def test_from_percent(self):
        assert Percent.from_percent(1.5).as_decimal() == pytest.approx(0.015)

    def test_from_multiplier(self):
        assert Percent.from_multiplier(1.25).as_decimal() == pytest.approx(0.25)

    def test_negative_multiplier_clamps_to_total_loss(self):
        assert Percent.from_multiplier(-0.3).as_decimal() == -1.0

    def test_zero(self):
        assert Percent.zero().as_multiplier() == 1.0

    def test_accessors_agree(self):
        percent = Percent.from_decimal(0.02)
        assert percent.as_percent() == pytest.approx(2.0)
        assert percent.as_multiplier() == pytest.approx(1.02)


class TestPercentCompose:
    def test_compose_multiplies(self):
        composed = Percent.from_decimal(0.10).compose(Percent.from_decimal(-0.10))
        assert composed.as_decimal() == pytest.approx(-0.01)

    def test_compose_all_matches_pairwise_fold(self):
        decimals = [0.01, -0.02, 0.03, 0.004, -0.015, 0.0]
        percents = [Percent.from_decimal(d) for d in decimals]

        folded = Percent.zero()
        for percent in percents:
            folded = folded.compose(percent)

        assert Percent.compose_all(percents).as_decimal() == pytest.approx(folded.as_decimal())

    def test_compose_all_empty_is_zero(self):
        assert Percent.compose_all([]) == Percent.zero()

    def test_compose_all_clamps_total_loss(self):
        result = Percent.compose_all([Percent.from_decimal(-1.5), Percent.from_decimal(0.1)])
        assert result.as_decimal() == -1.0


class TestPercentArithmetic:
    def test_add_and_subtract(self):
        a, b = Percent.from_decimal(0.03), Percent.from_decimal(0.01)
        assert (a + b).as_decimal() == pytest.approx(0.04)
        assert (a - b).as_decimal() == pytest.approx(0.02)

    def test_negate(self):
        assert (-Percent.from_decimal(0.05)).as_decimal() == -0.05

    def test_ordering(self):
        assert Percent.from_decimal(-0.1) < Percent.zero() < Percent.from_decimal(0.1)

    def test_format_appends_percent_sign(self):
        assert f"{Percent.from_decimal(0.1234):.2f}" == "12.34%"
