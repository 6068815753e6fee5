"""Shared fixtures for the levsim test suite."""

import numpy as np
import pytest

from levsim import config as cfg
from levsim.numbers import Percent
from levsim.pricing.leverage import Leverage
from levsim.pricing.period import Period


@pytest.fixture
def small_study_config():
    """Three leverage levels instead of the full 47-level ladder."""
    return cfg.StudyConfig(
        leverage_amounts=(Leverage(1.0), Leverage(2.0), Leverage(3.0)),
        periods=(Period.years(1),),
        leveraged_expense_ratio=Percent.from_percent(0.93),
        expense_leverage_threshold=1.0,
    )


@pytest.fixture
def daily_pool():
    """Daily changes with roughly 16% annual vol and a small positive drift."""
    rng = np.random.default_rng(42)
    return rng.normal(0.0003, 0.01, 2_000)


@pytest.fixture
def dataset_file(tmp_path):
    path = tmp_path / "daily-changes.csv"
    path.write_text("0.01\n-0.02\n0.005\n", encoding="utf-8")
    return path
