"""
Loading of the historical daily-change dataset.

The dataset is a text file with one daily change per line, written as a
decimal (0.0123 for +1.23%). Non-ASCII characters (byte-order marks,
stray spreadsheet symbols) are stripped before parsing; lines that still
do not parse are logged and skipped.
"""

import logging
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd

from levsim.errors import DataLoadError
from levsim.pricing.price_change import DailyPriceChange

logger = logging.getLogger(__name__)


def read_daily_changes(path) -> pd.Series:
    """
    Parse the dataset into a float Series indexed by 1-based line number.

    Raises:
        DataLoadError: the file cannot be read
    """
    path = Path(path)
    try:
        text = path.read_text(encoding='utf-8', errors='ignore')
    except OSError as e:
        raise DataLoadError(f"Failed to read daily changes from {path}: {e}") from e

    lines = pd.Series(text.splitlines(), dtype=object)
    lines.index = lines.index + 1

    cleaned = lines.str.replace(r'[^\x00-\x7F]', '', regex=True).str.strip()
    cleaned = cleaned[cleaned != '']

    values = pd.to_numeric(cleaned, errors='coerce')
    failed = values.isna() | ~np.isfinite(values.fillna(0.0))
    for line_number in values.index[failed.to_numpy()]:
        logger.warning("Parse error on line %d: '%s'", line_number, lines[line_number])

    return values[~failed].astype(np.float64)


def load_daily_price_changes(path) -> List[DailyPriceChange]:
    """
    Load the dataset as DailyPriceChange values, in file order.

    Raises:
        DataLoadError: the file cannot be read or holds no usable values
    """
    values = read_daily_changes(path)
    if values.empty:
        raise DataLoadError(f"No parseable daily changes in {path}")

    print(f"  [OK] Loaded {len(values):,} daily changes from {path}")
    print(f"    Mean: {values.mean()*100:+.4f}%  Std: {values.std(ddof=0)*100:.4f}%  "
          f"Min: {values.min()*100:+.2f}%  Max: {values.max()*100:+.2f}%")

    return [DailyPriceChange.from_decimal(value) for value in values.to_numpy()]
