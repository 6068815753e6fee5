"""
Reporting module for levsim.

Formats the per-descriptor StatGroups as console tables and writes them to
a delimited file through ResultWriter, which fixes its column count when
opened and refuses rows of any other width.
"""

import csv
import logging
from pathlib import Path
from typing import List, Sequence

from levsim.errors import InvalidConstructionError, ResultWriteError
from levsim.stats.summary import StatGroup

logger = logging.getLogger(__name__)

MAX_COLUMNS = 65535

REPORT_MODES = ('percentiles', 'summary')


# ============================================================================
# CONSOLE OUTPUT
# ============================================================================

def format_percentile_line(group: StatGroup) -> str:
    ladder = ", ".join(f"{p:.4f}" for p in group.percentiles)
    return (
        f"Years: {group.descriptor.period.as_years():.1f} | "
        f"Leverage: {group.descriptor.leverage.amount:<4.1f} | "
        f"Min/Max {group.min:.4f} :: {group.max:.4f} | "
        f"IQR: {group.inner_quartile_range:.4f} |  "
        f"Percentiles: [{ladder}]"
    )


def format_summary_line(group: StatGroup) -> str:
    return (
        f"Years: {group.descriptor.period.as_years():.1f} | "
        f"Leverage: {group.descriptor.leverage.amount:<4.1f} | "
        f"Median: {group.median:>10.2f} | "
        f"Average: {group.average:>10.2f} ({group.annualized_average:+.2f}/yr) | "
        f"Stdev: {group.stdev:>10.2f} | "
        f"Sharpe: {group.sharpe_ratio():>6.3f} | "
        f"Target hit: {group.match_ratio:.1f}"
    )


def print_report(groups: Sequence[StatGroup], mode: str = 'percentiles'):
    """Print one line per descriptor in the requested report mode."""
    if mode not in REPORT_MODES:
        raise InvalidConstructionError(f"Unknown report mode '{mode}' (expected one of {REPORT_MODES})")

    formatter = format_percentile_line if mode == 'percentiles' else format_summary_line

    print(f"\n{'='*140}")
    print(f"RESULTS ({mode.upper()}) - {len(groups)} leverage/period combinations")
    print(f"{'='*140}")
    for group in groups:
        print(formatter(group))
    print("="*140 + "\n")


# ============================================================================
# DELIMITED FILE OUTPUT
# ============================================================================

class ResultWriter:
    """
    CSV writer with a column count fixed at open time.

    write_row() returns False instead of raising when a row has the wrong
    number of fields or cannot be written. The file is flushed and closed
    by close(), on leaving a with-block (also when it raises), or when the
    writer is garbage collected.

    Usage:
        with ResultWriter.with_header(path, ["years", "leverage"]) as writer:
            writer.write_row(["5.0", "2.0"])
    """

    def __init__(self, file_path, columns: int):
        if columns <= 0 or columns > MAX_COLUMNS:
            raise InvalidConstructionError(
                f"Column count must be between 1 and {MAX_COLUMNS}, got {columns}"
            )
        self.file_path = Path(file_path)
        self.columns = columns
        try:
            self._file = open(self.file_path, 'w', newline='', encoding='utf-8')
        except OSError as e:
            raise ResultWriteError(f"Failed to open writer to file: {self.file_path}: {e}") from e
        self._writer = csv.writer(self._file)

    @classmethod
    def with_header(cls, file_path, header: Sequence[str]) -> 'ResultWriter':
        if len(header) > MAX_COLUMNS:
            raise InvalidConstructionError(
                f"Too many columns in the header. Max number is {MAX_COLUMNS}."
            )
        writer = cls(file_path, len(header))
        if not writer.write_row(header):
            writer.close()
            raise ResultWriteError(f"Failed to write header row to {file_path}")
        return writer

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write_row(self, row: Sequence) -> bool:
        if len(row) != self.columns:
            logger.debug("Rejected row with %d fields (expected %d)", len(row), self.columns)
            return False
        try:
            self._writer.writerow(row)
        except (OSError, ValueError, csv.Error) as e:
            logger.warning("Failed to write row to %s: %s", self.file_path, e)
            return False
        return True

    def flush(self):
        if not self._file.closed:
            self._file.flush()

    def close(self):
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __del__(self):
        file = getattr(self, '_file', None)
        if file is not None and not file.closed:
            self.close()


def stat_group_header(percentile_ladder: Sequence[float]) -> List[str]:
    return [
        'years', 'leverage', 'average', 'annualized_average', 'stdev', 'sharpe',
        'median', 'min', 'max', 'iqr', 'match_ratio',
    ] + [f"p{p*100:g}" for p in percentile_ladder]


def stat_group_row(group: StatGroup) -> List[str]:
    return [
        f"{group.descriptor.period.as_years():.1f}",
        f"{group.descriptor.leverage.amount:.3f}",
        repr(group.average.as_decimal()),
        repr(group.annualized_average.as_decimal()),
        repr(group.stdev.as_decimal()),
        repr(group.sharpe_ratio()),
        repr(group.median.as_decimal()),
        repr(group.min.as_decimal()),
        repr(group.max.as_decimal()),
        repr(group.inner_quartile_range.as_decimal()),
        repr(group.match_ratio.as_decimal()),
    ] + [repr(p.as_decimal()) for p in group.percentiles]


def write_stat_groups(file_path, groups: Sequence[StatGroup], percentile_ladder: Sequence[float]) -> int:
    """
    Write every StatGroup as one CSV row.

    Returns:
        Number of rows written
    """
    written = 0
    with ResultWriter.with_header(file_path, stat_group_header(percentile_ladder)) as writer:
        for group in groups:
            if writer.write_row(stat_group_row(group)):
                written += 1
            else:
                logger.warning("Skipped result row for %s", group.descriptor)
    print(f"  [OK] Wrote {written} result rows to {file_path}")
    return written
