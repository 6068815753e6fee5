"""
Exception hierarchy for levsim.

Invalid construction and reduction mismatches are programming or
configuration errors and are never caught inside the package. Data and
I/O errors are raised to the caller of the loader/writer with the
offending path attached.
"""


class LevsimError(Exception):
    """Base exception for levsim errors."""
    pass


class InvalidConstructionError(LevsimError, ValueError):
    """Raised when a value type or strategy is built from invalid input."""
    pass


class StatisticReductionError(LevsimError, AssertionError):
    """Raised when two accumulator sets with different descriptors are merged."""
    pass


class DataLoadError(LevsimError, OSError):
    """Raised when the daily-change dataset cannot be read."""
    pass


class ResultWriteError(LevsimError, OSError):
    """Raised when the result file cannot be opened for writing."""
    pass
