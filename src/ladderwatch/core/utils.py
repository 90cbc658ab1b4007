"""
Utility functions for Ladderwatch.

This module provides:
- Numeric helpers (finite checks and half-up rounding)
- Match ordering helpers
- A timing context manager for logging slow computations
"""

import logging
import math
import time
from collections.abc import Iterable
from typing import Any

logger = logging.getLogger(__name__)


def is_finite(value: Any) -> bool:
    """
    Check that a value is a usable real number.

    Booleans and None are rejected, as are NaN and infinities.

    Args:
        value: Value to check

    Returns:
        True if value is a finite int or float
    """
    if value is None or isinstance(value, bool):
        return False
    if not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def round_half_up(value: float, digits: int = 0) -> float | int:
    """
    Round a number with ties going towards positive infinity.

    Python's built-in round() uses banker's rounding; ratings and rates are
    reported with the conventional "x.5 goes up" rule instead.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        An int when digits is 0, otherwise a float
    """
    if digits == 0:
        return int(math.floor(value + 0.5))
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def sort_by_ended_at(matches: Iterable, reverse: bool = False) -> list:
    """Return a new list of matches ordered by end time (stable)."""
    return sorted(matches, key=lambda m: m.ended_at or 0, reverse=reverse)


class PerformanceMonitor:
    """
    Context manager for monitoring performance of code blocks.

    Usage:
        with PerformanceMonitor("roster summary"):
            build_summary(...)
    """

    def __init__(self, operation_name: str, log_level: int = logging.DEBUG):
        self.operation_name = operation_name
        self.log_level = log_level
        self.start_time: float | None = None
        self.elapsed_ms: float = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = time.perf_counter() - (self.start_time or 0)
        self.elapsed_ms = elapsed * 1000
        if exc_type is not None:
            logger.error(f"{self.operation_name} failed after {elapsed:.3f}s: {exc_val}")
        else:
            logger.log(self.log_level, f"{self.operation_name} completed in {elapsed:.3f}s")
        return False
