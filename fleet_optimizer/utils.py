# fleet_optimizer/utils.py
"""
Utility functions for the FleetOptimizer what-if simulator.

Provides time-of-day manipulation, rounding and display formatting helpers.
"""

from __future__ import annotations

import math
from datetime import time, timedelta, datetime
from typing import Union

from .errors import InvalidInputError


def parse_shift_start(value: Union[str, time]) -> time:
    """
    Parse a shift start time from form input.

    Args:
        value: 'HH:MM' (or 'HH:MM:SS') string, or an existing time

    Returns:
        A datetime.time

    Raises:
        InvalidInputError: If the string is not a valid time of day

    Example:
        >>> parse_shift_start("09:30")
        datetime.time(9, 30)
    """
    if isinstance(value, time):
        return value
    text = str(value).strip()
    for fmt in ('%H:%M', '%H:%M:%S'):
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise InvalidInputError(f"Invalid shift start time: {value!r} (expected HH:MM)")


def add_hours_to_time(base_time: time, hours_to_add: Union[int, float]) -> time:
    """
    Add a number of hours to a datetime.time object.

    Times past midnight wrap around; a 20:00 start with a 6 hour cap ends
    at 02:00.

    Example:
        >>> add_hours_to_time(time(9, 0), 7.5)
        datetime.time(16, 30)
    """
    # Use a dummy date to leverage timedelta arithmetic
    dummy_date = datetime(2000, 1, 1).date()
    base_datetime = datetime.combine(dummy_date, base_time)
    result_datetime = base_datetime + timedelta(hours=hours_to_add)
    return result_datetime.time()


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Unlike round(), 12.5 becomes 13 rather than 12.
    """
    if value < 0:
        return -round_half_up(-value)
    whole = math.floor(value)
    return int(whole) + (1 if value - whole >= 0.5 else 0)


def clamp(value: float, low: float, high: float) -> float:
    """Limit value to the closed interval [low, high]."""
    return max(low, min(high, value))


def format_currency(amount: Union[int, float], symbol: str = "₹") -> str:
    """
    Format a currency amount with thousands separators.

    Example:
        >>> format_currency(-12500)
        '-₹12,500'
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.0f}"
