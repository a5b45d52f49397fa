"""
Descriptive statistics shared by the analyzers.
Plain numpy reductions plus clock-time helpers for bedtime/wake-time math.
"""

import math
from typing import Sequence, Union

import numpy as np

Number = Union[int, float]


def round_half_up(value: float, digits: int = 0) -> Number:
    """
    Round halves toward positive infinity (2.5 -> 3, -2.5 -> -2).

    Unlike the built-in round(), exact halves never go to the even neighbour.
    """
    factor = 10 ** digits
    rounded = math.floor(float(value) * factor + 0.5)
    if digits == 0:
        return int(rounded)
    return rounded / factor


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def stddev(values: Sequence[float]) -> float:
    """Population standard deviation (divides by N); 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))


def time_to_minutes(clock: str) -> int:
    """Convert 'HH:MM' to minutes from midnight."""
    hours, minutes = clock.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def minutes_to_time(total_minutes: int) -> str:
    """Format minutes from midnight as zero-padded 'HH:MM'."""
    hours, minutes = divmod(int(total_minutes), 60)
    return f"{hours:02d}:{minutes:02d}"


def circular_time_average(times: Sequence[str]) -> str:
    """
    Average clock times as plain minutes from midnight.

    Not wraparound-aware: 23:30 and 00:30 average to 12:00, not 00:00.
    """
    if not times:
        return "00:00"
    minutes = [time_to_minutes(t) for t in times]
    return minutes_to_time(round_half_up(mean(minutes)))


def time_variance(times: Sequence[str]) -> float:
    """Standard deviation of clock times in minutes (same non-wraparound caveat)."""
    if not times:
        return 0.0
    return stddev([time_to_minutes(t) for t in times])
