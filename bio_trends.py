"""
Trend classification over a requested window.
Compares the mean of the last three readings against the mean of the first
three readings of the whole series (not a rolling window).
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from bio_stats import mean, round_half_up

TREND_WINDOW = 3

# HRV moves in whole milliseconds; sleep duration/score in fractions
HRV_STABLE_BELOW = 2.0
SERIES_STABLE_BELOW = 0.2
SIGNIFICANT_ABOVE = 5.0


@dataclass(frozen=True)
class TrendResult:
    """Direction and magnitude of change between the window edges."""
    direction: str  # "stable", "improving", "declining", "insufficient_data"
    change: float
    significance: str  # "none", "moderate", "significant"
    change_percent: Optional[int] = None


def classify_trend(values: Sequence[float], stable_below: float = HRV_STABLE_BELOW,
                   significant_above: float = SIGNIFICANT_ABOVE,
                   digits: int = 0, with_percent: bool = False) -> TrendResult:
    """
    Classify the direction of a series.

    Args:
        values: Readings ordered oldest first
        stable_below: |change| under this is reported as stable (HRV rule by default)
        significant_above: |change| over this is reported as significant
        digits: Decimal places kept on the reported change
        with_percent: Also report change relative to the earlier window

    Returns:
        TrendResult; insufficient_data when fewer than three readings exist
    """
    if len(values) < TREND_WINDOW:
        return TrendResult(
            direction="insufficient_data",
            change=0,
            significance="none",
            change_percent=0 if with_percent else None
        )

    values = list(values)
    recent = mean(values[-TREND_WINDOW:])
    earlier = mean(values[:TREND_WINDOW])
    change = recent - earlier

    if abs(change) < stable_below:
        direction = "stable"
        significance = "none"
    else:
        direction = "improving" if change > 0 else "declining"
        significance = "significant" if abs(change) > significant_above else "moderate"

    change_percent = None
    if with_percent:
        change_percent = round_half_up(change / earlier * 100) if earlier != 0 else 0

    return TrendResult(
        direction=direction,
        change=round_half_up(change, digits),
        significance=significance,
        change_percent=change_percent
    )


def classify_hrv_trend(values: Sequence[float]) -> TrendResult:
    """HRV variant: whole-millisecond change with percent change."""
    return classify_trend(values, stable_below=HRV_STABLE_BELOW, with_percent=True)


def classify_series_trend(values: Sequence[float]) -> TrendResult:
    """Coarse variant for sleep duration and sleep score."""
    return classify_trend(values, stable_below=SERIES_STABLE_BELOW, digits=1)
