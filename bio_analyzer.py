"""
Bio Analyzer - The Logic Core
Derives status, HRV, sleep and alert metrics from generated daily series
using pandas and numpy.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from bio_stats import (
    circular_time_average,
    mean,
    round_half_up,
    stddev,
    time_variance,
)
from bio_trends import TrendResult, classify_hrv_trend, classify_series_trend
from mock_data import HRVSample, MockDataGenerator, SleepSample

logger = logging.getLogger(__name__)


@dataclass
class HRVMetrics:
    """HRV window summary for the requested period."""
    days: int
    start_date: str
    end_date: str
    current: HRVSample
    average: int
    minimum: int
    maximum: int
    std_dev: float
    trend: TrendResult
    distribution: Dict[str, int]
    low_day_fraction: float
    recent: List[HRVSample]


@dataclass(frozen=True)
class SleepDebt:
    """Cumulative shortfall against the nightly sleep target."""
    total_hours: float
    avg_per_night: float
    status: str  # "minimal", "moderate", "significant"


@dataclass(frozen=True)
class SleepConsistency:
    """Bedtime/wake-time spread in minutes."""
    bedtime_variance: int
    wake_time_variance: int
    consistency_score: float


@dataclass
class SleepMetrics:
    """Sleep window summary for the requested period."""
    days: int
    start_date: str
    end_date: str
    last_night: SleepSample
    avg_duration: float
    avg_score: int
    avg_deep_sleep: float
    avg_rem_sleep: float
    avg_bedtime: str
    avg_wake_time: str
    duration_trend: TrendResult
    quality_trend: TrendResult
    sufficient_sleep_days: int
    best_night: SleepSample
    worst_night: SleepSample
    debt: SleepDebt
    consistency: SleepConsistency
    recent: List[SleepSample]


@dataclass(frozen=True)
class HealthStatus:
    """Today's snapshot. Built fresh on every request, never cached."""
    date: str
    hrv_current: int
    hrv_trend: str  # "up", "down", "stable"
    hrv_category: str
    last_night_hours: float
    avg_7_day: float
    sleep_score: int
    steps: int
    active_calories: int
    exercise_minutes: int
    alerts: Tuple[str, ...]


@dataclass(frozen=True)
class AlertThreshold:
    """One evaluated alert rule."""
    metric: str
    threshold: float
    current: float
    status: str  # "ok", "warning", "critical"
    message: str


@dataclass(frozen=True)
class AlertRule:
    """Static alert definition: warn when the status field drops below threshold."""
    metric: str
    threshold: float
    field: str
    warning_message: str
    ok_message: str


ALERT_RULES: Tuple[AlertRule, ...] = (
    AlertRule("HRV", 30, "hrv_current",
              "HRV below recovery threshold", "HRV within normal range"),
    AlertRule("Sleep Duration", 6, "last_night_hours",
              "Insufficient sleep duration", "Sleep duration adequate"),
    AlertRule("Daily Steps", 5000, "steps",
              "Below recommended daily steps", "Meeting step goals"),
)

SLEEP_TARGET_HOURS = 8


def calculate_sleep_debt(durations: Sequence[float],
                         target_hours: float = SLEEP_TARGET_HOURS) -> SleepDebt:
    """
    Sum nightly shortfalls against the target.

    Args:
        durations: Nightly sleep durations in hours
        target_hours: Nightly target (8h)

    Returns:
        SleepDebt; significant above 5h, moderate above 2h, else minimal
    """
    if len(durations) == 0:
        return SleepDebt(total_hours=0.0, avg_per_night=0.0, status="minimal")

    shortfall = np.clip(target_hours - np.asarray(durations, dtype=float), 0, None)
    total = float(shortfall.sum())

    if total > 5:
        status = "significant"
    elif total > 2:
        status = "moderate"
    else:
        status = "minimal"

    return SleepDebt(
        total_hours=round_half_up(total, 1),
        avg_per_night=round_half_up(total / len(durations), 1),
        status=status
    )


def calculate_sleep_consistency(bedtimes: Sequence[str],
                                wake_times: Sequence[str]) -> SleepConsistency:
    """Score schedule regularity: 100 minus the mean of both spreads, floored at 0."""
    bedtime_variance = round_half_up(time_variance(bedtimes))
    wake_time_variance = round_half_up(time_variance(wake_times))
    return SleepConsistency(
        bedtime_variance=bedtime_variance,
        wake_time_variance=wake_time_variance,
        consistency_score=max(0, 100 - (bedtime_variance + wake_time_variance) / 2)
    )


def evaluate_alert_thresholds(status: HealthStatus) -> List[AlertThreshold]:
    """Check every alert rule against a status snapshot (strict < comparison)."""
    results = []
    for rule in ALERT_RULES:
        current = getattr(status, rule.field)
        below = current < rule.threshold
        results.append(AlertThreshold(
            metric=rule.metric,
            threshold=rule.threshold,
            current=current,
            status="warning" if below else "ok",
            message=rule.warning_message if below else rule.ok_message
        ))
    return results


class HealthAnalyzer:
    """
    Health analytics engine.
    Pulls fresh series from the generator for every request and reduces
    them to metric dataclasses.
    """

    LOW_HRV_MS = 30
    MIN_SLEEP_HOURS = 6
    SUFFICIENT_SLEEP_HOURS = 7
    STATUS_WINDOW_DAYS = 7
    RECENT_DAYS_SHOWN = 10

    def __init__(self, generator: Optional[MockDataGenerator] = None):
        """
        Initialize the analyzer.

        Args:
            generator: Source of daily series (defaults to an unseeded MockDataGenerator)
        """
        self.generator = generator or MockDataGenerator()

    @property
    def today(self):
        return self.generator.today

    def _build_dataframe(self, samples: Sequence[Any]) -> pd.DataFrame:
        """Convert sample dataclasses into a DataFrame, one row per day."""
        return pd.DataFrame([asdict(sample) for sample in samples])

    def analyze_hrv(self, days: int) -> HRVMetrics:
        """
        Analyze HRV over the requested window.

        Args:
            days: Window length (already validated by the caller)

        Returns:
            HRVMetrics dataclass
        """
        samples = self.generator.generate_hrv(days)
        hrv_df = self._build_dataframe(samples)
        values = hrv_df["value"].tolist()

        counts = hrv_df["category"].value_counts()
        distribution = {
            category: int(counts.get(category, 0))
            for category in ("low", "normal", "high")
        }

        metrics = HRVMetrics(
            days=days,
            start_date=samples[0].date,
            end_date=samples[-1].date,
            current=samples[-1],
            average=round_half_up(mean(values)),
            minimum=int(hrv_df["value"].min()),
            maximum=int(hrv_df["value"].max()),
            std_dev=round_half_up(stddev(values), 1),
            trend=classify_hrv_trend(values),
            distribution=distribution,
            low_day_fraction=distribution["low"] / len(samples),
            recent=samples[-self.RECENT_DAYS_SHOWN:]
        )
        logger.debug("HRV %dd: avg=%s trend=%s", days, metrics.average, metrics.trend.direction)
        return metrics

    def analyze_sleep(self, days: int) -> SleepMetrics:
        """
        Analyze sleep over the requested window.

        Args:
            days: Window length (already validated by the caller)

        Returns:
            SleepMetrics dataclass
        """
        samples = self.generator.generate_sleep(days)
        sleep_df = self._build_dataframe(samples)
        durations = sleep_df["duration_hours"].tolist()
        scores = sleep_df["sleep_score"].tolist()

        # idxmax/idxmin return the first occurrence on ties
        best_night = samples[int(sleep_df["sleep_score"].idxmax())]
        worst_night = samples[int(sleep_df["sleep_score"].idxmin())]

        metrics = SleepMetrics(
            days=days,
            start_date=samples[0].date,
            end_date=samples[-1].date,
            last_night=samples[-1],
            avg_duration=round_half_up(mean(durations), 1),
            avg_score=round_half_up(mean(scores)),
            avg_deep_sleep=round_half_up(sleep_df["deep_sleep_hours"].mean(), 1),
            avg_rem_sleep=round_half_up(sleep_df["rem_sleep_hours"].mean(), 1),
            avg_bedtime=circular_time_average(sleep_df["bedtime"].tolist()),
            avg_wake_time=circular_time_average(sleep_df["wake_time"].tolist()),
            duration_trend=classify_series_trend(durations),
            quality_trend=classify_series_trend(scores),
            sufficient_sleep_days=int((sleep_df["duration_hours"] >= self.SUFFICIENT_SLEEP_HOURS).sum()),
            best_night=best_night,
            worst_night=worst_night,
            debt=calculate_sleep_debt(durations),
            consistency=calculate_sleep_consistency(
                sleep_df["bedtime"].tolist(), sleep_df["wake_time"].tolist()
            ),
            recent=samples[-self.RECENT_DAYS_SHOWN:]
        )
        logger.debug("Sleep %dd: avg=%sh debt=%sh", days, metrics.avg_duration, metrics.debt.total_hours)
        return metrics

    def analyze_status(self) -> HealthStatus:
        """Build today's snapshot from a fresh week of HRV and sleep plus activity."""
        recent_hrv = self.generator.generate_hrv(self.STATUS_WINDOW_DAYS)
        recent_sleep = self.generator.generate_sleep(self.STATUS_WINDOW_DAYS)
        activity = self.generator.generate_activity()

        current_hrv = recent_hrv[-1]
        last_night = recent_sleep[-1]

        hrv_trend = "stable"
        if len(recent_hrv) > 1:
            previous = recent_hrv[-2].value
            if current_hrv.value > previous:
                hrv_trend = "up"
            elif current_hrv.value < previous:
                hrv_trend = "down"

        alerts = []
        if current_hrv.value < self.LOW_HRV_MS:
            alerts.append("🔴 HRV is low - consider rest day")
        if last_night.duration_hours < self.MIN_SLEEP_HOURS:
            alerts.append("😴 Insufficient sleep last night")

        return HealthStatus(
            date=self.today.isoformat(),
            hrv_current=current_hrv.value,
            hrv_trend=hrv_trend,
            hrv_category=current_hrv.category,
            last_night_hours=last_night.duration_hours,
            avg_7_day=round_half_up(mean([s.duration_hours for s in recent_sleep]), 1),
            sleep_score=last_night.sleep_score,
            steps=activity["steps"],
            active_calories=activity["active_calories"],
            exercise_minutes=activity["exercise_minutes"],
            alerts=tuple(alerts)
        )

    def analyze_alerts(self) -> List[AlertThreshold]:
        """Evaluate the alert rules against a freshly generated status."""
        status = self.analyze_status()
        thresholds = evaluate_alert_thresholds(status)
        logger.debug("Alert check: %s", [(t.metric, t.status) for t in thresholds])
        return thresholds
