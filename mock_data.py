"""
Mock Data Generator - The Ingestion Layer
Synthesizes plausible daily HRV, sleep and activity readings.
NO REAL PERSONAL DATA - only example data for demos and agents.
"""

import logging
import math
import random
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional

from bio_stats import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HRVSample:
    """One day of heart-rate variability (milliseconds)."""
    date: str
    value: int
    category: str  # "low", "normal", "high"


@dataclass(frozen=True)
class SleepSample:
    """One night of sleep architecture."""
    date: str
    duration_hours: float
    deep_sleep_hours: float
    rem_sleep_hours: float
    sleep_score: int
    bedtime: str  # HH:MM
    wake_time: str  # HH:MM, always bedtime + duration_hours


def categorize_hrv(value: float) -> str:
    """Bucket an HRV reading into low (<30), high (>60) or normal."""
    if value < 30:
        return "low"
    elif value > 60:
        return "high"
    return "normal"


class MockDataGenerator:
    """
    Generates synthetic daily series ending at today.

    The random source only needs a ``random()`` method returning floats in
    [0, 1), so tests can pass a scripted source to pin exact outputs.
    """

    BASE_HRV_MS = 45
    HRV_SPREAD_MS = 20
    HRV_FLOOR_MS = 20
    HRV_CEILING_MS = 80

    MIN_SLEEP_HOURS = 6.5
    SLEEP_SPREAD_HOURS = 2.5
    EARLIEST_BEDTIME_HOUR = 22

    BASE_STEPS = 8500
    BASE_ACTIVE_CALORIES = 450
    BASE_EXERCISE_MINUTES = 25

    def __init__(self, rng: Optional[Any] = None, today: Optional[date] = None):
        """
        Initialize the generator.

        Args:
            rng: Random source exposing random() (defaults to random.Random())
            today: Last day of every generated series (defaults to date.today())
        """
        self.rng = rng if rng is not None else random.Random()
        self.today = today or date.today()

    def _dates(self, days: int) -> List[date]:
        """Calendar days for the window, oldest first, ending today."""
        return [self.today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]

    def generate_hrv(self, days: int) -> List[HRVSample]:
        """
        Generate one HRV sample per day.

        Args:
            days: Window length (positive)

        Returns:
            Samples ordered oldest first
        """
        samples = []
        for day in self._dates(days):
            variation = (self.rng.random() - 0.5) * self.HRV_SPREAD_MS
            raw = max(self.HRV_FLOOR_MS, min(self.HRV_CEILING_MS, self.BASE_HRV_MS + variation))
            value = round_half_up(raw)
            samples.append(HRVSample(
                date=day.isoformat(),
                value=value,
                category=categorize_hrv(value)
            ))
        logger.debug("Generated %d HRV samples ending %s", len(samples), self.today)
        return samples

    def generate_sleep(self, days: int) -> List[SleepSample]:
        """
        Generate one sleep sample per night.

        Args:
            days: Window length (positive)

        Returns:
            Samples ordered oldest first
        """
        samples = []
        for day in self._dates(days):
            duration = self.MIN_SLEEP_HOURS + self.rng.random() * self.SLEEP_SPREAD_HOURS
            deep = duration * (0.15 + self.rng.random() * 0.10)
            rem = duration * (0.20 + self.rng.random() * 0.10)

            hour = self.EARLIEST_BEDTIME_HOUR + math.floor(self.rng.random() * 3)
            minute = math.floor(self.rng.random() * 60)
            # hour 24 rolls over to 00:xx of the next day
            bedtime = datetime.combine(day, time()) + timedelta(hours=hour, minutes=minute)

            duration_hours = round_half_up(duration, 1)
            wake_time = bedtime + timedelta(minutes=round_half_up(duration_hours * 60))

            samples.append(SleepSample(
                date=day.isoformat(),
                duration_hours=duration_hours,
                deep_sleep_hours=round_half_up(deep, 1),
                rem_sleep_hours=round_half_up(rem, 1),
                sleep_score=round_half_up(60 + self.rng.random() * 35),
                bedtime=bedtime.strftime("%H:%M"),
                wake_time=wake_time.strftime("%H:%M")
            ))
        logger.debug("Generated %d sleep samples ending %s", len(samples), self.today)
        return samples

    def generate_activity(self) -> Dict[str, int]:
        """Generate a single day of activity totals (no cross-day series)."""
        return {
            "steps": self.BASE_STEPS + math.floor(self.rng.random() * 3000),
            "active_calories": self.BASE_ACTIVE_CALORIES + math.floor(self.rng.random() * 200),
            "exercise_minutes": self.BASE_EXERCISE_MINUTES + math.floor(self.rng.random() * 40)
        }
