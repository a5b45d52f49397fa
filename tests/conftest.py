import random
from datetime import date

import pytest

from mock_data import HRVSample, MockDataGenerator, SleepSample


class ScriptedRandom:
    """Random source that replays a fixed list of draws, cycling when exhausted."""

    def __init__(self, values):
        self._values = list(values)
        self._index = 0

    def random(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value


@pytest.fixture(scope="session")
def today() -> date:
    return date(2024, 3, 10)


@pytest.fixture
def seeded_generator(today) -> MockDataGenerator:
    """Generator with a seeded stdlib source, for property checks over many draws."""
    return MockDataGenerator(rng=random.Random(20240310), today=today)


@pytest.fixture
def scripted_generator(today):
    """Factory for generators that replay the given draws."""
    def _make(values) -> MockDataGenerator:
        return MockDataGenerator(rng=ScriptedRandom(values), today=today)
    return _make


class StrugglingGenerator(MockDataGenerator):
    """Fixed series with low HRV, short sleep and few steps."""

    def generate_hrv(self, days):
        return [HRVSample(date=d.isoformat(), value=25, category="low") for d in self._dates(days)]

    def generate_sleep(self, days):
        return [
            SleepSample(date=d.isoformat(), duration_hours=5.0, deep_sleep_hours=0.9,
                        rem_sleep_hours=1.1, sleep_score=62, bedtime="23:00", wake_time="04:00")
            for d in self._dates(days)
        ]

    def generate_activity(self):
        return {"steps": 3000, "active_calories": 300, "exercise_minutes": 5}


@pytest.fixture
def struggling_generator(today) -> MockDataGenerator:
    return StrugglingGenerator(today=today)
