"""Synthetic usage and weather for trying the tool without an export."""

import math
import random
from datetime import date, timedelta

from .models import DailyWeather, UsageRecord, day_of_week
from .rates import is_weekend

DEFAULT_START = date(2025, 1, 1)
DEFAULT_END = date(2025, 6, 30)

# kWh per 15-minute interval for each hour of the day
HOURLY_PATTERN = [
    0.03, 0.02, 0.02, 0.02, 0.02, 0.03,  # 0-5am: low overnight
    0.08, 0.15, 0.12, 0.08,  # 6-9am: morning peak
    0.04, 0.03, 0.03, 0.03, 0.03, 0.04,  # 10am-3pm: daytime low
    0.06, 0.10, 0.18, 0.15,  # 4-7pm: evening peak
    0.12, 0.10, 0.08, 0.05,  # 8-11pm: evening decline
]

# Jan..Dec, higher in winter
SEASONAL_MULTIPLIERS = [1.4, 1.3, 1.1, 0.9, 0.8, 0.85, 0.9, 0.9, 0.85, 1.0, 1.2, 1.35]


def weekend_multiplier(dow: int, hour: int) -> float:
    """Weekends sleep in and spend more of the day at home."""
    if is_weekend(dow):
        if 6 <= hour <= 9:
            return 0.6
        if 10 <= hour <= 16:
            return 1.3
    return 1.0


def _days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def generate_demo_records(
    start: date = DEFAULT_START, end: date = DEFAULT_END, seed: int | None = None
) -> list[UsageRecord]:
    """Fifteen-minute records with morning/evening peaks and ±30% noise."""
    rng = random.Random(seed)
    records = []

    for day in _days(start, end):
        seasonal = SEASONAL_MULTIPLIERS[day.month - 1]
        dow = day_of_week(day)
        for hour in range(24):
            base = HOURLY_PATTERN[hour] * seasonal * weekend_multiplier(dow, hour)
            for interval in range(4):
                minute = interval * 15
                usage = round(base * rng.uniform(0.7, 1.3), 2)
                records.append(
                    UsageRecord(
                        date=day,
                        start_time=f"{hour:02d}:{minute:02d}",
                        end_time=f"{hour:02d}:{minute + 14:02d}",
                        usage_kwh=max(0.01, usage),
                    )
                )

    return records


def generate_demo_weather(
    start: date = DEFAULT_START, end: date = DEFAULT_END, seed: int | None = None
) -> list[DailyWeather]:
    """Daily Fahrenheit temperatures: ~40°F mid-January to ~68°F mid-July."""
    rng = random.Random(seed)
    weather = []

    for day in _days(start, end):
        # Coldest around day 15 of the year
        phase = 2 * math.pi * (day.timetuple().tm_yday - 15) / 365
        mean = 54 - 14 * math.cos(phase) + rng.uniform(-5, 5)
        spread = 6 + rng.uniform(0, 4)
        weather.append(
            DailyWeather(
                date=day,
                temp_max=round(mean + spread, 1),
                temp_min=round(mean - spread, 1),
                temp_mean=round(mean, 1),
            )
        )

    return weather
