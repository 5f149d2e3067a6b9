from datetime import date, timedelta
from pathlib import Path

import pytest
from ratecompare.collectors.usage_export import load_export
from ratecompare.models import DailyTotal, DailyWeather, UsageRecord

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_export_path():
    """One weekday (Wed 2025-01-15) of 15-minute usage: 9.32 kWh total, 5.4 kWh peak."""
    return FIXTURES / "sample_export.csv"


@pytest.fixture
def sample_records(sample_export_path):
    return load_export(sample_export_path).records


@pytest.fixture
def make_daily():
    """Build consecutive DailyTotal rows from a list of usages."""

    def _make(usages, start=date(2025, 1, 1)):
        return [
            DailyTotal(date=start + timedelta(days=i), total_usage=usage)
            for i, usage in enumerate(usages)
        ]

    return _make


@pytest.fixture
def make_weather():
    def _make(temps, start=date(2025, 1, 1)):
        return [
            DailyWeather(
                date=start + timedelta(days=i),
                temp_max=temp + 5,
                temp_min=temp - 5,
                temp_mean=temp,
            )
            for i, temp in enumerate(temps)
        ]

    return _make


@pytest.fixture
def make_day_records():
    """96 records for one date, using `hourly` kWh per interval for each hour."""

    def _make(day, hourly=None):
        hourly = hourly or [0.1] * 24
        return [
            UsageRecord(
                date=day,
                start_time=f"{hour:02d}:{minute:02d}",
                end_time=f"{hour:02d}:{minute + 14:02d}",
                usage_kwh=hourly[hour],
            )
            for hour in range(24)
            for minute in (0, 15, 30, 45)
        ]

    return _make
