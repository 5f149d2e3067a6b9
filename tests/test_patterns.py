from datetime import date

import pytest
from ratecompare.analysis.patterns import (
    benchmark_usage,
    high_usage_days,
    interval_load_profile,
    temperature_context,
    weekday_comparison,
)
from ratecompare.analysis.seasonal import seasonal_comparison
from ratecompare.models import DailyTotal


def test_weekday_comparison(make_daily):
    # 2025-01-01 is a Wednesday; two full weeks
    usages = [10.0] * 14
    usages[3] = usages[10] = 16.0  # Saturdays
    usages[4] = usages[11] = 14.0  # Sundays
    result = weekday_comparison(make_daily(usages))
    assert result.averages[6] == 16
    assert result.averages[0] == 14
    assert result.weekday_avg == 10
    assert result.weekend_avg == 15
    assert result.weekend_difference_percent == pytest.approx(50.0)


@pytest.mark.parametrize(
    "temp, label",
    [(30, "cold"), (35, "cold"), (40, "cool"), (55, "mild"), (72, "warm"), (85, "hot")],
)
def test_temperature_context(temp, label):
    assert temperature_context(temp) == label


def test_high_usage_days(make_daily, make_weather):
    daily = make_daily([10.0, 30.0, 12.0, 20.0, 8.0])
    weather = make_weather([50.0, 30.0, 50.0, 50.0, 50.0])
    top = high_usage_days(daily, weather, limit=2)
    assert [d.date for d in top] == [date(2025, 1, 2), date(2025, 1, 4)]
    assert top[0].percent_above_average == pytest.approx(87.5)  # average is 16
    assert top[0].temperature_context == "cold"
    assert top[1].temperature_context == "mild"


def test_high_usage_days_without_weather(make_daily):
    top = high_usage_days(make_daily([10.0, 30.0]))
    assert top[0].temp_mean is None
    assert top[0].temperature_context is None
    assert high_usage_days([]) == []


def test_interval_load_profile(sample_records):
    profile = interval_load_profile(sample_records)
    assert profile.baseline_interval_kwh == pytest.approx(0.05)
    assert profile.baseline_kw == pytest.approx(0.2)
    assert profile.peak_hour == 17
    assert profile.peak_hour_ratio == pytest.approx(5.0)
    assert profile.night_avg_interval_kwh == pytest.approx(0.05)
    assert not profile.significant_overnight


def test_overnight_load_detected(make_day_records):
    hourly = [0.05] * 24
    for hour in (23, 0, 1, 2, 3, 4):
        hourly[hour] = 0.5
    profile = interval_load_profile(make_day_records(date(2025, 1, 15), hourly))
    assert profile.significant_overnight


def test_interval_load_profile_empty():
    assert interval_load_profile([]) is None


def test_benchmark_usage():
    result = benchmark_usage(886.0, 30.44)
    assert result.monthly_avg_kwh == pytest.approx(886.0)
    assert result.vs_us_label == "average"
    assert result.vs_regional_label == "average"

    result = benchmark_usage(1200.0, 30.44)
    assert result.vs_us_label == "higher"
    assert benchmark_usage(300.0, 30.44).vs_regional_label == "lower"
    assert benchmark_usage(100.0, 0) is None


def test_seasonal_comparison_by_calendar():
    daily = [
        DailyTotal(date=date(2025, 1, d), total_usage=20.0, peak_usage=5.0) for d in range(1, 11)
    ] + [DailyTotal(date=date(2025, 7, d), total_usage=10.0, peak_usage=4.0) for d in range(1, 11)]
    result = seasonal_comparison(daily)
    assert not result.uses_weather
    assert result.cold.day_count == 10
    assert result.cold.avg_daily_usage == 20
    assert result.cold.peak_percent == pytest.approx(25.0)
    assert result.warm.peak_percent == pytest.approx(40.0)
    assert result.difference_percent == pytest.approx(100.0)


def test_seasonal_comparison_by_temperature(make_daily, make_weather):
    temps = [40.0] * 15 + [58.0] * 10 + [70.0] * 15
    daily = make_daily([20.0] * 15 + [15.0] * 10 + [10.0] * 15)
    result = seasonal_comparison(daily, make_weather(temps))
    assert result.uses_weather
    assert result.cold.day_count == 15
    assert result.warm.day_count == 15
    assert result.cold.avg_temp == 40
    assert result.warm.avg_daily_usage == 10


def test_seasonal_comparison_needs_both_groups(make_daily):
    assert seasonal_comparison(make_daily([10.0] * 20)) is None
