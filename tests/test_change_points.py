import calendar
from datetime import date

import pytest
from ratecompare.analysis.change_points import (
    ChangePointConfig,
    detect_change_points,
    monthly_averages,
)
from ratecompare.analysis.weather import WeatherCorrelation
from ratecompare.models import DailyTotal, DailyWeather, MonthKey


def month_of(year, month, usage):
    days = calendar.monthrange(year, month)[1]
    return [DailyTotal(date=date(year, month, d), total_usage=usage) for d in range(1, days + 1)]


def series(*months, year=2025):
    """`months` is a list of (month, usage) pairs."""
    daily = []
    for month, usage in months:
        daily.extend(month_of(year, month, usage))
    return daily


def test_sustained_step_up():
    daily = series((4, 10.0), (5, 10.0), (6, 10.0), (7, 14.0), (8, 14.0))
    changes = detect_change_points(daily)
    assert len(changes) == 1
    change = changes[0]
    assert change.date == date(2025, 7, 1)
    assert change.direction == "up"
    assert change.before_avg == 10
    assert change.after_avg == 14
    assert change.change_percent == pytest.approx(40.0)


def test_sustained_step_down():
    daily = series((4, 20.0), (5, 20.0), (6, 20.0), (7, 12.0), (8, 12.0))
    changes = detect_change_points(daily)
    assert [c.direction for c in changes] == ["down"]


def test_single_month_spike_rejected():
    daily = series((4, 10.0), (5, 10.0), (6, 14.0), (7, 10.0), (8, 10.0))
    assert detect_change_points(daily) == []


def test_small_change_ignored():
    daily = series((4, 10.0), (5, 10.0), (6, 10.0), (7, 12.0), (8, 12.0))
    assert detect_change_points(daily) == []


def test_needs_ninety_days():
    # Four qualifying months, but only 80 days in total
    daily = [
        DailyTotal(date=date(2025, month, d), total_usage=usage)
        for month, usage in ((4, 10.0), (5, 10.0), (6, 14.0), (7, 14.0))
        for d in range(1, 21)
    ]
    assert len(daily) < 90
    assert detect_change_points(daily) == []


def test_short_months_do_not_count():
    daily = series((4, 10.0), (5, 10.0), (6, 10.0), (7, 14.0))
    # Only 10 days of August: not enough for a persistence check
    daily += [DailyTotal(date=date(2025, 8, d), total_usage=14.0) for d in range(1, 11)]
    assert detect_change_points(daily) == []


def test_season_boundary_skipped_without_weather():
    daily = series((2, 10.0), (3, 10.0), (4, 14.0), (5, 14.0), (6, 14.0))
    assert detect_change_points(daily) == []


def test_most_recent_first_and_limit():
    daily = series((4, 10.0), (5, 10.0), (6, 14.0), (7, 14.0), (8, 20.0), (9, 20.0))
    changes = detect_change_points(daily)
    assert [c.date for c in changes] == [date(2025, 8, 1), date(2025, 6, 1)]

    config = ChangePointConfig(max_change_points=1)
    assert [c.date for c in detect_change_points(daily, config=config)] == [date(2025, 8, 1)]


def test_weather_adjusted_crosses_season_boundary():
    daily = series((2, 10.0), (3, 10.0), (4, 14.0), (5, 14.0), (6, 14.0))
    weather = [DailyWeather(d.date, 55.0, 45.0, 50.0) for d in daily]
    # Flat temperature, so the adjustment leaves usage unchanged
    correlation = WeatherCorrelation(
        r=0.5,
        slope=0.0,
        intercept=12.0,
        base_temp=50.0,
        heating_slope=None,
        cooling_slope=None,
        paired_days=len(daily),
    )
    changes = detect_change_points(daily, weather, correlation)
    assert [c.date for c in changes] == [date(2025, 4, 1)]


def test_weak_correlation_not_used():
    daily = series((2, 10.0), (3, 10.0), (4, 14.0), (5, 14.0), (6, 14.0))
    weather = [DailyWeather(d.date, 55.0, 45.0, 50.0) for d in daily]
    correlation = WeatherCorrelation(0.1, 0.0, 12.0, 50.0, None, None, len(daily))
    assert detect_change_points(daily, weather, correlation) == []


def test_monthly_averages():
    daily = series((1, 10.0), (2, 20.0))
    months = monthly_averages([(d.date, d.total_usage) for d in daily])
    assert [m.key for m in months] == [MonthKey(2025, 1), MonthKey(2025, 2)]
    assert months[1].average == 20
    assert months[1].day_count == 28
    assert months[0].is_winter
