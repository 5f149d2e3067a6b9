from datetime import date

import pytest
from ratecompare.analysis.weather import (
    calculate_degree_days,
    correlate_weather,
    linear_regression,
    pair_with_weather,
    pearson_r,
    temperature_adjusted,
)
from ratecompare.models import DailyWeather


def test_pearson_positive_correlation():
    # Usage rises with temperature (cooling load)
    temps = [60, 70, 80, 90]
    usage = [20, 25, 35, 45]
    assert pearson_r(temps, usage) > 0.9


def test_pearson_negative_correlation():
    # Usage falls as it warms up (heating load)
    temps = [30, 40, 50, 60]
    usage = [30, 25, 18, 12]
    assert pearson_r(temps, usage) < -0.9


def test_pearson_undefined_cases():
    assert pearson_r([50, 50, 50, 50], [10, 12, 15, 18]) == 0
    assert pearson_r([1], [2]) == 0
    assert pearson_r([1, 2], [1, 2, 3]) == 0


def test_linear_regression():
    slope, intercept = linear_regression([1, 2, 3, 4], [3, 5, 7, 9])
    assert slope == pytest.approx(2.0)
    assert intercept == pytest.approx(1.0)
    assert linear_regression([], []) == (0.0, 0.0)


def test_degree_days():
    weather = [
        DailyWeather(date(2025, 1, 15), 45, 35, 40),  # 25 HDD
        DailyWeather(date(2025, 1, 16), 50, 40, 45),  # 20 HDD
        DailyWeather(date(2025, 7, 15), 85, 65, 75),  # 10 CDD
        DailyWeather(date(2025, 7, 16), 90, 70, 80),  # 15 CDD
        DailyWeather(date(2025, 5, 15), 68, 58, 65),  # at base
    ]
    result = calculate_degree_days(weather)
    assert result.heating == 45
    assert result.cooling == 25

    result = calculate_degree_days(weather, base_temp=70)
    assert result.heating == 60
    assert result.cooling == 15


def test_degree_days_empty():
    result = calculate_degree_days([])
    assert result.heating == 0
    assert result.cooling == 0


def test_pair_with_weather_joins_on_date(make_daily, make_weather):
    daily = make_daily([10.0, 11.0, 12.0])
    weather = make_weather([40.0, 41.0], start=date(2025, 1, 2))
    paired = pair_with_weather(daily, weather)
    assert [(p.date, p.temp, p.usage) for p in paired] == [
        (date(2025, 1, 2), 40.0, 11.0),
        (date(2025, 1, 3), 41.0, 12.0),
    ]


def test_correlation_needs_thirty_days(make_daily, make_weather):
    temps = [30.0 + i for i in range(29)]
    daily = make_daily([50 - 0.5 * t for t in temps])
    assert correlate_weather(daily, make_weather(temps)) is None
    assert correlate_weather(daily, None) is None


def test_heating_correlation(make_daily, make_weather):
    temps = [30.0 + i for i in range(40)]  # 30..69°F
    daily = make_daily([50 - 0.5 * t for t in temps])
    result = correlate_weather(daily, make_weather(temps))

    assert result.r == pytest.approx(-1.0)
    assert result.slope == pytest.approx(-0.5)
    assert result.intercept == pytest.approx(50.0)
    assert result.strength == "strong"
    assert result.paired_days == 40
    # Lowest-usage 4 days are the warmest: 66..69°F
    assert result.base_temp == pytest.approx(67.5)
    assert result.heating_slope == pytest.approx(-0.5)
    assert result.has_heating
    assert result.cooling_slope is None
    assert not result.has_cooling
    assert result.expected_usage(40) == pytest.approx(30.0)


def test_temperature_adjusted_removes_weather(make_daily, make_weather):
    temps = [30.0 + i for i in range(40)]
    daily = make_daily([50 - 0.5 * t for t in temps])
    weather = make_weather(temps)
    correlation = correlate_weather(daily, weather)

    adjusted = temperature_adjusted(daily, weather, correlation)
    overall = sum(d.total_usage for d in daily) / len(daily)
    assert [d for d, _ in adjusted] == [d.date for d in daily]
    assert all(value == pytest.approx(overall) for _, value in adjusted)


def test_temperature_adjusted_keeps_days_without_weather(make_daily, make_weather):
    temps = [30.0 + i for i in range(40)]
    daily = make_daily([50 - 0.5 * t for t in temps] + [99.0])
    weather = make_weather(temps)
    correlation = correlate_weather(daily, weather)
    adjusted = temperature_adjusted(daily, weather, correlation)
    assert adjusted[-1][1] == 99.0
