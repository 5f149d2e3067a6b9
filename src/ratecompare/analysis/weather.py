"""Correlate daily usage with outside temperature.

All temperatures are Fahrenheit. Usage and weather are joined on exact date.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from ..models import DailyTotal, DailyWeather

DEFAULT_BASE_TEMP_F = 65.0
MIN_PAIRED_DAYS = 30
BASE_TEMP_LOW_USAGE_FRACTION = 0.10  # lowest-usage days used to estimate the base temperature
BASE_TEMP_MARGIN_F = 5.0
MIN_SLOPE_DAYS = 10  # need more than this many cold/hot days for a slope
SENSITIVITY_KWH_PER_F = 0.1


@dataclass(frozen=True)
class PairedDay:
    date: date
    temp: float
    usage: float


@dataclass(frozen=True)
class DegreeDays:
    heating: float
    cooling: float


@dataclass(frozen=True)
class WeatherCorrelation:
    """Usage-vs-temperature regression results."""

    r: float
    slope: float  # kWh/day per °F
    intercept: float
    base_temp: float  # temperature of minimal HVAC draw
    heating_slope: float | None
    cooling_slope: float | None
    paired_days: int

    @property
    def has_heating(self) -> bool:
        return self.heating_slope is not None and self.heating_slope < -SENSITIVITY_KWH_PER_F

    @property
    def has_cooling(self) -> bool:
        return self.cooling_slope is not None and self.cooling_slope > SENSITIVITY_KWH_PER_F

    @property
    def strength(self) -> str:
        magnitude = abs(self.r)
        if magnitude > 0.5:
            return "strong"
        if magnitude > 0.3:
            return "moderate"
        return "weak"

    def expected_usage(self, temp: float) -> float:
        return self.intercept + self.slope * temp


def pearson_r(xs: Sequence[float], ys: Sequence[float]) -> float:
    """Pearson correlation coefficient; 0 when undefined."""
    n = len(xs)
    if n < 2 or n != len(ys):
        return 0.0
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)
    sum_y2 = sum(y * y for y in ys)

    var_x = n * sum_x2 - sum_x * sum_x
    var_y = n * sum_y2 - sum_y * sum_y
    if var_x <= 0 or var_y <= 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / (var_x * var_y) ** 0.5


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> tuple[float, float]:
    """Ordinary least squares fit of ys on xs. Returns (slope, intercept)."""
    n = len(xs)
    if n == 0:
        return 0.0, 0.0
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)

    denominator = n * sum_x2 - sum_x * sum_x
    slope = (n * sum_xy - sum_x * sum_y) / denominator if denominator != 0 else 0.0
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def pair_with_weather(
    daily: Iterable[DailyTotal], weather: Iterable[DailyWeather]
) -> list[PairedDay]:
    """Join daily usage to weather on exact date."""
    temps = {w.date: w.temp_mean for w in weather if w.temp_mean is not None}
    return [
        PairedDay(date=d.date, temp=temps[d.date], usage=d.total_usage)
        for d in daily
        if d.date in temps
    ]


def _restricted_slope(days: list[PairedDay]) -> float | None:
    if len(days) <= MIN_SLOPE_DAYS:
        return None
    slope, _ = linear_regression([p.temp for p in days], [p.usage for p in days])
    return slope


def correlate_weather(
    daily: Sequence[DailyTotal],
    weather: Sequence[DailyWeather] | None,
    min_days: int = MIN_PAIRED_DAYS,
) -> WeatherCorrelation | None:
    """Regress daily usage on mean temperature.

    Returns None when fewer than `min_days` days can be paired with weather.
    The base temperature is the mean temperature of the lowest-usage 10% of
    days; heating and cooling slopes are fit separately on days more than
    5°F below or above it.
    """
    if not weather:
        return None
    paired = pair_with_weather(daily, weather)
    if len(paired) < min_days or len(paired) < 2:
        return None

    temps = [p.temp for p in paired]
    usages = [p.usage for p in paired]
    r = pearson_r(temps, usages)
    slope, intercept = linear_regression(temps, usages)

    by_usage = sorted(paired, key=lambda p: p.usage)
    low_usage = by_usage[: max(int(len(paired) * BASE_TEMP_LOW_USAGE_FRACTION), 1)]
    base_temp = sum(p.temp for p in low_usage) / len(low_usage)

    cold_days = [p for p in paired if p.temp < base_temp - BASE_TEMP_MARGIN_F]
    hot_days = [p for p in paired if p.temp > base_temp + BASE_TEMP_MARGIN_F]

    return WeatherCorrelation(
        r=r,
        slope=slope,
        intercept=intercept,
        base_temp=base_temp,
        heating_slope=_restricted_slope(cold_days),
        cooling_slope=_restricted_slope(hot_days),
        paired_days=len(paired),
    )


def calculate_degree_days(
    weather: Iterable[DailyWeather], base_temp: float = DEFAULT_BASE_TEMP_F
) -> DegreeDays:
    """Heating and cooling degree days relative to `base_temp`."""
    heating = 0.0
    cooling = 0.0
    for day in weather:
        heating += max(base_temp - day.temp_mean, 0.0)
        cooling += max(day.temp_mean - base_temp, 0.0)
    return DegreeDays(heating=heating, cooling=cooling)


def temperature_adjusted(
    daily: Sequence[DailyTotal],
    weather: Iterable[DailyWeather],
    correlation: WeatherCorrelation,
) -> list[tuple[date, float]]:
    """Usage normalised to the average temperature.

    Each day with weather becomes global_mean + (actual - expected); days
    without weather keep their actual usage.
    """
    if not daily:
        return []
    mean = sum(d.total_usage for d in daily) / len(daily)
    temps = {w.date: w.temp_mean for w in weather if w.temp_mean is not None}

    adjusted = []
    for d in daily:
        temp = temps.get(d.date)
        if temp is None:
            adjusted.append((d.date, d.total_usage))
        else:
            residual = d.total_usage - correlation.expected_usage(temp)
            adjusted.append((d.date, mean + residual))
    return adjusted
