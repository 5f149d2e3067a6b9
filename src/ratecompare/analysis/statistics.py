"""Descriptive statistics over the daily usage series.

Everything here works on daily totals, not individual intervals. Standard
deviations are population figures (divide by N).
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from ..config import AnalysisConfig
from ..models import DailyTotal, DailyWeather
from ..rates import is_winter_month
from .change_points import ChangePoint, detect_change_points
from .weather import WeatherCorrelation, correlate_weather

DAYS_PER_MONTH = 30
TREND_STABLE_KWH = 0.5  # kWh/day per month
PEAK_TO_BASE_FLOOR = 0.1


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid]) / 2


def std_dev(values: Sequence[float], mean_value: float | None = None) -> float:
    if not values:
        return 0.0
    if mean_value is None:
        mean_value = mean(values)
    return math.sqrt(sum((v - mean_value) ** 2 for v in values) / len(values))


def coefficient_of_variation(std: float, mean_value: float) -> float:
    """Std dev as a percentage of the mean."""
    if mean_value == 0:
        return 0.0
    return std / mean_value * 100


def percentile(sorted_values: Sequence[float], fraction: float) -> float:
    """Nearest-rank style percentile: sorted_values[floor(n * fraction)]."""
    if not sorted_values:
        return 0.0
    index = min(int(len(sorted_values) * fraction), len(sorted_values) - 1)
    return sorted_values[index]


def linear_trend(values: Sequence[float]) -> float:
    """OLS slope of values against their index (units per step)."""
    n = len(values)
    if n < 2:
        return 0.0
    sum_x = n * (n - 1) / 2
    sum_x2 = (n - 1) * n * (2 * n - 1) / 6
    sum_y = sum(values)
    sum_xy = sum(i * v for i, v in enumerate(values))
    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / denominator


def monthly_trend(values: Sequence[float]) -> float:
    """Daily trend expressed as kWh/day change per month."""
    return linear_trend(values) * DAYS_PER_MONTH


def lag1_autocorrelation(values: Sequence[float]) -> float:
    """Pearson correlation between each day and the next."""
    if len(values) < 2:
        return 0.0
    xs = values[:-1]
    ys = values[1:]
    n = len(xs)
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    sum_x2 = sum(x * x for x in xs)
    sum_y2 = sum(y * y for y in ys)

    var_x = n * sum_x2 - sum_x * sum_x
    var_y = n * sum_y2 - sum_y * sum_y
    if var_x <= 0 or var_y <= 0:
        return 0.0
    return (n * sum_xy - sum_x * sum_y) / (math.sqrt(var_x) * math.sqrt(var_y))


@dataclass(frozen=True)
class Anomaly:
    date: date
    usage: float
    z_score: float

    @property
    def is_high(self) -> bool:
        return self.z_score > 0


def detect_anomalies(
    daily: Sequence[DailyTotal],
    threshold: float = 2.5,
    mean_value: float | None = None,
    std: float | None = None,
) -> list[Anomaly]:
    """Days whose z-score magnitude exceeds `threshold`, most extreme first."""
    usages = [d.total_usage for d in daily]
    if mean_value is None:
        mean_value = mean(usages)
    if std is None:
        std = std_dev(usages, mean_value)
    if std == 0:
        return []

    anomalies = []
    for d in daily:
        z = (d.total_usage - mean_value) / std
        if abs(z) > threshold:
            anomalies.append(Anomaly(date=d.date, usage=d.total_usage, z_score=z))
    return sorted(anomalies, key=lambda a: abs(a.z_score), reverse=True)


def day_of_week_means(daily: Sequence[DailyTotal], fallback: float) -> list[float]:
    """Mean daily usage for Sunday..Saturday; empty weekdays use `fallback`."""
    by_day: list[list[float]] = [[] for _ in range(7)]
    for d in daily:
        by_day[d.day_of_week].append(d.total_usage)
    return [mean(values) if values else fallback for values in by_day]


def weekly_pattern_strength(daily: Sequence[DailyTotal], mean_value: float | None = None) -> float:
    """Spread of the seven day-of-week means as a percentage of the overall mean."""
    if mean_value is None:
        mean_value = mean([d.total_usage for d in daily])
    if mean_value == 0:
        return 0.0
    dow_means = day_of_week_means(daily, mean_value)
    variance = sum((m - mean_value) ** 2 for m in dow_means) / 7
    return math.sqrt(variance) / mean_value * 100


def baseload(sorted_values: Sequence[float]) -> float:
    """Always-on floor: mean of the 5th and 10th percentile days."""
    return (percentile(sorted_values, 0.05) + percentile(sorted_values, 0.10)) / 2


def peak_to_base_ratio(sorted_values: Sequence[float]) -> float:
    if not sorted_values:
        return 0.0
    return percentile(sorted_values, 0.95) / max(percentile(sorted_values, 0.05), PEAK_TO_BASE_FLOOR)


def skew_direction(mean_value: float, median_value: float) -> str:
    if mean_value > median_value:
        return "right"
    if mean_value < median_value:
        return "left"
    return "symmetric"


@dataclass(frozen=True)
class BoxStats:
    min: float
    p25: float
    median: float
    p75: float
    max: float
    mean: float


def box_stats(values: Sequence[float], min_count: int = 5) -> BoxStats | None:
    if len(values) < min_count:
        return None
    ordered = sorted(values)
    return BoxStats(
        min=ordered[0],
        p25=percentile(ordered, 0.25),
        median=percentile(ordered, 0.5),
        p75=percentile(ordered, 0.75),
        max=ordered[-1],
        mean=mean(ordered),
    )


@dataclass(frozen=True)
class SeasonalSplit:
    """Winter (Oct-Mar) vs summer (Apr-Sep) daily usage."""

    winter_avg: float
    summer_avg: float
    winter_days: int
    summer_days: int
    winter_box: BoxStats | None
    summer_box: BoxStats | None

    @property
    def ratio(self) -> float:
        low = min(self.winter_avg, self.summer_avg)
        if low == 0:
            return 0.0
        return max(self.winter_avg, self.summer_avg) / low

    @property
    def heating_dominant(self) -> bool:
        return self.winter_avg > self.summer_avg


def seasonal_split(daily: Sequence[DailyTotal], min_days: int = 7) -> SeasonalSplit | None:
    """Compare calendar seasons; None unless both have more than `min_days` days."""
    winter = [d.total_usage for d in daily if is_winter_month(d.date.month)]
    summer = [d.total_usage for d in daily if not is_winter_month(d.date.month)]
    if len(winter) <= min_days or len(summer) <= min_days:
        return None
    return SeasonalSplit(
        winter_avg=mean(winter),
        summer_avg=mean(summer),
        winter_days=len(winter),
        summer_days=len(summer),
        winter_box=box_stats(winter),
        summer_box=box_stats(summer),
    )


@dataclass(frozen=True)
class UsageStatistics:
    """Bundle of daily-usage statistics and interpretations."""

    day_count: int
    mean: float
    median: float
    std_dev: float
    cv: float
    monthly_trend: float
    autocorrelation: float
    weekly_pattern_strength: float
    day_of_week_means: list[float]
    p5: float
    p10: float
    p95: float
    baseload: float
    peak_to_base: float
    anomalies: list[Anomaly] = field(default_factory=list)
    seasons: SeasonalSplit | None = None
    weather: WeatherCorrelation | None = None
    change_points: list[ChangePoint] = field(default_factory=list)

    @property
    def baseload_percent(self) -> float:
        if self.mean == 0:
            return 0.0
        return self.baseload / self.mean * 100

    @property
    def skew_direction(self) -> str:
        return skew_direction(self.mean, self.median)

    @property
    def trend_label(self) -> str:
        if self.monthly_trend > TREND_STABLE_KWH:
            return "up"
        if self.monthly_trend < -TREND_STABLE_KWH:
            return "down"
        return "stable"

    @property
    def variability_label(self) -> str:
        if self.cv < 20:
            return "consistent"
        if self.cv < 40:
            return "moderate"
        return "high"

    @property
    def weekly_pattern_label(self) -> str:
        return "strong" if self.weekly_pattern_strength > 10 else "weak"

    @property
    def predictability_label(self) -> str:
        if self.autocorrelation > 0.5:
            return "high"
        if self.autocorrelation > 0.2:
            return "moderate"
        return "low"

    @property
    def load_shape_label(self) -> str:
        if self.peak_to_base > 3:
            return "spiky"
        if self.peak_to_base > 2:
            return "moderate"
        return "flat"


def analyze_daily_usage(
    daily: Sequence[DailyTotal],
    weather: Sequence[DailyWeather] | None = None,
    config: AnalysisConfig | None = None,
) -> UsageStatistics | None:
    """Compute every daily statistic. None when there are too few days."""
    config = config or AnalysisConfig()
    series = sorted(daily, key=lambda d: d.date)
    if len(series) < config.min_days:
        return None

    usages = [d.total_usage for d in series]
    ordered = sorted(usages)
    avg = mean(usages)
    std = std_dev(usages, avg)

    correlation = correlate_weather(series, weather, config.min_weather_days)

    return UsageStatistics(
        day_count=len(series),
        mean=avg,
        median=median(usages),
        std_dev=std,
        cv=coefficient_of_variation(std, avg),
        monthly_trend=monthly_trend(usages),
        autocorrelation=lag1_autocorrelation(usages),
        weekly_pattern_strength=weekly_pattern_strength(series, avg),
        day_of_week_means=day_of_week_means(series, avg),
        p5=percentile(ordered, 0.05),
        p10=percentile(ordered, 0.10),
        p95=percentile(ordered, 0.95),
        baseload=baseload(ordered),
        peak_to_base=peak_to_base_ratio(ordered),
        anomalies=detect_anomalies(series, config.anomaly_threshold, avg, std),
        seasons=seasonal_split(series, config.min_season_days),
        weather=correlation,
        change_points=detect_change_points(series, weather, correlation, config.change_points),
    )
