"""Secondary usage patterns: day-of-week, top days, interval load profile, benchmarks."""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from ..models import DailyTotal, DailyWeather, UsageRecord
from ..rates import is_weekend
from .statistics import mean, percentile

DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# Average monthly residential usage (kWh)
US_AVERAGE_MONTHLY_KWH = 886  # EIA 2023
REGIONAL_AVERAGE_MONTHLY_KWH = 950  # Pacific Northwest, more electric heat
DAYS_PER_MONTH = 30.44

NIGHT_HOURS = (23, 0, 1, 2, 3, 4)
MIDDAY_HOURS = (10, 11, 12, 13, 14, 15)
INTERVALS_PER_HOUR = 4


@dataclass(frozen=True)
class WeekdayComparison:
    averages: list[float]  # Sunday..Saturday average daily kWh
    weekday_avg: float
    weekend_avg: float

    @property
    def weekend_difference_percent(self) -> float:
        if self.weekday_avg == 0:
            return 0.0
        return (self.weekend_avg - self.weekday_avg) / self.weekday_avg * 100


def weekday_comparison(daily: Sequence[DailyTotal]) -> WeekdayComparison:
    """Average daily usage for each day of the week (over distinct dates)."""
    by_day: list[list[float]] = [[] for _ in range(7)]
    for d in daily:
        by_day[d.day_of_week].append(d.total_usage)
    averages = [mean(values) for values in by_day]

    weekday = [averages[i] for i in range(7) if not is_weekend(i)]
    weekend = [averages[i] for i in range(7) if is_weekend(i)]
    return WeekdayComparison(
        averages=averages,
        weekday_avg=sum(weekday) / len(weekday),
        weekend_avg=sum(weekend) / len(weekend),
    )


def temperature_context(temp_mean: float) -> str:
    if temp_mean <= 35:
        return "cold"
    if temp_mean >= 80:
        return "hot"
    if temp_mean <= 45:
        return "cool"
    if temp_mean >= 70:
        return "warm"
    return "mild"


@dataclass(frozen=True)
class HighUsageDay:
    date: date
    usage: float
    percent_above_average: float
    temp_mean: float | None = None

    @property
    def temperature_context(self) -> str | None:
        if self.temp_mean is None:
            return None
        return temperature_context(self.temp_mean)


def high_usage_days(
    daily: Sequence[DailyTotal],
    weather: Sequence[DailyWeather] | None = None,
    limit: int = 5,
) -> list[HighUsageDay]:
    """Highest-usage days with how far above the average they were."""
    if not daily:
        return []
    temps = {w.date: w.temp_mean for w in weather or []}
    average = mean([d.total_usage for d in daily])
    top = sorted(daily, key=lambda d: d.total_usage, reverse=True)[:limit]
    return [
        HighUsageDay(
            date=d.date,
            usage=d.total_usage,
            percent_above_average=(d.total_usage - average) / average * 100 if average else 0.0,
            temp_mean=temps.get(d.date),
        )
        for d in top
    ]


@dataclass(frozen=True)
class LoadProfile:
    """Interval-level load shape."""

    baseline_interval_kwh: float  # 5th percentile interval
    peak_hour: int | None
    lowest_hour: int | None
    peak_hour_ratio: float
    night_avg_interval_kwh: float
    midday_avg_interval_kwh: float

    @property
    def baseline_kw(self) -> float:
        """Continuous always-on draw in kWh per hour."""
        return self.baseline_interval_kwh * INTERVALS_PER_HOUR

    @property
    def baseline_monthly_kwh(self) -> float:
        return self.baseline_interval_kwh * INTERVALS_PER_HOUR * 24 * 30

    @property
    def significant_overnight(self) -> bool:
        return (
            self.night_avg_interval_kwh > self.midday_avg_interval_kwh * 1.5
            and self.night_avg_interval_kwh > self.baseline_interval_kwh * 2
        )


def interval_load_profile(records: Sequence[UsageRecord]) -> LoadProfile | None:
    """Baseline, busiest/quietest hour and overnight share from raw intervals."""
    if not records:
        return None

    ordered = sorted(r.usage_kwh for r in records)
    baseline = percentile(ordered, 0.05)

    totals: dict[int, list[float]] = {}
    for r in records:
        totals.setdefault(r.hour, []).append(r.usage_kwh)
    hourly_avg = {hour: mean(values) for hour, values in totals.items()}

    by_avg = sorted(hourly_avg.items(), key=lambda item: item[1], reverse=True)
    peak_hour, peak_value = by_avg[0]
    lowest_hour, lowest_value = by_avg[-1]

    return LoadProfile(
        baseline_interval_kwh=baseline,
        peak_hour=peak_hour,
        lowest_hour=lowest_hour,
        peak_hour_ratio=peak_value / (lowest_value or 0.01),
        night_avg_interval_kwh=sum(hourly_avg.get(h, 0.0) for h in NIGHT_HOURS) / len(NIGHT_HOURS),
        midday_avg_interval_kwh=sum(hourly_avg.get(h, 0.0) for h in MIDDAY_HOURS) / len(MIDDAY_HOURS),
    )


def _benchmark_label(percent: float) -> str:
    if percent > 10:
        return "higher"
    if percent < -10:
        return "lower"
    return "average"


@dataclass(frozen=True)
class Benchmark:
    monthly_avg_kwh: float
    vs_us_percent: float
    vs_regional_percent: float

    @property
    def vs_us_label(self) -> str:
        return _benchmark_label(self.vs_us_percent)

    @property
    def vs_regional_label(self) -> str:
        return _benchmark_label(self.vs_regional_percent)


def benchmark_usage(total_usage: float, day_count: int) -> Benchmark | None:
    """Compare average monthly usage to US and regional averages."""
    if day_count <= 0:
        return None
    monthly = total_usage / day_count * DAYS_PER_MONTH
    return Benchmark(
        monthly_avg_kwh=monthly,
        vs_us_percent=(monthly - US_AVERAGE_MONTHLY_KWH) / US_AVERAGE_MONTHLY_KWH * 100,
        vs_regional_percent=(monthly - REGIONAL_AVERAGE_MONTHLY_KWH)
        / REGIONAL_AVERAGE_MONTHLY_KWH
        * 100,
    )
