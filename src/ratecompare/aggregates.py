"""Fold interval records into monthly, hour-of-week and daily buckets."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from .models import (
    DailyTotal,
    HourlyAverage,
    HourOfWeekBucket,
    HourOfWeekKey,
    MonthKey,
    MonthlyBucket,
    UsageRecord,
    day_of_week,
)
from .rates import RateClassifier, RatePeriod


@dataclass
class Aggregation:
    """Result of aggregating one set of usage records."""

    monthly: dict[MonthKey, MonthlyBucket] = field(default_factory=dict)
    hour_of_week: dict[HourOfWeekKey, HourOfWeekBucket] = field(default_factory=dict)
    daily: dict[date, DailyTotal] = field(default_factory=dict)

    @property
    def month_count(self) -> int:
        return len(self.monthly)

    @property
    def total_usage(self) -> float:
        return sum(bucket.total_usage for bucket in self.monthly.values())

    @property
    def peak_usage(self) -> float:
        return sum(bucket.peak_usage for bucket in self.monthly.values())

    @property
    def off_peak_usage(self) -> float:
        return sum(bucket.off_peak_usage for bucket in self.monthly.values())

    def monthly_buckets(self) -> list[MonthlyBucket]:
        return [self.monthly[key] for key in sorted(self.monthly)]

    def daily_series(self) -> list[DailyTotal]:
        """Daily totals in chronological order."""
        return [self.daily[d] for d in sorted(self.daily)]

    def hourly_averages(self) -> list[HourlyAverage]:
        return [
            HourlyAverage(hour=key.hour, weekday=key.weekday, average=bucket.average)
            for key, bucket in sorted(self.hour_of_week.items())
        ]


class UsageAggregator:
    """Attributes each record to exactly one month, day and hour-of-week bucket."""

    def __init__(self, classifier: RateClassifier | None = None):
        self.classifier = classifier or RateClassifier()

    def aggregate(self, records: Iterable[UsageRecord]) -> Aggregation:
        result = Aggregation()

        for record in records:
            hour = record.hour
            dow = day_of_week(record.date)
            month_key = MonthKey.from_date(record.date)
            rates = self.classifier.classify(record.date.month, hour, dow)
            usage = record.usage_kwh
            is_peak = rates.tou_period is RatePeriod.PEAK

            monthly = result.monthly.get(month_key)
            if monthly is None:
                monthly = result.monthly[month_key] = MonthlyBucket(key=month_key)
            monthly.total_usage += usage
            monthly.tou_energy_cost += usage * rates.tou_rate
            monthly.tou_super_energy_cost += usage * rates.tou_super_rate
            monthly.interval_count += 1
            monthly.days.add(record.date)
            if is_peak:
                monthly.peak_usage += usage
            else:
                monthly.off_peak_usage += usage
            if rates.tou_super_period is RatePeriod.SUPER_OFF_PEAK:
                monthly.super_off_peak_usage += usage

            how_key = HourOfWeekKey(dow, hour)
            cell = result.hour_of_week.get(how_key)
            if cell is None:
                cell = result.hour_of_week[how_key] = HourOfWeekBucket(key=how_key)
            cell.total += usage
            cell.count += 1

            daily = result.daily.get(record.date)
            if daily is None:
                daily = result.daily[record.date] = DailyTotal(date=record.date)
            daily.total_usage += usage
            daily.hourly_usage[hour] += usage
            daily.interval_count += 1
            if is_peak:
                daily.peak_usage += usage
            else:
                daily.off_peak_usage += usage

        return result


def aggregate_usage(
    records: Iterable[UsageRecord], classifier: RateClassifier | None = None
) -> Aggregation:
    return UsageAggregator(classifier).aggregate(records)


def calculate_daily_usage(
    records: Iterable[UsageRecord], classifier: RateClassifier | None = None
) -> list[DailyTotal]:
    """Chronological daily totals with peak/off-peak split."""
    return aggregate_usage(records, classifier).daily_series()


def calculate_hourly_averages(
    records: Iterable[UsageRecord], classifier: RateClassifier | None = None
) -> list[HourlyAverage]:
    """Average interval usage per (weekday, hour) cell."""
    return aggregate_usage(records, classifier).hourly_averages()
