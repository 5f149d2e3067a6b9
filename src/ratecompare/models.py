"""Data models for interval usage, weather and derived buckets."""

from dataclasses import dataclass, field
from datetime import date
from typing import NamedTuple

ELECTRIC_USAGE = "Electric usage"


def round_hundredths(value: float) -> float:
    """Round to 2 decimal places. Only used at output boundaries."""
    return round(value + 0.0, 2)


def day_of_week(d: date) -> int:
    """Day of week with 0=Sunday ... 6=Saturday."""
    return d.isoweekday() % 7


def parse_hour(time_str: str) -> int:
    """Parse the hour out of an HH:MM string. Raises ValueError outside 0-23."""
    hour = int(time_str.split(":")[0])
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour out of range: {time_str!r}")
    return hour


@dataclass(frozen=True)
class UsageRecord:
    """A single metered interval."""

    date: date
    start_time: str  # HH:MM format
    end_time: str  # HH:MM format
    usage_kwh: float
    record_type: str = ELECTRIC_USAGE
    notes: str | None = None

    @property
    def hour(self) -> int:
        return parse_hour(self.start_time)


@dataclass(frozen=True)
class DailyWeather:
    """Daily temperature summary in Fahrenheit."""

    date: date
    temp_max: float
    temp_min: float
    temp_mean: float


class MonthKey(NamedTuple):
    year: int
    month: int

    @classmethod
    def from_date(cls, d: date) -> "MonthKey":
        return cls(d.year, d.month)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


class HourOfWeekKey(NamedTuple):
    weekday: int  # 0=Sunday
    hour: int


@dataclass
class MonthlyBucket:
    """Usage and time-of-use energy charges accumulated for one calendar month.

    The TOU cost fields hold energy charges only (rate x usage summed per
    interval); the basic charge is added by the cost calculator.
    """

    key: MonthKey
    total_usage: float = 0.0
    peak_usage: float = 0.0
    off_peak_usage: float = 0.0
    super_off_peak_usage: float = 0.0
    tou_energy_cost: float = 0.0
    tou_super_energy_cost: float = 0.0
    interval_count: int = 0
    days: set[date] = field(default_factory=set)


@dataclass
class HourOfWeekBucket:
    """Sum and count of interval usage for one (weekday, hour) cell."""

    key: HourOfWeekKey
    total: float = 0.0
    count: int = 0

    @property
    def average(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total / self.count


@dataclass
class DailyTotal:
    """Usage summed across all intervals of one date."""

    date: date
    total_usage: float = 0.0
    peak_usage: float = 0.0
    off_peak_usage: float = 0.0
    hourly_usage: list[float] = field(default_factory=lambda: [0.0] * 24)
    interval_count: int = 0

    @property
    def day_of_week(self) -> int:
        return day_of_week(self.date)


@dataclass(frozen=True)
class MonthlyStats:
    """Per-month cost comparison row."""

    month: str
    total_usage: float
    flat_cost: float
    tou_cost: float
    tou_super_cost: float
    peak_usage: float
    off_peak_usage: float


@dataclass(frozen=True)
class HourlyAverage:
    """Average interval usage for a weekday/hour cell (heatmap input)."""

    hour: int
    weekday: int
    average: float


@dataclass(frozen=True)
class CostTotals:
    """Total cost per schedule over all months of the data."""

    flat: float
    tou: float
    tou_super: float
    month_count: int
