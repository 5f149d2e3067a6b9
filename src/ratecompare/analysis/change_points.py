"""Detect sustained month-over-month shifts in baseline daily usage."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from ..models import DailyTotal, DailyWeather, MonthKey
from ..rates import is_winter_month
from .weather import WeatherCorrelation, temperature_adjusted

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangePointConfig:
    """Heuristic thresholds for change-point detection."""

    min_days: int = 90  # Need at least 3 months of daily data
    min_days_per_month: int = 14
    min_months: int = 4
    min_change_percent: float = 25.0
    weather_adjusted_min_change_percent: float = 20.0
    persistence_percent: float = 15.0  # next month must stay within this of the new level
    oscillation_factor: float = 0.5  # fraction of the threshold the shift must hold vs two months back
    min_weather_days: int = 30
    min_correlation: float = 0.3
    max_change_points: int = 2


@dataclass(frozen=True)
class MonthAverage:
    key: MonthKey
    average: float
    day_count: int
    first_date: date

    @property
    def is_winter(self) -> bool:
        return is_winter_month(self.key.month)


@dataclass(frozen=True)
class ChangePoint:
    """A persistent shift in average daily usage starting at `date`."""

    date: date
    before_avg: float
    after_avg: float
    change_percent: float  # absolute value
    direction: str  # 'up' or 'down'


def _percent_change(new: float, old: float) -> float | None:
    if old == 0:
        return None
    return (new - old) / old * 100


def monthly_averages(
    series: Sequence[tuple[date, float]], min_days_per_month: int = 14
) -> list[MonthAverage]:
    """Average daily usage per calendar month, keeping months with enough days."""
    grouped: dict[MonthKey, list[tuple[date, float]]] = {}
    for day, usage in series:
        grouped.setdefault(MonthKey.from_date(day), []).append((day, usage))

    months = []
    for key in sorted(grouped):
        days = grouped[key]
        if len(days) < min_days_per_month:
            continue
        months.append(
            MonthAverage(
                key=key,
                average=sum(u for _, u in days) / len(days),
                day_count=len(days),
                first_date=min(d for d, _ in days),
            )
        )
    return months


def detect_change_points(
    daily: Sequence[DailyTotal],
    weather: Sequence[DailyWeather] | None = None,
    correlation: WeatherCorrelation | None = None,
    config: ChangePointConfig | None = None,
) -> list[ChangePoint]:
    """Find months where average daily usage shifted and stayed shifted.

    A month qualifies when it differs from the previous month by at least the
    threshold, the following month stays close to it, and it also differs
    from two months back (so a single spike is not reported). When the
    weather correlation is strong enough, usage is first normalised for
    temperature; otherwise comparisons across the winter/summer boundary are
    skipped. Returns at most `max_change_points`, most recent first.
    """
    config = config or ChangePointConfig()
    if len(daily) < config.min_days:
        return []

    weather_adjusted = (
        weather is not None
        and correlation is not None
        and correlation.paired_days >= config.min_weather_days
        and abs(correlation.r) > config.min_correlation
    )
    if weather_adjusted:
        series = temperature_adjusted(daily, weather, correlation)
        threshold = config.weather_adjusted_min_change_percent
    else:
        series = [(d.date, d.total_usage) for d in daily]
        threshold = config.min_change_percent

    months = monthly_averages(series, config.min_days_per_month)
    if len(months) < config.min_months:
        return []

    changes: list[ChangePoint] = []
    for i in range(2, len(months) - 1):
        two_back, prev, curr, nxt = months[i - 2], months[i - 1], months[i], months[i + 1]

        if not weather_adjusted and prev.is_winter != curr.is_winter:
            continue

        change = _percent_change(curr.average, prev.average)
        if change is None or abs(change) < threshold:
            continue

        persistence = _percent_change(nxt.average, curr.average)
        vs_two_back = _percent_change(curr.average, two_back.average)
        if persistence is None or vs_two_back is None:
            continue

        if abs(persistence) < config.persistence_percent and abs(vs_two_back) >= (
            threshold * config.oscillation_factor
        ):
            changes.append(
                ChangePoint(
                    date=curr.first_date,
                    before_avg=prev.average,
                    after_avg=curr.average,
                    change_percent=abs(change),
                    direction="up" if change > 0 else "down",
                )
            )

    logger.debug(
        "Change point scan: %d months, threshold %.0f%%, weather adjusted=%s, found %d",
        len(months),
        threshold,
        weather_adjusted,
        len(changes),
    )
    changes.reverse()
    return changes[: config.max_change_points]
