"""Rate period classification for the flat, TOU and TOU + super off-peak schedules."""

from dataclasses import dataclass
from enum import Enum

from .tariffs import DEFAULT_RATE_TABLE, RateTable

WEEKEND_DAYS = frozenset({0, 6})  # Sunday, Saturday


class Schedule(str, Enum):
    FLAT = "flat"
    TOU = "tou"
    TOU_SUPER = "tou_super"


SCHEDULE_NAMES = {
    Schedule.FLAT: ("Flat Rate", "Schedule 7"),
    Schedule.TOU: ("Time-of-Use", "Schedule 307"),
    Schedule.TOU_SUPER: ("TOU + Super Off-Peak", "Schedule 327"),
}


class RatePeriod(str, Enum):
    PEAK = "peak"
    OFF_PEAK = "off_peak"
    MID_PEAK = "mid_peak"
    SUPER_OFF_PEAK = "super_off_peak"


def is_weekend(day_of_week: int) -> bool:
    return day_of_week in WEEKEND_DAYS


def is_peak_hour(hour: int, day_of_week: int, table: RateTable = DEFAULT_RATE_TABLE) -> bool:
    """Weekday morning or evening peak window. Weekends are never peak."""
    if is_weekend(day_of_week):
        return False
    return table.morning_peak.contains(hour) or table.evening_peak.contains(hour)


def is_super_off_peak_hour(hour: int, table: RateTable = DEFAULT_RATE_TABLE) -> bool:
    """Overnight window (23:00-07:00), every day of the week."""
    return table.super_off_peak.contains(hour)


def is_winter_month(month: int, table: RateTable = DEFAULT_RATE_TABLE) -> bool:
    """Oct-Mar with 1-based calendar months."""
    return month in table.winter_months


@dataclass(frozen=True)
class IntervalRates:
    """Rate period and $/kWh for one interval under each time-varying schedule."""

    tou_period: RatePeriod
    tou_rate: float
    tou_super_period: RatePeriod
    tou_super_rate: float


class RateClassifier:
    """Maps (month, hour, day of week) to rate periods for a given rate table."""

    def __init__(self, table: RateTable = DEFAULT_RATE_TABLE):
        self.table = table

    def is_tou_peak(self, month: int, hour: int, day_of_week: int) -> bool:
        # The morning window only counts as peak during winter on Schedule 307
        if is_weekend(day_of_week):
            return False
        if self.table.evening_peak.contains(hour):
            return True
        return self.table.morning_peak.contains(hour) and is_winter_month(month, self.table)

    def tou_period(self, month: int, hour: int, day_of_week: int) -> RatePeriod:
        if self.is_tou_peak(month, hour, day_of_week):
            return RatePeriod.PEAK
        return RatePeriod.OFF_PEAK

    def tou_rate(self, month: int, hour: int, day_of_week: int) -> float:
        rates = self.table.tou
        if self.tou_period(month, hour, day_of_week) is RatePeriod.OFF_PEAK:
            return rates.off_peak_rate
        if is_winter_month(month, self.table):
            return rates.peak_rate_winter
        return rates.peak_rate_summer

    def tou_super_period(self, month: int, hour: int, day_of_week: int) -> RatePeriod:
        if is_super_off_peak_hour(hour, self.table):
            return RatePeriod.SUPER_OFF_PEAK
        if is_peak_hour(hour, day_of_week, self.table):
            return RatePeriod.PEAK
        return RatePeriod.MID_PEAK

    def tou_super_rate(self, month: int, hour: int, day_of_week: int) -> float:
        rates = self.table.tou_super
        period = self.tou_super_period(month, hour, day_of_week)
        if period is RatePeriod.SUPER_OFF_PEAK:
            return rates.super_off_peak_rate
        winter = is_winter_month(month, self.table)
        if period is RatePeriod.PEAK:
            return rates.peak_rate_winter if winter else rates.peak_rate_summer
        return rates.mid_peak_rate_winter if winter else rates.mid_peak_rate_summer

    def classify(self, month: int, hour: int, day_of_week: int) -> IntervalRates:
        return IntervalRates(
            tou_period=self.tou_period(month, hour, day_of_week),
            tou_rate=self.tou_rate(month, hour, day_of_week),
            tou_super_period=self.tou_super_period(month, hour, day_of_week),
            tou_super_rate=self.tou_super_rate(month, hour, day_of_week),
        )

    def flat_tier_rate(self, cumulative_monthly_kwh: float) -> float:
        """Marginal flat rate for the next kWh given usage so far this month."""
        flat = self.table.flat
        if cumulative_monthly_kwh < flat.tier1_limit_kwh:
            return flat.tier1_rate
        return flat.tier2_rate
