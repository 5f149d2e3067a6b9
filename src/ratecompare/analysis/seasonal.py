"""Cold-day vs warm-day comparison of usage and peak share."""

from collections.abc import Sequence
from dataclasses import dataclass

from ..models import DailyTotal, DailyWeather
from ..rates import is_winter_month

COLD_THRESHOLD_F = 50  # days at or below are "cold"
WARM_THRESHOLD_F = 65  # days at or above are "warm"
MIN_WEATHER_DAYS = 30


@dataclass(frozen=True)
class SeasonGroup:
    day_count: int
    total_usage: float
    peak_usage: float
    avg_temp: float | None

    @property
    def avg_daily_usage(self) -> float:
        if self.day_count == 0:
            return 0.0
        return self.total_usage / self.day_count

    @property
    def peak_percent(self) -> float:
        if self.total_usage == 0:
            return 0.0
        return self.peak_usage / self.total_usage * 100


@dataclass(frozen=True)
class SeasonalComparison:
    cold: SeasonGroup
    warm: SeasonGroup
    uses_weather: bool

    @property
    def difference_percent(self) -> float:
        """How much more (or less) a cold day uses than a warm day."""
        warm = self.warm.avg_daily_usage
        if warm == 0:
            return 0.0
        return (self.cold.avg_daily_usage - warm) / warm * 100


def _group(days: list[DailyTotal], temps: list[float]) -> SeasonGroup:
    return SeasonGroup(
        day_count=len(days),
        total_usage=sum(d.total_usage for d in days),
        peak_usage=sum(d.peak_usage for d in days),
        avg_temp=sum(temps) / len(temps) if temps else None,
    )


def seasonal_comparison(
    daily: Sequence[DailyTotal], weather: Sequence[DailyWeather] | None = None
) -> SeasonalComparison | None:
    """Split days into cold and warm groups.

    With more than 30 days of weather, days are classified by mean
    temperature and mild days in between are left out. Otherwise the
    calendar winter/summer split is used.
    """
    temps = {w.date: w.temp_mean for w in weather or []}
    uses_weather = len(temps) > MIN_WEATHER_DAYS

    cold: list[DailyTotal] = []
    warm: list[DailyTotal] = []
    cold_temps: list[float] = []
    warm_temps: list[float] = []

    for d in daily:
        temp = temps.get(d.date)
        if uses_weather and temp is not None:
            if temp <= COLD_THRESHOLD_F:
                cold.append(d)
                cold_temps.append(temp)
            elif temp >= WARM_THRESHOLD_F:
                warm.append(d)
                warm_temps.append(temp)
        elif is_winter_month(d.date.month):
            cold.append(d)
        else:
            warm.append(d)

    if not cold or not warm:
        return None
    return SeasonalComparison(
        cold=_group(cold, cold_temps),
        warm=_group(warm, warm_temps),
        uses_weather=uses_weather,
    )
