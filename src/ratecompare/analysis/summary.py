"""Run the full analysis pipeline and produce JSON-friendly summaries."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..aggregates import Aggregation, UsageAggregator
from ..config import AnalysisConfig
from ..costs import CostCalculator, PeakShiftEstimate, PlanComparison
from ..models import (
    CostTotals,
    DailyWeather,
    HourlyAverage,
    MonthlyStats,
    UsageRecord,
    round_hundredths,
)
from ..rates import SCHEDULE_NAMES, RateClassifier, Schedule
from ..tariffs import DEFAULT_RATE_TABLE, RateTable
from .patterns import (
    DAY_NAMES,
    Benchmark,
    HighUsageDay,
    LoadProfile,
    WeekdayComparison,
    benchmark_usage,
    high_usage_days,
    interval_load_profile,
    weekday_comparison,
)
from .seasonal import SeasonalComparison, seasonal_comparison
from .statistics import UsageStatistics, analyze_daily_usage
from .weather import DegreeDays, calculate_degree_days

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything computed from one set of usage records."""

    table: RateTable
    aggregation: Aggregation
    monthly_stats: list[MonthlyStats]
    hourly_averages: list[HourlyAverage]
    totals: CostTotals
    statistics: UsageStatistics | None = None
    weekday: WeekdayComparison | None = None
    high_usage_days: list[HighUsageDay] = field(default_factory=list)
    load_profile: LoadProfile | None = None
    benchmark: Benchmark | None = None
    seasonal: SeasonalComparison | None = None
    degree_days: DegreeDays | None = None
    weather_days: int = 0

    @property
    def day_count(self) -> int:
        return len(self.aggregation.daily)

    def comparison(self, current_plan: Schedule = Schedule.FLAT) -> PlanComparison:
        return CostCalculator(self.table).compare(self.totals, current_plan)

    def peak_shift(self, shift_percent: float = 20.0) -> PeakShiftEstimate:
        return CostCalculator(self.table).peak_shift_savings(
            self.aggregation.peak_usage,
            self.aggregation.off_peak_usage,
            self.totals,
            shift_percent,
        )


def analyze_records(
    records: Sequence[UsageRecord],
    weather: Sequence[DailyWeather] | None = None,
    table: RateTable | None = None,
    config: AnalysisConfig | None = None,
) -> AnalysisResult:
    """Aggregate, cost and analyse interval records."""
    table = table or DEFAULT_RATE_TABLE
    aggregation = UsageAggregator(RateClassifier(table)).aggregate(records)
    calculator = CostCalculator(table)
    daily = aggregation.daily_series()

    logger.info(
        "Analysing %d records over %d days (%d months)",
        len(records),
        len(daily),
        aggregation.month_count,
    )

    return AnalysisResult(
        table=table,
        aggregation=aggregation,
        monthly_stats=calculator.monthly_stats(aggregation),
        hourly_averages=aggregation.hourly_averages(),
        totals=calculator.total_costs(aggregation),
        statistics=analyze_daily_usage(daily, weather, config),
        weekday=weekday_comparison(daily) if daily else None,
        high_usage_days=high_usage_days(daily, weather),
        load_profile=interval_load_profile(records),
        benchmark=benchmark_usage(aggregation.total_usage, len(daily)),
        seasonal=seasonal_comparison(daily, weather),
        degree_days=calculate_degree_days(weather) if weather else None,
        weather_days=len(weather or []),
    )


def _r(value: float | None) -> float | None:
    return None if value is None else round_hundredths(value)


def _statistics_summary(stats: UsageStatistics) -> dict:
    summary = {
        "days": stats.day_count,
        "mean": _r(stats.mean),
        "median": _r(stats.median),
        "std_dev": _r(stats.std_dev),
        "cv_percent": _r(stats.cv),
        "variability": stats.variability_label,
        "skew": stats.skew_direction,
        "monthly_trend": _r(stats.monthly_trend),
        "trend": stats.trend_label,
        "autocorrelation": _r(stats.autocorrelation),
        "predictability": stats.predictability_label,
        "weekly_pattern_strength": _r(stats.weekly_pattern_strength),
        "weekly_pattern": stats.weekly_pattern_label,
        "day_of_week_means": {
            DAY_NAMES[i]: _r(value) for i, value in enumerate(stats.day_of_week_means)
        },
        "percentiles": {"p5": _r(stats.p5), "p10": _r(stats.p10), "p95": _r(stats.p95)},
        "baseload": _r(stats.baseload),
        "baseload_percent": _r(stats.baseload_percent),
        "peak_to_base": _r(stats.peak_to_base),
        "load_shape": stats.load_shape_label,
        "anomalies": [
            {
                "date": a.date.isoformat(),
                "usage": _r(a.usage),
                "z_score": _r(a.z_score),
                "direction": "high" if a.is_high else "low",
            }
            for a in stats.anomalies
        ],
        "seasons": None,
        "weather": None,
        "change_points": [
            {
                "date": cp.date.isoformat(),
                "before_avg": _r(cp.before_avg),
                "after_avg": _r(cp.after_avg),
                "change_percent": _r(cp.change_percent),
                "direction": cp.direction,
            }
            for cp in stats.change_points
        ],
    }

    if stats.seasons:
        s = stats.seasons
        summary["seasons"] = {
            "winter_avg": _r(s.winter_avg),
            "summer_avg": _r(s.summer_avg),
            "winter_days": s.winter_days,
            "summer_days": s.summer_days,
            "ratio": _r(s.ratio),
            "heating_dominant": s.heating_dominant,
        }

    if stats.weather:
        w = stats.weather
        summary["weather"] = {
            "r": _r(w.r),
            "strength": w.strength,
            "slope": _r(w.slope),
            "intercept": _r(w.intercept),
            "base_temp": _r(w.base_temp),
            "heating_slope": _r(w.heating_slope),
            "cooling_slope": _r(w.cooling_slope),
            "has_heating": w.has_heating,
            "has_cooling": w.has_cooling,
            "paired_days": w.paired_days,
        }
    return summary


def build_summary(result: AnalysisResult, current_plan: Schedule = Schedule.FLAT) -> dict:
    """Bundle an analysis into a dict rounded to 2 decimal places."""
    comparison = result.comparison(current_plan)
    daily = result.aggregation.daily_series()
    total = result.aggregation.total_usage
    peak = result.aggregation.peak_usage

    summary: dict = {
        "rate_table": {
            "name": result.table.name,
            "effective_date": result.table.effective_date,
        },
        "period": {
            "start": daily[0].date.isoformat() if daily else None,
            "end": daily[-1].date.isoformat() if daily else None,
            "days": len(daily),
            "months": result.aggregation.month_count,
        },
        "usage": {
            "total_kwh": _r(total),
            "peak_kwh": _r(peak),
            "off_peak_kwh": _r(result.aggregation.off_peak_usage),
            "peak_percent": _r(peak / total * 100) if total > 0 else 0,
            "daily_avg_kwh": _r(total / len(daily)) if daily else 0,
        },
        "monthly": [
            {
                "month": m.month,
                "total_usage": m.total_usage,
                "flat_cost": m.flat_cost,
                "tou_cost": m.tou_cost,
                "tou_super_cost": m.tou_super_cost,
                "peak_usage": m.peak_usage,
                "off_peak_usage": m.off_peak_usage,
            }
            for m in result.monthly_stats
        ],
        "plans": {
            "current": current_plan.value,
            "best": comparison.best_plan.value,
            "yearly_savings": _r(comparison.yearly_savings),
            "savings_percent": _r(comparison.savings_percent),
            "costs": [
                {
                    "schedule": p.schedule.value,
                    "name": SCHEDULE_NAMES[p.schedule][0],
                    "total": _r(p.total),
                    "monthly": _r(p.monthly),
                    "yearly": _r(p.yearly),
                    "savings_vs_current": _r(p.savings_vs_current),
                }
                for p in comparison.plans
            ],
        },
        "hourly_averages": [
            {"weekday": h.weekday, "hour": h.hour, "average": _r(h.average)}
            for h in result.hourly_averages
        ],
        "statistics": _statistics_summary(result.statistics) if result.statistics else None,
        "weekday": None,
        "high_usage_days": [
            {
                "date": d.date.isoformat(),
                "usage": _r(d.usage),
                "percent_above_average": _r(d.percent_above_average),
                "temp_mean": _r(d.temp_mean),
                "temperature": d.temperature_context,
            }
            for d in result.high_usage_days
        ],
        "load_profile": None,
        "benchmark": None,
        "seasonal": None,
        "degree_days": None,
    }

    if result.day_count and result.totals.month_count:
        shift = result.peak_shift()
        summary["plans"]["peak_shift"] = {
            "shift_percent": _r(shift.shift_percent),
            "shifted_kwh": _r(shift.shifted_kwh),
            "monthly_savings": _r(shift.monthly_savings),
            "yearly_savings": _r(shift.yearly_savings),
        }

    if result.weekday:
        summary["weekday"] = {
            "averages": {DAY_NAMES[i]: _r(v) for i, v in enumerate(result.weekday.averages)},
            "weekday_avg": _r(result.weekday.weekday_avg),
            "weekend_avg": _r(result.weekday.weekend_avg),
            "weekend_difference_percent": _r(result.weekday.weekend_difference_percent),
        }

    if result.load_profile:
        lp = result.load_profile
        summary["load_profile"] = {
            "baseline_kw": _r(lp.baseline_kw),
            "baseline_monthly_kwh": _r(lp.baseline_monthly_kwh),
            "peak_hour": lp.peak_hour,
            "lowest_hour": lp.lowest_hour,
            "peak_hour_ratio": _r(lp.peak_hour_ratio),
            "significant_overnight": lp.significant_overnight,
        }

    if result.benchmark:
        b = result.benchmark
        summary["benchmark"] = {
            "monthly_avg_kwh": _r(b.monthly_avg_kwh),
            "vs_us_percent": _r(b.vs_us_percent),
            "vs_us": b.vs_us_label,
            "vs_regional_percent": _r(b.vs_regional_percent),
            "vs_regional": b.vs_regional_label,
        }

    if result.seasonal:
        s = result.seasonal
        summary["seasonal"] = {
            "uses_weather": s.uses_weather,
            "difference_percent": _r(s.difference_percent),
            "cold": {
                "days": s.cold.day_count,
                "avg_daily_kwh": _r(s.cold.avg_daily_usage),
                "peak_percent": _r(s.cold.peak_percent),
                "avg_temp": _r(s.cold.avg_temp),
            },
            "warm": {
                "days": s.warm.day_count,
                "avg_daily_kwh": _r(s.warm.avg_daily_usage),
                "peak_percent": _r(s.warm.peak_percent),
                "avg_temp": _r(s.warm.avg_temp),
            },
        }

    if result.degree_days:
        summary["degree_days"] = {
            "heating": _r(result.degree_days.heating),
            "cooling": _r(result.degree_days.cooling),
            "weather_days": result.weather_days,
        }

    return summary


def format_summary_text(summary: dict) -> str:
    """Format an analysis summary as human-readable text."""
    period = summary["period"]
    usage = summary["usage"]
    plans = summary["plans"]
    names = {p["schedule"]: p["name"] for p in plans["costs"]}

    lines = [
        f"Usage Summary: {period['start']} to {period['end']}",
        f"({period['days']} days, {period['months']} months)",
        "",
        "Usage:",
        f"  - Total: {usage['total_kwh']} kWh ({usage['daily_avg_kwh']} kWh/day)",
        f"  - Peak: {usage['peak_kwh']} kWh ({usage['peak_percent']}%)",
        "",
        "Plans:",
    ]
    for plan in plans["costs"]:
        marker = " (current)" if plan["schedule"] == plans["current"] else ""
        lines.append(f"  - {plan['name']}{marker}: ${plan['total']:.2f} (${plan['yearly']:.2f}/yr)")

    if plans["best"] != plans["current"] and plans["yearly_savings"] > 0:
        lines.append(
            f"  Switching to {names[plans['best']]} would save about "
            f"${plans['yearly_savings']:.2f}/yr ({plans['savings_percent']}%)"
        )
    else:
        lines.append("  You're already on the cheapest plan for this usage.")

    stats = summary.get("statistics")
    if stats:
        lines.extend([
            "",
            "Patterns:",
            f"  - Daily average {stats['mean']} kWh, variability {stats['variability']} "
            f"({stats['cv_percent']}%)",
            f"  - Trend: {stats['trend']} ({stats['monthly_trend']:+} kWh/day per month)",
            f"  - Always-on baseload: {stats['baseload']} kWh/day ({stats['baseload_percent']}%)",
        ])
        if stats["weather"]:
            w = stats["weather"]
            lines.append(
                f"  - Weather correlation: {w['strength']} (r={w['r']}, {w['paired_days']} days)"
            )
        for cp in stats["change_points"]:
            lines.append(
                f"  - Usage went {cp['direction']} {cp['change_percent']}% from {cp['date']}"
            )
        if stats["anomalies"]:
            lines.append(f"  - Unusual days: {len(stats['anomalies'])}")

    if summary.get("high_usage_days"):
        lines.extend(["", "Highest usage days:"])
        for day in summary["high_usage_days"]:
            temp = f", {day['temperature']}" if day["temperature"] else ""
            lines.append(
                f"  - {day['date']}: {day['usage']} kWh "
                f"(+{day['percent_above_average']}%{temp})"
            )

    return "\n".join(lines)
