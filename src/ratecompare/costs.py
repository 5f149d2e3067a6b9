"""Per-schedule cost calculation from aggregated usage."""

from dataclasses import dataclass

from .aggregates import Aggregation
from .models import CostTotals, MonthlyBucket, MonthlyStats, round_hundredths
from .rates import Schedule
from .tariffs import DEFAULT_RATE_TABLE, RateTable


def calculate_flat_rate_cost(monthly_kwh: float, table: RateTable = DEFAULT_RATE_TABLE) -> float:
    """Schedule 7 cost for one calendar month of usage, including the basic charge."""
    flat = table.flat
    kwh = max(monthly_kwh, 0.0)
    if kwh <= flat.tier1_limit_kwh:
        return table.basic_charge + kwh * flat.tier1_rate
    return (
        table.basic_charge
        + flat.tier1_limit_kwh * flat.tier1_rate
        + (kwh - flat.tier1_limit_kwh) * flat.tier2_rate
    )


@dataclass(frozen=True)
class PlanCost:
    schedule: Schedule
    total: float
    monthly: float
    yearly: float
    savings_vs_current: float  # positive when cheaper than the current plan


@dataclass(frozen=True)
class PlanComparison:
    """Costs of every schedule relative to the customer's current plan."""

    current_plan: Schedule
    best_plan: Schedule
    plans: list[PlanCost]
    month_count: int

    def plan(self, schedule: Schedule) -> PlanCost:
        for plan in self.plans:
            if plan.schedule is schedule:
                return plan
        raise KeyError(schedule)

    @property
    def yearly_savings(self) -> float:
        """Yearly savings from switching to the best plan."""
        return self.plan(self.current_plan).yearly - self.plan(self.best_plan).yearly

    @property
    def savings_percent(self) -> float:
        current = self.plan(self.current_plan).total
        if current == 0:
            return 0.0
        best = self.plan(self.best_plan).total
        return (current - best) / current * 100


@dataclass(frozen=True)
class PeakShiftEstimate:
    """What-if estimate for moving part of peak usage to off-peak on TOU."""

    shift_percent: float
    shifted_kwh: float
    additional_savings: float
    period_savings: float
    monthly_savings: float
    yearly_savings: float


class CostCalculator:
    """Applies a rate table to aggregated usage."""

    def __init__(self, table: RateTable = DEFAULT_RATE_TABLE):
        self.table = table

    def flat_rate_cost(self, monthly_kwh: float) -> float:
        return calculate_flat_rate_cost(monthly_kwh, self.table)

    def tou_cost(self, bucket: MonthlyBucket) -> float:
        return self.table.basic_charge + bucket.tou_energy_cost

    def tou_super_cost(self, bucket: MonthlyBucket) -> float:
        return self.table.basic_charge + bucket.tou_super_energy_cost

    def monthly_stats(self, aggregation: Aggregation) -> list[MonthlyStats]:
        """One rounded row per calendar month, sorted by month."""
        return [
            MonthlyStats(
                month=str(bucket.key),
                total_usage=round_hundredths(bucket.total_usage),
                flat_cost=round_hundredths(self.flat_rate_cost(bucket.total_usage)),
                tou_cost=round_hundredths(self.tou_cost(bucket)),
                tou_super_cost=round_hundredths(self.tou_super_cost(bucket)),
                peak_usage=round_hundredths(bucket.peak_usage),
                off_peak_usage=round_hundredths(bucket.off_peak_usage),
            )
            for bucket in aggregation.monthly_buckets()
        ]

    def total_costs(self, aggregation: Aggregation) -> CostTotals:
        """Sum each schedule over all months; flat tiers reset every month."""
        flat = tou = tou_super = 0.0
        for bucket in aggregation.monthly.values():
            flat += self.flat_rate_cost(bucket.total_usage)
            tou += self.tou_cost(bucket)
            tou_super += self.tou_super_cost(bucket)
        return CostTotals(
            flat=flat, tou=tou, tou_super=tou_super, month_count=aggregation.month_count
        )

    def compare(self, totals: CostTotals, current_plan: Schedule = Schedule.FLAT) -> PlanComparison:
        costs = {
            Schedule.FLAT: totals.flat,
            Schedule.TOU: totals.tou,
            Schedule.TOU_SUPER: totals.tou_super,
        }
        months = totals.month_count
        current_cost = costs[current_plan]
        best_plan = min(costs, key=costs.get)

        plans = [
            PlanCost(
                schedule=schedule,
                total=cost,
                monthly=cost / months if months else 0.0,
                yearly=cost * 12 / months if months else 0.0,
                savings_vs_current=current_cost - cost,
            )
            for schedule, cost in costs.items()
        ]
        return PlanComparison(
            current_plan=current_plan, best_plan=best_plan, plans=plans, month_count=months
        )

    def peak_shift_savings(
        self,
        peak_usage: float,
        off_peak_usage: float,
        totals: CostTotals,
        shift_percent: float = 20.0,
    ) -> PeakShiftEstimate:
        """Estimate TOU savings if `shift_percent` of peak kWh moved off-peak.

        Uses the average of the winter and summer peak rates, so it is a
        rough figure on top of the exact flat-vs-TOU difference.
        """
        if not 0 <= shift_percent <= 100:
            raise ValueError(f"shift_percent must be between 0 and 100, got {shift_percent}")

        tou = self.table.tou
        avg_peak_rate = (tou.peak_rate_winter + tou.peak_rate_summer) / 2
        shifted = peak_usage * shift_percent / 100

        current = peak_usage * avg_peak_rate + off_peak_usage * tou.off_peak_rate
        shifted_cost = (peak_usage - shifted) * avg_peak_rate + (
            off_peak_usage + shifted
        ) * tou.off_peak_rate
        additional = current - shifted_cost

        period_savings = (totals.flat - totals.tou) + additional
        monthly = period_savings / totals.month_count if totals.month_count else 0.0
        return PeakShiftEstimate(
            shift_percent=shift_percent,
            shifted_kwh=shifted,
            additional_savings=additional,
            period_savings=period_savings,
            monthly_savings=monthly,
            yearly_savings=monthly * 12,
        )
