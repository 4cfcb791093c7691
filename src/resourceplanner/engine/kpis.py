"""
Management dashboard KPIs.

Portfolio-level figures for a period: active projects, resources with spare
capacity, overall utilization and over-allocation conflicts, each with the
value for the preceding week and a seven-week trend.

All resource figures come from the same per-resource UtilizationResults the
alert engine and heatmap use. Past periods are evaluated as of their own
start date, so the current-or-future week filter keeps every one of their
weeks.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from resourceplanner.engine import period
from resourceplanner.engine.alert_engine import AlertEngine, filter_resources
from resourceplanner.engine.iso_week import DateLike
from resourceplanner.engine.models import Allocation, PeriodWindow, Project, Resource
from resourceplanner.engine.utilization import (
    MAX_UTILIZATION_PERCENT,
    period_utilization_percent,
    round_half_away,
)
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)

TREND_PERIODS = 7
TREND_LABEL = "from last week"
METRICS = ("activeProjects", "availableResources", "utilization", "conflicts")


@dataclass(frozen=True)
class KpiValues:
    active_projects: int
    available_resources: int
    utilization: float
    conflicts: int

    def metric(self, name: str) -> float:
        return {
            "activeProjects": self.active_projects,
            "availableResources": self.available_resources,
            "utilization": self.utilization,
            "conflicts": self.conflicts,
        }[name]


@dataclass(frozen=True)
class KpiTrend:
    current_value: float
    previous_value: float
    trend_data: List[float]
    period_label: str = TREND_LABEL

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_value": self.current_value,
            "previous_value": self.previous_value,
            "period_label": self.period_label,
            "trend_data": list(self.trend_data),
        }


@dataclass
class KpiSummary:
    active_projects: int
    total_projects: int
    available_resources: int
    total_resources: int
    utilization: float
    conflicts: int
    trends: Dict[str, KpiTrend] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "activeProjects": self.active_projects,
            "totalProjects": self.total_projects,
            "availableResources": self.available_resources,
            "totalResources": self.total_resources,
            "utilization": self.utilization,
            "conflicts": self.conflicts,
        }
        if self.trends:
            data["trendData"] = {name: trend.to_dict() for name, trend in self.trends.items()}
        return data


def _one_decimal(value: float) -> float:
    return round_half_away(value * 10) / 10


def trend_periods(end_date: date, count: int = TREND_PERIODS) -> List[PeriodWindow]:
    """`count` consecutive seven-day periods, oldest first, the last ending on `end_date`."""
    windows = []
    for offset in range(count - 1, -1, -1):
        period_end = end_date - timedelta(days=7 * offset)
        windows.append(PeriodWindow(period_end - timedelta(days=6), period_end))
    return windows


class KpiCalculator:
    """
    Computes KPI figures over a snapshot.

    Args:
        engine: Alert engine whose utilization computation is shared
    """

    def __init__(self, engine: Optional[AlertEngine] = None):
        self.engine = engine or AlertEngine()

    def values_for_window(
        self,
        resources: Sequence[Resource],
        projects: Sequence[Project],
        allocations: Sequence[Allocation],
        window: PeriodWindow,
        now: DateLike,
    ) -> KpiValues:
        """
        KPI values for one window.

        Utilization is total allocated hours over total period capacity of
        the active resources in scope. A resource is available below 100% of
        its own period capacity and a conflict above it.
        """
        active = [resource for resource in resources if resource.is_active]
        _, results = self.engine.compute_utilization(active, allocations, window, now)

        total_hours = sum(result.total_allocated_hours for result in results.values())
        total_capacity = sum(result.period_capacity_hours for result in results.values())
        percents = [period_utilization_percent(result) for result in results.values()]

        if total_capacity > 0:
            rate = min(total_hours / total_capacity * 100, MAX_UTILIZATION_PERCENT)
        else:
            rate = 0.0

        return KpiValues(
            active_projects=sum(
                1 for project in projects if project.is_active_in(window.start_date, window.end_date)
            ),
            available_resources=sum(1 for percent in percents if percent < 100),
            utilization=max(0.0, _one_decimal(rate)),
            conflicts=sum(1 for percent in percents if percent > 100),
        )

    def compute(
        self,
        resources: Sequence[Resource],
        projects: Sequence[Project],
        allocations: Sequence[Allocation],
        start_date: Optional[date],
        end_date: Optional[date],
        department: Optional[str],
        now: datetime,
        include_trends: bool = True,
    ) -> KpiSummary:
        """
        KPI summary for a period.

        Args:
            resources: Resource snapshot
            projects: Every project
            allocations: Allocations covering the period and, for trends, the
                seven weeks before its end
            start_date: Period start; None for an open period
            end_date: Period end; trends end here, or today when None
            department: Department name, "all" or None
            now: Wall-clock time the computation is relative to
            include_trends: Also compute previous-week values and trend series
        """
        in_scope = filter_resources(resources, department)
        window = period.normalize(start_date, end_date, now)
        current = self.values_for_window(in_scope, projects, allocations, window, now)

        summary = KpiSummary(
            active_projects=current.active_projects,
            total_projects=len(projects),
            available_resources=current.available_resources,
            total_resources=sum(1 for resource in in_scope if resource.is_active),
            utilization=current.utilization,
            conflicts=current.conflicts,
        )

        if include_trends:
            anchor = end_date or now.date()
            history = [
                self.values_for_window(in_scope, projects, allocations, past, past.start_date)
                for past in trend_periods(anchor)
            ]
            # the week before the last trend point is the comparison baseline
            previous_window = trend_periods(anchor - timedelta(days=7), 1)[0]
            previous = self.values_for_window(
                in_scope, projects, allocations, previous_window, previous_window.start_date
            )
            summary.trends = {
                name: KpiTrend(
                    current_value=current.metric(name),
                    previous_value=previous.metric(name),
                    trend_data=[values.metric(name) for values in history],
                )
                for name in METRICS
            }

        logger.info(
            "KPIs calculated",
            active_projects=summary.active_projects,
            total_projects=summary.total_projects,
            available_resources=summary.available_resources,
            total_resources=summary.total_resources,
            utilization=summary.utilization,
            conflicts=summary.conflicts,
            department=department or "all",
        )
        return summary
