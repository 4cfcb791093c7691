"""
Utilization Calculator

Converts a resource's weekly capacity and per-week allocated hours into
per-week utilization percentages, the peak week and the period total.

Utilization is measured against effective capacity: nominal weekly capacity
minus a fixed non-project overhead (meetings, administration).

Usage:
    calculator = UtilizationCalculator()
    result = calculator.compute_for_resource(resource, allocations, week_keys, window)
    result.peak_utilization_percent, result.peak_week_key
"""

import math
from typing import Iterable, List, Optional, Sequence

from resourceplanner.engine.allocation_expander import expand_all, qualifying_allocations, total_hours
from resourceplanner.engine.models import (
    NON_PROJECT_HOURS_PER_WEEK,
    Allocation,
    PeriodWindow,
    Resource,
    UtilizationResult,
    WeekUtilization,
)
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)

# Ceiling for reported utilization percentages.
MAX_UTILIZATION_PERCENT = 10_000


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def utilization_percent(allocated_hours: float, capacity_hours: float) -> int:
    """
    Whole-percent utilization, clamped to 0..MAX_UTILIZATION_PERCENT.

    0 whenever there is no capacity or the hours are not a number.
    """
    if not capacity_hours > 0:
        return 0
    ratio = allocated_hours / capacity_hours * 100
    if math.isnan(ratio) or ratio <= 0:
        return 0
    if ratio >= MAX_UTILIZATION_PERCENT:
        return MAX_UTILIZATION_PERCENT
    return round_half_away(ratio)


def period_utilization_percent(result: UtilizationResult) -> int:
    """Total hours against capacity over the whole period, not the peak week."""
    return utilization_percent(result.total_allocated_hours, result.period_capacity_hours)


class UtilizationCalculator:
    """
    Computes week-by-week utilization for one resource at a time.

    The calculator is stateless; a single instance can serve concurrent
    requests.
    """

    NON_PROJECT_HOURS = NON_PROJECT_HOURS_PER_WEEK

    def effective_weekly_capacity(self, resource: Resource) -> float:
        return max(0.0, float(resource.weekly_capacity_hours or 0) - self.NON_PROJECT_HOURS)

    def compute_for_resource(
        self,
        resource: Resource,
        allocations: Iterable[Allocation],
        week_keys: Sequence[str],
        window: Optional[PeriodWindow] = None,
    ) -> UtilizationResult:
        """
        Compute utilization for one resource.

        Args:
            resource: Resource being measured
            allocations: Allocations to consider; anything not active, not
                belonging to the resource or outside the window is ignored
            week_keys: Ordered week-keys of the period (already filtered)
            window: Period the week-keys came from

        Returns:
            UtilizationResult with weekly breakdown, peak and total
        """
        capacity = self.effective_weekly_capacity(resource)
        relevant = qualifying_allocations(allocations, resource.id, window)

        if not week_keys:
            hours = total_hours(relevant)
            percent = utilization_percent(hours, capacity)
            logger.debug(
                "Aggregate utilization without weekly breakdown",
                resource_id=resource.id,
                allocated_hours=hours,
                utilization=percent,
            )
            return UtilizationResult(
                resource_id=resource.id,
                effective_weekly_capacity=capacity,
                weeks=(),
                peak_utilization_percent=percent,
                peak_week_key=None,
                total_allocated_hours=hours,
            )

        weekly_hours = expand_all(relevant, week_keys, window)

        weeks: List[WeekUtilization] = []
        peak_percent = 0
        peak_week: Optional[str] = None
        for key in week_keys:
            hours = weekly_hours[key]
            percent = utilization_percent(hours, capacity)
            weeks.append(WeekUtilization(week_key=key, allocated_hours=hours, utilization_percent=percent))
            # strictly greater keeps the first week on ties
            if percent > peak_percent:
                peak_percent = percent
                peak_week = key

        return UtilizationResult(
            resource_id=resource.id,
            effective_weekly_capacity=capacity,
            weeks=tuple(weeks),
            peak_utilization_percent=peak_percent,
            peak_week_key=peak_week,
            total_allocated_hours=sum(week.allocated_hours for week in weeks),
        )
