"""
Capacity heatmap rows.

Presentation adapter over shared UtilizationResults: one row per active
resource with period utilization, a coarse status bucket and the per-week
hours behind it.
"""

import math
from typing import Any, Dict, List, Mapping, Optional, Sequence

from resourceplanner.engine.allocation_expander import qualifying_allocations
from resourceplanner.engine.models import Allocation, PeriodWindow, Resource, UtilizationResult
from resourceplanner.engine.utilization import period_utilization_percent, round_half_away


def heatmap_status(percent: int) -> str:
    if percent >= 100:
        return "overallocated"
    if percent >= 80:
        return "near-capacity"
    return "available"


def _one_decimal(value: float) -> float:
    if not math.isfinite(value * 10):
        return 0.0
    return round_half_away(value * 10) / 10


def heatmap_row(
    resource: Resource,
    result: UtilizationResult,
    allocation_count: int,
) -> Dict[str, Any]:
    capacity = result.period_capacity_hours
    percent = period_utilization_percent(result)
    return {
        "id": resource.id,
        "name": resource.name,
        "department": resource.department_label,
        "utilization": percent,
        "allocatedHours": _one_decimal(result.total_allocated_hours),
        "capacity": _one_decimal(capacity),
        "status": heatmap_status(percent),
        "projects": allocation_count,
        "weeklyBreakdown": [
            {
                "week": week.week_key,
                "hours": _one_decimal(week.allocated_hours),
                "capacity": _one_decimal(result.effective_weekly_capacity),
            }
            for week in result.weeks
        ],
    }


def build_heatmap(
    results: Mapping[int, UtilizationResult],
    resources: Sequence[Resource],
    allocations: Sequence[Allocation],
    window: Optional[PeriodWindow] = None,
) -> List[Dict[str, Any]]:
    """
    Heatmap rows for every active resource that has a utilization result.

    `projects` counts the resource's active allocations touching the window.
    """
    rows = []
    for resource in resources:
        result = results.get(resource.id)
        if result is None or not resource.is_active:
            continue
        count = len(qualifying_allocations(allocations, resource.id, window))
        rows.append(heatmap_row(resource, result, count))
    return rows
