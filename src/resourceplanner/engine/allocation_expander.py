"""
Allocation week expansion.

Turns allocation records into hours per requested week-key. Allocations with
a weekly plan are read week by week; the rest have their total spread evenly
over the requested weeks.
"""

import math
from typing import Dict, Iterable, List, Optional, Sequence

from resourceplanner.engine.models import Allocation, PeriodWindow
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)


def _hours(value: object) -> float:
    if value is None:
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric allocation hours", value=repr(value))
        return 0.0
    if not math.isfinite(hours):
        logger.warning("Ignoring non-finite allocation hours", value=repr(value))
        return 0.0
    return hours


def overlaps_window(allocation: Allocation, window: Optional[PeriodWindow]) -> bool:
    """An unbounded window accepts every allocation."""
    if window is None or not window.is_bounded:
        return True
    return allocation.overlaps(window.start_date, window.end_date)


def qualifying_allocations(
    allocations: Iterable[Allocation],
    resource_id: int,
    window: Optional[PeriodWindow] = None,
) -> List[Allocation]:
    """Active allocations of one resource that touch the window."""
    return [
        allocation
        for allocation in allocations
        if allocation.resource_id == resource_id
        and allocation.is_active
        and overlaps_window(allocation, window)
    ]


def expand(
    allocation: Allocation,
    week_keys: Sequence[str],
    window: Optional[PeriodWindow] = None,
) -> Dict[str, float]:
    """
    Hours this allocation contributes to each requested week.

    Args:
        allocation: The allocation to expand
        week_keys: Ordered week-keys being analysed
        window: Period the week-keys were generated from; allocations
            outside it contribute nothing

    Returns:
        Mapping of every requested week-key to hours (possibly 0)
    """
    if not overlaps_window(allocation, window):
        return {key: 0.0 for key in week_keys}

    if allocation.has_weekly_hours:
        plan = allocation.weekly_hours
        return {key: _hours(plan.get(key)) for key in week_keys}

    if not week_keys:
        return {}

    share = _hours(allocation.allocated_hours_total) / len(week_keys)
    return {key: share for key in week_keys}


def expand_all(
    allocations: Iterable[Allocation],
    week_keys: Sequence[str],
    window: Optional[PeriodWindow] = None,
) -> Dict[str, float]:
    """Sum of `expand` over several allocations, keyed in week order."""
    totals = {key: 0.0 for key in week_keys}
    for allocation in allocations:
        for key, hours in expand(allocation, week_keys, window).items():
            totals[key] += hours
    return totals


def total_hours(allocations: Iterable[Allocation]) -> float:
    """Aggregate fallback used when no week-keys are available."""
    return sum(_hours(allocation.allocated_hours_total) for allocation in allocations)
