"""
Capacity Alert Engine

Composes period normalization, week expansion, utilization and
classification into the dashboard's alert payload.

Flow:
    resources/allocations -> active + department filter -> normalized window
    -> week-keys (current and future only) -> per-resource utilization
    -> peak-week classification -> categories, summary, metadata

The engine is a pure computation over request-scoped snapshots; callers
fetch the data and supply `now`.
"""

from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from resourceplanner.engine import period
from resourceplanner.engine.alert_classifier import classify, empty_categories
from resourceplanner.engine.allocation_expander import qualifying_allocations
from resourceplanner.engine.iso_week import parse_date
from resourceplanner.engine.models import (
    ALL_DEPARTMENTS,
    Allocation,
    AlertCategoryType,
    AlertMetadata,
    AlertPayload,
    AlertResource,
    AlertSettings,
    AlertSummary,
    PeriodWindow,
    Resource,
    UtilizationResult,
)
from resourceplanner.engine.utilization import UtilizationCalculator
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)

RawDate = Union[str, date, None]


def _raw_text(value: RawDate) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    return value.isoformat()


def filter_resources(resources: Sequence[Resource], department: Optional[str]) -> List[Resource]:
    """
    Active resources matching the department filter.

    A missing filter, "all", or a department no resource belongs to leaves
    the active set unfiltered.
    """
    active = [resource for resource in resources if resource.is_active]
    if not department or department == ALL_DEPARTMENTS:
        return active

    known = {resource.department_label for resource in resources}
    if department not in known:
        logger.warning("Unknown department filter, using all resources", department=department)
        return active

    return [resource for resource in active if resource.department_label == department]


class AlertEngine:
    """
    Orchestrates capacity alert computation.

    Args:
        calculator: Utilization calculator to use; a fresh one by default
    """

    def __init__(self, calculator: Optional[UtilizationCalculator] = None):
        self.calculator = calculator or UtilizationCalculator()

    def compute_utilization(
        self,
        resources: Iterable[Resource],
        allocations: Sequence[Allocation],
        window: PeriodWindow,
        now: datetime,
    ) -> Tuple[List[str], Dict[int, UtilizationResult]]:
        """Week-keys for the window and a utilization result per resource."""
        week_keys = period.week_keys_for_window(window, now)
        results = {}
        for resource in resources:
            relevant = qualifying_allocations(allocations, resource.id, window)
            results[resource.id] = self.calculator.compute_for_resource(
                resource, relevant, week_keys, window
            )
        return week_keys, results

    def compute_alerts(
        self,
        resources: Sequence[Resource],
        allocations: Sequence[Allocation],
        start_date: RawDate,
        end_date: RawDate,
        department: Optional[str],
        settings: Optional[AlertSettings],
        now: datetime,
        severity: Optional[str] = None,
    ) -> AlertPayload:
        """
        Compute the alert payload for a period.

        Args:
            resources: Resource snapshot
            allocations: Allocation snapshot (all statuses; inactive ones are skipped)
            start_date: Requested period start, as given by the caller
            end_date: Requested period end, as given by the caller
            department: Department name, "all" or None
            settings: Alert thresholds; defaults when None
            now: Wall-clock time the computation is relative to
            severity: Optional category name limiting which categories are
                returned; the summary always counts every category

        Returns:
            AlertPayload with non-empty categories in severity order
        """
        settings = settings or AlertSettings()

        in_scope = filter_resources(resources, department)
        window = period.normalize(parse_date(start_date), parse_date(end_date), now)
        week_keys, results = self.compute_utilization(in_scope, allocations, window, now)
        multiplier = period.period_multiplier(window.start_date, window.end_date)

        logger.info(
            "Computing capacity alerts",
            resources=len(in_scope),
            allocations=len(allocations),
            weeks=len(week_keys),
            forward_looking=window.is_forward_looking,
            excluded_past_weeks=window.excluded_past_weeks,
        )

        categories = empty_categories(settings)
        for resource in in_scope:
            result = results[resource.id]
            category = classify(resource, result, settings)
            if category is None:
                continue
            categories[category].resources.append(AlertResource(
                id=resource.id,
                name=resource.name,
                department=resource.department_label,
                role=resource.role,
                peak_utilization_percent=result.peak_utilization_percent,
                total_allocated_hours=result.total_allocated_hours,
                period_capacity_hours=result.effective_weekly_capacity * multiplier,
                peak_week_key=result.peak_week_key,
                weekly_breakdown=result.weeks,
            ))

        counts = {category: group.count for category, group in categories.items()}
        summary = AlertSummary(
            total_alerts=sum(counts.values()),
            critical_count=counts[AlertCategoryType.CRITICAL],
            warning_count=counts[AlertCategoryType.WARNING],
            info_count=counts[AlertCategoryType.INFO],
            unassigned_count=counts[AlertCategoryType.UNASSIGNED],
        )

        visible = [group for group in categories.values() if group.count > 0]
        if severity and severity != "all":
            visible = [group for group in visible if group.type.value == severity]

        logger.info(
            "Capacity alerts computed",
            total_alerts=summary.total_alerts,
            **{category.value: count for category, count in counts.items()},
        )

        return AlertPayload(
            categories=visible,
            summary=summary,
            metadata=AlertMetadata(
                department=department or ALL_DEPARTMENTS,
                start_date=_raw_text(start_date),
                end_date=_raw_text(end_date),
                generated_at=now,
            ),
            window=window,
        )
