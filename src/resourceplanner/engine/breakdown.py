"""
Resource alert breakdown.

Drill-down behind a single alert: week-by-week hours and utilization for one
resource, which projects contribute to each week, and the recommendations
that follow from the peak week. Utilization comes from the shared
UtilizationCalculator so the numbers always agree with the alert payload.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Mapping, Optional, Sequence

from resourceplanner.engine import period
from resourceplanner.engine.allocation_expander import expand, qualifying_allocations
from resourceplanner.engine.iso_week import parse_date, parse_week_key
from resourceplanner.engine.models import (
    Allocation,
    PeriodWindow,
    Project,
    Recommendation,
    Resource,
    UtilizationResult,
)
from resourceplanner.engine.recommendations import RecommendationGenerator
from resourceplanner.engine.utilization import UtilizationCalculator
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)

PROBLEMATIC_OVER = 100
PROBLEMATIC_UNDER = 50


def utilization_status(percent: int) -> str:
    if percent >= 120:
        return "critical"
    if percent >= 100:
        return "overallocated"
    if percent >= 90:
        return "near-capacity"
    if percent >= 50:
        return "optimal"
    if percent > 0:
        return "under-utilized"
    return "unassigned"


@dataclass
class ProjectContribution:
    project_id: int
    project_name: str
    total_hours: float = 0.0
    allocations: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class BreakdownPeriod:
    label: str
    week_key: str
    start_date: date
    end_date: date
    allocated_hours: float
    effective_capacity: float
    utilization: int
    status: str
    project_breakdown: List[Dict[str, Any]]

    @property
    def is_problematic(self) -> bool:
        return self.utilization > PROBLEMATIC_OVER or self.utilization < PROBLEMATIC_UNDER


@dataclass
class ResourceBreakdown:
    resource: Resource
    effective_capacity: float
    non_project_hours: float
    period_type: str
    window: PeriodWindow
    original_start: Optional[date]
    original_end: Optional[date]
    result: UtilizationResult
    periods: List[BreakdownPeriod]
    contributing_projects: List[ProjectContribution]
    recommendations: List[Recommendation]

    @property
    def problematic_periods(self) -> List[BreakdownPeriod]:
        return [p for p in self.periods if p.is_problematic]

    @property
    def peak_period(self) -> Optional[BreakdownPeriod]:
        peak = self.result.peak_utilization_percent
        return next((p for p in self.periods if p.utilization == peak), None)

    def to_dict(self) -> Dict[str, Any]:
        peak = self.result.peak_utilization_percent
        peak_period = self.peak_period
        peak_label = peak_period.label if peak_period else None
        peak_hours = peak_period.allocated_hours if peak_period else 0
        return {
            "resource": {
                "id": self.resource.id,
                "name": self.resource.name,
                "department": self.resource.department,
                "role": self.resource.role,
                "totalCapacity": self.resource.weekly_capacity_hours,
                "effectiveCapacity": self.effective_capacity,
                "nonProjectHours": self.non_project_hours,
            },
            "window": {
                "originalStartDate": self.original_start.isoformat() if self.original_start else None,
                "originalEndDate": self.original_end.isoformat() if self.original_end else None,
                "startDate": self.window.start_date.isoformat() if self.window.start_date else None,
                "endDate": self.window.end_date.isoformat() if self.window.end_date else None,
                "isForwardLooking": self.window.is_forward_looking,
                "excludedPastWeeks": self.window.excluded_past_weeks,
            },
            "summary": {
                "periodType": self.period_type,
                "totalPeriods": len(self.periods),
                "problematicPeriods": len(self.problematic_periods),
                "overallUtilization": peak,
                "totalAllocatedHours": self.result.total_allocated_hours,
                "peakUtilization": peak,
                "peakPeriod": peak_label,
                "calculationFormula": (
                    f"Peak Weekly Analysis: {peak}% in {peak_label or 'N/A'} "
                    f"({peak_hours:g}h / {self.effective_capacity:g}h x 100)"
                ),
            },
            "periods": [
                {
                    "period": p.label,
                    "weekKey": p.week_key,
                    "startDate": p.start_date.isoformat(),
                    "endDate": p.end_date.isoformat(),
                    "allocatedHours": p.allocated_hours,
                    "effectiveCapacity": p.effective_capacity,
                    "utilization": p.utilization,
                    "status": p.status,
                    "projectBreakdown": p.project_breakdown,
                    "isProblematic": p.is_problematic,
                }
                for p in self.periods
            ],
            "contributingProjects": [
                {
                    "projectId": c.project_id,
                    "projectName": c.project_name,
                    "totalHours": c.total_hours,
                    "allocations": c.allocations,
                }
                for c in self.contributing_projects
            ],
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


def _week_bounds(key: str) -> tuple:
    year, week = parse_week_key(key)
    monday = date.fromisocalendar(year, week, 1)
    return monday, monday + timedelta(days=6)


def compute_resource_breakdown(
    resource: Resource,
    allocations: Sequence[Allocation],
    projects: Mapping[int, Project],
    start_date: Any,
    end_date: Any,
    now: datetime,
    period_type: str = "week",
    calculator: Optional[UtilizationCalculator] = None,
    generator: Optional[RecommendationGenerator] = None,
) -> ResourceBreakdown:
    """
    Build the week-by-week breakdown for one resource.

    Args:
        resource: Resource to analyse
        allocations: Allocation snapshot; only this resource's active ones count
        projects: Projects by id, used for labels
        start_date: Requested start (date or ISO string)
        end_date: Requested end (date or ISO string)
        now: Wall-clock time the analysis is relative to
        period_type: Echoed back; weeks are always the unit of analysis

    Returns:
        ResourceBreakdown
    """
    calculator = calculator or UtilizationCalculator()
    generator = generator or RecommendationGenerator()

    original_start, original_end = parse_date(start_date), parse_date(end_date)
    window = period.normalize(original_start, original_end, now)
    week_keys = period.week_keys_for_window(window, now)
    relevant = qualifying_allocations(allocations, resource.id, window)
    result = calculator.compute_for_resource(resource, relevant, week_keys, window)
    capacity = result.effective_weekly_capacity

    per_allocation = [(allocation, expand(allocation, week_keys, window)) for allocation in relevant]
    contributions: Dict[int, ProjectContribution] = {}

    periods = []
    for week in result.weeks:
        monday, sunday = _week_bounds(week.week_key)
        year, number = parse_week_key(week.week_key)
        project_breakdown = []
        for allocation, hours_by_week in per_allocation:
            hours = hours_by_week.get(week.week_key, 0.0)
            if hours <= 0:
                continue
            project = projects.get(allocation.project_id)
            project_name = project.name if project else f"Project {allocation.project_id}"
            project_breakdown.append({
                "projectId": allocation.project_id,
                "projectName": project_name,
                "allocatedHours": hours,
                "role": allocation.role,
                "allocationId": allocation.id,
                "weekKey": week.week_key,
            })

            contribution = contributions.setdefault(
                allocation.project_id,
                ProjectContribution(allocation.project_id, project_name),
            )
            contribution.total_hours += hours
            entry = {
                "id": allocation.id,
                "role": allocation.role,
                "allocatedHours": hours,
                "weekKey": week.week_key,
                "startDate": allocation.start_date.isoformat(),
                "endDate": allocation.end_date.isoformat(),
            }
            if not allocation.has_weekly_hours:
                entry["note"] = "Distributed from base allocation"
            contribution.allocations.append(entry)

        periods.append(BreakdownPeriod(
            label=f"Week {number}, {year}",
            week_key=week.week_key,
            start_date=max(monday, window.start_date) if window.start_date else monday,
            end_date=min(sunday, window.end_date) if window.end_date else sunday,
            allocated_hours=week.allocated_hours,
            effective_capacity=capacity,
            utilization=week.utilization_percent,
            status=utilization_status(week.utilization_percent),
            project_breakdown=project_breakdown,
        ))

    problematic = sum(1 for p in periods if p.is_problematic)
    recommendations = generator.generate(
        result.peak_utilization_percent,
        problematic,
        len(contributions),
        capacity,
    )

    logger.info(
        "Generated resource breakdown",
        resource_id=resource.id,
        periods=len(periods),
        peak_utilization=result.peak_utilization_percent,
        problematic_periods=problematic,
    )

    return ResourceBreakdown(
        resource=resource,
        effective_capacity=capacity,
        non_project_hours=calculator.NON_PROJECT_HOURS,
        period_type=period_type,
        window=window,
        original_start=original_start,
        original_end=original_end,
        result=result,
        periods=periods,
        contributing_projects=list(contributions.values()),
        recommendations=recommendations,
    )
