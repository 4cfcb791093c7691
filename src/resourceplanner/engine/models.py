"""
Capacity engine value types.

Immutable snapshots of resources, projects and allocations as the engine
consumes them, plus the computed results it hands back. None of these carry
persistence concerns; the snapshot loader builds them from storage rows.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

DEFAULT_WEEKLY_CAPACITY = 40.0
NON_PROJECT_HOURS_PER_WEEK = 8.0
DEFAULT_DEPARTMENT = "General"
ALL_DEPARTMENTS = "all"


class AlertCategoryType(str, Enum):
    """Severity categories, in payload order."""
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    UNASSIGNED = "unassigned"


class RecommendationPriority(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Resource:
    """A person whose weekly capacity is planned against."""
    id: int
    name: str
    department: Optional[str] = None
    role: Optional[str] = None
    weekly_capacity_hours: float = DEFAULT_WEEKLY_CAPACITY
    is_active: bool = True

    @property
    def department_label(self) -> str:
        """Department used for filtering: department, then role, then General."""
        return self.department or self.role or DEFAULT_DEPARTMENT


@dataclass(frozen=True)
class Project:
    id: int
    name: str
    status: str = "active"
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def is_active_in(self, start: Optional[date], end: Optional[date]) -> bool:
        """Active status and, for a bounded range, dates touching it; missing dates are open."""
        if self.status != "active":
            return False
        if start is None or end is None:
            return True
        return (self.start_date is None or self.start_date <= end) and (
            self.end_date is None or self.end_date >= start
        )


@dataclass(frozen=True)
class Allocation:
    """
    Hours a resource is booked on a project between two inclusive dates.

    `weekly_hours` maps week-keys ("YYYY-Www") to hours. When it carries at
    least one entry it wins over `allocated_hours_total`, which is otherwise
    spread evenly across the weeks being analysed.
    """
    id: int
    resource_id: int
    project_id: int
    start_date: date
    end_date: date
    status: str = "active"
    allocated_hours_total: float = 0.0
    weekly_hours: Optional[Mapping[str, float]] = None
    role: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    @property
    def has_weekly_hours(self) -> bool:
        return bool(self.weekly_hours)

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and self.end_date >= start


@dataclass(frozen=True)
class AlertSettings:
    """Configurable utilization thresholds, in percent."""
    warning_threshold: float = 90.0
    error_threshold: float = 100.0
    critical_threshold: float = 120.0
    under_utilization_threshold: float = 50.0


@dataclass(frozen=True)
class PeriodWindow:
    """
    A date range, possibly pulled forward to the current week.

    `start_date`/`end_date` are None when the caller gave no (or unparseable)
    bounds; such a window yields no week-keys.
    """
    start_date: Optional[date]
    end_date: Optional[date]
    is_forward_looking: bool = False
    excluded_past_weeks: int = 0

    @property
    def is_bounded(self) -> bool:
        return self.start_date is not None and self.end_date is not None


@dataclass(frozen=True)
class WeekUtilization:
    week_key: str
    allocated_hours: float
    utilization_percent: int


@dataclass(frozen=True)
class UtilizationResult:
    """Per-resource utilization over a period."""
    resource_id: int
    effective_weekly_capacity: float
    weeks: Tuple[WeekUtilization, ...]
    peak_utilization_percent: int
    peak_week_key: Optional[str]
    total_allocated_hours: float

    @property
    def period_capacity_hours(self) -> float:
        """Effective capacity over every analysed week; one week when there are none."""
        return self.effective_weekly_capacity * max(1, len(self.weeks))


@dataclass(frozen=True)
class Recommendation:
    type: str
    priority: RecommendationPriority
    title: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "priority": self.priority.value,
            "title": self.title,
            "description": self.description,
        }


@dataclass(frozen=True)
class AlertResource:
    """Resource-level detail carried inside an alert category."""
    id: int
    name: str
    department: str
    role: Optional[str]
    peak_utilization_percent: int
    total_allocated_hours: float
    period_capacity_hours: float
    peak_week_key: Optional[str]
    weekly_breakdown: Tuple[WeekUtilization, ...]


@dataclass
class AlertCategory:
    type: AlertCategoryType
    title: str
    description: str
    color: str
    icon: str
    threshold: Optional[float] = None
    resources: List[AlertResource] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.resources)


@dataclass(frozen=True)
class AlertSummary:
    total_alerts: int
    critical_count: int
    warning_count: int
    info_count: int
    unassigned_count: int


@dataclass(frozen=True)
class AlertMetadata:
    """Echoes the caller's original request; the computation window may differ."""
    department: str
    start_date: Optional[str]
    end_date: Optional[str]
    generated_at: datetime


@dataclass
class AlertPayload:
    categories: List[AlertCategory]
    summary: AlertSummary
    metadata: AlertMetadata
    window: Optional[PeriodWindow] = None
