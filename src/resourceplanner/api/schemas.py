from datetime import date, datetime
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from resourceplanner.engine.iso_week import parse_week_key
from resourceplanner.engine.models import AlertCategoryType, AlertPayload


class CamelModel(BaseModel):
    """JSON uses camelCase; Python code and ORM rows use snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


AllocationStatus = Literal["active", "planned", "completed"]
Severity = Literal["critical", "error", "warning", "info", "unassigned", "all"]

# --- Resources ---

class ResourceBase(CamelModel):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    weekly_capacity: float = Field(40.0, ge=0, le=168, description="Nominal hours per week")
    is_active: bool = True

class ResourceCreate(ResourceBase):
    pass

class ResourceUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    weekly_capacity: Optional[float] = Field(None, ge=0, le=168)
    is_active: Optional[bool] = None

class ResourceResponse(ResourceBase):
    id: int

# --- Projects ---

class ProjectBase(CamelModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: str = "active"
    priority: str = "medium"

class ProjectCreate(ProjectBase):
    pass

class ProjectUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[str] = None
    priority: Optional[str] = None

class ProjectResponse(ProjectBase):
    id: int

# --- Allocations ---

HOURS_PER_WEEK = 168.0


def max_hours_for_span(start_date: date, end_date: date) -> float:
    """Upper bound for an allocation total: every hour of every week it touches."""
    weeks = (end_date - start_date).days // 7 + 1
    return HOURS_PER_WEEK * max(1, weeks)


def _check_week_keys(value: Optional[Dict[str, float]]) -> Optional[Dict[str, float]]:
    if value is None:
        return value
    for key, hours in value.items():
        if parse_week_key(key) is None:
            raise ValueError(f"invalid week key {key!r}, expected YYYY-Www")
        if not 0 <= hours <= HOURS_PER_WEEK:
            raise ValueError(f"hours for {key} must be between 0 and {HOURS_PER_WEEK:g}")
    return value

class AllocationBase(CamelModel):
    project_id: int
    resource_id: int
    allocated_hours: float = Field(0.0, ge=0, allow_inf_nan=False, description="Total hours over the allocation span")
    start_date: date
    end_date: date
    role: Optional[str] = None
    status: AllocationStatus = "active"
    weekly_allocations: Dict[str, float] = Field(default_factory=dict, description="Hours per week-key")

    @field_validator("weekly_allocations")
    @classmethod
    def validate_weekly_allocations(cls, value):
        return _check_week_keys(value)

class AllocationCreate(AllocationBase):

    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        if self.allocated_hours > max_hours_for_span(self.start_date, self.end_date):
            raise ValueError("allocatedHours exceeds the hours available in the allocation span")
        return self

class AllocationUpdate(CamelModel):
    project_id: Optional[int] = None
    resource_id: Optional[int] = None
    allocated_hours: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    role: Optional[str] = None
    status: Optional[AllocationStatus] = None
    weekly_allocations: Optional[Dict[str, float]] = None

    @field_validator("weekly_allocations")
    @classmethod
    def validate_weekly_allocations(cls, value):
        return _check_week_keys(value)

class AllocationResponse(AllocationBase):
    id: int

    @field_validator("weekly_allocations")
    @classmethod
    def validate_weekly_allocations(cls, value):
        return value

    @field_validator("weekly_allocations", mode="before")
    @classmethod
    def default_weekly_allocations(cls, value):
        return value or {}

# --- Time entries ---

HOURS_PER_DAY = 24.0
DayHours = Annotated[float, Field(ge=0, le=HOURS_PER_DAY, allow_inf_nan=False)]


def _check_monday(value: Optional[date]) -> Optional[date]:
    if value is not None and value.isoweekday() != 1:
        raise ValueError("weekStartDate must be a Monday")
    return value

class TimeEntryBase(CamelModel):
    resource_id: int
    allocation_id: int
    week_start_date: date
    monday_hours: DayHours = 0.0
    tuesday_hours: DayHours = 0.0
    wednesday_hours: DayHours = 0.0
    thursday_hours: DayHours = 0.0
    friday_hours: DayHours = 0.0
    saturday_hours: DayHours = 0.0
    sunday_hours: DayHours = 0.0
    notes: Optional[str] = None

class TimeEntryCreate(TimeEntryBase):

    @field_validator("week_start_date")
    @classmethod
    def validate_week_start(cls, value):
        return _check_monday(value)

class TimeEntryUpdate(CamelModel):
    allocation_id: Optional[int] = None
    monday_hours: Optional[DayHours] = None
    tuesday_hours: Optional[DayHours] = None
    wednesday_hours: Optional[DayHours] = None
    thursday_hours: Optional[DayHours] = None
    friday_hours: Optional[DayHours] = None
    saturday_hours: Optional[DayHours] = None
    sunday_hours: Optional[DayHours] = None
    notes: Optional[str] = None

class TimeEntryResponse(TimeEntryBase):
    id: int
    total_hours: float

# --- Weekly submissions ---

class WeeklySubmissionRequest(CamelModel):
    resource_id: int
    week_start_date: date

    @field_validator("week_start_date")
    @classmethod
    def validate_week_start(cls, value):
        return _check_monday(value)

class WeeklySubmissionResponse(CamelModel):
    id: int
    resource_id: int
    week_start_date: date
    is_submitted: bool
    submitted_at: Optional[datetime] = None
    reminder_sent: bool = False
    reminder_sent_at: Optional[datetime] = None
    total_hours: float = 0.0

# --- Alert Settings ---

class AlertSettingsPayload(CamelModel):
    warning_threshold: float = Field(90.0, ge=0)
    error_threshold: float = Field(100.0, ge=0)
    critical_threshold: float = Field(120.0, ge=0)
    under_utilization_threshold: float = Field(50.0, ge=0)
    is_enabled: bool = True

    @model_validator(mode="after")
    def check_order(self):
        if not (self.under_utilization_threshold <= self.warning_threshold
                <= self.error_threshold <= self.critical_threshold):
            raise ValueError(
                "thresholds must satisfy underUtilization <= warning <= error <= critical"
            )
        return self

# --- Dashboard alerts ---

class WeekUtilizationResponse(CamelModel):
    week_key: str
    allocated_hours: float
    utilization_percent: int

class AlertResourceResponse(CamelModel):
    id: int
    name: str
    department: str
    role: Optional[str] = None
    peak_utilization_percent: int
    total_allocated_hours: float
    period_capacity_hours: float
    peak_week_key: Optional[str] = None
    weekly_breakdown: List[WeekUtilizationResponse]

class AlertCategoryResponse(CamelModel):
    type: AlertCategoryType
    title: str
    description: str
    color: str
    icon: str
    threshold: Optional[float] = None
    count: int
    resources: List[AlertResourceResponse]

class AlertSummaryResponse(CamelModel):
    total_alerts: int
    critical_count: int
    warning_count: int
    info_count: int
    unassigned_count: int

class AlertMetadataResponse(CamelModel):
    department: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    generated_at: datetime

class PeriodWindowResponse(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_forward_looking: bool
    excluded_past_weeks: int

class AlertPayloadResponse(CamelModel):
    categories: List[AlertCategoryResponse]
    summary: AlertSummaryResponse
    metadata: AlertMetadataResponse

    @classmethod
    def from_payload(cls, payload: AlertPayload) -> "AlertPayloadResponse":
        return cls.model_validate(payload, from_attributes=True)

class AlertPayloadWithWindowResponse(AlertPayloadResponse):
    """Alert payload plus the normalized window the computation actually used."""
    window: Optional[PeriodWindowResponse] = None
