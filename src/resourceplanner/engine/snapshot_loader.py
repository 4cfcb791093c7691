"""
Capacity snapshot loading.

Reads resources, projects and allocations through the repositories and turns
the ORM rows into the engine's immutable value types. Nothing downstream of
this module touches SQLAlchemy objects.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from resourceplanner.engine.models import AlertSettings, Allocation, Project, Resource
from resourceplanner.platform.config import settings as app_settings
from resourceplanner.platform.logging import get_logger
from resourceplanner.storage.models import (
    AlertSettingsModel,
    AllocationModel,
    ProjectModel,
    ResourceModel,
)
from resourceplanner.storage.repositories import (
    AlertSettingsRepository,
    AllocationRepository,
    ProjectRepository,
    ResourceRepository,
)

logger = get_logger(__name__)


@dataclass
class CapacitySnapshot:
    resources: List[Resource] = field(default_factory=list)
    allocations: List[Allocation] = field(default_factory=list)
    projects: Dict[int, Project] = field(default_factory=dict)


def to_resource(row: ResourceModel) -> Resource:
    capacity = row.weekly_capacity
    return Resource(
        id=row.id,
        name=row.name,
        department=row.department,
        role=row.role,
        weekly_capacity_hours=float(capacity if capacity is not None else app_settings.DEFAULT_WEEKLY_CAPACITY_HOURS),
        is_active=bool(row.is_active) and not row.is_deleted,
    )


def to_project(row: ProjectModel) -> Project:
    return Project(
        id=row.id,
        name=row.name,
        status=row.status or "active",
        start_date=row.start_date,
        end_date=row.end_date,
    )


def to_allocation(row: AllocationModel) -> Allocation:
    return Allocation(
        id=row.id,
        resource_id=row.resource_id,
        project_id=row.project_id,
        start_date=row.start_date,
        end_date=row.end_date,
        status=row.status or "active",
        allocated_hours_total=float(row.allocated_hours or 0),
        weekly_hours=dict(row.weekly_allocations or {}),
        role=row.role,
    )


def to_alert_settings(row: Optional[AlertSettingsModel]) -> AlertSettings:
    if row is None:
        return AlertSettings()
    return AlertSettings(
        warning_threshold=float(row.warning_threshold),
        error_threshold=float(row.error_threshold),
        critical_threshold=float(row.critical_threshold),
        under_utilization_threshold=float(row.under_utilization_threshold),
    )


class CapacitySnapshotLoader:
    """Fetches a request-scoped snapshot for the engine."""

    def __init__(
        self,
        resource_repo: ResourceRepository,
        project_repo: ProjectRepository,
        allocation_repo: AllocationRepository,
        settings_repo: AlertSettingsRepository,
    ):
        self.resource_repo = resource_repo
        self.project_repo = project_repo
        self.allocation_repo = allocation_repo
        self.settings_repo = settings_repo

    def load(
        self,
        session: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        resource_id: Optional[int] = None,
    ) -> CapacitySnapshot:
        """
        Load resources, the allocations touching the range and their projects.

        The range only narrows the query; the engine still applies its own
        window to what is returned.
        """
        if resource_id is not None:
            row = self.resource_repo.get(session, resource_id)
            resource_rows = [row] if row is not None else []
        else:
            resource_rows = self.resource_repo.list_all(session)

        allocation_rows = self.allocation_repo.list_in_range(
            session, start_date, end_date, resource_id=resource_id
        )
        project_rows = self.project_repo.get_many(session, (a.project_id for a in allocation_rows))

        snapshot = CapacitySnapshot(
            resources=[to_resource(row) for row in resource_rows],
            allocations=[to_allocation(row) for row in allocation_rows],
            projects={row.id: to_project(row) for row in project_rows},
        )
        logger.debug(
            "Loaded capacity snapshot",
            resources=len(snapshot.resources),
            allocations=len(snapshot.allocations),
            projects=len(snapshot.projects),
        )
        return snapshot

    def load_projects(self, session: Session) -> List[Project]:
        """Every project, for portfolio-level figures."""
        return [to_project(row) for row in self.project_repo.list_all(session)]

    def load_alert_settings(self, session: Session) -> AlertSettings:
        """Enabled capacity thresholds, defaults when none are stored."""
        return to_alert_settings(self.settings_repo.get_by_type(session))
