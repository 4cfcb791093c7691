"""Resource Planner Storage Layer - relational persistence (Postgres, SQLite for tests)."""

from .base import StorageAdapter
from .postgres_adapter import PostgresAdapter, PostgresConfig
from .models import (
    AlertSettingsModel,
    AllocationModel,
    Base,
    ProjectModel,
    ResourceModel,
    TimeEntryModel,
    WeeklySubmissionModel,
)

__all__ = [
    "StorageAdapter",
    "PostgresAdapter",
    "PostgresConfig",
    "Base",
    "ResourceModel",
    "ProjectModel",
    "AllocationModel",
    "AlertSettingsModel",
    "TimeEntryModel",
    "WeeklySubmissionModel",
]
