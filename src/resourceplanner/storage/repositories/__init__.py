from .alert_settings_repository import AlertSettingsRepository
from .allocation_repository import AllocationRepository
from .project_repository import ProjectRepository
from .resource_repository import ResourceRepository
from .time_entry_repository import TimeEntryRepository
from .weekly_submission_repository import WeeklySubmissionRepository

__all__ = [
    "AlertSettingsRepository",
    "AllocationRepository",
    "ProjectRepository",
    "ResourceRepository",
    "TimeEntryRepository",
    "WeeklySubmissionRepository",
]
