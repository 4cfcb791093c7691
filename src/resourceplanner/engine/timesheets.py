"""
Timesheet Service - logged hours and weekly submission.

Resources log actual hours per allocation and ISO week (Monday start), then
submit the week. A submitted week is locked: its entries can no longer be
created, changed or removed until the week is unsubmitted.

Logged hours are not an input to capacity utilization, so nothing here
touches the alert cache.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from resourceplanner.platform.logging import get_logger
from resourceplanner.storage.models import ResourceModel, TimeEntryModel, WeeklySubmissionModel
from resourceplanner.storage.repositories import (
    AllocationRepository,
    ResourceRepository,
    TimeEntryRepository,
    WeeklySubmissionRepository,
)

logger = get_logger(__name__)


class TimesheetLockedError(ValueError):
    """Raised when changing hours of a week that has been submitted."""


def ensure_monday(week_start_date: date) -> None:
    if week_start_date.isoweekday() != 1:
        raise ValueError("weekStartDate must be a Monday")


class TimesheetService:
    """
    Service layer for time entries and weekly submissions.

    Methods return None when a referenced row does not exist and raise
    ValueError when the request breaks a timesheet rule.
    """

    def __init__(
        self,
        resource_repo: Optional[ResourceRepository] = None,
        allocation_repo: Optional[AllocationRepository] = None,
        entry_repo: Optional[TimeEntryRepository] = None,
        submission_repo: Optional[WeeklySubmissionRepository] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.resource_repo = resource_repo or ResourceRepository()
        self.allocation_repo = allocation_repo or AllocationRepository()
        self.entry_repo = entry_repo or TimeEntryRepository()
        self.submission_repo = submission_repo or WeeklySubmissionRepository()
        self.clock = clock

    def is_week_submitted(self, session: Session, resource_id: int, week_start_date: date) -> bool:
        submission = self.submission_repo.get_for_week(session, resource_id, week_start_date)
        return submission is not None and submission.is_submitted

    def _ensure_unlocked(self, session: Session, resource_id: int, week_start_date: date) -> None:
        if self.is_week_submitted(session, resource_id, week_start_date):
            raise TimesheetLockedError(
                f"Week of {week_start_date.isoformat()} is submitted; unsubmit it to change hours"
            )

    def _allocation_for(self, session: Session, resource_id: int, allocation_id: int):
        allocation = self.allocation_repo.get(session, allocation_id)
        if allocation is not None and allocation.resource_id != resource_id:
            raise ValueError("Allocation does not belong to the resource")
        return allocation

    # --- Time entries ---

    def create_entry(self, session: Session, data: Dict[str, Any]) -> Optional[TimeEntryModel]:
        """Log hours; None when the resource or the allocation is missing."""
        ensure_monday(data["week_start_date"])
        if self.resource_repo.get(session, data["resource_id"]) is None:
            return None
        if self._allocation_for(session, data["resource_id"], data["allocation_id"]) is None:
            return None
        self._ensure_unlocked(session, data["resource_id"], data["week_start_date"])

        entry = self.entry_repo.create(session, TimeEntryModel(**data))
        logger.info(
            "Time entry created",
            entry_id=entry.id,
            resource_id=entry.resource_id,
            week_start_date=entry.week_start_date.isoformat(),
            total_hours=entry.total_hours,
        )
        return entry

    def update_entry(self, session: Session, entry_id: int, updates: Dict[str, Any]) -> Optional[TimeEntryModel]:
        entry = self.entry_repo.get(session, entry_id)
        if entry is None:
            return None
        self._ensure_unlocked(session, entry.resource_id, entry.week_start_date)
        if "allocation_id" in updates:
            if self._allocation_for(session, entry.resource_id, updates["allocation_id"]) is None:
                raise ValueError("Allocation not found")
        return self.entry_repo.update(session, entry_id, updates)

    def delete_entry(self, session: Session, entry_id: int) -> bool:
        entry = self.entry_repo.get(session, entry_id)
        if entry is None:
            return False
        self._ensure_unlocked(session, entry.resource_id, entry.week_start_date)
        return self.entry_repo.delete(session, entry_id)

    # --- Weekly submission ---

    def submit_week(self, session: Session, resource_id: int, week_start_date: date) -> Optional[WeeklySubmissionModel]:
        """
        Mark a resource's week as submitted, creating the submission row on
        first use. The stored total is the sum of the week's entries.
        """
        ensure_monday(week_start_date)
        if self.resource_repo.get(session, resource_id) is None:
            return None

        entries = self.entry_repo.list_for_week(session, resource_id, week_start_date)
        total = sum(entry.total_hours for entry in entries)
        values = {"is_submitted": True, "submitted_at": self.clock(), "total_hours": total}

        submission = self.submission_repo.get_for_week(session, resource_id, week_start_date)
        if submission is None:
            submission = self.submission_repo.create(
                session,
                WeeklySubmissionModel(resource_id=resource_id, week_start_date=week_start_date, **values),
            )
        else:
            submission = self.submission_repo.update(session, submission.id, values)

        logger.info(
            "Weekly timesheet submitted",
            resource_id=resource_id,
            week_start_date=week_start_date.isoformat(),
            entries=len(entries),
            total_hours=total,
        )
        return submission

    def unsubmit_week(self, session: Session, resource_id: int, week_start_date: date) -> Optional[WeeklySubmissionModel]:
        """Reopen a week; None when it was never submitted or created."""
        submission = self.submission_repo.get_for_week(session, resource_id, week_start_date)
        if submission is None:
            return None
        submission = self.submission_repo.update(
            session, submission.id, {"is_submitted": False, "submitted_at": None}
        )
        logger.info(
            "Weekly timesheet reopened",
            resource_id=resource_id,
            week_start_date=week_start_date.isoformat(),
        )
        return submission

    def unsubmitted_resources(self, session: Session, week_start_date: date) -> List[ResourceModel]:
        """
        Active resources with an active allocation covering the week's Monday
        and no submitted timesheet for the week.
        """
        ensure_monday(week_start_date)
        submitted = self.submission_repo.submitted_resource_ids(session, week_start_date)
        allocated = {
            allocation.resource_id
            for allocation in self.allocation_repo.list_in_range(session, week_start_date, week_start_date)
            if allocation.status == "active"
        }
        return [
            resource
            for resource in self.resource_repo.list_all(session)
            if resource.is_active and resource.id in allocated and resource.id not in submitted
        ]
