"""
Router for weekly timesheet submission endpoints.
"""

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from resourceplanner.api import schemas
from resourceplanner.api.dependencies import get_db, get_timesheet_service
from resourceplanner.engine.timesheets import TimesheetService

router = APIRouter()


@router.get("/", response_model=List[schemas.WeeklySubmissionResponse])
def list_weekly_submissions(
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
    resource_id: Optional[int] = Query(None, alias="resourceId"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    return service.submission_repo.list(session, limit=limit, offset=offset, resource_id=resource_id)


@router.get("/pending", response_model=List[schemas.WeeklySubmissionResponse])
def list_pending_submissions(
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
    resource_id: Optional[int] = Query(None, alias="resourceId"),
):
    """Submission rows that exist but are not submitted (reopened weeks)."""
    return service.submission_repo.list(session, limit=1000, resource_id=resource_id, pending_only=True)


@router.get("/unsubmitted/{week_start_date}", response_model=List[schemas.ResourceResponse])
def list_unsubmitted_resources(
    week_start_date: date,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    """Active, allocated resources that have not submitted the week yet."""
    try:
        return service.unsubmitted_resources(session, week_start_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/resource/{resource_id}/week/{week_start_date}", response_model=schemas.WeeklySubmissionResponse)
def get_submission_for_week(
    resource_id: int,
    week_start_date: date,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    submission = service.submission_repo.get_for_week(session, resource_id, week_start_date)
    if not submission:
        raise HTTPException(status_code=404, detail="Weekly submission not found")
    return submission


@router.get("/{submission_id}", response_model=schemas.WeeklySubmissionResponse)
def get_weekly_submission(
    submission_id: int,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    submission = service.submission_repo.get(session, submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Weekly submission not found")
    return submission


@router.post("/submit", response_model=schemas.WeeklySubmissionResponse)
def submit_week(
    request: schemas.WeeklySubmissionRequest,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    """
    Submit a resource's week. Resubmitting refreshes the stored total and
    submission time.
    """
    try:
        submission = service.submit_week(session, request.resource_id, request.week_start_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if submission is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    return submission


@router.post("/unsubmit", response_model=schemas.WeeklySubmissionResponse)
def unsubmit_week(
    request: schemas.WeeklySubmissionRequest,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    submission = service.unsubmit_week(session, request.resource_id, request.week_start_date)
    if submission is None:
        raise HTTPException(status_code=404, detail="Weekly submission not found")
    return submission
