"""
Router for logged hours.

Entries of a submitted week are locked; changing them answers 409 until the
week is unsubmitted.
"""

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from resourceplanner.api import schemas
from resourceplanner.api.dependencies import get_db, get_timesheet_service
from resourceplanner.engine.timesheets import TimesheetLockedError, TimesheetService

router = APIRouter()

# Columns that may be cleared by sending null
NULLABLE_FIELDS = ("notes",)


def _http_error(error: ValueError) -> HTTPException:
    if isinstance(error, TimesheetLockedError):
        return HTTPException(status_code=409, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))


@router.get("/", response_model=List[schemas.TimeEntryResponse])
def list_time_entries(
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
    resource_id: Optional[int] = Query(None, alias="resourceId"),
    week_start_date: Optional[date] = Query(None, alias="weekStartDate"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    return service.entry_repo.list(
        session, limit=limit, offset=offset, resource_id=resource_id, week_start_date=week_start_date
    )


@router.post("/", response_model=schemas.TimeEntryResponse, status_code=status.HTTP_201_CREATED)
def create_time_entry(
    entry_create: schemas.TimeEntryCreate,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    try:
        entry = service.create_entry(session, entry_create.model_dump())
    except ValueError as e:
        raise _http_error(e)
    if entry is None:
        raise HTTPException(status_code=404, detail="Resource or allocation not found")
    return entry


@router.get("/{entry_id}", response_model=schemas.TimeEntryResponse)
def get_time_entry(
    entry_id: int,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    entry = service.entry_repo.get(session, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Time entry not found")
    return entry


@router.patch("/{entry_id}", response_model=schemas.TimeEntryResponse)
def update_time_entry(
    entry_id: int,
    updates: schemas.TimeEntryUpdate,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    update_data = {
        name: value
        for name, value in updates.model_dump(exclude_unset=True).items()
        if value is not None or name in NULLABLE_FIELDS
    }
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    try:
        entry = service.update_entry(session, entry_id, update_data)
    except ValueError as e:
        raise _http_error(e)
    if entry is None:
        raise HTTPException(status_code=404, detail="Time entry not found")
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_entry(
    entry_id: int,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[TimesheetService, Depends(get_timesheet_service)],
):
    try:
        deleted = service.delete_entry(session, entry_id)
    except ValueError as e:
        raise _http_error(e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Time entry not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
