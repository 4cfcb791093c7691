"""
Router for Allocation management endpoints.

Every write commits and then invalidates the alert cache: allocations are
the main input to utilization.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from resourceplanner.api import schemas
from resourceplanner.api.dependencies import get_capacity_service, get_db
from resourceplanner.engine.capacity_service import CapacityService
from resourceplanner.platform.logging import get_logger
from resourceplanner.storage.models import AllocationModel
from resourceplanner.storage.repositories import (
    AllocationRepository,
    ProjectRepository,
    ResourceRepository,
    TimeEntryRepository,
)

logger = get_logger(__name__)

router = APIRouter()
repo = AllocationRepository()
resource_repo = ResourceRepository()
project_repo = ProjectRepository()
entry_repo = TimeEntryRepository()


def _ensure_references(session: Session, resource_id: Optional[int], project_id: Optional[int]) -> None:
    if resource_id is not None and not resource_repo.get(session, resource_id):
        raise HTTPException(status_code=404, detail="Resource not found")
    if project_id is not None and not project_repo.get(session, project_id):
        raise HTTPException(status_code=404, detail="Project not found")


@router.get("/", response_model=List[schemas.AllocationResponse])
def list_allocations(
    session: Annotated[Session, Depends(get_db)],
    resource_id: Optional[int] = Query(None, alias="resourceId"),
    project_id: Optional[int] = Query(None, alias="projectId"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    return repo.list(session, limit=limit, offset=offset, resource_id=resource_id, project_id=project_id)


@router.post("/", response_model=schemas.AllocationResponse, status_code=status.HTTP_201_CREATED)
def create_allocation(
    allocation_create: schemas.AllocationCreate,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """
    Create a new Allocation.
    """
    _ensure_references(session, allocation_create.resource_id, allocation_create.project_id)
    created = repo.create(session, AllocationModel(**allocation_create.model_dump()))
    service.invalidate(session)
    logger.info(
        "Allocation created",
        allocation_id=created.id,
        resource_id=created.resource_id,
        project_id=created.project_id,
    )
    return created


@router.get("/{allocation_id}", response_model=schemas.AllocationResponse)
def get_allocation(
    allocation_id: int,
    session: Annotated[Session, Depends(get_db)],
):
    allocation = repo.get(session, allocation_id)
    if not allocation:
        raise HTTPException(status_code=404, detail="Allocation not found")
    return allocation


@router.patch("/{allocation_id}", response_model=schemas.AllocationResponse)
def update_allocation(
    allocation_id: int,
    updates: schemas.AllocationUpdate,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """
    Update an Allocation.
    """
    update_data = updates.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    existing = repo.get(session, allocation_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Allocation not found")

    _ensure_references(session, update_data.get("resource_id"), update_data.get("project_id"))
    start = update_data.get("start_date", existing.start_date)
    end = update_data.get("end_date", existing.end_date)
    if start and end and end < start:
        raise HTTPException(status_code=400, detail="endDate must not be before startDate")
    hours = update_data.get("allocated_hours", existing.allocated_hours) or 0
    if start and end and hours > schemas.max_hours_for_span(start, end):
        raise HTTPException(status_code=400, detail="allocatedHours exceeds the hours available in the allocation span")

    updated = repo.update(session, allocation_id, update_data)
    service.invalidate(session)
    return updated


@router.delete("/{allocation_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_allocation(
    allocation_id: int,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    if entry_repo.exists_for_allocation(session, allocation_id):
        raise HTTPException(status_code=409, detail="Allocation has logged time entries")
    if not repo.delete(session, allocation_id):
        raise HTTPException(status_code=404, detail="Allocation not found")
    service.invalidate(session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
