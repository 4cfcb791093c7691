"""
Router for Project management endpoints.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from resourceplanner.api import schemas
from resourceplanner.api.dependencies import get_capacity_service, get_db
from resourceplanner.engine.capacity_service import CapacityService
from resourceplanner.platform.logging import get_logger
from resourceplanner.storage.models import ProjectModel
from resourceplanner.storage.repositories import AllocationRepository, ProjectRepository

logger = get_logger(__name__)

router = APIRouter()
repo = ProjectRepository()
allocation_repo = AllocationRepository()


@router.get("/", response_model=List[schemas.ProjectResponse])
def list_projects(
    session: Annotated[Session, Depends(get_db)],
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    return repo.list(session, limit=limit, offset=offset)


@router.post("/", response_model=schemas.ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project(
    project_create: schemas.ProjectCreate,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    created = repo.create(session, ProjectModel(**project_create.model_dump()))
    service.invalidate(session)
    logger.info("Project created", project_id=created.id)
    return created


@router.get("/{project_id}", response_model=schemas.ProjectResponse)
def get_project(
    project_id: int,
    session: Annotated[Session, Depends(get_db)],
):
    project = repo.get(session, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.patch("/{project_id}", response_model=schemas.ProjectResponse)
def update_project(
    project_id: int,
    updates: schemas.ProjectUpdate,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    update_data = updates.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = repo.update(session, project_id, update_data)
    if not updated:
        raise HTTPException(status_code=404, detail="Project not found")
    service.invalidate(session)
    return updated


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project(
    project_id: int,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """
    Delete a Project. Projects that still have allocations cannot be deleted.
    """
    if repo.get(session, project_id) and allocation_repo.list(session, limit=1, project_id=project_id):
        raise HTTPException(status_code=409, detail="Project still has allocations")
    if not repo.delete(session, project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    service.invalidate(session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
