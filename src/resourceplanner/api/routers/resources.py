"""
Router for Resource management endpoints.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resourceplanner.api import schemas
from resourceplanner.api.dependencies import get_capacity_service, get_db
from resourceplanner.engine.capacity_service import CapacityService
from resourceplanner.platform.logging import get_logger
from resourceplanner.storage.models import ResourceModel
from resourceplanner.storage.repositories import ResourceRepository

logger = get_logger(__name__)

router = APIRouter()
repo = ResourceRepository()


@router.get("/", response_model=List[schemas.ResourceResponse])
def list_resources(
    session: Annotated[Session, Depends(get_db)],
    department: Optional[str] = Query(None),
    active_only: bool = Query(False, alias="activeOnly"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
):
    return repo.list(session, limit=limit, offset=offset, department=department, active_only=active_only)


@router.post("/", response_model=schemas.ResourceResponse, status_code=status.HTTP_201_CREATED)
def create_resource(
    resource_create: schemas.ResourceCreate,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """
    Create a new Resource.
    """
    try:
        created = repo.create(session, ResourceModel(**resource_create.model_dump()))
    except IntegrityError:
        raise HTTPException(status_code=409, detail="A resource with this email already exists")
    service.invalidate(session)
    logger.info("Resource created", resource_id=created.id)
    return created


@router.get("/{resource_id}", response_model=schemas.ResourceResponse)
def get_resource(
    resource_id: int,
    session: Annotated[Session, Depends(get_db)],
):
    resource = repo.get(session, resource_id)
    if not resource:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource


@router.patch("/{resource_id}", response_model=schemas.ResourceResponse)
def update_resource(
    resource_id: int,
    updates: schemas.ResourceUpdate,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """
    Update a Resource.
    """
    update_data = updates.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")

    updated = repo.update(session, resource_id, update_data)
    if not updated:
        raise HTTPException(status_code=404, detail="Resource not found")
    service.invalidate(session)
    return updated


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(
    resource_id: int,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    """
    Delete (soft delete) a Resource.
    """
    if not repo.delete(session, resource_id):
        raise HTTPException(status_code=404, detail="Resource not found")
    service.invalidate(session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
