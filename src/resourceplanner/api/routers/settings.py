"""
Router for alert threshold settings.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from resourceplanner.api import schemas
from resourceplanner.api.dependencies import get_capacity_service, get_db
from resourceplanner.engine.capacity_service import CapacityService
from resourceplanner.platform.logging import get_logger
from resourceplanner.storage.repositories import AlertSettingsRepository

logger = get_logger(__name__)

router = APIRouter()
repo = AlertSettingsRepository()


@router.get("/alerts", response_model=schemas.AlertSettingsPayload)
def get_alert_settings(
    session: Annotated[Session, Depends(get_db)],
):
    """Capacity alert thresholds; defaults when none are stored."""
    row = repo.get_by_type(session, enabled_only=False)
    if row is None:
        return schemas.AlertSettingsPayload()
    return row


@router.put("/alerts", response_model=schemas.AlertSettingsPayload)
def put_alert_settings(
    payload: schemas.AlertSettingsPayload,
    session: Annotated[Session, Depends(get_db)],
    service: Annotated[CapacityService, Depends(get_capacity_service)],
):
    row = repo.upsert(session, payload.model_dump())
    service.invalidate(session)
    logger.info("Alert settings updated", **payload.model_dump())
    return row
