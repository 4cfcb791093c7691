"""
Router for capacity dashboard endpoints: alerts, per-resource breakdown, heatmap, KPIs.
"""

from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from resourceplanner.api import schemas
from resourceplanner.api.dependencies import get_capacity_service, get_db
from resourceplanner.engine.capacity_service import CapacityService
from resourceplanner.engine.iso_week import parse_date
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/alerts",
    response_model=None,
    responses={200: {"model": schemas.AlertPayloadWithWindowResponse}},
)
def get_capacity_alerts(
    service: Annotated[CapacityService, Depends(get_capacity_service)],
    session: Annotated[Session, Depends(get_db)],
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    department: Optional[str] = Query(None),
    severity: schemas.Severity = Query("all"),
    include_window: bool = Query(False, alias="includeWindow"),
):
    """
    Capacity alerts grouped by severity for the requested period.

    With `includeWindow=true` the normalized computation window is added
    under `window`; the default payload carries only categories, summary
    and metadata.
    """
    try:
        payload = service.get_alerts(session, start_date, end_date, department, severity)
    except Exception as e:
        logger.error("Failed to compute capacity alerts", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to compute capacity alerts")
    if include_window:
        return schemas.AlertPayloadWithWindowResponse.from_payload(payload)
    return schemas.AlertPayloadResponse.from_payload(payload)


@router.get("/alerts/resource/{resource_id}/breakdown")
def get_resource_breakdown(
    resource_id: int,
    service: Annotated[CapacityService, Depends(get_capacity_service)],
    session: Annotated[Session, Depends(get_db)],
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    period_type: str = Query("week", alias="periodType"),
) -> Dict[str, Any]:
    """
    Week-by-week utilization breakdown behind one resource's alert.
    """
    if parse_date(start_date) is None or parse_date(end_date) is None:
        raise HTTPException(status_code=400, detail="startDate and endDate are required")

    try:
        breakdown = service.get_resource_breakdown(
            session, resource_id, start_date, end_date, period_type
        )
    except Exception as e:
        logger.error("Failed to compute resource breakdown", resource_id=resource_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to compute resource breakdown")

    if breakdown is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    return breakdown.to_dict()


@router.get("/heatmap")
def get_capacity_heatmap(
    service: Annotated[CapacityService, Depends(get_capacity_service)],
    session: Annotated[Session, Depends(get_db)],
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    department: Optional[str] = Query(None),
) -> List[Dict[str, Any]]:
    """Per-resource utilization heatmap."""
    try:
        return service.get_heatmap(session, start_date, end_date, department)
    except Exception as e:
        logger.error("Failed to build capacity heatmap", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to build capacity heatmap")


@router.get("/kpis")
def get_dashboard_kpis(
    service: Annotated[CapacityService, Depends(get_capacity_service)],
    session: Annotated[Session, Depends(get_db)],
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    department: Optional[str] = Query(None),
    include_trends: bool = Query(True, alias="includeTrends"),
) -> Dict[str, Any]:
    """
    Portfolio KPIs for the period: active projects, available resources,
    overall utilization and conflicts, with last-week values and a
    seven-week trend under `trendData`.
    """
    try:
        summary = service.get_kpis(session, start_date, end_date, department, include_trends)
    except Exception as e:
        logger.error("Failed to calculate dashboard KPIs", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to calculate dashboard KPIs")
    return summary.to_dict()
