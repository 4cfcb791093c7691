"""
Capacity Service - request-level entry point for alerts, breakdowns, heatmaps and KPIs.

Sits between the API routers and the engine: loads the snapshot inside the
caller's session, runs the shared computations and owns the alert cache.
"""

from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Session

from resourceplanner.engine import period
from resourceplanner.engine.alert_cache import AlertCache
from resourceplanner.engine.alert_engine import AlertEngine, filter_resources
from resourceplanner.engine.breakdown import ResourceBreakdown, compute_resource_breakdown
from resourceplanner.engine.heatmap import build_heatmap
from resourceplanner.engine.iso_week import parse_date
from resourceplanner.engine.kpis import TREND_PERIODS, KpiCalculator, KpiSummary
from resourceplanner.engine.models import AlertPayload
from resourceplanner.engine.snapshot_loader import CapacitySnapshotLoader
from resourceplanner.platform.logging import get_logger

logger = get_logger(__name__)


class CapacityService:
    """
    Service layer for capacity analysis.

    Args:
        loader: Snapshot loader over the repositories
        engine: Alert engine; a default one when omitted
        cache: Alert payload cache; no caching when omitted
        clock: Wall-clock source, injectable for tests
    """

    def __init__(
        self,
        loader: CapacitySnapshotLoader,
        engine: Optional[AlertEngine] = None,
        cache: Optional[AlertCache] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.loader = loader
        self.engine = engine or AlertEngine()
        self.cache = cache
        self.clock = clock
        self.kpis = KpiCalculator(self.engine)

    def get_alerts(
        self,
        session: Session,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        department: Optional[str] = None,
        severity: Optional[str] = None,
    ) -> AlertPayload:
        now = self.clock()
        key = None
        generation = None
        if self.cache is not None:
            generation = self.cache.generation
            key = AlertCache.make_key(department, start_date, end_date, severity, now)
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Serving capacity alerts from cache", department=department)
                return cached

        snapshot = self.loader.load(session, parse_date(start_date), parse_date(end_date))
        alert_settings = self.loader.load_alert_settings(session)
        payload = self.engine.compute_alerts(
            snapshot.resources,
            snapshot.allocations,
            start_date,
            end_date,
            department,
            alert_settings,
            now,
            severity=severity,
        )

        if self.cache is not None:
            self.cache.set(key, payload, generation=generation)
        return payload

    def get_resource_breakdown(
        self,
        session: Session,
        resource_id: int,
        start_date: str,
        end_date: str,
        period_type: str = "week",
    ) -> Optional[ResourceBreakdown]:
        """Breakdown for one resource, None when the resource does not exist."""
        snapshot = self.loader.load(
            session, parse_date(start_date), parse_date(end_date), resource_id=resource_id
        )
        if not snapshot.resources:
            return None
        return compute_resource_breakdown(
            snapshot.resources[0],
            snapshot.allocations,
            snapshot.projects,
            start_date,
            end_date,
            self.clock(),
            period_type=period_type,
            calculator=self.engine.calculator,
        )

    def get_heatmap(
        self,
        session: Session,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        department: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        now = self.clock()
        snapshot = self.loader.load(session, parse_date(start_date), parse_date(end_date))
        in_scope = filter_resources(snapshot.resources, department)
        window = period.normalize(parse_date(start_date), parse_date(end_date), now)
        _, results = self.engine.compute_utilization(in_scope, snapshot.allocations, window, now)
        rows = build_heatmap(results, in_scope, snapshot.allocations, window)
        logger.info("Generated capacity heatmap", resources=len(rows))
        return rows

    def get_kpis(
        self,
        session: Session,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        department: Optional[str] = None,
        include_trends: bool = True,
    ) -> KpiSummary:
        """Dashboard KPIs; trend weeks reach back seven weeks before the end date."""
        now = self.clock()
        start = parse_date(start_date)
        end = parse_date(end_date)

        load_start, load_end = start, end
        if include_trends:
            anchor = end or now.date()
            history_start = anchor - timedelta(days=7 * TREND_PERIODS - 1)
            load_start = min(start, history_start) if start is not None else None
            load_end = max(end, anchor) if end is not None else None

        snapshot = self.loader.load(session, load_start, load_end)
        projects = self.loader.load_projects(session)
        return self.kpis.compute(
            snapshot.resources,
            projects,
            snapshot.allocations,
            start,
            end,
            department,
            now,
            include_trends=include_trends,
        )

    def invalidate(self, session: Optional[Session] = None) -> None:
        """
        Forget cached payloads after a data change.

        When the writing session is given it is committed first, so a reader
        that misses the cache afterwards loads the new rows.
        """
        if session is not None:
            session.commit()
        if self.cache is not None:
            self.cache.invalidate()
