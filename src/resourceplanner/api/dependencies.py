from typing import Annotated

from fastapi import Depends

from resourceplanner.api.database import close_postgres_adapter, get_db, get_postgres_adapter
from resourceplanner.engine.alert_cache import AlertCache
from resourceplanner.engine.alert_engine import AlertEngine
from resourceplanner.engine.capacity_service import CapacityService
from resourceplanner.engine.snapshot_loader import CapacitySnapshotLoader
from resourceplanner.engine.timesheets import TimesheetService
from resourceplanner.platform.config import settings
from resourceplanner.platform.logging import get_logger
from resourceplanner.storage.repositories import (
    AlertSettingsRepository,
    AllocationRepository,
    ProjectRepository,
    ResourceRepository,
)

__all__ = [
    "get_db",
    "get_postgres_adapter",
    "get_alert_cache",
    "get_capacity_service",
    "get_timesheet_service",
    "init_resources",
    "close_resources",
]

logger = get_logger(__name__)

# Singletons
_alert_cache: AlertCache | None = None
_alert_engine: AlertEngine | None = None


def get_alert_cache() -> AlertCache:
    global _alert_cache
    if _alert_cache is None:
        _alert_cache = AlertCache(
            ttl_seconds=settings.ALERT_CACHE_TTL_SECONDS,
            max_entries=settings.ALERT_CACHE_MAX_ENTRIES,
        )
    return _alert_cache


def get_alert_engine() -> AlertEngine:
    global _alert_engine
    if _alert_engine is None:
        _alert_engine = AlertEngine()
    return _alert_engine


def get_capacity_service(
    cache: Annotated[AlertCache, Depends(get_alert_cache)],
    engine: Annotated[AlertEngine, Depends(get_alert_engine)],
) -> CapacityService:
    loader = CapacitySnapshotLoader(
        resource_repo=ResourceRepository(),
        project_repo=ProjectRepository(),
        allocation_repo=AllocationRepository(),
        settings_repo=AlertSettingsRepository(),
    )
    return CapacityService(loader=loader, engine=engine, cache=cache)



def get_timesheet_service() -> TimesheetService:
    return TimesheetService()

async def init_resources() -> None:
    """Initialize the database connection."""
    adapter = get_postgres_adapter()
    adapter.connect()
    if adapter.config.is_sqlite:
        logger.info("Creating schema for SQLite database")
        adapter.create_schema()


async def close_resources() -> None:
    """Close all resources."""
    global _alert_cache
    close_postgres_adapter()
    if _alert_cache is not None:
        _alert_cache.invalidate()
        _alert_cache = None
