"""
Resource Planner API Main Application

Entry point for the FastAPI application.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from resourceplanner.platform.config import settings
from resourceplanner.platform.logging import configure_logging, get_logger
from resourceplanner.api.middleware import RequestContextMiddleware
from resourceplanner.api.routers import allocations, dashboard, projects, resources, time_entries, weekly_submissions
from resourceplanner.api.routers import settings as settings_router
from resourceplanner.api.dependencies import (
    init_resources,
    close_resources,
    get_postgres_adapter,
)

# Configure logging on import
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting Resource Planner API...")
    try:
        await init_resources()
        logger.info("Resources initialized successfully.")
    except Exception as e:
        logger.error("Failed to initialize resources", error=str(e))
        raise

    yield

    logger.info("Shutting down Resource Planner API...")
    await close_resources()
    logger.info("Resources closed.")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Resource capacity planning: utilization alerts, breakdowns, heatmaps, KPIs and timesheets",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# OBSERVABILITY
# =============================================================================

# Add Prometheus metrics endpoint
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/health/live", tags=["Health"])
async def liveness() -> dict:
    """Liveness probe - is the service running?"""
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
async def readiness() -> dict:
    """
    Readiness probe - is the service ready to accept traffic?
    Checks the database connection.
    """
    database_healthy = False
    try:
        adapter = get_postgres_adapter()
        database_healthy = adapter.health_check()
    except Exception as e:
        logger.warning("Database health check failed", error=str(e))

    return {
        "status": "ready" if database_healthy else "not_ready",
        "version": settings.VERSION,
        "checks": {
            "database": "healthy" if database_healthy else "unhealthy",
        },
    }


# =============================================================================
# API ROUTERS
# =============================================================================

app.include_router(dashboard.router, prefix="/api/v1/dashboard", tags=["Dashboard"])
app.include_router(resources.router, prefix="/api/v1/resources", tags=["Resources"])
app.include_router(projects.router, prefix="/api/v1/projects", tags=["Projects"])
app.include_router(allocations.router, prefix="/api/v1/allocations", tags=["Allocations"])
app.include_router(settings_router.router, prefix="/api/v1/settings", tags=["Settings"])
app.include_router(time_entries.router, prefix="/api/v1/time-entries", tags=["Timesheets"])
app.include_router(weekly_submissions.router, prefix="/api/v1/weekly-submissions", tags=["Timesheets"])


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "resourceplanner.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
