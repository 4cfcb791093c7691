"""
Resource Planner - Capacity planning backend

This package contains the resource planning backend services:
- api: FastAPI REST endpoints (dashboard alerts, breakdowns, heatmap, CRUD)
- engine: Capacity utilization & alert engine (pure computation)
- storage: Relational storage adapters, models and repositories
- platform: Cross-cutting concerns (configuration, logging)
"""

__version__ = "0.1.0"
