"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

sys.path.append(os.path.join(os.getcwd(), "src"))

from resourceplanner.engine.models import Allocation, Project, Resource  # noqa: E402
from resourceplanner.storage.models import Base  # noqa: E402

# Wednesday of ISO week 2024-W11 (Monday 2024-03-11)
NOW = datetime(2024, 3, 13, 10, 0)
CURRENT_MONDAY = date(2024, 3, 11)


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("DEBUG", "true")


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def db_engine():
    """In-memory SQLite shared across connections."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(db_engine):
    Session = sessionmaker(bind=db_engine, expire_on_commit=False)
    session = Session()
    yield session
    session.close()


def make_resource(id=1, name="Alice", department="Engineering", capacity=40.0, **kwargs) -> Resource:
    return Resource(id=id, name=name, department=department, weekly_capacity_hours=capacity, **kwargs)


def make_allocation(
    id=1,
    resource_id=1,
    project_id=10,
    start=date(2024, 3, 11),
    end=date(2024, 3, 31),
    hours=0.0,
    weekly=None,
    status="active",
    role=None,
) -> Allocation:
    return Allocation(
        id=id,
        resource_id=resource_id,
        project_id=project_id,
        start_date=start,
        end_date=end,
        status=status,
        allocated_hours_total=hours,
        weekly_hours=weekly,
        role=role,
    )


def make_project(id=10, name="Apollo") -> Project:
    return Project(id=id, name=name)
