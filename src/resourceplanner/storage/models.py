from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy import (
    JSON, Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, func
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass

# Helper to support both Postgres JSONB and generic JSON (for SQLite tests)
JSON_TYPE = JSON().with_variant(JSONB, 'postgresql')
TIMESTAMP_TYPE = DateTime(timezone=True).with_variant(TIMESTAMP(timezone=True), 'postgresql')

# --- Resources ---

class ResourceModel(Base):
    __tablename__ = "resources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String, unique=True)
    role: Mapped[Optional[str]] = mapped_column(String)
    department: Mapped[Optional[str]] = mapped_column(String, index=True)
    weekly_capacity: Mapped[float] = mapped_column(Float, nullable=False, default=40.0, server_default='40')
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default='1')
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default='0')
    deleted_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP_TYPE, nullable=True)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())

    allocations: Mapped[List["AllocationModel"]] = relationship(back_populates="resource")

# --- Projects ---

class ProjectModel(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    start_date: Mapped[Optional[date]] = mapped_column(Date)
    end_date: Mapped[Optional[date]] = mapped_column(Date)
    status: Mapped[str] = mapped_column(String, default='active', server_default='active', index=True)
    priority: Mapped[str] = mapped_column(String, default='medium', server_default='medium')
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())

# --- Allocations ---

class AllocationModel(Base):
    __tablename__ = "resource_allocations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    resource_id: Mapped[int] = mapped_column(ForeignKey("resources.id"), nullable=False, index=True)
    allocated_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    role: Mapped[Optional[str]] = mapped_column(String)
    # active, planned, completed
    status: Mapped[str] = mapped_column(String, default='active', server_default='active', index=True)
    # {"2024-W05": 12.0, ...}
    weekly_allocations: Mapped[Dict[str, float]] = mapped_column(JSON_TYPE, default=dict)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())

    resource: Mapped["ResourceModel"] = relationship(back_populates="allocations")
    project: Mapped["ProjectModel"] = relationship()

# --- Alert Settings ---

class AlertSettingsModel(Base):
    __tablename__ = "alert_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String, nullable=False, default='capacity', server_default='capacity', index=True)
    warning_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=90.0, server_default='90')
    error_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=100.0, server_default='100')
    critical_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=120.0, server_default='120')
    under_utilization_threshold: Mapped[float] = mapped_column(Float, nullable=False, default=50.0, server_default='50')
    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default='1')
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())

# --- Time logging ---

DAY_HOUR_FIELDS = (
    "monday_hours",
    "tuesday_hours",
    "wednesday_hours",
    "thursday_hours",
    "friday_hours",
    "saturday_hours",
    "sunday_hours",
)

class TimeEntryModel(Base):
    """Actual hours a resource logged against one allocation in one ISO week."""
    __tablename__ = "time_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_id: Mapped[int] = mapped_column(ForeignKey("resources.id"), nullable=False, index=True)
    allocation_id: Mapped[int] = mapped_column(ForeignKey("resource_allocations.id"), nullable=False, index=True)
    # Monday of the week
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    monday_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    tuesday_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    wednesday_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    thursday_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    friday_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    saturday_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    sunday_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    notes: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())

    @property
    def total_hours(self) -> float:
        return sum(float(getattr(self, name) or 0) for name in DAY_HOUR_FIELDS)

class WeeklySubmissionModel(Base):
    __tablename__ = "weekly_submissions"
    __table_args__ = (UniqueConstraint("resource_id", "week_start_date", name="uq_weekly_submission_week"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_id: Mapped[int] = mapped_column(ForeignKey("resources.id"), nullable=False, index=True)
    week_start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    is_submitted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default='0')
    submitted_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP_TYPE, nullable=True)
    reminder_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default='0')
    reminder_sent_at: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP_TYPE, nullable=True)
    total_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default='0')
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TIMESTAMP_TYPE, server_default=func.now(), onupdate=func.now())
