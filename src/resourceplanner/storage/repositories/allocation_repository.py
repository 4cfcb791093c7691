from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from resourceplanner.storage.models import AllocationModel
from .base import BaseRepository


class AllocationRepository(BaseRepository[AllocationModel]):
    """Repository for resource allocations."""

    updatable_fields = (
        "project_id", "resource_id", "allocated_hours", "start_date", "end_date",
        "role", "status", "weekly_allocations",
    )

    def create(self, session: Session, entity: AllocationModel) -> AllocationModel:
        session.add(entity)
        session.flush()
        session.refresh(entity)
        return entity

    def get(self, session: Session, id: int) -> Optional[AllocationModel]:
        return session.get(AllocationModel, id)

    def delete(self, session: Session, id: int) -> bool:
        allocation = self.get(session, id)
        if allocation is None:
            return False
        session.delete(allocation)
        session.flush()
        return True

    def list(
        self,
        session: Session,
        limit: int = 100,
        offset: int = 0,
        resource_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> List[AllocationModel]:
        stmt = select(AllocationModel)
        if resource_id is not None:
            stmt = stmt.where(AllocationModel.resource_id == resource_id)
        if project_id is not None:
            stmt = stmt.where(AllocationModel.project_id == project_id)
        stmt = stmt.order_by(AllocationModel.id).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def list_in_range(
        self,
        session: Session,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        resource_id: Optional[int] = None,
    ) -> List[AllocationModel]:
        """
        Allocations touching [start_date, end_date], every status.

        Open bounds are not filtered.
        """
        stmt = select(AllocationModel)
        if start_date is not None:
            stmt = stmt.where(AllocationModel.end_date >= start_date)
        if end_date is not None:
            stmt = stmt.where(AllocationModel.start_date <= end_date)
        if resource_id is not None:
            stmt = stmt.where(AllocationModel.resource_id == resource_id)
        return list(session.scalars(stmt.order_by(AllocationModel.id)).all())
