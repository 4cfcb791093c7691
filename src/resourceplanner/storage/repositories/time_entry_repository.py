from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from resourceplanner.storage.models import DAY_HOUR_FIELDS, TimeEntryModel
from .base import BaseRepository


class TimeEntryRepository(BaseRepository[TimeEntryModel]):
    """Repository for logged hours."""

    updatable_fields = ("allocation_id", "notes") + DAY_HOUR_FIELDS

    def create(self, session: Session, entity: TimeEntryModel) -> TimeEntryModel:
        session.add(entity)
        session.flush()
        session.refresh(entity)
        return entity

    def get(self, session: Session, id: int) -> Optional[TimeEntryModel]:
        return session.get(TimeEntryModel, id)

    def delete(self, session: Session, id: int) -> bool:
        entry = self.get(session, id)
        if entry is None:
            return False
        session.delete(entry)
        session.flush()
        return True

    def list(
        self,
        session: Session,
        limit: int = 100,
        offset: int = 0,
        resource_id: Optional[int] = None,
        week_start_date: Optional[date] = None,
    ) -> List[TimeEntryModel]:
        stmt = select(TimeEntryModel)
        if resource_id is not None:
            stmt = stmt.where(TimeEntryModel.resource_id == resource_id)
        if week_start_date is not None:
            stmt = stmt.where(TimeEntryModel.week_start_date == week_start_date)
        stmt = stmt.order_by(TimeEntryModel.week_start_date.desc(), TimeEntryModel.id).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def list_for_week(self, session: Session, resource_id: int, week_start_date: date) -> List[TimeEntryModel]:
        stmt = (
            select(TimeEntryModel)
            .where(TimeEntryModel.resource_id == resource_id)
            .where(TimeEntryModel.week_start_date == week_start_date)
            .order_by(TimeEntryModel.id)
        )
        return list(session.scalars(stmt).all())

    def exists_for_allocation(self, session: Session, allocation_id: int) -> bool:
        stmt = select(TimeEntryModel.id).where(TimeEntryModel.allocation_id == allocation_id).limit(1)
        return session.scalars(stmt).first() is not None
