from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from resourceplanner.storage.models import WeeklySubmissionModel
from .base import BaseRepository


class WeeklySubmissionRepository(BaseRepository[WeeklySubmissionModel]):
    """Repository for per-resource weekly timesheet submissions."""

    updatable_fields = ("is_submitted", "submitted_at", "reminder_sent", "reminder_sent_at", "total_hours")

    def create(self, session: Session, entity: WeeklySubmissionModel) -> WeeklySubmissionModel:
        session.add(entity)
        session.flush()
        session.refresh(entity)
        return entity

    def get(self, session: Session, id: int) -> Optional[WeeklySubmissionModel]:
        return session.get(WeeklySubmissionModel, id)

    def delete(self, session: Session, id: int) -> bool:
        row = self.get(session, id)
        if row is None:
            return False
        session.delete(row)
        session.flush()
        return True

    def list(
        self,
        session: Session,
        limit: int = 100,
        offset: int = 0,
        resource_id: Optional[int] = None,
        pending_only: bool = False,
    ) -> List[WeeklySubmissionModel]:
        stmt = select(WeeklySubmissionModel)
        if resource_id is not None:
            stmt = stmt.where(WeeklySubmissionModel.resource_id == resource_id)
        if pending_only:
            stmt = stmt.where(WeeklySubmissionModel.is_submitted.is_(False))
        stmt = stmt.order_by(WeeklySubmissionModel.week_start_date.desc(), WeeklySubmissionModel.id)
        return list(session.scalars(stmt.limit(limit).offset(offset)).all())

    def get_for_week(self, session: Session, resource_id: int, week_start_date: date) -> Optional[WeeklySubmissionModel]:
        stmt = (
            select(WeeklySubmissionModel)
            .where(WeeklySubmissionModel.resource_id == resource_id)
            .where(WeeklySubmissionModel.week_start_date == week_start_date)
        )
        return session.scalars(stmt).first()

    def submitted_resource_ids(self, session: Session, week_start_date: date) -> set:
        stmt = (
            select(WeeklySubmissionModel.resource_id)
            .where(WeeklySubmissionModel.week_start_date == week_start_date)
            .where(WeeklySubmissionModel.is_submitted.is_(True))
        )
        return set(session.scalars(stmt).all())
