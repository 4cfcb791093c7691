from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from resourceplanner.storage.models import ProjectModel
from .base import BaseRepository


class ProjectRepository(BaseRepository[ProjectModel]):
    """Repository for projects."""

    updatable_fields = ("name", "description", "start_date", "end_date", "status", "priority")

    def create(self, session: Session, entity: ProjectModel) -> ProjectModel:
        session.add(entity)
        session.flush()
        session.refresh(entity)
        return entity

    def get(self, session: Session, id: int) -> Optional[ProjectModel]:
        return session.get(ProjectModel, id)

    def delete(self, session: Session, id: int) -> bool:
        project = self.get(session, id)
        if project is None:
            return False
        session.delete(project)
        session.flush()
        return True

    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[ProjectModel]:
        stmt = select(ProjectModel).order_by(ProjectModel.id).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def get_many(self, session: Session, ids: Iterable[int]) -> List[ProjectModel]:
        ids = list(set(ids))
        if not ids:
            return []
        stmt = select(ProjectModel).where(ProjectModel.id.in_(ids))
        return list(session.scalars(stmt).all())

    def list_all(self, session: Session) -> List[ProjectModel]:
        return list(session.scalars(select(ProjectModel).order_by(ProjectModel.id)).all())
