from datetime import datetime, timezone
from typing import List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from resourceplanner.storage.models import ResourceModel
from .base import BaseRepository

logger = logging.getLogger(__name__)


class ResourceRepository(BaseRepository[ResourceModel]):
    """Repository for planned resources (people)."""

    updatable_fields = ("name", "email", "role", "department", "weekly_capacity", "is_active")

    def create(self, session: Session, entity: ResourceModel) -> ResourceModel:
        session.add(entity)
        session.flush()
        session.refresh(entity)
        return entity

    def get(self, session: Session, id: int) -> Optional[ResourceModel]:
        resource = session.get(ResourceModel, id)
        if resource is None or resource.is_deleted:
            return None
        return resource

    def delete(self, session: Session, id: int) -> bool:
        """Soft delete: the row stays for history but leaves every listing."""
        resource = self.get(session, id)
        if resource is None:
            return False
        resource.is_deleted = True
        resource.is_active = False
        resource.deleted_at = datetime.now(timezone.utc)
        session.flush()
        logger.info(f"Resource {id} soft-deleted")
        return True

    def list(
        self,
        session: Session,
        limit: int = 100,
        offset: int = 0,
        department: Optional[str] = None,
        active_only: bool = False,
    ) -> List[ResourceModel]:
        stmt = select(ResourceModel).where(ResourceModel.is_deleted.is_(False))
        if department:
            stmt = stmt.where(ResourceModel.department == department)
        if active_only:
            stmt = stmt.where(ResourceModel.is_active.is_(True))
        stmt = stmt.order_by(ResourceModel.id).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def list_all(self, session: Session) -> List[ResourceModel]:
        """Every non-deleted resource, unpaginated."""
        stmt = select(ResourceModel).where(ResourceModel.is_deleted.is_(False)).order_by(ResourceModel.id)
        return list(session.scalars(stmt).all())
