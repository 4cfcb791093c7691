from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from resourceplanner.storage.models import AlertSettingsModel
from .base import BaseRepository

CAPACITY = "capacity"


class AlertSettingsRepository(BaseRepository[AlertSettingsModel]):
    """Repository for alert threshold rows, one per alert type."""

    updatable_fields = (
        "warning_threshold", "error_threshold", "critical_threshold",
        "under_utilization_threshold", "is_enabled",
    )

    def create(self, session: Session, entity: AlertSettingsModel) -> AlertSettingsModel:
        session.add(entity)
        session.flush()
        session.refresh(entity)
        return entity

    def get(self, session: Session, id: int) -> Optional[AlertSettingsModel]:
        return session.get(AlertSettingsModel, id)

    def delete(self, session: Session, id: int) -> bool:
        row = self.get(session, id)
        if row is None:
            return False
        session.delete(row)
        session.flush()
        return True

    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[AlertSettingsModel]:
        stmt = select(AlertSettingsModel).order_by(AlertSettingsModel.id).limit(limit).offset(offset)
        return list(session.scalars(stmt).all())

    def get_by_type(self, session: Session, type: str = CAPACITY, enabled_only: bool = True) -> Optional[AlertSettingsModel]:
        stmt = select(AlertSettingsModel).where(AlertSettingsModel.type == type)
        if enabled_only:
            stmt = stmt.where(AlertSettingsModel.is_enabled.is_(True))
        return session.scalars(stmt.order_by(AlertSettingsModel.id).limit(1)).first()

    def upsert(self, session: Session, values: Dict[str, Any], type: str = CAPACITY) -> AlertSettingsModel:
        """Update the row for `type`, creating it when missing."""
        row = self.get_by_type(session, type, enabled_only=False)
        if row is None:
            fields = {k: v for k, v in values.items() if k in self.updatable_fields}
            return self.create(session, AlertSettingsModel(type=type, **fields))
        return self.update(session, row.id, values)
