from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Generic[T], ABC):
    """Abstract base repository defining CRUD contracts using SQLAlchemy Session."""

    # Columns callers may change through update()
    updatable_fields: tuple = ()

    @abstractmethod
    def create(self, session: Session, entity: T) -> T:
        pass

    @abstractmethod
    def get(self, session: Session, id: int) -> Optional[T]:
        pass

    def update(self, session: Session, id: int, updates: Dict[str, Any]) -> Optional[T]:
        entity = self.get(session, id)
        if entity is None:
            return None
        for name in self.updatable_fields:
            if name in updates:
                setattr(entity, name, updates[name])
        session.flush()
        return entity

    @abstractmethod
    def delete(self, session: Session, id: int) -> bool:
        pass

    @abstractmethod
    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[T]:
        pass
