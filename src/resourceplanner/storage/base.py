from abc import ABC, abstractmethod
from typing import ContextManager

from sqlalchemy.orm import Session


class StorageAdapter(ABC):
    """Abstract base class for storage adapters."""

    @abstractmethod
    def connect(self) -> None:
        """Establish connection to the storage backend."""

    @abstractmethod
    def close(self) -> None:
        """Close the connection."""

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the backend is reachable."""

    @abstractmethod
    def get_session(self) -> ContextManager[Session]:
        """Provide a transactional session scope."""
