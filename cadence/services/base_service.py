# File: cadence/services/base_service.py

from typing import TypeVar, Generic, Optional
from contextlib import contextmanager
from sqlalchemy.orm import Session
import logging

from cadence.core.exceptions import EntityNotFoundException
from cadence.repositories.base_repository import BaseRepository

T = TypeVar("T")
logger = logging.getLogger(__name__)


class BaseService(Generic[T]):
    """
    Base service for all Cadence services.

    Provides common functionality including:
    - Transaction management
    - Error handling and standardization
    - Logging
    - Basic read operations
    """

    def __init__(self, session: Session, repository: BaseRepository):
        """
        Initialize service with dependencies.

        Args:
            session: Database session for persistence operations
            repository: Repository for the service's main entity
        """
        self.session = session
        self.repository = repository

    @contextmanager
    def transaction(self):
        """
        Provide a transactional scope around operations.

        Yields:
            None

        Raises:
            Exception: Any exception that occurs during transaction execution
        """
        try:
            yield
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.error(f"Transaction failed: {str(e)}", exc_info=True)
            raise

    def get_by_id(self, id: int) -> Optional[T]:
        """
        Get entity by ID.

        Args:
            id: Entity ID to retrieve

        Returns:
            Entity if found, None otherwise
        """
        return self.repository.get_by_id(id)

    def get_or_raise(self, id: int) -> T:
        """
        Get entity by ID or raise if it does not exist.

        Args:
            id: Entity ID to retrieve

        Returns:
            The entity

        Raises:
            EntityNotFoundException: If no entity has this ID
        """
        entity = self.get_by_id(id)
        if entity is None:
            raise EntityNotFoundException(self.repository.model.__name__, id)
        return entity
