# backend/app/repositories/base_repository.py
"""
Base Repository Pattern for the studio booking API.

Repositories own data access only. They flush but never commit; the
service layer decides the transaction boundary.
"""

import logging
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException
from ..database import get_dialect_name

# Type variable for generic model support
T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Common data access patterns for one model.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @property
    def dialect_name(self) -> str:
        return get_dialect_name(self.db)

    def get_by_id(self, id: str, load_relationships: bool = True) -> Optional[T]:
        """
        Retrieve an entity by its primary key.

        Implements eager loading for relationships when requested.
        """
        try:
            query = self._build_query().filter(self.model.id == id)
            if load_relationships:
                query = self._apply_eager_loading(query)
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting {self.model.__name__} by id {id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve {self.model.__name__}: {str(e)}") from e

    def create(self, **kwargs: Any) -> T:
        """
        Create a new entity.

        Note: Does NOT commit - transaction management is handled by service layer.
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()  # Get ID without committing
            return entity
        except IntegrityError as exc:
            self.logger.error(
                "Integrity error creating %s: %s", self.model.__name__, exc, exc_info=True
            )
            self.db.rollback()
            raise RepositoryException(f"Integrity constraint violated: {exc}") from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error creating {self.model.__name__}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create {self.model.__name__}: {str(e)}") from e

    def flush(self) -> None:
        """Flush pending ORM changes."""
        try:
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error flushing {self.model.__name__}: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to save {self.model.__name__}: {str(e)}") from e

    # Protected helper methods for use by subclasses

    def _apply_eager_loading(self, query: Query) -> Query:
        """
        Apply eager loading to relationships.

        Override in subclasses to specify which relationships to load.
        """
        return query

    def _build_query(self) -> Query:
        """Get base query for the model."""
        return self.db.query(self.model)

    def _execute_query(self, query: Query) -> List[T]:
        """Execute query with error handling."""
        try:
            return query.all()
        except SQLAlchemyError as e:
            self.logger.error(f"Query execution error: {str(e)}")
            raise RepositoryException(f"Query failed: {str(e)}") from e

    def _execute_first(self, query: Query) -> Optional[T]:
        try:
            return query.first()
        except SQLAlchemyError as e:
            self.logger.error(f"Query execution error: {str(e)}")
            raise RepositoryException(f"Query failed: {str(e)}") from e
