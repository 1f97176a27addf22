"""Base repository with generic CRUD operations.

Provides reusable query patterns and session management for all repositories.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .session import get_session

# Generic type for ORM models
ModelT = TypeVar("ModelT")


class BaseRepository(Generic[ModelT]):
    """Base repository providing common CRUD operations.

    Subclasses should set the model_class attribute to their ORM model.

    Example:
        class ArticleRepository(BaseRepository[ArticleRecord]):
            model_class = ArticleRecord
    """

    model_class: Type[ModelT]

    def __init__(self, database_url: Optional[str] = None):
        """Initialize repository with an optional database URL.

        Args:
            database_url: SQLAlchemy URL. If None, uses the configured database.
        """
        self.database_url = database_url

    def _get_session(self):
        """Get a database session context manager."""
        return get_session(self.database_url)

    def get_by_id(self, id: int) -> Optional[ModelT]:
        """Get a record by its primary key ID.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        with self._get_session() as session:
            return session.get(self.model_class, id)

    def count(self) -> int:
        """Count total records."""
        with self._get_session() as session:
            stmt = select(func.count()).select_from(self.model_class)
            return int(session.execute(stmt).scalar_one())

    # Session-aware methods for transaction composition

    def _get_by_id_session(self, session: Session, id: int) -> Optional[ModelT]:
        """Get by ID within an existing session."""
        return session.get(self.model_class, id)

    def _create_session(self, session: Session, **kwargs) -> ModelT:
        """Create within an existing session."""
        instance = self.model_class(**kwargs)  # type: ignore[call-arg]
        session.add(instance)
        session.flush()
        return instance
