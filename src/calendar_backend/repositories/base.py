"""
Base repository with generic CRUD operations.

This module provides a generic BaseRepository class that implements
common database operations (Create, Read, Update, Delete) for any SQLAlchemy model.
All domain-specific repositories should extend this base class.
"""

from typing import Generic, TypeVar, Type, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from calendar_backend.models.base import Base
from calendar_backend.core.exceptions import DatabaseException


# Generic type bound to SQLAlchemy Base
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Generic base repository with CRUD operations.

    Type Parameters:
        ModelType: The SQLAlchemy model type this repository manages

    Example:
        class CategoryRepository(BaseRepository[Category]):
            def __init__(self, db: Session):
                super().__init__(Category, db)

            def list_for_owner(self, owner_id: int) -> List[Category]:
                return self.db.query(self.model).filter(
                    self.model.owner_id == owner_id
                ).all()
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize the repository.

        Args:
            model: The SQLAlchemy model class
            db: SQLAlchemy database session
        """
        self.model = model
        self.db = db

    def get(self, id: int) -> Optional[ModelType]:
        """
        Get a single record by ID.

        Args:
            id: Primary key value

        Returns:
            Model instance or None if not found
        """
        try:
            return self.db.query(self.model).filter(self.model.id == id).first()
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to get {self.model.__name__} with id {id}") from e

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """
        Count records, optionally with filters.

        Returns:
            Count of matching records
        """
        try:
            query = self.db.query(self.model)

            if filters:
                for key, value in filters.items():
                    if hasattr(self.model, key):
                        query = query.filter(getattr(self.model, key) == value)

            return query.count()
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to count {self.model.__name__}") from e

    def create(self, obj: ModelType) -> ModelType:
        """
        Create a new record.

        Args:
            obj: Model instance to create

        Returns:
            Created model instance with ID populated
        """
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            return obj
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException(f"Failed to create {self.model.__name__}: {e}") from e

    def create_from_dict(self, data: Dict[str, Any]) -> ModelType:
        """
        Create a new record from dictionary.

        Returns:
            Created model instance
        """
        return self.create(self.model(**data))

    def update(self, obj: ModelType) -> ModelType:
        """
        Persist pending changes on an existing record.

        Returns:
            Updated model instance
        """
        try:
            self.db.commit()
            self.db.refresh(obj)
            return obj
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException(f"Failed to update {self.model.__name__}: {e}") from e

    def delete(self, obj: ModelType) -> bool:
        """
        Delete a record.

        Returns:
            True if successful
        """
        try:
            self.db.delete(obj)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException(f"Failed to delete {self.model.__name__}: {e}") from e

    def assign_ownerless(self, owner_id: int) -> int:
        """
        Give every record without an owner to ``owner_id``.

        Only meaningful for models with an ``owner_id`` column.

        Returns:
            Number of records reassigned
        """
        try:
            updated = (
                self.db.query(self.model)
                .filter(self.model.owner_id.is_(None))
                .update({self.model.owner_id: owner_id}, synchronize_session=False)
            )
            self.db.commit()
            return updated
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException(f"Failed to migrate ownerless {self.model.__name__} records: {e}") from e
