"""
Category Repository

Data access layer for user-defined categories.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from calendar_backend.models.category import Category, DEFAULT_CATEGORY_COLOR
from calendar_backend.repositories.base import BaseRepository
from calendar_backend.core.exceptions import DatabaseException


class CategoryRepository(BaseRepository[Category]):
    """Repository for categories, always scoped to an owner."""

    def __init__(self, db: Session):
        super().__init__(Category, db)

    def list_for_owner(self, owner_id: int) -> List[Category]:
        try:
            return (
                self.db.query(Category)
                .filter(Category.owner_id == owner_id)
                .order_by(Category.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise DatabaseException("Failed to list categories") from e

    def get_for_owner(self, owner_id: int, category_id: int) -> Optional[Category]:
        try:
            return (
                self.db.query(Category)
                .filter(Category.id == category_id, Category.owner_id == owner_id)
                .first()
            )
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to get Category with id {category_id}") from e

    def create_for_owner(self, owner_id: int, name: str, color: Optional[str] = None) -> Category:
        return self.create(Category(
            name=name,
            color=color or DEFAULT_CATEGORY_COLOR,
            owner_id=owner_id,
        ))

    def delete_for_owner(self, owner_id: int, category_id: int) -> bool:
        """
        Delete one of the owner's categories.

        Event metadata pointing at the category keeps its category_id.

        Returns:
            True if a record was deleted, False if none matched
        """
        category = self.get_for_owner(owner_id, category_id)
        if category is None:
            return False
        return self.delete(category)
