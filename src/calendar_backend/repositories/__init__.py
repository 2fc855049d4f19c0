"""
Repositories package.

This package contains all data access layer repositories following the Repository Pattern.
Each repository extends BaseRepository and provides domain-specific data operations.

Usage:
    from calendar_backend.repositories import CategoryRepository
    from calendar_backend.core.database import get_db

    def list_categories(db: Session = Depends(get_db)):
        return CategoryRepository(db).list_for_owner(user.id)
"""

from calendar_backend.repositories.base import BaseRepository
from calendar_backend.repositories.user_repository import UserRepository
from calendar_backend.repositories.category_repository import CategoryRepository
from calendar_backend.repositories.event_metadata_repository import EventMetadataRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "CategoryRepository",
    "EventMetadataRepository",
]
