"""
User Repository

Data access layer for user records.
"""

from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from calendar_backend.models.user import User
from calendar_backend.repositories.base import BaseRepository
from calendar_backend.core.exceptions import DuplicateException, DatabaseException


class UserRepository(BaseRepository[User]):
    """Repository for user records."""

    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_google_id(self, google_id: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.google_id == google_id).first()
        except SQLAlchemyError as e:
            raise DatabaseException("Failed to look up user by Google id") from e

    def create_user(self, user_data: dict) -> User:
        if self.get_by_google_id(user_data.get("google_id")):
            raise DuplicateException("User", "google_id", user_data.get("google_id"))

        try:
            return self.create_from_dict(user_data)
        except DatabaseException as e:
            if isinstance(e.__cause__, IntegrityError):
                raise DuplicateException("User", "google_id", user_data.get("google_id")) from e
            raise

    def set_refresh_token(self, user: User, refresh_token: str) -> User:
        user.refresh_token = refresh_token
        return self.update(user)
