"""
User ORM model.

A user is linked to a Google account and owns categories and event metadata.
"""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from calendar_backend.models.base import Base, TimestampMixin


class User(TimestampMixin, Base):
    """User record created on first Google login."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    google_id = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, nullable=False, index=True)
    display_name = Column(String, nullable=True)
    avatar = Column(String, nullable=True)
    refresh_token = Column(Text, nullable=True)

    categories = relationship("Category", back_populates="owner")
    event_metadata = relationship("EventMetadata", back_populates="owner")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
