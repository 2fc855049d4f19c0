"""
Category ORM model.

User-defined labels with a display color. Records created before per-user
ownership existed have no owner until the legacy owner logs in.
"""

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from calendar_backend.models.base import Base, TimestampMixin

DEFAULT_CATEGORY_COLOR = "#3b82f6"


class Category(TimestampMixin, Base):
    """A named, colored label owned by a user."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    color = Column(String, nullable=False, default=DEFAULT_CATEGORY_COLOR)
    is_default = Column(Boolean, nullable=False, default=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    owner = relationship("User", back_populates="categories")
