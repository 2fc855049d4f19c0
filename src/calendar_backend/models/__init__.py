"""
ORM Models package.

All models are imported here to ensure proper registration with SQLAlchemy
before ``Base.metadata.create_all`` runs.

Usage:
    from calendar_backend.models import User, Category, EventMetadata
    from calendar_backend.models.base import Base
"""

from calendar_backend.models.base import Base, TimestampMixin
from calendar_backend.models.user import User
from calendar_backend.models.category import Category, DEFAULT_CATEGORY_COLOR
from calendar_backend.models.event_metadata import EventMetadata

__all__ = [
    "Base",
    "TimestampMixin",
    "User",
    "Category",
    "DEFAULT_CATEGORY_COLOR",
    "EventMetadata",
]
