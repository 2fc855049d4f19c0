"""
EventMetadata ORM model.

Local annotations (tags, notes, category, custom status) attached to a Google
Calendar event or to a whole recurring series by its series id.
"""

from sqlalchemy import Column, Integer, String, Text, JSON, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from calendar_backend.models.base import Base, TimestampMixin


class EventMetadata(TimestampMixin, Base):
    """Annotation record keyed by the remote event (or series) id."""

    __tablename__ = "event_metadata"
    __table_args__ = (
        UniqueConstraint("owner_id", "google_event_id", name="uq_event_metadata_owner_event"),
    )

    id = Column(Integer, primary_key=True, index=True)
    google_event_id = Column(String, nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    # Plain reference: deleting a category leaves the id in place.
    # Only a category with the same owner is joined.
    category_id = Column(Integer, nullable=True)
    custom_status = Column(String, nullable=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    owner = relationship("User", back_populates="event_metadata")
    category = relationship(
        "Category",
        primaryjoin=(
            "and_(foreign(EventMetadata.category_id) == Category.id, "
            "Category.owner_id == EventMetadata.owner_id)"
        ),
        viewonly=True,
        lazy="joined",
    )
