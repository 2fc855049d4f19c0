"""
Event Metadata Repository

Data access layer for the local annotations attached to Google Calendar
events. Every query is scoped to the owning user.
"""

from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from calendar_backend.models.base import utcnow
from calendar_backend.models.event_metadata import EventMetadata
from calendar_backend.repositories.base import BaseRepository
from calendar_backend.core.exceptions import DatabaseException

logger = logging.getLogger(__name__)

# Columns an upsert is allowed to write
UPSERT_FIELDS = ("tags", "notes", "category_id", "custom_status")


def _dialect_insert(dialect_name: str):
    if dialect_name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
        return insert
    if dialect_name == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
        return insert
    raise DatabaseException(f"Atomic upsert is not supported on the '{dialect_name}' dialect")


class EventMetadataRepository(BaseRepository[EventMetadata]):
    """Repository for event metadata records."""

    def __init__(self, db: Session):
        super().__init__(EventMetadata, db)

    def get_for_event(self, owner_id: int, google_event_id: str) -> Optional[EventMetadata]:
        try:
            return (
                self.db.query(EventMetadata)
                .filter(
                    EventMetadata.owner_id == owner_id,
                    EventMetadata.google_event_id == google_event_id,
                )
                .execution_options(populate_existing=True)
                .first()
            )
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to get metadata for event {google_event_id}") from e

    def find_for_events(self, owner_id: int, google_event_ids: Iterable[str]) -> List[EventMetadata]:
        """
        Fetch the owner's metadata for any of the given event ids.

        Returns:
            Matching records with their category loaded
        """
        ids = list(google_event_ids)
        if not ids:
            return []

        try:
            return (
                self.db.query(EventMetadata)
                .filter(
                    EventMetadata.owner_id == owner_id,
                    EventMetadata.google_event_id.in_(ids),
                )
                .all()
            )
        except SQLAlchemyError as e:
            raise DatabaseException("Failed to fetch event metadata") from e

    def create_for_event(
        self,
        owner_id: int,
        google_event_id: str,
        tags: Optional[List[str]] = None,
        notes: Optional[str] = None,
        category_id: Optional[int] = None,
    ) -> EventMetadata:
        metadata = self.create(EventMetadata(
            google_event_id=google_event_id,
            tags=list(tags or []),
            notes=notes,
            category_id=category_id,
            owner_id=owner_id,
        ))
        return metadata

    def upsert_for_event(self, owner_id: int, google_event_id: str, values: Dict[str, Any]) -> EventMetadata:
        """
        Atomically update the owner's record for ``google_event_id`` or create it.

        Uses ``INSERT ... ON CONFLICT DO UPDATE`` against the
        (owner_id, google_event_id) unique constraint, so concurrent calls for
        the same id end up with a single row. Only keys present in ``values``
        are written on update.

        Args:
            owner_id: Owning user id
            google_event_id: Remote event or series id
            values: Subset of tags, notes, category_id, custom_status

        Returns:
            The resulting record with its category loaded
        """
        values = {k: v for k, v in values.items() if k in UPSERT_FIELDS}
        now = utcnow()

        try:
            insert = _dialect_insert(self.db.get_bind().dialect.name)
            stmt = insert(EventMetadata).values(
                google_event_id=google_event_id,
                owner_id=owner_id,
                tags=values.get("tags") or [],
                notes=values.get("notes"),
                category_id=values.get("category_id"),
                custom_status=values.get("custom_status"),
                created_at=now,
                updated_at=now,
            )
            update_set = {key: stmt.excluded[key] for key in values}
            update_set["updated_at"] = now
            stmt = stmt.on_conflict_do_update(
                index_elements=["owner_id", "google_event_id"],
                set_=update_set,
            )
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise DatabaseException(f"Failed to upsert metadata for event {google_event_id}: {e}") from e

        metadata = self.get_for_event(owner_id, google_event_id)
        if metadata is None:
            raise DatabaseException(f"Upserted metadata for event {google_event_id} could not be read back")
        return metadata

    def delete_for_event(self, owner_id: int, google_event_id: str) -> bool:
        """
        Delete the owner's record at exactly ``google_event_id``.

        Returns:
            True if a record was deleted, False if none existed
        """
        metadata = self.get_for_event(owner_id, google_event_id)
        if metadata is None:
            return False
        return self.delete(metadata)
