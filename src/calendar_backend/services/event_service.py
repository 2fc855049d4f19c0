"""
Event Service

Joins Google Calendar events with the locally stored metadata and runs the
event CRUD operations against both stores.

Metadata lookup for an event walks an ordered list of candidate ids: the
instance's own id first, then its recurring series id. The first id with a
record wins, so metadata written against a series shows on every instance
that has no record of its own.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
from sqlalchemy.orm import Session

from calendar_backend.core.exceptions import NotAttendeeException, UnknownCategoryException
from calendar_backend.integrations.google_calendar import GoogleCalendarGateway
from calendar_backend.models.event_metadata import EventMetadata
from calendar_backend.models.user import User
from calendar_backend.repositories.category_repository import CategoryRepository
from calendar_backend.repositories.event_metadata_repository import EventMetadataRepository
from calendar_backend.schemas.event import (
    CreateEventRequest,
    UpdateEventRequest,
    EventMetadataResponse,
)
from calendar_backend.services.base_service import BaseService


def metadata_lookup_keys(event: Mapping[str, Any]) -> List[str]:
    """Candidate metadata ids for an event, most specific first."""
    candidates = [event.get("id"), event.get("recurringEventId")]
    return [key for key in candidates if key]


def resolve_metadata(
    event: Mapping[str, Any],
    metadata_by_id: Mapping[str, EventMetadata],
) -> Optional[EventMetadata]:
    for key in metadata_lookup_keys(event):
        metadata = metadata_by_id.get(key)
        if metadata is not None:
            return metadata
    return None


@dataclass
class MergedEvent:
    """A remote event paired with the local metadata resolved for it."""

    remote_event: Dict[str, Any]
    metadata: Optional[EventMetadata] = None

    def to_dict(self, include_empty: bool = True) -> Dict[str, Any]:
        """
        Remote event fields plus ``extendedProps``.

        Args:
            include_empty: Emit ``extendedProps: {}`` when there is no
                metadata; otherwise leave the key out
        """
        data = dict(self.remote_event)
        if self.metadata is not None:
            data["extendedProps"] = EventMetadataResponse.model_validate(self.metadata).model_dump(
                mode="json", by_alias=True
            )
        elif include_empty:
            data["extendedProps"] = {}
        return data


class EventService(BaseService):
    """Event operations for one user against Google Calendar and the metadata store."""

    def __init__(self, db: Session, gateway: GoogleCalendarGateway, user: User):
        super().__init__(db)
        self.gateway = gateway
        self.user = user
        self.metadata = EventMetadataRepository(db)
        self.categories = CategoryRepository(db)

    def _check_category(self, category_id: Optional[int]) -> None:
        # Checked before the remote call so a rejected request changes nothing
        if category_id is not None and self.categories.get_for_owner(self.user.id, category_id) is None:
            raise UnknownCategoryException(category_id)

    def list_events(self, time_min: Optional[str] = None, time_max: Optional[str] = None) -> List[MergedEvent]:
        """
        List remote events in a window with their metadata attached.

        Args:
            time_min: RFC3339 lower bound (defaults to now)
            time_max: Optional RFC3339 upper bound

        Returns:
            One MergedEvent per remote event, in the remote order
        """
        time_min = time_min or datetime.now(timezone.utc).isoformat()

        with self._timed_operation("list_events"):
            events = self.gateway.list_events(time_min=time_min, time_max=time_max)

            ids = set()
            for event in events:
                ids.update(metadata_lookup_keys(event))

            records = self.metadata.find_for_events(self.user.id, ids)
            metadata_by_id = {record.google_event_id: record for record in records}

            merged = [MergedEvent(event, resolve_metadata(event, metadata_by_id)) for event in events]

        self.logger.info(
            f"Listed {len(merged)} events for user {self.user.id} "
            f"({len(records)} metadata records matched)"
        )
        return merged

    def create_event(self, request: CreateEventRequest) -> MergedEvent:
        """
        Create the remote event, then its metadata if any was supplied.

        Nothing is written locally when the remote insert fails.

        Raises:
            UnknownCategoryException: If the category is not one of the caller's
        """
        self._check_category(request.category_id)
        created =self.gateway.insert_event(request.remote_body())

        metadata = None
        if request.has_metadata():
            metadata = self.metadata.create_for_event(
                owner_id=self.user.id,
                google_event_id=created["id"],
                tags=request.tags,
                notes=request.notes,
                category_id=request.category_id,
            )

        self.logger.info(f"Created event {created.get('id')} for user {self.user.id}")
        return MergedEvent(created, metadata)

    def update_event(self, event_id: str, request: UpdateEventRequest) -> MergedEvent:
        """
        Patch the remote event and upsert its metadata.

        For an instance of a recurring event the metadata is written against
        the series id, so the change shows on every instance of the series.

        Raises:
            UnknownCategoryException: If the category is not one of the caller's
        """
        self._check_category(request.category_id)
        updated =self.gateway.patch_event(event_id, request.remote_body())

        target_id = updated.get("recurringEventId") or event_id
        metadata = self.metadata.upsert_for_event(self.user.id, target_id, request.metadata_changes())

        self.logger.info(f"Updated event {event_id} (metadata at {target_id}) for user {self.user.id}")
        return MergedEvent(updated, metadata)

    def delete_event(self, event_id: str) -> None:
        """Delete the remote event, then the caller's metadata at exactly that id."""
        self.gateway.delete_event(event_id)
        self.metadata.delete_for_event(self.user.id, event_id)
        self.logger.info(f"Deleted event {event_id} for user {self.user.id}")

    def rsvp_event(self, event_id: str, response_status: str) -> Dict[str, Any]:
        """
        Set the caller's response on an invitation.

        Raises:
            NotAttendeeException: If the caller is not on the attendee list
        """
        event = self.gateway.get_event(event_id)
        attendees = [dict(attendee) for attendee in event.get("attendees") or []]

        self_attendee = next((attendee for attendee in attendees if attendee.get("self")), None)
        if self_attendee is None:
            raise NotAttendeeException(event_id)

        self_attendee["responseStatus"] = response_status
        self.logger.info(f"RSVP {response_status} to event {event_id} for user {self.user.id}")
        return self.gateway.patch_event(event_id, {"attendees": attendees})
