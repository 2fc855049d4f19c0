"""
Event Pydantic Schemas

Request bodies for the event endpoints and the shape of the local metadata
attached to remote events as ``extendedProps``. Remote events themselves are
passed through as plain dicts.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import Field, field_validator

from calendar_backend.schemas.common import CamelModel
from calendar_backend.schemas.category import CategoryResponse

# Fields forwarded to Google Calendar as the event resource
REMOTE_EVENT_FIELDS = ("summary", "description", "start", "end", "location")


class EventWriteRequest(CamelModel):
    """Body shared by event create and update."""

    summary: Optional[str] = None
    description: Optional[str] = None
    start: Optional[Dict[str, Any]] = Field(None, description="Google time object, e.g. {'dateTime': ...}")
    end: Optional[Dict[str, Any]] = None
    location: Optional[str] = None
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    category_id: Optional[Union[int, str]] = None

    @field_validator("category_id", mode="before")
    @classmethod
    def normalize_category_id(cls, v):
        # "" from the client's "no category" option means absent
        if v is None or v == "":
            return None
        if isinstance(v, bool):
            raise ValueError("categoryId must be an integer id")
        if isinstance(v, int):
            return v
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        raise ValueError("categoryId must be an integer id")

    def remote_body(self) -> Dict[str, Any]:
        """Event resource for Google: only the remote fields that were given."""
        data = self.model_dump(include=set(REMOTE_EVENT_FIELDS))
        return {key: value for key, value in data.items() if value is not None}

    def has_metadata(self) -> bool:
        return bool(self.tags) or bool(self.notes) or self.category_id is not None


class CreateEventRequest(EventWriteRequest):
    """Request schema for creating an event."""


class UpdateEventRequest(EventWriteRequest):
    """Request schema for updating an event."""

    def metadata_changes(self) -> Dict[str, Any]:
        """
        Column values for the metadata upsert.

        Tags and notes are written only when supplied; the category is
        written every time and cleared when no id was supplied.
        """
        changes: Dict[str, Any] = {}
        if "tags" in self.model_fields_set:
            changes["tags"] = list(self.tags or [])
        if "notes" in self.model_fields_set:
            changes["notes"] = self.notes
        changes["category_id"] = self.category_id
        return changes


class RsvpRequest(CamelModel):
    """Request schema for answering an invitation."""

    response_status: Literal["accepted", "declined", "tentative"]


class EventMetadataResponse(CamelModel):
    """Local annotations exposed as ``extendedProps``."""

    id: int
    google_event_id: str
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    category_id: Optional[int] = None
    category: Optional[CategoryResponse] = None
    custom_status: Optional[str] = None
    owner_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
