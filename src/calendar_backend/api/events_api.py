"""
Calendar Events API
"""

from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query, status

from calendar_backend.core.dependencies import get_event_service
from calendar_backend.schemas.common import MessageResponse
from calendar_backend.schemas.event import CreateEventRequest, UpdateEventRequest, RsvpRequest
from calendar_backend.services.event_service import EventService


router = APIRouter(
    prefix="/events",
    tags=["Events"]
)


@router.get("")
def list_events(
    time_min: Optional[str] = Query(None, alias="timeMin"),
    time_max: Optional[str] = Query(None, alias="timeMax"),
    service: EventService = Depends(get_event_service),
) -> List[Dict[str, Any]]:
    events = service.list_events(time_min=time_min, time_max=time_max)
    return [event.to_dict() for event in events]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(
    request: CreateEventRequest,
    service: EventService = Depends(get_event_service),
) -> Dict[str, Any]:
    # No extendedProps key when no metadata was stored
    return service.create_event(request).to_dict(include_empty=False)


@router.put("/{event_id}")
def update_event(
    event_id: str,
    request: UpdateEventRequest,
    service: EventService = Depends(get_event_service),
) -> Dict[str, Any]:
    return service.update_event(event_id, request).to_dict()


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(event_id: str, service: EventService = Depends(get_event_service)):
    service.delete_event(event_id)
    return MessageResponse(message="Event deleted successfully")


@router.post("/{event_id}/rsvp")
def rsvp_event(
    event_id: str,
    request: RsvpRequest,
    service: EventService = Depends(get_event_service),
) -> Dict[str, Any]:
    return service.rsvp_event(event_id, request.response_status)
