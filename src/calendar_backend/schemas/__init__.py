"""
Pydantic schemas for request and response bodies.

JSON on the wire is camelCase; every schema derives from ``CamelModel``.
"""

from calendar_backend.schemas.common import CamelModel, MessageResponse, HealthCheckResponse
from calendar_backend.schemas.user import UserResponse
from calendar_backend.schemas.category import CreateCategoryRequest, CategoryResponse
from calendar_backend.schemas.event import (
    CreateEventRequest,
    UpdateEventRequest,
    RsvpRequest,
    EventMetadataResponse,
)

__all__ = [
    "CamelModel",
    "MessageResponse",
    "HealthCheckResponse",
    "UserResponse",
    "CreateCategoryRequest",
    "CategoryResponse",
    "CreateEventRequest",
    "UpdateEventRequest",
    "RsvpRequest",
    "EventMetadataResponse",
]
