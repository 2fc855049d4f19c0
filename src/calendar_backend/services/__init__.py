"""
Service layer.

Services hold the business logic between the API routers and the
repositories/integrations:
- EventService: remote event CRUD merged with local metadata
- IdentityService: Google sign-in bookkeeping and ownerless-data migration
"""

from calendar_backend.services.event_service import EventService, MergedEvent, resolve_metadata, metadata_lookup_keys
from calendar_backend.services.identity_service import IdentityService

__all__ = [
    "EventService",
    "MergedEvent",
    "resolve_metadata",
    "metadata_lookup_keys",
    "IdentityService",
]
