from fastapi import Depends, Request
from sqlalchemy.orm import Session
import logging

from calendar_backend.core.config import Settings
from calendar_backend.core.database import get_db
from calendar_backend.core.security import Authenticator
from calendar_backend.models.user import User

logger = logging.getLogger('CORE_DEPENDENCIES')


# ============================================================================
# Configuration Dependencies
# ============================================================================

def get_app_settings(request: Request) -> Settings:
    """
    Settings the running app was built with.

    Example:
        @router.get("/config")
        def get_config(settings: Settings = Depends(get_app_settings)):
            return {"calendar_id": settings.calendar_id}
    """
    return request.app.state.settings


def get_authenticator(request: Request) -> Authenticator:
    """The authenticator selected at startup."""
    return request.app.state.authenticator


# ============================================================================
# Access Gate
# ============================================================================

def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    authenticator: Authenticator = Depends(get_authenticator),
) -> User:
    """
    Resolve the authenticated user or reject the request with 401.

    The result is kept on ``request.state`` so routers depending on it more
    than once authenticate only once.

    Example:
        @router.get("/categories")
        def list_categories(user: User = Depends(get_current_user)):
            ...
    """
    user = getattr(request.state, "user", None)
    if user is None:
        user = authenticator.authenticate(request, db)
        request.state.user = user
    return user


# ============================================================================
# Integration Dependencies
# ============================================================================

def get_calendar_gateway(
    user: User = Depends(get_current_user),
    settings: Settings = Depends(get_app_settings),
):
    """
    Get a Google Calendar gateway authorised as the current user.

    Returns:
        GoogleCalendarGateway: Per-request calendar client
    """
    from calendar_backend.integrations.google_calendar import GoogleCalendarGateway
    return GoogleCalendarGateway.for_user(user, settings)


def get_oauth_client(settings: Settings = Depends(get_app_settings)):
    """
    Get the Google sign-in client.

    Returns:
        GoogleOAuthClient: OAuth helper for this deployment
    """
    from calendar_backend.integrations.google_oauth import GoogleOAuthClient
    return GoogleOAuthClient(settings)


# ============================================================================
# Service Dependencies
# ============================================================================

def get_event_service(
    db: Session = Depends(get_db),
    gateway=Depends(get_calendar_gateway),
    user: User = Depends(get_current_user),
):
    """
    Get EventService instance.

    Returns:
        EventService: Event operations for the current user

    Example:
        @router.get("/events")
        def list_events(service: EventService = Depends(get_event_service)):
            return service.list_events()
    """
    from calendar_backend.services.event_service import EventService
    return EventService(db, gateway, user)


def get_identity_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Get IdentityService instance.

    Returns:
        IdentityService: Login bookkeeping and legacy data migration
    """
    from calendar_backend.services.identity_service import IdentityService
    return IdentityService(db, legacy_owner_email=settings.legacy_owner_email)
