"""
External service integrations package.

This package contains client wrappers for the Google services the backend
talks to:
- Google Calendar: per-user event gateway
- Google OAuth: sign-in and profile lookup

Each integration provides a clean interface that can be swapped for a fake in
tests through FastAPI dependency overrides.

Usage:
    from calendar_backend.integrations import GoogleCalendarGateway

    gateway = GoogleCalendarGateway.for_user(user, settings)
    events = gateway.list_events(time_min="2025-01-01T00:00:00Z")
"""

from calendar_backend.integrations.google_calendar import GoogleCalendarGateway
from calendar_backend.integrations.google_oauth import GoogleOAuthClient, GoogleProfile

__all__ = [
    "GoogleCalendarGateway",
    "GoogleOAuthClient",
    "GoogleProfile",
]
