"""
HTTP routers.

Every router is mounted under ``/api``; the events and categories routers sit
behind the access gate.
"""

from calendar_backend.api.auth_api import router as auth_router
from calendar_backend.api.categories_api import router as categories_router
from calendar_backend.api.events_api import router as events_router
from calendar_backend.api.health_api import router as health_router

__all__ = [
    "auth_router",
    "categories_router",
    "events_router",
    "health_router",
]
