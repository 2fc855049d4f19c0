"""
Google Calendar client wrapper.

This module provides the calendar gateway used by the event service:
- Credential construction from a user's refresh token
- Thin event operations (list, get, insert, patch, delete)
- Translation of Google API errors into GoogleCalendarException
"""

from typing import Any, Dict, List, Optional
import logging

from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from calendar_backend.core.config import Settings, GOOGLE_TOKEN_URI, GOOGLE_SCOPES
from calendar_backend.core.exceptions import AuthenticationException, GoogleCalendarException
from calendar_backend.models.user import User

logger = logging.getLogger(__name__)


def _http_error_message(error: HttpError) -> str:
    reason = getattr(error, "reason", None)
    return reason or str(error)


class GoogleCalendarGateway:
    """
    Wrapper around the Google Calendar v3 ``events`` collection.

    One instance serves one request for one user; nothing is cached between
    calls.
    """

    def __init__(self, service: Any, calendar_id: str = "primary", max_results: int = 2500):
        """
        Initialize the gateway.

        Args:
            service: A googleapiclient Calendar v3 resource
            calendar_id: Calendar to operate on
            max_results: Page size cap for list_events
        """
        self._service = service
        self.calendar_id = calendar_id
        self.max_results = max_results

    @classmethod
    def for_user(cls, user: User, settings: Settings) -> "GoogleCalendarGateway":
        """
        Build a gateway authorised as ``user``.

        Falls back to the configured GOOGLE_REFRESH_TOKEN when the user has
        none stored (passphrase deployments).

        Raises:
            AuthenticationException: If no refresh token is available
        """
        refresh_token = user.refresh_token or settings.google_refresh_token
        if not refresh_token:
            raise AuthenticationException("Google account not connected; please sign in again")

        credentials = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            scopes=GOOGLE_SCOPES,
        )
        service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        return cls(service, calendar_id=settings.calendar_id, max_results=settings.max_event_results)

    def _execute(self, operation: str, request: Any) -> Any:
        try:
            return request.execute()
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.error(f"Google Calendar {operation} failed ({status}): {_http_error_message(e)}")
            raise GoogleCalendarException(_http_error_message(e), status=status, details={"operation": operation}) from e
        except GoogleAuthError as e:
            logger.error(f"Google Calendar {operation} failed to authorise: {e}")
            raise GoogleCalendarException(f"authorisation failed: {e}", details={"operation": operation}) from e
        except OSError as e:
            logger.error(f"Google Calendar {operation} transport error: {e}")
            raise GoogleCalendarException(str(e), details={"operation": operation}) from e

    def list_events(self, time_min: str, time_max: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List event instances in a window, recurring series expanded.

        Returns:
            Events ordered by start time (at most ``max_results``)
        """
        params: Dict[str, Any] = {
            "calendarId": self.calendar_id,
            "timeMin": time_min,
            "maxResults": self.max_results,
            "singleEvents": True,
            "orderBy": "startTime",
        }
        if time_max:
            params["timeMax"] = time_max

        response = self._execute("list", self._service.events().list(**params))
        return response.get("items", [])

    def get_event(self, event_id: str) -> Dict[str, Any]:
        return self._execute("get", self._service.events().get(calendarId=self.calendar_id, eventId=event_id))

    def insert_event(self, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._execute("insert", self._service.events().insert(calendarId=self.calendar_id, body=body))

    def patch_event(self, event_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        return self._execute(
            "patch",
            self._service.events().patch(calendarId=self.calendar_id, eventId=event_id, body=body),
        )

    def delete_event(self, event_id: str) -> None:
        self._execute("delete", self._service.events().delete(calendarId=self.calendar_id, eventId=event_id))
