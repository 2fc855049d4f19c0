"""
Custom exceptions for the application.

This module defines domain-specific exceptions for better error handling
and more meaningful error messages throughout the application. Each exception
carries the HTTP status it is reported with.
"""

from typing import Optional, Any, Dict


class ApplicationException(Exception):
    """Base exception for all application-specific exceptions."""

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DatabaseException(ApplicationException):
    """Exception raised for database-related errors."""
    pass


class AuthenticationException(ApplicationException):
    """Exception raised when a request has no valid credential."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class UnknownCategoryException(ApplicationException):
    """Exception raised when an event refers to a category the caller does not own."""

    status_code = 400

    def __init__(self, category_id: int):
        super().__init__(f"Category not found: {category_id}", {"category_id": category_id})


class NotAttendeeException(ApplicationException):
    """Exception raised when RSVPing to an event the caller is not invited to."""

    status_code = 400

    def __init__(self, event_id: str):
        super().__init__("You are not an attendee of this event", {"event_id": event_id})


class DuplicateException(ApplicationException):
    """Exception raised when attempting to create a duplicate resource."""

    status_code = 409

    def __init__(self, resource: str, field: str, value: Any):
        message = f"{resource} already exists with {field}: {value}"
        super().__init__(message, {"resource": resource, "field": field, "value": value})


class ConfigurationException(ApplicationException):
    """Exception raised for configuration-related errors."""
    pass


class ExternalServiceException(ApplicationException):
    """Exception raised when an external service (Google APIs) fails."""

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"{service} error: {message}"
        details = details or {}
        details["service"] = service
        super().__init__(full_message, details)


class GoogleCalendarException(ExternalServiceException):
    """Exception raised for Google Calendar API errors."""

    def __init__(self, message: str, status: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        details = details or {}
        if status is not None:
            details["status"] = status
        super().__init__("Google Calendar", message, details)


class GoogleOAuthException(ExternalServiceException):
    """Exception raised when the Google OAuth exchange fails."""

    status_code = 401

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("Google OAuth", message, details)
