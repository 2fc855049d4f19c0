"""Personal calendar backend: Google Calendar proxy with local event metadata."""

__version__ = "0.1.0"
