"""Shared fixtures for the calendar backend test suite.

Covers:
- Settings for each auth mode backed by an in-memory SQLite database
- A fake Google Calendar gateway holding events in memory
- A fake Google OAuth client returning a canned profile
- App/client fixtures with the fakes wired in through dependency overrides
"""

from __future__ import annotations

import copy
import itertools

import pytest
from fastapi.testclient import TestClient

from calendar_backend.core.config import Settings
from calendar_backend.core.database import close_db, database, init_db
from calendar_backend.core.dependencies import get_calendar_gateway, get_oauth_client
from calendar_backend.core.exceptions import GoogleCalendarException
from calendar_backend.integrations.google_oauth import GoogleProfile
from calendar_backend.main import create_app
from calendar_backend.repositories.user_repository import UserRepository

LEGACY_EMAIL = "legacy@example.com"
APP_PASSWORD = "open-sesame"
OAUTH_STATE = "test-oauth-state"


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeCalendarGateway:
    """In-memory stand-in for GoogleCalendarGateway."""

    def __init__(self):
        self.events: dict[str, dict] = {}
        self.calls: list[tuple] = []
        self.fail_with: GoogleCalendarException | None = None
        self._ids = itertools.count(1)

    def add_event(self, event_id: str, **fields) -> dict:
        event = {"id": event_id, "status": "confirmed", "summary": event_id, **fields}
        self.events[event_id] = event
        return copy.deepcopy(event)

    def _check(self, operation: str, *args):
        self.calls.append((operation, *args))
        if self.fail_with is not None:
            raise self.fail_with

    def _require(self, event_id: str) -> dict:
        if event_id not in self.events:
            raise GoogleCalendarException("Not Found", status=404)
        return self.events[event_id]

    def list_events(self, time_min, time_max=None):
        self._check("list", time_min, time_max)
        return [copy.deepcopy(event) for event in self.events.values()]

    def get_event(self, event_id):
        self._check("get", event_id)
        return copy.deepcopy(self._require(event_id))

    def insert_event(self, body):
        self._check("insert", body)
        event_id = f"created{next(self._ids)}"
        return self.add_event(event_id, **body)

    def patch_event(self, event_id, body):
        self._check("patch", event_id, body)
        event = self._require(event_id)
        event.update(copy.deepcopy(body))
        return copy.deepcopy(event)

    def delete_event(self, event_id):
        self._check("delete", event_id)
        self._require(event_id)
        del self.events[event_id]


class FakeOAuthClient:
    """Stand-in for GoogleOAuthClient returning ``profile`` on every exchange."""

    def __init__(self):
        self.profile = GoogleProfile(
            google_id="google-sub-1",
            email="person@example.com",
            display_name="Test Person",
            avatar="https://example.com/avatar.png",
            refresh_token="refresh-1",
        )
        self.exchanges: list[tuple] = []

    def authorization_url(self):
        return f"https://accounts.google.com/o/oauth2/auth?state={OAUTH_STATE}", OAUTH_STATE, "test-verifier"

    def exchange_code(self, code, state, code_verifier=None):
        self.exchanges.append((code, state, code_verifier))
        return self.profile


# ---------------------------------------------------------------------------
# Settings and database
# ---------------------------------------------------------------------------


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "sqlite://",
        "auth_mode": "session",
        "session_secret": "test-session-secret",
        "google_client_id": "test-client-id.apps.googleusercontent.com",
        "google_client_secret": "test-client-secret",
        "legacy_owner_email": LEGACY_EMAIL,
        "post_login_redirect": "/",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def db(settings):
    """A fresh in-memory database for each test."""
    close_db()
    init_db(settings=settings)
    session = database.session()
    try:
        yield session
    finally:
        session.close()
        close_db()


@pytest.fixture
def user(db):
    return UserRepository(db).create_user({
        "google_id": "google-sub-owner",
        "email": "owner@example.com",
        "display_name": "Owner",
        "refresh_token": "owner-refresh",
    })


# ---------------------------------------------------------------------------
# App and clients
# ---------------------------------------------------------------------------


@pytest.fixture
def gateway() -> FakeCalendarGateway:
    return FakeCalendarGateway()


@pytest.fixture
def oauth() -> FakeOAuthClient:
    return FakeOAuthClient()


@pytest.fixture
def app(settings, db, gateway, oauth):
    app = create_app(settings)
    app.dependency_overrides[get_calendar_gateway] = lambda: gateway
    app.dependency_overrides[get_oauth_client] = lambda: oauth
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


def login(client: TestClient):
    """Run the Google sign-in round trip; returns the callback response."""
    start = client.get("/api/auth/google", follow_redirects=False)
    assert start.status_code in (302, 307)
    return client.get(
        "/api/auth/google/callback",
        params={"code": "auth-code", "state": OAUTH_STATE},
        follow_redirects=False,
    )


@pytest.fixture
def auth_client(client) -> TestClient:
    """A client with a signed-in session."""
    response = login(client)
    assert response.status_code == 302
    return client
