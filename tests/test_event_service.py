"""Tests for the event service: merging remote events with local metadata."""

from __future__ import annotations

import pytest

from calendar_backend.core.exceptions import (
    GoogleCalendarException,
    NotAttendeeException,
    UnknownCategoryException,
)
from calendar_backend.repositories.category_repository import CategoryRepository
from calendar_backend.repositories.event_metadata_repository import EventMetadataRepository
from calendar_backend.repositories.user_repository import UserRepository
from calendar_backend.schemas.event import CreateEventRequest, UpdateEventRequest
from calendar_backend.services.event_service import (
    EventService,
    MergedEvent,
    metadata_lookup_keys,
    resolve_metadata,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def service(db, gateway, user) -> EventService:
    return EventService(db, gateway, user)


@pytest.fixture
def metadata_repo(db) -> EventMetadataRepository:
    return EventMetadataRepository(db)


def _add_series(gateway, series_id: str, count: int) -> list[str]:
    ids = []
    for n in range(count):
        instance_id = f"{series_id}_2025010{n + 1}T090000Z"
        gateway.add_event(instance_id, recurringEventId=series_id)
        ids.append(instance_id)
    return ids


# ---------------------------------------------------------------------------
# Lookup order
# ---------------------------------------------------------------------------


class TestLookupKeys:
    def test_instance_id_precedes_series_id(self):
        event = {"id": "abc_20250101", "recurringEventId": "abc"}
        assert metadata_lookup_keys(event) == ["abc_20250101", "abc"]

    def test_single_event_has_only_its_own_id(self):
        assert metadata_lookup_keys({"id": "solo"}) == ["solo"]

    def test_instance_record_wins_over_series_record(self, metadata_repo, user):
        series = metadata_repo.create_for_event(user.id, "abc", tags=["series"])
        instance = metadata_repo.create_for_event(user.id, "abc_1", tags=["instance"])
        lookup = {"abc": series, "abc_1": instance}

        assert resolve_metadata({"id": "abc_1", "recurringEventId": "abc"}, lookup) is instance
        assert resolve_metadata({"id": "abc_2", "recurringEventId": "abc"}, lookup) is series
        assert resolve_metadata({"id": "other"}, lookup) is None


# ---------------------------------------------------------------------------
# listEvents
# ---------------------------------------------------------------------------


class TestListEvents:
    def test_event_without_metadata_gets_empty_extended_props(self, service, gateway):
        gateway.add_event("plain")

        merged = service.list_events()

        assert len(merged) == 1
        assert merged[0].metadata is None
        assert merged[0].to_dict()["extendedProps"] == {}

    def test_series_metadata_attaches_to_every_instance(self, service, gateway, metadata_repo, user):
        instance_ids = _add_series(gateway, "series1", 3)
        metadata_repo.create_for_event(user.id, "series1", tags=["weekly"], notes="standup")

        merged = service.list_events()

        assert [m.remote_event["id"] for m in merged] == instance_ids
        for event in merged:
            props = event.to_dict()["extendedProps"]
            assert props["googleEventId"] == "series1"
            assert props["tags"] == ["weekly"]

    def test_instance_metadata_overrides_series_for_that_instance_only(
        self, service, gateway, metadata_repo, user
    ):
        first, second = _add_series(gateway, "series2", 2)
        metadata_repo.create_for_event(user.id, "series2", tags=["series"])
        metadata_repo.create_for_event(user.id, first, tags=["override"])

        merged = {m.remote_event["id"]: m for m in service.list_events()}

        assert merged[first].metadata.tags == ["override"]
        assert merged[second].metadata.tags == ["series"]

    def test_order_and_count_preserved(self, service, gateway, metadata_repo, user):
        for event_id in ("c", "a", "b"):
            gateway.add_event(event_id)
        metadata_repo.create_for_event(user.id, "a", notes="only a")

        merged = service.list_events()

        assert [m.remote_event["id"] for m in merged] == ["c", "a", "b"]

    def test_other_users_metadata_is_not_attached(self, service, gateway, metadata_repo, db):
        stranger = UserRepository(db).create_user({"google_id": "other", "email": "other@example.com"})
        gateway.add_event("shared")
        metadata_repo.create_for_event(stranger.id, "shared", tags=["private"])

        merged = service.list_events()

        assert merged[0].metadata is None

    def test_default_time_min_is_now(self, service, gateway):
        service.list_events()
        operation, time_min, time_max = gateway.calls[0]
        assert operation == "list"
        assert time_min
        assert time_max is None

    def test_window_is_passed_through(self, service, gateway):
        service.list_events("2025-01-01T00:00:00Z", "2025-02-01T00:00:00Z")
        assert gateway.calls[0] == ("list", "2025-01-01T00:00:00Z", "2025-02-01T00:00:00Z")

    def test_remote_failure_propagates(self, service, gateway):
        gateway.fail_with = GoogleCalendarException("Backend Error", status=503)
        with pytest.raises(GoogleCalendarException, match="Backend Error"):
            service.list_events()


# ---------------------------------------------------------------------------
# createEvent
# ---------------------------------------------------------------------------


class TestCreateEvent:
    def test_without_annotations_creates_no_metadata(self, service, metadata_repo):
        request = CreateEventRequest(summary="Lunch", tags=[], notes="", categoryId="")

        merged = service.create_event(request)

        assert merged.metadata is None
        assert "extendedProps" not in merged.to_dict(include_empty=False)
        assert metadata_repo.count() == 0

    def test_with_tags_creates_metadata_for_new_id(self, service, user):
        request = CreateEventRequest(summary="Gym", tags=["health"], notes="legs")

        merged = service.create_event(request)

        assert merged.metadata.google_event_id == merged.remote_event["id"]
        assert merged.metadata.owner_id == user.id
        assert merged.metadata.tags == ["health"]
        assert merged.metadata.notes == "legs"

    def test_remote_body_excludes_local_fields(self, service, gateway):
        service.create_event(CreateEventRequest(
            summary="Gym",
            start={"dateTime": "2025-01-01T09:00:00Z"},
            tags=["x"],
        ))

        operation, body = gateway.calls[0]
        assert operation == "insert"
        assert body == {"summary": "Gym", "start": {"dateTime": "2025-01-01T09:00:00Z"}}

    def test_remote_failure_writes_no_metadata(self, service, gateway, metadata_repo):
        gateway.fail_with = GoogleCalendarException("Forbidden", status=403)

        with pytest.raises(GoogleCalendarException):
            service.create_event(CreateEventRequest(summary="x", tags=["a"]))

        assert metadata_repo.count() == 0


# ---------------------------------------------------------------------------
# updateEvent
# ---------------------------------------------------------------------------


class TestUpdateEvent:
    def test_instance_update_writes_series_metadata(self, service, gateway, metadata_repo, user):
        first, second, third = _add_series(gateway, "series3", 3)

        merged = service.update_event(second, UpdateEventRequest(tags=["team"], notes="retro"))

        assert merged.metadata.google_event_id == "series3"
        assert metadata_repo.get_for_event(user.id, second) is None

        listed = service.list_events()
        assert all(m.metadata is not None and m.metadata.tags == ["team"] for m in listed)

    def test_single_event_update_writes_own_id(self, service, gateway, user):
        gateway.add_event("solo")

        merged = service.update_event("solo", UpdateEventRequest(notes="hello"))

        assert merged.metadata.google_event_id == "solo"
        assert merged.metadata.owner_id == user.id

    def test_update_existing_record_in_place(self, service, gateway, metadata_repo, user):
        gateway.add_event("solo")
        original = metadata_repo.create_for_event(user.id, "solo", tags=["old"], notes="keep")

        merged = service.update_event("solo", UpdateEventRequest(tags=["new"]))

        assert merged.metadata.id == original.id
        assert merged.metadata.tags == ["new"]
        assert merged.metadata.notes == "keep"
        assert metadata_repo.count() == 1

    def test_empty_category_clears_reference(self, service, gateway, metadata_repo, db, user):
        category = CategoryRepository(db).create_for_owner(user.id, "Work")
        gateway.add_event("solo")
        metadata_repo.create_for_event(user.id, "solo", category_id=category.id)

        merged = service.update_event("solo", UpdateEventRequest(categoryId=""))

        assert merged.metadata.category_id is None

    def test_category_is_set_and_loaded(self, service, gateway, db, user):
        category = CategoryRepository(db).create_for_owner(user.id, "Work", "#ff0000")
        gateway.add_event("solo")

        merged = service.update_event("solo", UpdateEventRequest(categoryId=str(category.id)))

        props = merged.to_dict()["extendedProps"]
        assert props["categoryId"] == category.id
        assert props["category"]["name"] == "Work"
        assert props["category"]["color"] == "#ff0000"

    def test_category_of_another_user_is_rejected(self, service, gateway, db):
        stranger = UserRepository(db).create_user({"google_id": "other", "email": "other@example.com"})
        category = CategoryRepository(db).create_for_owner(stranger.id, "Private")
        gateway.add_event("solo")

        with pytest.raises(UnknownCategoryException):
            service.update_event("solo", UpdateEventRequest(categoryId=category.id))

        assert gateway.calls == []

    def test_remote_patch_receives_only_remote_fields(self, service, gateway):
        gateway.add_event("solo")

        service.update_event("solo", UpdateEventRequest(summary="Renamed", tags=["t"]))

        assert ("patch", "solo", {"summary": "Renamed"}) in gateway.calls


# ---------------------------------------------------------------------------
# deleteEvent
# ---------------------------------------------------------------------------


class TestDeleteEvent:
    def test_deletes_remote_event_and_own_metadata(self, service, gateway, metadata_repo, user):
        gateway.add_event("solo")
        metadata_repo.create_for_event(user.id, "solo", tags=["x"])

        service.delete_event("solo")

        assert "solo" not in gateway.events
        assert metadata_repo.get_for_event(user.id, "solo") is None

    def test_instance_delete_keeps_series_metadata(self, service, gateway, metadata_repo, user):
        first, _ = _add_series(gateway, "series4", 2)
        metadata_repo.create_for_event(user.id, "series4", tags=["kept"])

        service.delete_event(first)

        assert metadata_repo.get_for_event(user.id, "series4") is not None

    def test_remote_failure_keeps_metadata(self, service, gateway, metadata_repo, user):
        gateway.add_event("solo")
        metadata_repo.create_for_event(user.id, "solo", tags=["x"])
        gateway.fail_with = GoogleCalendarException("Gone", status=410)

        with pytest.raises(GoogleCalendarException):
            service.delete_event("solo")

        assert metadata_repo.get_for_event(user.id, "solo") is not None


# ---------------------------------------------------------------------------
# rsvpEvent
# ---------------------------------------------------------------------------


class TestRsvpEvent:
    def test_updates_self_attendee_only(self, service, gateway):
        gateway.add_event("invite", attendees=[
            {"email": "host@example.com", "organizer": True, "responseStatus": "accepted"},
            {"email": "owner@example.com", "self": True, "responseStatus": "needsAction"},
        ])

        updated = service.rsvp_event("invite", "tentative")

        statuses = {a["email"]: a["responseStatus"] for a in updated["attendees"]}
        assert statuses == {"host@example.com": "accepted", "owner@example.com": "tentative"}

    def test_not_attendee_raises_without_patching(self, service, gateway):
        gateway.add_event("invite", attendees=[{"email": "host@example.com"}])

        with pytest.raises(NotAttendeeException):
            service.rsvp_event("invite", "accepted")

        assert not any(call[0] == "patch" for call in gateway.calls)

    def test_event_without_attendees_is_not_attendee(self, service, gateway):
        gateway.add_event("solo")
        with pytest.raises(NotAttendeeException):
            service.rsvp_event("solo", "declined")


class TestMergedEvent:
    def test_to_dict_does_not_mutate_remote_event(self):
        remote = {"id": "x"}
        MergedEvent(remote).to_dict()
        assert remote == {"id": "x"}
