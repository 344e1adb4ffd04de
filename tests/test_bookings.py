"""Tests for guarded booking writes and the calendar page controller."""

from __future__ import annotations

from datetime import date

import pytest

from roomcal.domain.events import BookingCreated, BookingDeleted, BookingUpdated
from roomcal.domain.handlers import CalendarController
from roomcal.domain.models import BookingCreate, BookingUpdate
from roomcal.errors import (
    ConflictException,
    MalformedRangeException,
    NotFoundException,
    ValidationException,
)

_TODAY = date(2025, 1, 15)


def _create(service, start: str, end: str, room_id: str = "room-a", name: str = "Ada"):
    return service.create(
        BookingCreate(
            room_id=room_id,
            customer_name=name,
            start_date=date.fromisoformat(start),
            end_date=date.fromisoformat(end),
        )
    )


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


def test_create_persists_and_publishes(service):
    events: list = []
    service.bus.subscribe(BookingCreated, events.append)

    booking = _create(service, "2025-01-10", "2025-01-12")

    assert service.booking_repo.get(booking.id) == booking
    assert booking.created_at is not None
    assert [e.booking_id for e in events] == [booking.id]


def test_create_rejects_adjacent_booking(service):
    _create(service, "2025-01-10", "2025-01-12")
    with pytest.raises(ConflictException) as exc_info:
        _create(service, "2025-01-12", "2025-01-14", name="Bob")

    assert exc_info.value.details["room_id"] == "room-a"
    assert len(service.booking_repo.list_all()) == 1


def test_create_allows_gap_and_other_rooms(service):
    _create(service, "2025-01-10", "2025-01-12")
    _create(service, "2025-01-13", "2025-01-14", name="Bob")
    _create(service, "2025-01-10", "2025-01-12", room_id="room-b", name="Cy")
    assert len(service.booking_repo.list_all()) == 3


def test_create_requires_known_room(service):
    with pytest.raises(NotFoundException):
        _create(service, "2025-01-10", "2025-01-12", room_id="attic")


def test_create_rejects_reversed_range(service):
    with pytest.raises(MalformedRangeException) as exc_info:
        _create(service, "2025-01-12", "2025-01-10")

    assert exc_info.value.details == {"start_date": "2025-01-12", "end_date": "2025-01-10"}
    assert service.booking_repo.list_all() == []


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


def test_update_own_dates_does_not_self_conflict(service):
    booking = _create(service, "2025-01-10", "2025-01-12")
    updated = service.update(
        booking.id, BookingUpdate(start_date=date(2025, 1, 11), end_date=date(2025, 1, 14))
    )
    assert (updated.start_date, updated.end_date) == (date(2025, 1, 11), date(2025, 1, 14))
    assert updated.created_at == booking.created_at
    assert updated.id == booking.id


def test_update_merges_only_supplied_fields(service):
    booking = _create(service, "2025-01-10", "2025-01-12")
    events: list = []
    service.bus.subscribe(BookingUpdated, events.append)

    updated = service.update(booking.id, BookingUpdate(notes="Projector needed"))

    assert updated.notes == "Projector needed"
    assert updated.customer_name == "Ada"
    assert updated.start_date == booking.start_date
    assert events[0].changed_fields == ["notes"]


def test_update_into_neighbour_is_rejected(service):
    _create(service, "2025-01-10", "2025-01-12")
    other = _create(service, "2025-01-15", "2025-01-16", name="Bob")

    with pytest.raises(ConflictException):
        service.update(other.id, BookingUpdate(start_date=date(2025, 1, 12)))
    assert service.booking_repo.get(other.id).start_date == date(2025, 1, 15)


def test_moving_to_another_room_checks_that_room(service):
    _create(service, "2025-01-10", "2025-01-12", room_id="room-b")
    booking = _create(service, "2025-01-10", "2025-01-12", name="Bob")

    with pytest.raises(ConflictException):
        service.update(booking.id, BookingUpdate(room_id="room-b"))
    with pytest.raises(NotFoundException):
        service.update(booking.id, BookingUpdate(room_id="attic"))


def test_update_producing_reversed_range_is_rejected(service):
    booking = _create(service, "2025-01-10", "2025-01-12")
    with pytest.raises(MalformedRangeException):
        service.update(booking.id, BookingUpdate(start_date=date(2025, 1, 20)))


def test_update_unknown_booking(service):
    with pytest.raises(NotFoundException):
        service.update("missing", BookingUpdate(notes="x"))


# ---------------------------------------------------------------------------
# Delete / queries
# ---------------------------------------------------------------------------


def test_delete_is_unconditional_and_reports_missing(service):
    booking = _create(service, "2025-01-10", "2025-01-12")
    events: list = []
    service.bus.subscribe(BookingDeleted, events.append)

    service.delete(booking.id)
    assert service.booking_repo.get(booking.id) is None
    assert [e.booking_id for e in events] == [booking.id]

    with pytest.raises(NotFoundException):
        service.delete(booking.id)


def test_month_queries_include_boundary_spanning_bookings(service):
    spanning = _create(service, "2024-12-30", "2025-01-02")
    inside = _create(service, "2025-01-20", "2025-01-21", room_id="room-b")
    _create(service, "2025-02-03", "2025-02-04")

    repo = service.booking_repo
    assert {b.id for b in repo.list_for_month(2025, 1)} == {spanning.id, inside.id}
    assert [b.id for b in repo.list_for_month(2024, 12)] == [spanning.id]
    assert [b.id for b in repo.list_for_room_month("room-b", 2025, 1)] == [inside.id]


def test_advisory_check_matches_write_guard(service):
    booking = _create(service, "2025-01-10", "2025-01-12")
    assert service.check_conflict("room-a", date(2025, 1, 12), date(2025, 1, 14))
    assert not service.check_conflict("room-a", date(2025, 1, 13), date(2025, 1, 14))
    assert not service.check_conflict(
        "room-a", date(2025, 1, 10), date(2025, 1, 12), exclude_booking_id=booking.id
    )


# ---------------------------------------------------------------------------
# Calendar controller
# ---------------------------------------------------------------------------


@pytest.fixture()
def controller(service, scheduler):
    return CalendarController(
        service, scheduler=scheduler, delay=0.5, today=_TODAY, year=2025, month=1
    )


def test_drag_opens_booking_draft(controller):
    controller.selection.pointer_down("2025-01-12")
    controller.selection.pointer_enter("2025-01-10")
    assert controller.draft_open is False
    assert controller.displayed_dates() == ["2025-01-10", "2025-01-11", "2025-01-12"]

    controller.selection.pointer_up()
    assert controller.draft_open is True
    assert controller.selected_dates == ["2025-01-10", "2025-01-11", "2025-01-12"]
    assert controller.displayed_dates() == controller.selected_dates


def test_auto_page_moves_controller_month(controller, scheduler):
    controller.selection.pointer_down("2025-01-30")
    controller.selection.pointer_enter("2025-02-01")
    scheduler.advance(0.5)
    assert (controller.year, controller.month) == (2025, 2)


def test_submit_draft_books_selected_span_once(controller, service):
    controller.selection.pointer_down("2025-01-10")
    controller.selection.pointer_enter("2025-01-12")
    controller.selection.pointer_up()
    controller.selection.pointer_up()

    booking = controller.submit_draft("room-a", "Ada", customer_email="ada@example.com")

    assert (booking.start_date, booking.end_date) == (date(2025, 1, 10), date(2025, 1, 12))
    assert controller.selected_dates == []
    assert controller.draft_open is False
    assert len(service.booking_repo.list_all()) == 1
    with pytest.raises(ValidationException):
        controller.submit_draft("room-a", "Ada")


def test_conflicting_draft_stays_open(controller, service):
    _create(service, "2025-01-12", "2025-01-13", name="Bob")
    controller.selection.pointer_down("2025-01-10")
    controller.selection.pointer_enter("2025-01-12")
    controller.selection.pointer_up()

    assert controller.check_draft_conflict("room-a") is True
    assert controller.check_draft_conflict("room-b") is False
    with pytest.raises(ConflictException):
        controller.submit_draft("room-a", "Ada")
    assert controller.draft_open is True
    assert controller.selected_dates == ["2025-01-10", "2025-01-11", "2025-01-12"]


def test_navigation_and_month_view(controller, service):
    _create(service, "2025-01-31", "2025-02-02")
    controller.next_month()
    assert (controller.selection.year, controller.selection.month) == (2025, 2)

    cells = {c.day.date_string: c for c in controller.month_view()}
    assert cells["2025-02-01"].indicators[0].label == "Conference Room A - Ada"
    assert cells["2025-01-31"].indicators  # leading padding cell

    controller.previous_month()
    controller.previous_month()
    assert (controller.year, controller.month) == (2024, 12)
    controller.go_to_today()
    assert (controller.year, controller.month) == (2025, 1)


def test_close_draft_and_teardown(controller, scheduler):
    controller.selection.pointer_down("2025-01-10")
    controller.selection.pointer_up()
    controller.close_draft()
    assert controller.selected_dates == []

    controller.selection.pointer_down("2025-01-30")
    controller.selection.pointer_enter("2025-02-01")
    controller.teardown()
    scheduler.advance(1.0)
    assert (controller.year, controller.month) == (2025, 1)
