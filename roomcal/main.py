"""FastAPI application: entry point for the room booking calendar."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Query, Response, status

from roomcal.config import get_settings
from roomcal.domain.bus import EventBus
from roomcal.domain.models import (
    Booking,
    BookingCreate,
    BookingSummaryItem,
    BookingUpdate,
    ConflictCheckRequest,
    ConflictCheckResponse,
    DayCell,
    Room,
)
from roomcal.errors import DomainException
from roomcal.repos.memory import BookingRepository, create_room_repository
from roomcal.services.bookings import BookingService
from roomcal.services.calendar import (
    build_month_view,
    grid_bounds,
    summarize_bookings,
)
from roomcal.strings import get_strings

settings = get_settings()
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_title)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
room_repo = create_room_repository(seed=settings.seed_rooms)
booking_repo = BookingRepository()
booking_service = BookingService(
    room_repo=room_repo, booking_repo=booking_repo, bus=event_bus
)
logger.info("Serving %d room(s)", len(room_repo.list_all()))


def _month_feed(
    year: int | None, month: int | None, room_id: str | None = None
) -> list[Booking]:
    if year is None or month is None:
        if room_id is not None:
            return booking_repo.list_for_room(room_id)
        return booking_repo.list_all()
    if room_id is not None:
        return booking_repo.list_for_room_month(room_id, year, month)
    return booking_repo.list_for_month(year, month)


# ── Rooms ─────────────────────────────────────────────────────────────


@app.get("/api/rooms", response_model=list[Room])
def list_rooms() -> list[Room]:
    return room_repo.list_all()


@app.get("/api/rooms/{room_id}", response_model=Room)
def get_room(room_id: str) -> Room:
    room = room_repo.get(room_id)
    if room is None:
        raise HTTPException(status_code=404, detail="Room not found")
    return room


# ── Bookings ──────────────────────────────────────────────────────────


@app.get("/api/bookings", response_model=list[Booking])
def list_bookings(
    year: int | None = None,
    month: int | None = Query(default=None, ge=1, le=12),
) -> list[Booking]:
    """Return all bookings, or only those intersecting a month when both
    ``year`` and ``month`` are given."""
    return _month_feed(year, month)


@app.get("/api/room-bookings/{room_id}", response_model=list[Booking])
def list_room_bookings(
    room_id: str,
    year: int | None = None,
    month: int | None = Query(default=None, ge=1, le=12),
) -> list[Booking]:
    return _month_feed(year, month, room_id=room_id)


@app.get("/api/bookings/summary", response_model=list[BookingSummaryItem])
def booking_summary(
    year: int,
    month: int = Query(ge=1, le=12),
    lang: str | None = None,
) -> list[BookingSummaryItem]:
    """Summary lines for the bookings shown under the month grid."""
    return summarize_bookings(
        booking_repo.list_for_month(year, month),
        room_repo.list_all(),
        language=lang or settings.default_language,
    )


@app.post("/api/bookings/check-conflict", response_model=ConflictCheckResponse)
def check_conflict(body: ConflictCheckRequest) -> ConflictCheckResponse:
    try:
        conflict = booking_service.check_conflict(
            body.room_id, body.start_date, body.end_date, body.exclude_booking_id
        )
    except DomainException as exc:
        raise exc.to_http_exception()
    return ConflictCheckResponse(has_conflict=conflict)


@app.get("/api/bookings/{booking_id}", response_model=Booking)
def get_booking(booking_id: str) -> Booking:
    try:
        return booking_service.get(booking_id)
    except DomainException as exc:
        raise exc.to_http_exception()


@app.post("/api/bookings", response_model=Booking, status_code=status.HTTP_201_CREATED)
def create_booking(body: BookingCreate) -> Booking:
    try:
        return booking_service.create(body)
    except DomainException as exc:
        raise exc.to_http_exception()


@app.put("/api/bookings/{booking_id}", response_model=Booking)
def update_booking(booking_id: str, body: BookingUpdate) -> Booking:
    """Merge the supplied fields into the booking; omitted fields are kept."""
    try:
        return booking_service.update(booking_id, body)
    except DomainException as exc:
        raise exc.to_http_exception()


@app.delete("/api/bookings/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(booking_id: str) -> Response:
    try:
        booking_service.delete(booking_id)
    except DomainException as exc:
        raise exc.to_http_exception()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ── Calendar ──────────────────────────────────────────────────────────


@app.get("/api/calendar/{year}/{month}", response_model=list[DayCell])
def month_view(
    year: int,
    month: int,
    room_id: str | None = None,
    lang: str | None = None,
) -> list[DayCell]:
    """Day cells for the month grid with their booking indicators."""
    if not 1 <= month <= 12:
        raise HTTPException(status_code=422, detail="month must be between 1 and 12")
    first, last = grid_bounds(year, month)
    return build_month_view(
        year,
        month,
        booking_repo.list_overlapping(first, last, room_id=room_id),
        room_repo.list_all(),
        language=lang or settings.default_language,
    )


@app.get("/api/strings/{language}")
def strings(language: str) -> dict[str, str]:
    return get_strings(language)
