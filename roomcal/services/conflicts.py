"""Service for detecting overlapping room bookings."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from roomcal.domain.models import Booking
from roomcal.errors import MalformedRangeException


def overlaps(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Closed-interval intersection test.

    Touching endpoints overlap: a booking ending on the 12th conflicts with
    one starting on the 12th.
    """
    return start_a <= end_b and end_a >= start_b


def _ensure_ordered(start: date, end: date) -> None:
    if start > end:
        raise MalformedRangeException(
            "start date must not be after end date",
            details={"start_date": start.isoformat(), "end_date": end.isoformat()},
        )


def find_conflicts(
    room_id: str,
    start: date,
    end: date,
    bookings: Iterable[Booking],
    exclude_booking_id: str | None = None,
) -> list[Booking]:
    """Return the bookings of *room_id* that overlap ``[start, end]``.

    ``exclude_booking_id`` exempts a booking from its own check when its
    dates are being updated. Raises ``MalformedRangeException`` when
    ``start > end``.
    """
    _ensure_ordered(start, end)
    return [
        booking
        for booking in bookings
        if booking.room_id == room_id
        and booking.id != exclude_booking_id
        and overlaps(start, end, booking.start_date, booking.end_date)
    ]


def has_conflict(
    room_id: str,
    start: date,
    end: date,
    bookings: Iterable[Booking],
    exclude_booking_id: str | None = None,
) -> bool:
    """True as soon as one booking of *room_id* overlaps ``[start, end]``."""
    _ensure_ordered(start, end)
    return any(
        booking.room_id == room_id
        and booking.id != exclude_booking_id
        and overlaps(start, end, booking.start_date, booking.end_date)
        for booking in bookings
    )


def bookings_overlapping(
    start: date,
    end: date,
    bookings: Iterable[Booking],
    room_id: str | None = None,
) -> list[Booking]:
    """Range query: every booking intersecting ``[start, end]``, optionally per room."""
    return [
        booking
        for booking in bookings
        if (room_id is None or booking.room_id == room_id)
        and overlaps(start, end, booking.start_date, booking.end_date)
    ]
