"""Domain events emitted by the calendar and the booking service."""

from __future__ import annotations

from pydantic import BaseModel


class DatesSelected(BaseModel):
    """Fired once per finished drag gesture with the sorted day strings."""

    dates: list[str]


class MonthChanged(BaseModel):
    """Fired when the grid auto-pages to an adjacent month mid-drag."""

    year: int
    month: int


class BookingCreated(BaseModel):
    booking_id: str
    room_id: str


class BookingUpdated(BaseModel):
    booking_id: str
    changed_fields: list[str]


class BookingDeleted(BaseModel):
    booking_id: str
