"""Domain models for the room booking calendar."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import Enum

from pydantic import BaseModel, EmailStr, Field, model_validator

try:
    from enum import StrEnum
except ImportError:  # pragma: no cover - fallback for older Python runtimes

    class StrEnum(str, Enum):
        pass


class SelectionState(StrEnum):
    IDLE = "idle"
    DRAGGING = "dragging"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Room(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    color: str


class Booking(BaseModel):
    id: str = Field(default_factory=_new_id)
    room_id: str
    customer_name: str = Field(min_length=1)
    customer_email: EmailStr | None = None
    start_date: date
    end_date: date
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> Booking:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CalendarDay(BaseModel):
    """One cell of a month grid padded to whole Sunday-Saturday weeks."""

    calendar_date: date
    date_string: str
    day_number: int
    is_current_month: bool
    is_prev_month: bool
    is_next_month: bool
    is_today: bool


class BookingIndicator(BaseModel):
    booking_id: str
    room_id: str
    color: str
    label: str


class DayCell(BaseModel):
    day: CalendarDay
    indicators: list[BookingIndicator] = Field(default_factory=list)
    more_count: int = 0


class BookingSummaryItem(BaseModel):
    booking_id: str
    customer_name: str
    customer_email: str | None = None
    room_id: str
    room_name: str
    room_color: str
    date_label: str
    duration_days: int
    duration_label: str


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    room_id: str
    customer_name: str = Field(min_length=1)
    customer_email: EmailStr | None = None
    start_date: date
    end_date: date
    notes: str | None = None


class BookingUpdate(BaseModel):
    """Partial update; only fields explicitly supplied are merged."""

    room_id: str | None = None
    customer_name: str | None = Field(default=None, min_length=1)
    customer_email: EmailStr | None = None
    start_date: date | None = None
    end_date: date | None = None
    notes: str | None = None


class ConflictCheckRequest(BaseModel):
    room_id: str
    start_date: date
    end_date: date
    exclude_booking_id: str | None = None


class ConflictCheckResponse(BaseModel):
    has_conflict: bool
