"""Calendar day-grid generation and date helpers.

All dates are calendar days (``datetime.date``) exchanged as canonical
``YYYY-MM-DD`` strings; nothing here is timezone-aware.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from dateutil.relativedelta import relativedelta
from dateutil.rrule import DAILY, rrule

from roomcal.domain.models import (
    Booking,
    BookingIndicator,
    BookingSummaryItem,
    CalendarDay,
    DayCell,
    Room,
)
from roomcal.strings import get_strings

MAX_INDICATORS = 3
FALLBACK_COLOR = "#6b7280"


def parse_date(value: date | str) -> date:
    """Accept a ``date`` or a ``YYYY-MM-DD`` string."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def format_date(value: date) -> str:
    return value.isoformat()


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of the given month (1-12)."""
    first = date(year, month, 1)
    last = first + relativedelta(months=1, days=-1)
    return first, last


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    shifted = date(year, month, 1) + relativedelta(months=delta)
    return shifted.year, shifted.month


def date_range(start: date | str, end: date | str) -> list[str]:
    """Enumerate every day from *start* to *end* inclusive.

    The caller orders the endpoints; a reversed range yields an empty list.
    """
    start_day, end_day = parse_date(start), parse_date(end)
    if start_day > end_day:
        return []
    days = rrule(DAILY, dtstart=start_day, until=end_day)
    return [format_date(dt.date()) for dt in days]


def sort_dates(dates: Iterable[date | str]) -> list[str]:
    """Chronologically sort and deduplicate day strings."""
    return [format_date(d) for d in sorted({parse_date(d) for d in dates})]


def grid_bounds(year: int, month: int) -> tuple[date, date]:
    """Sunday on or before the 1st, Saturday on or after the last day."""
    first, last = month_bounds(year, month)
    # date.weekday(): Monday == 0 ... Sunday == 6
    grid_start = first - timedelta(days=(first.weekday() + 1) % 7)
    grid_end = last + timedelta(days=(5 - last.weekday()) % 7)
    return grid_start, grid_end


def generate_grid(
    year: int, month: int, today: date | None = None
) -> list[CalendarDay]:
    """Build the day cells for a month, padded to whole Sunday-Saturday weeks."""
    today = today or date.today()
    first, last = month_bounds(year, month)
    grid_start, grid_end = grid_bounds(year, month)

    days: list[CalendarDay] = []
    for dt in rrule(DAILY, dtstart=grid_start, until=grid_end):
        day = dt.date()
        days.append(
            CalendarDay(
                calendar_date=day,
                date_string=format_date(day),
                day_number=day.day,
                is_current_month=first <= day <= last,
                is_prev_month=day < first,
                is_next_month=day > last,
                is_today=day == today,
            )
        )
    return days


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def format_date_range(start: date | str, end: date | str) -> str:
    """Human-readable label for a booking span, e.g. ``Jan 5-7, 2025``."""
    start_day, end_day = parse_date(start), parse_date(end)
    if start_day == end_day:
        return f"{start_day:%b} {start_day.day}, {start_day.year}"
    if start_day.year == end_day.year:
        if start_day.month == end_day.month:
            return f"{start_day:%b} {start_day.day}-{end_day.day}, {start_day.year}"
        return (
            f"{start_day:%b} {start_day.day} - {end_day:%b} {end_day.day}, "
            f"{start_day.year}"
        )
    return (
        f"{start_day:%b} {start_day.day}, {start_day.year} - "
        f"{end_day:%b} {end_day.day}, {end_day.year}"
    )


def booking_duration_days(start: date | str, end: date | str) -> int:
    return (parse_date(end) - parse_date(start)).days + 1


def bookings_for_date(day: date | str, bookings: Iterable[Booking]) -> list[Booking]:
    target = parse_date(day)
    return [b for b in bookings if b.start_date <= target <= b.end_date]


def build_month_view(
    year: int,
    month: int,
    bookings: list[Booking],
    rooms: list[Room],
    today: date | None = None,
    language: str = "en",
) -> list[DayCell]:
    """Attach booking indicators to every cell of the month grid."""
    strings = get_strings(language)
    rooms_by_id = {room.id: room for room in rooms}

    cells: list[DayCell] = []
    for day in generate_grid(year, month, today=today):
        day_bookings = bookings_for_date(day.calendar_date, bookings)
        indicators = []
        for booking in day_bookings[:MAX_INDICATORS]:
            room = rooms_by_id.get(booking.room_id)
            room_name = room.name if room else strings["UNKNOWN_ROOM"]
            indicators.append(
                BookingIndicator(
                    booking_id=booking.id,
                    room_id=booking.room_id,
                    color=room.color if room else FALLBACK_COLOR,
                    label=f"{room_name} - {booking.customer_name}",
                )
            )
        cells.append(
            DayCell(
                day=day,
                indicators=indicators,
                more_count=max(len(day_bookings) - MAX_INDICATORS, 0),
            )
        )
    return cells


def summarize_bookings(
    bookings: list[Booking], rooms: list[Room], language: str = "en"
) -> list[BookingSummaryItem]:
    """One summary line per booking, ordered by start date."""
    strings = get_strings(language)
    rooms_by_id = {room.id: room for room in rooms}

    items: list[BookingSummaryItem] = []
    for booking in sorted(bookings, key=lambda b: (b.start_date, b.created_at)):
        room = rooms_by_id.get(booking.room_id)
        duration = booking_duration_days(booking.start_date, booking.end_date)
        unit = strings["DAY_LABEL"] if duration == 1 else strings["DAYS_LABEL"]
        items.append(
            BookingSummaryItem(
                booking_id=booking.id,
                customer_name=booking.customer_name,
                customer_email=booking.customer_email,
                room_id=booking.room_id,
                room_name=room.name if room else strings["UNKNOWN_ROOM"],
                room_color=room.color if room else FALLBACK_COLOR,
                date_label=format_date_range(booking.start_date, booking.end_date),
                duration_days=duration,
                duration_label=f"{duration} {unit}",
            )
        )
    return items
