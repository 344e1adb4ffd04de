"""Calendar page controller: wires selection events to the booking draft."""

from __future__ import annotations

import logging
from datetime import date

from roomcal.domain.bus import EventBus
from roomcal.domain.events import DatesSelected, MonthChanged
from roomcal.domain.models import Booking, BookingCreate, DayCell
from roomcal.errors import ValidationException
from roomcal.services.bookings import BookingService
from roomcal.services.calendar import (
    build_month_view,
    grid_bounds,
    parse_date,
    shift_month,
    sort_dates,
)
from roomcal.services.selection import RangeSelection, Scheduler

logger = logging.getLogger(__name__)


class CalendarController:
    """State behind one month calendar: displayed month, drag, booking draft.

    Each controller gets its own bus by default so that two calendars on
    the same page never see each other's selections.
    """

    def __init__(
        self,
        booking_service: BookingService,
        bus: EventBus | None = None,
        scheduler: Scheduler | None = None,
        delay: float | None = None,
        today: date | None = None,
        year: int | None = None,
        month: int | None = None,
    ) -> None:
        self.booking_service = booking_service
        self.bus = bus or EventBus()
        self._today = today
        current = today or date.today()
        self.year = year or current.year
        self.month = month or current.month

        self.selected_dates: list[str] = []
        self.draft_open = False

        self.selection = RangeSelection(
            self.year,
            self.month,
            bus=self.bus,
            scheduler=scheduler,
            delay=delay,
            today=today,
        )
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(DatesSelected, self.on_dates_selected)
        self.bus.subscribe(MonthChanged, self.on_month_changed)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_dates_selected(self, event: DatesSelected) -> None:
        self.selected_dates = sort_dates(event.dates)
        self.draft_open = bool(self.selected_dates)
        logger.debug("Booking draft opened for %d day(s)", len(self.selected_dates))

    def on_month_changed(self, event: MonthChanged) -> None:
        self.year, self.month = event.year, event.month

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def previous_month(self) -> None:
        self._go_to(*shift_month(self.year, self.month, -1))

    def next_month(self) -> None:
        self._go_to(*shift_month(self.year, self.month, 1))

    def go_to_today(self) -> None:
        current = self._today or date.today()
        self._go_to(current.year, current.month)

    def _go_to(self, year: int, month: int) -> None:
        self.year, self.month = year, month
        self.selection.show_month(year, month)

    def month_view(self, language: str = "en") -> list[DayCell]:
        first, last = grid_bounds(self.year, self.month)
        return build_month_view(
            self.year,
            self.month,
            self.booking_service.booking_repo.list_overlapping(first, last),
            self.booking_service.room_repo.list_all(),
            today=self._today,
            language=language,
        )

    def displayed_dates(self) -> list[str]:
        return self.selection.displayed_dates(self.selected_dates)

    # ------------------------------------------------------------------
    # Booking draft
    # ------------------------------------------------------------------

    def check_draft_conflict(self, room_id: str) -> bool:
        if not self.selected_dates:
            return False
        start, end = self._draft_range()
        return self.booking_service.check_conflict(room_id, start, end)

    def submit_draft(
        self,
        room_id: str,
        customer_name: str,
        customer_email: str | None = None,
        notes: str | None = None,
    ) -> Booking:
        """Book the selected dates; the draft stays open if the service refuses."""
        if not self.selected_dates:
            raise ValidationException("Select at least one date before booking")
        start, end = self._draft_range()
        booking = self.booking_service.create(
            BookingCreate(
                room_id=room_id,
                customer_name=customer_name,
                customer_email=customer_email,
                start_date=start,
                end_date=end,
                notes=notes,
            )
        )
        self.close_draft()
        return booking

    def close_draft(self) -> None:
        self.selected_dates = []
        self.draft_open = False

    def teardown(self) -> None:
        self.selection.teardown()
        self.bus.unsubscribe(DatesSelected, self.on_dates_selected)
        self.bus.unsubscribe(MonthChanged, self.on_month_changed)

    def _draft_range(self) -> tuple[date, date]:
        return parse_date(self.selected_dates[0]), parse_date(self.selected_dates[-1])
