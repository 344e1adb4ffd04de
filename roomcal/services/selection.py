"""Drag-to-select state machine for the month grid.

A gesture starts with ``pointer_down`` on a day cell, grows with every
``pointer_enter`` and ends with ``pointer_up`` (which may arrive from
anywhere, including outside the grid). The selection is always the dense,
chronologically ordered range between the anchor cell and the cell under
the pointer.

Hovering the grid's first or last cell while it shows a day of the
previous/next month arms a one-shot timer; if the gesture is still alive
when it fires, the grid pages one month in that direction and the
selection is recomputed without another pointer event.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from functools import partial
from typing import Callable, Protocol

from roomcal.config import get_settings
from roomcal.domain.bus import EventBus
from roomcal.domain.events import DatesSelected, MonthChanged
from roomcal.domain.models import CalendarDay, SelectionState
from roomcal.services.calendar import (
    date_range,
    generate_grid,
    month_bounds,
    parse_date,
    shift_month,
)

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Runs deferred callbacks on the event loop that delivers pointer events.

    Without an explicit loop, timers go to the running loop. When pointer
    events arrive with no loop running, timers are parked on a private
    idle loop; they stay cancellable and fire once that loop is run.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._idle_loop: asyncio.AbstractEventLoop | None = None

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            if self._idle_loop is None:
                logger.debug("No running event loop; parking timers on an idle loop")
                self._idle_loop = asyncio.new_event_loop()
            return self._idle_loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self.loop.call_later(delay, callback)


class Gesture:
    """State owned by one drag, from pointer-down to pointer-up.

    The auto-page timer captures its gesture and does nothing once that
    gesture is no longer active, so a late timer can never touch a newer
    drag or another grid.
    """

    def __init__(self, anchor: date) -> None:
        self.anchor = anchor
        self.selection: list[str] = [anchor.isoformat()]
        self.active = True
        self.timer: TimerHandle | None = None

    def select_to(self, target: date) -> None:
        self.selection = date_range(min(self.anchor, target), max(self.anchor, target))

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None


class RangeSelection:
    """Turns pointer/touch events over a month grid into a sorted day range."""

    def __init__(
        self,
        year: int,
        month: int,
        bus: EventBus,
        scheduler: Scheduler | None = None,
        delay: float | None = None,
        today: date | None = None,
    ) -> None:
        self.bus = bus
        self.scheduler = scheduler or AsyncioScheduler()
        if delay is None:
            delay = get_settings().auto_page_delay_seconds
        self.delay = delay
        self._today = today
        self._gesture: Gesture | None = None
        self.show_month(year, month)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def state(self) -> SelectionState:
        return SelectionState.DRAGGING if self._gesture else SelectionState.IDLE

    @property
    def selection(self) -> list[str]:
        """Dates accumulated by the gesture in progress (empty when idle)."""
        return list(self._gesture.selection) if self._gesture else []

    def displayed_dates(self, external: list[str] | None = None) -> list[str]:
        """Dates to highlight: the drag while dragging, otherwise *external*."""
        if self._gesture is not None:
            return list(self._gesture.selection)
        return list(external or [])

    def is_selected(self, day: str, external: list[str] | None = None) -> bool:
        return day in self.displayed_dates(external)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def show_month(self, year: int, month: int) -> None:
        self.year = year
        self.month = month
        self.grid: list[CalendarDay] = generate_grid(year, month, today=self._today)
        self._cell_index = {day.date_string: i for i, day in enumerate(self.grid)}

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def pointer_down(self, day: str) -> None:
        if self._gesture is not None:
            # The previous gesture never saw its pointer-up; drop it.
            logger.debug(
                "Discarding unfinished gesture anchored at %s", self._gesture.anchor
            )
            self.teardown()
        self._gesture = Gesture(parse_date(day))
        logger.debug("Drag started at %s", day)

    def pointer_enter(self, day: str) -> None:
        gesture = self._gesture
        if gesture is None:
            return

        gesture.cancel_timer()
        target = parse_date(day)
        direction = self._page_direction(day, target)
        if direction:
            destination = shift_month(self.year, self.month, direction)
            gesture.timer = self.scheduler.call_later(
                self.delay, partial(self._auto_page, gesture, target, destination)
            )
        gesture.select_to(target)

    def pointer_up(self) -> list[str] | None:
        """End the gesture and publish its dates; ``None`` when not dragging."""
        gesture = self._gesture
        if gesture is None:
            return None

        gesture.cancel_timer()
        gesture.active = False
        self._gesture = None

        dates = list(gesture.selection)
        logger.debug("Drag finished with %d day(s)", len(dates))
        self.bus.publish(DatesSelected(dates=dates))
        return dates

    def touch_start(self, day: str) -> None:
        self.pointer_down(day)

    def touch_move(self, day: str | None) -> None:
        # None when the finger is not over a day cell.
        if day is not None:
            self.pointer_enter(day)

    def touch_end(self) -> list[str] | None:
        return self.pointer_up()

    def teardown(self) -> None:
        """Abandon any gesture without emitting; used on unmount."""
        gesture = self._gesture
        if gesture is None:
            return
        gesture.cancel_timer()
        gesture.active = False
        self._gesture = None

    # ------------------------------------------------------------------
    # Auto-paging
    # ------------------------------------------------------------------

    def _page_direction(self, day: str, target: date) -> int:
        index = self._cell_index.get(day)
        if index is None:
            return 0
        first, last = month_bounds(self.year, self.month)
        if index == 0 and target < first:
            return -1
        if index == len(self.grid) - 1 and target > last:
            return 1
        return 0

    def _auto_page(
        self, gesture: Gesture, target: date, destination: tuple[int, int]
    ) -> None:
        # destination is the month next to the one shown when armed.
        gesture.timer = None
        if not gesture.active or gesture is not self._gesture:
            return

        year, month = destination
        logger.debug("Auto-paging to %04d-%02d", year, month)
        self.show_month(year, month)
        gesture.select_to(target)
        self.bus.publish(MonthChanged(year=year, month=month))
