"""Shared fixtures: a manually driven scheduler and fresh repositories."""

from __future__ import annotations

import pytest

from roomcal.domain.bus import EventBus
from roomcal.repos.memory import BookingRepository, create_room_repository
from roomcal.services.bookings import BookingService


class FakeTimer:
    def __init__(self, due: float, callback) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Scheduler whose clock only moves when a test calls ``advance``."""

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_later(self, delay: float, callback) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled and t.due > self.now]

    def advance(self, seconds: float) -> None:
        start, self.now = self.now, self.now + seconds
        for timer in list(self.timers):
            if not timer.cancelled and start < timer.due <= self.now:
                timer.callback()


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture()
def service() -> BookingService:
    """Fresh bus + seeded rooms + empty bookings for each test."""
    return BookingService(
        room_repo=create_room_repository(),
        booking_repo=BookingRepository(),
        bus=EventBus(),
    )
