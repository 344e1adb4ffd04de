"""In-memory repositories for rooms and bookings."""

from __future__ import annotations

from datetime import date
from typing import Any

from roomcal.domain.models import Booking, Room
from roomcal.services.calendar import month_bounds
from roomcal.services.conflicts import bookings_overlapping, has_conflict

# Fields a partial update may never touch.
_IMMUTABLE_FIELDS = ("id", "created_at")


class RoomRepository:
    """Dict-backed store for Room instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Room] = {}

    def add(self, room: Room) -> None:
        self._store[room.id] = room

    def get(self, room_id: str) -> Room | None:
        return self._store.get(room_id)

    def list_all(self) -> list[Room]:
        return list(self._store.values())


class BookingRepository:
    """Dict-backed store for Booking instances, keyed by id.

    Storage offers no exclusion constraint; callers run the conflict check
    before ``add``/``update``.
    """

    def __init__(self) -> None:
        self._store: dict[str, Booking] = {}

    def add(self, booking: Booking) -> None:
        self._store[booking.id] = booking

    def get(self, booking_id: str) -> Booking | None:
        return self._store.get(booking_id)

    def list_all(self) -> list[Booking]:
        return list(self._store.values())

    def list_for_room(self, room_id: str) -> list[Booking]:
        return [b for b in self._store.values() if b.room_id == room_id]

    def list_overlapping(
        self, start: date, end: date, room_id: str | None = None
    ) -> list[Booking]:
        return bookings_overlapping(start, end, self._store.values(), room_id=room_id)

    def list_for_month(self, year: int, month: int) -> list[Booking]:
        """Bookings intersecting the month, including ones spanning its edges."""
        first, last = month_bounds(year, month)
        return self.list_overlapping(first, last)

    def list_for_room_month(self, room_id: str, year: int, month: int) -> list[Booking]:
        first, last = month_bounds(year, month)
        return self.list_overlapping(first, last, room_id=room_id)

    def update(self, booking_id: str, changes: dict[str, Any]) -> Booking | None:
        """Shallow-merge *changes* into the stored booking and re-validate it.

        Returns ``None`` when the id is unknown. Raises pydantic's
        ``ValidationError`` if the merged record is invalid.
        """
        existing = self._store.get(booking_id)
        if existing is None:
            return None
        merged = existing.model_dump()
        merged.update({k: v for k, v in changes.items() if k not in _IMMUTABLE_FIELDS})
        updated = Booking.model_validate(merged)
        self._store[booking_id] = updated
        return updated

    def delete(self, booking_id: str) -> bool:
        return self._store.pop(booking_id, None) is not None

    def has_conflict(
        self,
        room_id: str,
        start: date,
        end: date,
        exclude_booking_id: str | None = None,
    ) -> bool:
        return has_conflict(
            room_id, start, end, self.list_for_room(room_id), exclude_booking_id
        )


# ---------------------------------------------------------------------------
# Seed data – the rooms offered on a fresh install
# ---------------------------------------------------------------------------

DEFAULT_ROOMS = (
    Room(id="room-a", name="Conference Room A", color="#3b82f6"),
    Room(id="room-b", name="Conference Room B", color="#10b981"),
    Room(id="room-c", name="Meeting Room C", color="#f59e0b"),
)


def _seed_rooms(repo: RoomRepository) -> None:
    for room in DEFAULT_ROOMS:
        repo.add(room.model_copy())


def create_room_repository(seed: bool = True) -> RoomRepository:
    """Return a RoomRepository, pre-loaded with the default rooms when *seed*."""
    repo = RoomRepository()
    if seed:
        _seed_rooms(repo)
    return repo
