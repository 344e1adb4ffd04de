"""Booking writes guarded by the per-room conflict check."""

from __future__ import annotations

import logging
from datetime import date

from roomcal.domain.bus import EventBus
from roomcal.domain.events import BookingCreated, BookingDeleted, BookingUpdated
from roomcal.domain.models import Booking, BookingCreate, BookingUpdate
from roomcal.errors import ConflictException, MalformedRangeException, NotFoundException
from roomcal.repos.memory import BookingRepository, RoomRepository
from roomcal.strings import get_strings

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = get_strings("en")["CONFLICT_MESSAGE"]

_REQUIRED_FIELDS = ("room_id", "customer_name", "start_date", "end_date")
_INTERVAL_FIELDS = ("room_id", "start_date", "end_date")


def _booking_not_found(booking_id: str) -> NotFoundException:
    return NotFoundException("Booking not found", details={"booking_id": booking_id})


class BookingService:
    """Create, update and delete bookings without ever committing an overlap.

    The check and the write are not atomic; a single writer is assumed.
    """

    def __init__(
        self,
        room_repo: RoomRepository,
        booking_repo: BookingRepository,
        bus: EventBus,
    ) -> None:
        self.room_repo = room_repo
        self.booking_repo = booking_repo
        self.bus = bus

    def get(self, booking_id: str) -> Booking:
        booking = self.booking_repo.get(booking_id)
        if booking is None:
            raise _booking_not_found(booking_id)
        return booking

    def check_conflict(
        self,
        room_id: str,
        start: date,
        end: date,
        exclude_booking_id: str | None = None,
    ) -> bool:
        """Advisory check; a form can poll this before submitting."""
        return self.booking_repo.has_conflict(room_id, start, end, exclude_booking_id)

    def create(self, data: BookingCreate) -> Booking:
        self._reject_malformed(data.start_date, data.end_date)
        self._require_room(data.room_id)
        self._reject_conflict(data.room_id, data.start_date, data.end_date)

        booking = Booking(**data.model_dump())
        self.booking_repo.add(booking)
        logger.info(
            "Created booking %s for room %s (%s..%s)",
            booking.id,
            booking.room_id,
            booking.start_date,
            booking.end_date,
        )
        self.bus.publish(BookingCreated(booking_id=booking.id, room_id=booking.room_id))
        return booking

    def update(self, booking_id: str, data: BookingUpdate) -> Booking:
        existing = self.get(booking_id)
        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if not (field in _REQUIRED_FIELDS and value is None)
        }

        if any(field in changes for field in _INTERVAL_FIELDS):
            room_id = changes.get("room_id", existing.room_id)
            start = changes.get("start_date", existing.start_date)
            end = changes.get("end_date", existing.end_date)
            self._reject_malformed(start, end)
            if "room_id" in changes:
                self._require_room(room_id)
            self._reject_conflict(room_id, start, end, exclude_booking_id=booking_id)

        updated = self.booking_repo.update(booking_id, changes)
        if updated is None:
            raise _booking_not_found(booking_id)
        changed_fields = sorted(changes)
        logger.info("Updated booking %s (%s)", booking_id, ", ".join(changed_fields))
        self.bus.publish(
            BookingUpdated(booking_id=booking_id, changed_fields=changed_fields)
        )
        return updated

    def delete(self, booking_id: str) -> None:
        if not self.booking_repo.delete(booking_id):
            logger.warning("Delete of unknown booking %s", booking_id)
            raise _booking_not_found(booking_id)
        logger.info("Deleted booking %s", booking_id)
        self.bus.publish(BookingDeleted(booking_id=booking_id))

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def _reject_malformed(self, start: date, end: date) -> None:
        if start > end:
            logger.warning("Rejected reversed range %s..%s", start, end)
            raise MalformedRangeException(
                "start date must not be after end date",
                details={"start_date": start.isoformat(), "end_date": end.isoformat()},
            )

    def _require_room(self, room_id: str) -> None:
        if self.room_repo.get(room_id) is None:
            logger.warning("Booking references unknown room %s", room_id)
            raise NotFoundException("Room not found", details={"room_id": room_id})

    def _reject_conflict(
        self,
        room_id: str,
        start: date,
        end: date,
        exclude_booking_id: str | None = None,
    ) -> None:
        if self.booking_repo.has_conflict(room_id, start, end, exclude_booking_id):
            logger.warning("Conflict for room %s on %s..%s", room_id, start, end)
            raise ConflictException(
                CONFLICT_MESSAGE,
                details={
                    "room_id": room_id,
                    "start_date": start.isoformat(),
                    "end_date": end.isoformat(),
                },
            )
