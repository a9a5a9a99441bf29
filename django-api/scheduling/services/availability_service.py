"""Availability resolver and booking ledger operations.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors
"""

import logging
from collections.abc import Iterable

from scheduling.domain import (
    AvailabilityReport,
    Booking,
    EventId,
    Room,
    RoomCategory,
    RoomId,
    TimeWindow,
)
from scheduling.domain.errors import ConflictError, RoomNotFoundError
from scheduling.services.parsing import parse_event_id, parse_room_ids
from scheduling.stores.interfaces import BookingLedger, RoomCatalogStore

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Service answering "which rooms are free" and holding rooms for events."""

    def __init__(self, rooms: RoomCatalogStore, ledger: BookingLedger) -> None:
        self._rooms = rooms
        self._ledger = ledger

    def find_occupied_rooms(
        self,
        window: TimeWindow,
        department: str | None = None,
        category: RoomCategory | None = None,
        exclude_event_id: str | None = None,
    ) -> list[RoomId]:
        """Return ids of the department's rooms booked during window."""
        return self._ledger.find_occupied_room_ids(
            window,
            department=department,
            category=category,
            exclude_event_id=_optional_event_id(exclude_event_id),
        )

    def find_available_rooms(
        self,
        window: TimeWindow,
        department: str | None = None,
        category: RoomCategory | None = None,
        exclude_event_id: str | None = None,
    ) -> list[Room]:
        """Return the department's schedulable rooms free during window."""
        return self._ledger.find_available_rooms(
            window,
            department=department,
            category=category,
            exclude_event_id=_optional_event_id(exclude_event_id),
        )

    def find_available_amphitheaters(
        self, window: TimeWindow, exclude_event_id: str | None = None
    ) -> list[Room]:
        return self.find_available_rooms(
            window,
            category=RoomCategory.AMPHITHEATER,
            exclude_event_id=exclude_event_id,
        )

    def exclude_rooms(
        self, room_ids: Iterable[str], department: str | None = None
    ) -> list[Room]:
        """Return schedulable rooms not in room_ids (second step of the two-call form)."""
        return self._ledger.exclude_rooms(parse_room_ids(room_ids), department=department)

    def check_availability(
        self,
        window: TimeWindow,
        room_ids: Iterable[str],
        exclude_event_id: str | None = None,
    ) -> AvailabilityReport:
        """Report bookings that would collide with holding room_ids during window."""
        ids = self._existing(room_ids)
        conflicts = self._ledger.find_conflicts(
            window, ids, exclude_event_id=_optional_event_id(exclude_event_id)
        )
        return AvailabilityReport(available=not conflicts, conflicts=tuple(conflicts))

    def reserve(
        self, event_id: str, room_ids: Iterable[str], window: TimeWindow
    ) -> list[Booking]:
        """Book all rooms for an event, or none.

        Raises:
            InvalidIdError: If an id is malformed.
            RoomNotFoundError: If a room does not exist.
            ConflictError: Naming the first room already booked in window.
        """
        parsed_event = parse_event_id(event_id)
        ids = self._existing(room_ids)
        try:
            bookings = self._ledger.reserve(parsed_event, ids, window)
        except ConflictError as exc:
            logger.warning(
                "Reservation rejected for event %s: room %s held by booking %s",
                parsed_event,
                exc.room_id,
                exc.conflicting_booking_id,
            )
            raise
        logger.info("Reserved %d room(s) for event %s on %s", len(bookings), parsed_event, window)
        return bookings

    def release(self, event_id: str) -> int:
        """Free every room held by an event."""
        parsed_event = parse_event_id(event_id)
        released = self._ledger.release(parsed_event)
        logger.info("Released %d booking(s) of event %s", released, parsed_event)
        return released

    def bookings_for_event(self, event_id: str) -> list[Booking]:
        return self._ledger.bookings_for_event(parse_event_id(event_id))

    def _existing(self, room_ids: Iterable[str]) -> list[RoomId]:
        ids = list(dict.fromkeys(parse_room_ids(room_ids)))
        found = {room.id for room in self._rooms.get_rooms(ids)}
        for room_id in ids:
            if room_id not in found:
                raise RoomNotFoundError(str(room_id))
        return ids


def _optional_event_id(value: str | None) -> EventId | None:
    return parse_event_id(value) if value else None
