"""In-memory implementation of every scheduling store.

Swappable with the Django stores. Atomicity of reserve/rebook is provided by
per-(room, day) locks acquired in a stable order, plus a per-event lock.
"""

import threading
import uuid
from collections.abc import Iterable, Sequence

from scheduling.domain import (
    Assignment,
    Booking,
    BookingId,
    EventId,
    Participant,
    ParticipantId,
    Room,
    RoomCategory,
    RoomId,
    ScheduledEvent,
    TimeWindow,
)
from scheduling.domain.errors import ConflictError
from scheduling.locks import KeyedLocks
from scheduling.stores.interfaces import (
    BookingLedger,
    EventStore,
    ParticipantStore,
    RoomCatalogStore,
    ScheduleStore,
)


class InMemorySchedulingStore(
    RoomCatalogStore, BookingLedger, ScheduleStore, EventStore, ParticipantStore
):
    def __init__(self) -> None:
        self._state = threading.Lock()
        self._locks = KeyedLocks()
        self._rooms: dict[RoomId, Room] = {}
        self._events: dict[EventId, ScheduledEvent] = {}
        self._participants: dict[ParticipantId, Participant] = {}
        self._bookings: dict[BookingId, Booking] = {}
        self._assignments: dict[EventId, list[Assignment]] = {}

    # Seeding (admin CRUD stand-in)

    def add_room(self, room: Room) -> Room:
        with self._state:
            self._rooms[room.id] = room
        return room

    def add_event(self, event: ScheduledEvent) -> ScheduledEvent:
        with self._state:
            self._events[event.id] = event
        return event

    def add_participant(self, participant: Participant) -> Participant:
        with self._state:
            self._participants[participant.id] = participant
        return participant

    # RoomCatalogStore

    def list_rooms(
        self,
        department: str | None = None,
        category: RoomCategory | None = None,
    ) -> list[Room]:
        with self._state:
            rooms = list(self._rooms.values())
        return sorted(
            (room for room in rooms if _matches(room, department, category)),
            key=lambda room: (room.name, str(room.id)),
        )

    def list_departments(self) -> list[str]:
        with self._state:
            departments = {room.department for room in self._rooms.values()}
        return sorted(d for d in departments if d)

    def get_room(self, room_id: RoomId) -> Room | None:
        with self._state:
            return self._rooms.get(room_id)

    def get_rooms(self, room_ids: Iterable[RoomId]) -> list[Room]:
        with self._state:
            return [self._rooms[rid] for rid in dict.fromkeys(room_ids) if rid in self._rooms]

    # BookingLedger

    def find_occupied_room_ids(
        self,
        window: TimeWindow,
        department: str | None = None,
        category: RoomCategory | None = None,
        exclude_event_id: EventId | None = None,
    ) -> list[RoomId]:
        with self._state:
            bookings = list(self._bookings.values())
            rooms = dict(self._rooms)
        occupied = {
            booking.room_id
            for booking in bookings
            if booking.window.overlaps(window)
            and booking.event_id != exclude_event_id
            and booking.room_id in rooms
            and _matches(rooms[booking.room_id], department, category)
        }
        return sorted(occupied, key=str)

    def find_available_rooms(
        self,
        window: TimeWindow,
        department: str | None = None,
        category: RoomCategory | None = None,
        exclude_event_id: EventId | None = None,
    ) -> list[Room]:
        occupied = self.find_occupied_room_ids(
            window, department, category, exclude_event_id
        )
        return self.exclude_rooms(occupied, department, category)

    def exclude_rooms(
        self,
        room_ids: Iterable[RoomId],
        department: str | None = None,
        category: RoomCategory | None = None,
    ) -> list[Room]:
        excluded = set(room_ids)
        return [
            room
            for room in self.list_rooms(department, category)
            if room.is_schedulable and room.id not in excluded
        ]

    def find_conflicts(
        self,
        window: TimeWindow,
        room_ids: Iterable[RoomId],
        exclude_event_id: EventId | None = None,
    ) -> list[Booking]:
        wanted = set(room_ids)
        with self._state:
            bookings = list(self._bookings.values())
        return sorted(
            (
                booking
                for booking in bookings
                if booking.room_id in wanted
                and booking.event_id != exclude_event_id
                and booking.window.overlaps(window)
            ),
            key=lambda booking: (str(booking.room_id), booking.window.start),
        )

    def bookings_for_event(self, event_id: EventId) -> list[Booking]:
        with self._state:
            return [b for b in self._bookings.values() if b.event_id == event_id]

    def reserve(
        self, event_id: EventId, room_ids: Sequence[RoomId], window: TimeWindow
    ) -> list[Booking]:
        keys = self._room_keys(room_ids, window)
        with self._locks.hold(("event", event_id), *keys):
            return self._check_and_insert(event_id, room_ids, window, replace=False)

    def rebook(
        self, event_id: EventId, room_ids: Sequence[RoomId], window: TimeWindow
    ) -> list[Booking]:
        keys = self._room_keys(room_ids, window)
        with self._locks.hold(("event", event_id), *keys):
            return self._check_and_insert(event_id, room_ids, window, replace=True)

    def release(self, event_id: EventId) -> int:
        with self._locks.hold(("event", event_id)), self._state:
            return self._drop_bookings(event_id)

    # ScheduleStore

    def get_assignments(self, event_id: EventId) -> list[Assignment]:
        with self._state:
            return list(self._assignments.get(event_id, ()))

    def commit_schedule(
        self,
        event_id: EventId,
        room_ids: Sequence[RoomId],
        window: TimeWindow,
        assignments: Sequence[Assignment],
    ) -> list[Booking]:
        keys = self._room_keys(room_ids, window)
        with self._locks.hold(("event", event_id), *keys):
            bookings = self._check_and_insert(event_id, room_ids, window, replace=True)
            with self._state:
                self._assignments[event_id] = list(assignments)
            return bookings

    def clear_schedule(self, event_id: EventId) -> None:
        with self._locks.hold(("event", event_id)), self._state:
            self._drop_bookings(event_id)
            self._assignments.pop(event_id, None)

    # EventStore / ParticipantStore

    def get_event(self, event_id: EventId) -> ScheduledEvent | None:
        with self._state:
            return self._events.get(event_id)

    def get_participants(
        self, participant_ids: Iterable[ParticipantId]
    ) -> list[Participant]:
        with self._state:
            return [
                self._participants[pid]
                for pid in dict.fromkeys(participant_ids)
                if pid in self._participants
            ]

    # Internals

    @staticmethod
    def _room_keys(room_ids: Iterable[RoomId], window: TimeWindow) -> list[tuple]:
        return [("room", room_id, window.day) for room_id in room_ids]

    def _check_and_insert(
        self,
        event_id: EventId,
        room_ids: Sequence[RoomId],
        window: TimeWindow,
        replace: bool,
    ) -> list[Booking]:
        # Caller holds the room locks; the state lock only guards containers.
        exclude = event_id if replace else None
        for room_id in room_ids:
            conflicts = self.find_conflicts(window, [room_id], exclude_event_id=exclude)
            if conflicts:
                raise ConflictError(str(room_id), str(conflicts[0].id))
        created = [
            Booking(
                id=BookingId(uuid.uuid4()),
                room_id=room_id,
                event_id=event_id,
                window=window,
            )
            for room_id in dict.fromkeys(room_ids)
        ]
        with self._state:
            if replace:
                self._drop_bookings(event_id)
            for booking in created:
                self._bookings[booking.id] = booking
        return created

    def _drop_bookings(self, event_id: EventId) -> int:
        doomed = [bid for bid, b in self._bookings.items() if b.event_id == event_id]
        for booking_id in doomed:
            del self._bookings[booking_id]
        return len(doomed)


def _matches(room: Room, department: str | None, category: RoomCategory | None) -> bool:
    if department is not None and room.department != department:
        return False
    if category is not None and room.category is not category:
        return False
    return True
