"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence

from scheduling.domain import (
    Assignment,
    Booking,
    EventId,
    Participant,
    ParticipantId,
    Room,
    RoomCategory,
    RoomId,
    ScheduledEvent,
    TimeWindow,
)


class RoomCatalogStore(ABC):
    """Read-only access to rooms."""

    @abstractmethod
    def list_rooms(
        self,
        department: str | None = None,
        category: RoomCategory | None = None,
    ) -> list[Room]:
        """Return rooms ordered by name, optionally filtered."""
        ...

    @abstractmethod
    def list_departments(self) -> list[str]:
        """Return the distinct departments owning at least one room."""
        ...

    @abstractmethod
    def get_room(self, room_id: RoomId) -> Room | None:
        """Return a room by ID, or None if not found."""
        ...

    @abstractmethod
    def get_rooms(self, room_ids: Iterable[RoomId]) -> list[Room]:
        """Return the rooms that exist among room_ids."""
        ...


class BookingLedger(ABC):
    """Interface for room booking persistence.

    Implementations must make reserve and rebook atomic: the overlap check
    and the insert happen under one lock or transaction per room.
    """

    @abstractmethod
    def find_occupied_room_ids(
        self,
        window: TimeWindow,
        department: str | None = None,
        category: RoomCategory | None = None,
        exclude_event_id: EventId | None = None,
    ) -> list[RoomId]:
        """Return ids of rooms with a booking overlapping window."""
        ...

    @abstractmethod
    def find_available_rooms(
        self,
        window: TimeWindow,
        department: str | None = None,
        category: RoomCategory | None = None,
        exclude_event_id: EventId | None = None,
    ) -> list[Room]:
        """Return schedulable rooms with no booking overlapping window."""
        ...

    @abstractmethod
    def exclude_rooms(
        self,
        room_ids: Iterable[RoomId],
        department: str | None = None,
        category: RoomCategory | None = None,
    ) -> list[Room]:
        """Return schedulable rooms whose id is not in room_ids."""
        ...

    @abstractmethod
    def find_conflicts(
        self,
        window: TimeWindow,
        room_ids: Iterable[RoomId],
        exclude_event_id: EventId | None = None,
    ) -> list[Booking]:
        """Return bookings on room_ids overlapping window."""
        ...

    @abstractmethod
    def bookings_for_event(self, event_id: EventId) -> list[Booking]:
        """Return all bookings held by an event."""
        ...

    @abstractmethod
    def reserve(
        self, event_id: EventId, room_ids: Sequence[RoomId], window: TimeWindow
    ) -> list[Booking]:
        """Book every room or none.

        Raises:
            ConflictError: If any room overlaps an existing booking.
        """
        ...

    @abstractmethod
    def rebook(
        self, event_id: EventId, room_ids: Sequence[RoomId], window: TimeWindow
    ) -> list[Booking]:
        """Replace the event's bookings in one step.

        The event's own bookings never conflict with its new ones. On
        conflict with another event the existing bookings are kept.

        Raises:
            ConflictError: If any room is booked by another event.
        """
        ...

    @abstractmethod
    def release(self, event_id: EventId) -> int:
        """Delete all bookings of an event and return how many were held."""
        ...


class ScheduleStore(ABC):
    """Persistence for seat assignments, committed together with bookings."""

    @abstractmethod
    def get_assignments(self, event_id: EventId) -> list[Assignment]:
        """Return the event's assignments in fill order."""
        ...

    @abstractmethod
    def commit_schedule(
        self,
        event_id: EventId,
        room_ids: Sequence[RoomId],
        window: TimeWindow,
        assignments: Sequence[Assignment],
    ) -> list[Booking]:
        """Rebook rooms and replace all assignments of an event atomically.

        Raises:
            ConflictError: If any room is booked by another event.
        """
        ...

    @abstractmethod
    def clear_schedule(self, event_id: EventId) -> None:
        """Release bookings and discard assignments of an event atomically."""
        ...


class EventStore(ABC):
    """Read access to exams and concours."""

    @abstractmethod
    def get_event(self, event_id: EventId) -> ScheduledEvent | None:
        """Return an event by ID, or None if not found."""
        ...


class ParticipantStore(ABC):
    """Read access to students and candidates."""

    @abstractmethod
    def get_participants(
        self, participant_ids: Iterable[ParticipantId]
    ) -> list[Participant]:
        """Return the participants that exist among participant_ids."""
        ...
