"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in scheduling/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from enum import Enum

from scheduling.domain.value_objects import (
    BookingId,
    Capacity,
    EventId,
    ParticipantId,
    RoomId,
    TimeWindow,
)


class RoomCategory(Enum):
    AMPHITHEATER = "amphitheater"
    CLASSROOM = "classroom"


class EventKind(Enum):
    EXAM = "exam"
    CONCOURS = "concours"


@dataclass(frozen=True)
class Room:
    """Domain representation of a Room."""

    id: RoomId
    name: str
    department: str | None
    capacity: Capacity
    category: RoomCategory
    equipment: tuple[str, ...] = ()
    is_schedulable: bool = True

    @property
    def is_amphitheater(self) -> bool:
        return self.category is RoomCategory.AMPHITHEATER


@dataclass(frozen=True)
class Booking:
    """A room held by an event for a time window."""

    id: BookingId
    room_id: RoomId
    event_id: EventId
    window: TimeWindow


@dataclass(frozen=True)
class Participant:
    """A student or concours candidate.

    external_ref is the CNE (or student number) and only drives seat ordering.
    """

    id: ParticipantId
    display_name: str
    external_ref: str
    email: str | None = None


@dataclass(frozen=True)
class ScheduledEvent:
    """An exam or concours as seen by the scheduling core."""

    id: EventId
    kind: EventKind
    title: str
    window: TimeWindow
    department: str | None = None


@dataclass(frozen=True)
class Assignment:
    """One participant seated in one room for one event."""

    event_id: EventId
    room_id: RoomId
    seat_number: int
    participant_id: ParticipantId


@dataclass(frozen=True)
class RoomSummary:
    """Répartition line: how many seats of a room are used."""

    room_id: RoomId
    room_name: str
    department: str | None
    assigned: int
    capacity: int


@dataclass(frozen=True)
class Repartition:
    """Seat assignments of an event together with the per-room summary."""

    event_id: EventId
    assignments: tuple[Assignment, ...] = ()
    summary: tuple[RoomSummary, ...] = ()

    def by_room(self) -> dict[RoomId, list[Assignment]]:
        """Group assignments by room, preserving room fill order."""
        grouped: dict[RoomId, list[Assignment]] = {}
        for assignment in self.assignments:
            grouped.setdefault(assignment.room_id, []).append(assignment)
        return grouped

    def seat_of(self, participant_id: ParticipantId) -> Assignment | None:
        for assignment in self.assignments:
            if assignment.participant_id == participant_id:
                return assignment
        return None

    @property
    def total_assigned(self) -> int:
        return len(self.assignments)


@dataclass(frozen=True)
class AvailabilityReport:
    """Result of a non-mutating availability pre-check."""

    available: bool
    conflicts: tuple[Booking, ...] = field(default_factory=tuple)
