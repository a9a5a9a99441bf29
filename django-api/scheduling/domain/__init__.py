from scheduling.domain.models import (
    Assignment,
    AvailabilityReport,
    Booking,
    EventKind,
    Participant,
    Repartition,
    Room,
    RoomCategory,
    RoomSummary,
    ScheduledEvent,
)
from scheduling.domain.value_objects import (
    BookingId,
    Capacity,
    EventId,
    ParticipantId,
    RoomId,
    TimeWindow,
)

__all__ = [
    "Assignment",
    "AvailabilityReport",
    "Booking",
    "EventKind",
    "Participant",
    "Repartition",
    "Room",
    "RoomCategory",
    "RoomSummary",
    "ScheduledEvent",
    "BookingId",
    "Capacity",
    "EventId",
    "ParticipantId",
    "RoomId",
    "TimeWindow",
]
