"""Domain error codes for the scheduling module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    ROOM_NOT_FOUND = "ROOM_NOT_FOUND"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    PARTICIPANT_NOT_FOUND = "PARTICIPANT_NOT_FOUND"
    INVALID_ID = "INVALID_ID"
    INVALID_TIME_WINDOW = "INVALID_TIME_WINDOW"
    ROOM_CONFLICT = "ROOM_CONFLICT"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    """Base class for references to entities that do not exist."""


class RoomNotFoundError(NotFoundError):
    """Raised when a referenced room does not exist."""

    def __init__(self, room_id: str) -> None:
        super().__init__(
            code=ErrorCode.ROOM_NOT_FOUND,
            message="Room not found",
        )
        self.room_id = room_id


class EventNotFoundError(NotFoundError):
    """Raised when a referenced exam or concours does not exist."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class ParticipantNotFoundError(NotFoundError):
    """Raised when a referenced student or candidate does not exist."""

    def __init__(self, participant_id: str) -> None:
        super().__init__(
            code=ErrorCode.PARTICIPANT_NOT_FOUND,
            message="Participant not found",
        )
        self.participant_id = participant_id


class InvalidIdError(DomainError):
    """Raised when an identifier is malformed."""

    def __init__(self, field: str = "id") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {field} format",
        )
        self.field = field


class InvalidTimeWindowError(DomainError):
    """Raised when a start time is not strictly before its end time."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TIME_WINDOW,
            message="Start time must be before end time",
        )


class ConflictError(DomainError):
    """Raised when a room is already booked for an overlapping interval."""

    def __init__(self, room_id: str, conflicting_booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.ROOM_CONFLICT,
            message="Room is already booked at this time",
        )
        self.room_id = room_id
        self.conflicting_booking_id = conflicting_booking_id


class CapacityExceededError(DomainError):
    """Raised when the selected rooms cannot seat every participant."""

    def __init__(self, shortfall: int) -> None:
        super().__init__(
            code=ErrorCode.CAPACITY_EXCEEDED,
            message="Not enough seats in the selected rooms",
        )
        self.shortfall = shortfall


CONVOCATIONS_NOT_SENT = "Convocations could not be sent"
CANCELLATIONS_NOT_SENT = "Cancellation notices could not be sent"


class NotificationFailure(DomainError):
    """Raised by a notifier when convocations or notices could not be delivered."""

    def __init__(self, detail: str, message: str = CONVOCATIONS_NOT_SENT) -> None:
        super().__init__(code=ErrorCode.NOTIFICATION_FAILED, message=message)
        self.detail = detail
