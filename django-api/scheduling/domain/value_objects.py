"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from datetime import date, time
from typing import Self
from uuid import UUID


@dataclass(frozen=True, order=True)
class RoomId:
    """Unique identifier for a Room."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class EventId:
    """Unique identifier for a scheduled exam or concours."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class BookingId:
    """Unique identifier for a Booking."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, order=True)
class ParticipantId:
    """Unique identifier for a student or concours candidate."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(str(value)))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Strictly positive number of seats in a room."""

    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError("Capacity must be positive")


@dataclass(frozen=True)
class TimeWindow:
    """A half-open [start, end) interval on a single calendar day."""

    day: date
    start: time
    end: time

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError("Time window start must be before its end")

    def overlaps(self, other: "TimeWindow") -> bool:
        """Intervals touching at an endpoint do not overlap."""
        if self.day != other.day:
            return False
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.day.isoformat()} {self.start:%H:%M}-{self.end:%H:%M}"
