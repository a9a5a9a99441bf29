"""Conversion of raw identifiers and times into domain primitives.

Malformed input becomes a domain error so handlers can map it to 400.
"""

from collections.abc import Iterable
from datetime import date, time

from scheduling.domain import EventId, ParticipantId, RoomId, TimeWindow
from scheduling.domain.errors import InvalidIdError, InvalidTimeWindowError


def parse_event_id(value: str) -> EventId:
    try:
        return EventId.from_string(value)
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError("event id") from None


def parse_room_id(value: str) -> RoomId:
    try:
        return RoomId.from_string(value)
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdError("room id") from None


def parse_room_ids(values: Iterable[str]) -> list[RoomId]:
    return [parse_room_id(value) for value in values]


def parse_participant_ids(values: Iterable[str]) -> list[ParticipantId]:
    parsed = []
    for value in values:
        try:
            parsed.append(ParticipantId.from_string(value))
        except (TypeError, ValueError, AttributeError):
            raise InvalidIdError("participant id") from None
    return parsed


def make_window(day: date, start: time, end: time) -> TimeWindow:
    try:
        return TimeWindow(day=day, start=start, end=end)
    except ValueError:
        raise InvalidTimeWindowError() from None
