"""Seat assignment engine.

Greedy bin-fill: participants ordered by external reference (CNE), rooms
ordered largest first, seats 1..capacity of one room are filled before the
next room is opened. The result depends only on the input sets, never on
their order.
"""

import logging
from collections.abc import Iterable, Sequence

from scheduling.domain import (
    Assignment,
    EventId,
    Participant,
    Repartition,
    Room,
    RoomId,
    RoomSummary,
)
from scheduling.domain.errors import CapacityExceededError

logger = logging.getLogger(__name__)


def participant_order(participant: Participant) -> tuple[str, str]:
    return (participant.external_ref, str(participant.id))


def room_order(room: Room) -> tuple[int, str]:
    return (-room.capacity.value, str(room.id))


def assign_seats(
    event_id: EventId,
    participants: Sequence[Participant],
    rooms: Sequence[Room],
) -> Repartition:
    """Seat every participant in the given rooms.

    Raises:
        CapacityExceededError: If the rooms hold fewer seats than there are
            participants. Nothing is assigned in that case.
        ValueError: If a participant or a room appears twice.
    """
    _ensure_unique((p.id for p in participants), "participant")
    _ensure_unique((r.id for r in rooms), "room")

    total_capacity = sum(room.capacity.value for room in rooms)
    shortfall = len(participants) - total_capacity
    if shortfall > 0:
        logger.warning(
            "Cannot seat %d participants for event %s: %d seats short",
            len(participants),
            event_id,
            shortfall,
        )
        raise CapacityExceededError(shortfall)

    queue = sorted(participants, key=participant_order)
    assignments: list[Assignment] = []
    summary: list[RoomSummary] = []
    position = 0
    for room in sorted(rooms, key=room_order):
        if position >= len(queue):
            break
        batch = queue[position : position + room.capacity.value]
        assignments.extend(
            Assignment(
                event_id=event_id,
                room_id=room.id,
                seat_number=seat,
                participant_id=participant.id,
            )
            for seat, participant in enumerate(batch, start=1)
        )
        summary.append(_summary_line(room, len(batch)))
        position += len(batch)

    return Repartition(
        event_id=event_id,
        assignments=tuple(assignments),
        summary=tuple(summary),
    )


def summarize(
    event_id: EventId, assignments: Sequence[Assignment], rooms: Iterable[Room]
) -> Repartition:
    """Rebuild a répartition from stored assignments."""
    by_id = {room.id: room for room in rooms}
    counts: dict[RoomId, int] = {}
    for assignment in assignments:
        counts[assignment.room_id] = counts.get(assignment.room_id, 0) + 1
    summary = tuple(
        _summary_line(by_id[room_id], count)
        for room_id, count in counts.items()
        if room_id in by_id
    )
    return Repartition(event_id=event_id, assignments=tuple(assignments), summary=summary)


def _summary_line(room: Room, assigned: int) -> RoomSummary:
    return RoomSummary(
        room_id=room.id,
        room_name=room.name,
        department=room.department,
        assigned=assigned,
        capacity=room.capacity.value,
    )


def _ensure_unique(ids: Iterable[object], label: str) -> None:
    seen: set[object] = set()
    for value in ids:
        if value in seen:
            raise ValueError(f"Duplicate {label} {value}")
        seen.add(value)
