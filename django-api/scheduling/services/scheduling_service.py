"""Scheduling service - commits rooms and seats for an exam or concours.

A schedule is always recomputed from scratch and committed as one unit:
bookings and assignments of the event are replaced together or not at all.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from scheduling.domain import Booking, EventId, Participant, Repartition, ScheduledEvent
from scheduling.domain.errors import (
    CANCELLATIONS_NOT_SENT,
    CONVOCATIONS_NOT_SENT,
    ConflictError,
    EventNotFoundError,
    NotificationFailure,
    ParticipantNotFoundError,
)
from scheduling.locks import KeyedLocks
from scheduling.services.notifications import (
    ConvocationNotifier,
    LoggingNotifier,
    build_convocations,
)
from scheduling.services.parsing import parse_event_id, parse_participant_ids
from scheduling.services.room_service import RoomCatalogService
from scheduling.services.seating import assign_seats, summarize
from scheduling.stores.interfaces import (
    EventStore,
    ParticipantStore,
    RoomCatalogStore,
    ScheduleStore,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleResult:
    repartition: Repartition
    bookings: tuple[Booking, ...]
    warnings: tuple[str, ...] = field(default_factory=tuple)


class SchedulingService:
    """Service for committing and reading an event's répartition."""

    def __init__(
        self,
        events: EventStore,
        rooms: RoomCatalogStore,
        participants: ParticipantStore,
        schedules: ScheduleStore,
        notifier: ConvocationNotifier | None = None,
        locks: KeyedLocks | None = None,
    ) -> None:
        self._events = events
        self._rooms = rooms
        self._catalog = RoomCatalogService(rooms)
        self._participants = participants
        self._schedules = schedules
        self._notifier = notifier or LoggingNotifier()
        self._locks = locks or KeyedLocks()

    def schedule(
        self,
        event_id: str,
        room_ids: Iterable[str],
        participant_ids: Iterable[str],
    ) -> ScheduleResult:
        """Seat participants in rooms and hold the rooms for the event.

        Raises:
            InvalidIdError: If an id is malformed.
            EventNotFoundError, RoomNotFoundError, ParticipantNotFoundError:
                If a referenced entity does not exist.
            CapacityExceededError: If the rooms hold too few seats.
            ConflictError: If a room is booked by another event.
        """
        parsed_event = parse_event_id(event_id)
        with self._locks.hold(("event", parsed_event)):
            event = self._load_event(parsed_event)
            rooms = self._catalog.get_rooms(room_ids)
            participants = self._load_participants(participant_ids)
            repartition = assign_seats(event.id, participants, rooms)
            try:
                bookings = self._schedules.commit_schedule(
                    event.id,
                    [room.id for room in rooms],
                    event.window,
                    repartition.assignments,
                )
            except ConflictError as exc:
                logger.warning(
                    "Schedule of event %s rejected: room %s held by booking %s",
                    event.id,
                    exc.room_id,
                    exc.conflicting_booking_id,
                )
                raise
            logger.info(
                "Scheduled event %s: %d participant(s) in %d room(s)",
                event.id,
                repartition.total_assigned,
                len(repartition.summary),
            )

        convocations = build_convocations(event, repartition, participants, rooms)
        warnings = self._deliver(
            event, lambda: self._notifier.notify(event, convocations), CONVOCATIONS_NOT_SENT
        )
        return ScheduleResult(
            repartition=repartition, bookings=tuple(bookings), warnings=warnings
        )

    def get_repartition(self, event_id: str) -> Repartition:
        """Return the stored assignments of an event with their per-room summary.

        Raises:
            InvalidIdError: If event_id is not a valid UUID.
            EventNotFoundError: If the event does not exist.
        """
        event = self._load_event(parse_event_id(event_id))
        assignments = self._schedules.get_assignments(event.id)
        rooms = self._rooms.get_rooms(dict.fromkeys(a.room_id for a in assignments))
        return summarize(event.id, assignments, rooms)

    def cancel(self, event_id: str) -> tuple[str, ...]:
        """Release the event's rooms, discard its seats and notify the seated participants.

        Returns the notification warnings, empty when every notice went out.
        """
        parsed_event = parse_event_id(event_id)
        with self._locks.hold(("event", parsed_event)):
            event = self._load_event(parsed_event)
            seated = [a.participant_id for a in self._schedules.get_assignments(event.id)]
            participants = self._participants.get_participants(seated)
            self._schedules.clear_schedule(event.id)
        logger.info("Cancelled schedule of event %s", event.id)
        return self._deliver(
            event,
            lambda: self._notifier.notify_cancellation(event, participants),
            CANCELLATIONS_NOT_SENT,
        )

    def _load_event(self, event_id: EventId) -> ScheduledEvent:
        event = self._events.get_event(event_id)
        if event is None:
            raise EventNotFoundError(str(event_id))
        return event

    def _load_participants(self, participant_ids: Iterable[str]) -> list[Participant]:
        ids = list(dict.fromkeys(parse_participant_ids(participant_ids)))
        found = {p.id: p for p in self._participants.get_participants(ids)}
        for participant_id in ids:
            if participant_id not in found:
                raise ParticipantNotFoundError(str(participant_id))
        return [found[participant_id] for participant_id in ids]

    def _deliver(self, event, send, failure_message: str) -> tuple[str, ...]:
        try:
            send()
        except NotificationFailure as exc:
            logger.warning("Notification for event %s not sent: %s", event.id, exc.detail)
            return (exc.message,)
        except Exception:
            logger.exception("Notifier failed for event %s", event.id)
            return (failure_message,)
        return ()
