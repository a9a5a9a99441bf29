"""Django ORM implementation of the scheduling stores.

Atomic reservation: every mutating path runs in transaction.atomic() and
locks the Event row and the requested Room rows (ordered by id) with
SELECT ... FOR UPDATE before re-checking overlaps. On backends without row
locks (SQLite) the database-wide write lock serializes writers instead.
"""

from collections.abc import Iterable, Sequence

from django.db import transaction
from django.db.models import QuerySet

from scheduling import models as orm
from scheduling.domain import (
    Assignment,
    Booking,
    BookingId,
    Capacity,
    EventId,
    EventKind,
    Participant,
    ParticipantId,
    Room,
    RoomCategory,
    RoomId,
    ScheduledEvent,
    TimeWindow,
)
from scheduling.domain.errors import ConflictError, EventNotFoundError, RoomNotFoundError
from scheduling.stores.interfaces import (
    BookingLedger,
    EventStore,
    ParticipantStore,
    RoomCatalogStore,
    ScheduleStore,
)


def _to_room(row: orm.Room) -> Room:
    return Room(
        id=RoomId(row.id),
        name=row.name,
        department=row.department or None,
        capacity=Capacity(row.capacity),
        category=RoomCategory(row.category),
        equipment=tuple(row.equipment or ()),
        is_schedulable=row.is_schedulable,
    )


def _to_booking(row: orm.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        room_id=RoomId(row.room_id),
        event_id=EventId(row.event_id),
        window=TimeWindow(row.date, row.start_time, row.end_time),
    )


def _to_event(row: orm.Event) -> ScheduledEvent:
    return ScheduledEvent(
        id=EventId(row.id),
        kind=EventKind(row.kind),
        title=row.title,
        window=TimeWindow(row.date, row.start_time, row.end_time),
        department=row.department or None,
    )


def _to_participant(row: orm.Participant) -> Participant:
    return Participant(
        id=ParticipantId(row.id),
        display_name=row.display_name,
        external_ref=row.external_ref,
        email=row.email or None,
    )


def _to_assignment(row: orm.Assignment) -> Assignment:
    return Assignment(
        event_id=EventId(row.event_id),
        room_id=RoomId(row.room_id),
        seat_number=row.seat_number,
        participant_id=ParticipantId(row.participant_id),
    )


def _rooms(
    department: str | None = None, category: RoomCategory | None = None
) -> QuerySet[orm.Room]:
    queryset = orm.Room.objects.all()
    if department is not None:
        queryset = queryset.filter(department=department)
    if category is not None:
        queryset = queryset.filter(category=category.value)
    return queryset


def _overlapping(
    window: TimeWindow, exclude_event_id: EventId | None = None
) -> QuerySet[orm.Booking]:
    queryset = orm.Booking.objects.filter(
        date=window.day,
        start_time__lt=window.end,
        end_time__gt=window.start,
    )
    if exclude_event_id is not None:
        queryset = queryset.exclude(event_id=exclude_event_id.value)
    return queryset


class DjangoRoomCatalogStore(RoomCatalogStore):
    """Room catalog backed by the Room table."""

    def list_rooms(
        self,
        department: str | None = None,
        category: RoomCategory | None = None,
    ) -> list[Room]:
        return [_to_room(row) for row in _rooms(department, category).order_by("name", "id")]

    def list_departments(self) -> list[str]:
        values = (
            orm.Room.objects.exclude(department__isnull=True)
            .exclude(department="")
            .order_by("department")
            .values_list("department", flat=True)
            .distinct()
        )
        return list(values)

    def get_room(self, room_id: RoomId) -> Room | None:
        row = orm.Room.objects.filter(id=room_id.value).first()
        return _to_room(row) if row else None

    def get_rooms(self, room_ids: Iterable[RoomId]) -> list[Room]:
        ids = [room_id.value for room_id in dict.fromkeys(room_ids)]
        rows = {row.id: row for row in orm.Room.objects.filter(id__in=ids)}
        return [_to_room(rows[i]) for i in ids if i in rows]


class DjangoBookingLedger(BookingLedger):
    """Booking ledger backed by the Booking table."""

    def find_occupied_room_ids(
        self,
        window: TimeWindow,
        department: str | None = None,
        category: RoomCategory | None = None,
        exclude_event_id: EventId | None = None,
    ) -> list[RoomId]:
        queryset = _overlapping(window, exclude_event_id)
        if department is not None:
            queryset = queryset.filter(room__department=department)
        if category is not None:
            queryset = queryset.filter(room__category=category.value)
        room_ids = queryset.order_by().values_list("room_id", flat=True).distinct()
        return sorted((RoomId(value) for value in room_ids), key=str)

    def find_available_rooms(
        self,
        window: TimeWindow,
        department: str | None = None,
        category: RoomCategory | None = None,
        exclude_event_id: EventId | None = None,
    ) -> list[Room]:
        occupied = _overlapping(window, exclude_event_id).values("room_id")
        queryset = (
            _rooms(department, category)
            .filter(is_schedulable=True)
            .exclude(id__in=occupied)
            .order_by("name", "id")
        )
        return [_to_room(row) for row in queryset]

    def exclude_rooms(
        self,
        room_ids: Iterable[RoomId],
        department: str | None = None,
        category: RoomCategory | None = None,
    ) -> list[Room]:
        queryset = (
            _rooms(department, category)
            .filter(is_schedulable=True)
            .exclude(id__in=[room_id.value for room_id in room_ids])
            .order_by("name", "id")
        )
        return [_to_room(row) for row in queryset]

    def find_conflicts(
        self,
        window: TimeWindow,
        room_ids: Iterable[RoomId],
        exclude_event_id: EventId | None = None,
    ) -> list[Booking]:
        queryset = _overlapping(window, exclude_event_id).filter(
            room_id__in=[room_id.value for room_id in room_ids]
        )
        return [_to_booking(row) for row in queryset.order_by("room_id", "start_time")]

    def bookings_for_event(self, event_id: EventId) -> list[Booking]:
        rows = orm.Booking.objects.filter(event_id=event_id.value)
        return [_to_booking(row) for row in rows]

    def reserve(
        self, event_id: EventId, room_ids: Sequence[RoomId], window: TimeWindow
    ) -> list[Booking]:
        with transaction.atomic():
            return self._check_and_insert(event_id, room_ids, window, replace=False)

    def rebook(
        self, event_id: EventId, room_ids: Sequence[RoomId], window: TimeWindow
    ) -> list[Booking]:
        with transaction.atomic():
            return self._check_and_insert(event_id, room_ids, window, replace=True)

    def release(self, event_id: EventId) -> int:
        with transaction.atomic():
            _lock_event(event_id)
            deleted, _ = orm.Booking.objects.filter(event_id=event_id.value).delete()
        return deleted

    def _check_and_insert(
        self,
        event_id: EventId,
        room_ids: Sequence[RoomId],
        window: TimeWindow,
        replace: bool,
    ) -> list[Booking]:
        _lock_event(event_id)
        ids = [room_id.value for room_id in dict.fromkeys(room_ids)]
        locked = set(
            orm.Room.objects.select_for_update()
            .filter(id__in=ids)
            .order_by("id")
            .values_list("id", flat=True)
        )
        for value in ids:
            if value not in locked:
                raise RoomNotFoundError(str(value))

        overlapping = _overlapping(window, event_id if replace else None)
        for value in ids:
            conflict = overlapping.filter(room_id=value).order_by("start_time").first()
            if conflict is not None:
                raise ConflictError(str(value), str(conflict.id))

        if replace:
            orm.Booking.objects.filter(event_id=event_id.value).delete()
        rows = orm.Booking.objects.bulk_create(
            orm.Booking(
                room_id=value,
                event_id=event_id.value,
                date=window.day,
                start_time=window.start,
                end_time=window.end,
            )
            for value in ids
        )
        return [_to_booking(row) for row in rows]


class DjangoScheduleStore(ScheduleStore):
    """Assignment persistence; commits go through the booking ledger."""

    def __init__(self, ledger: DjangoBookingLedger | None = None) -> None:
        self._ledger = ledger or DjangoBookingLedger()

    def get_assignments(self, event_id: EventId) -> list[Assignment]:
        rows = orm.Assignment.objects.filter(event_id=event_id.value).order_by("ordinal")
        return [_to_assignment(row) for row in rows]

    def commit_schedule(
        self,
        event_id: EventId,
        room_ids: Sequence[RoomId],
        window: TimeWindow,
        assignments: Sequence[Assignment],
    ) -> list[Booking]:
        with transaction.atomic():
            bookings = self._ledger.rebook(event_id, room_ids, window)
            orm.Assignment.objects.filter(event_id=event_id.value).delete()
            orm.Assignment.objects.bulk_create(
                orm.Assignment(
                    event_id=event_id.value,
                    room_id=assignment.room_id.value,
                    participant_id=assignment.participant_id.value,
                    seat_number=assignment.seat_number,
                    ordinal=ordinal,
                )
                for ordinal, assignment in enumerate(assignments)
            )
        return bookings

    def clear_schedule(self, event_id: EventId) -> None:
        with transaction.atomic():
            self._ledger.release(event_id)
            orm.Assignment.objects.filter(event_id=event_id.value).delete()


class DjangoEventStore(EventStore):
    def get_event(self, event_id: EventId) -> ScheduledEvent | None:
        row = orm.Event.objects.filter(id=event_id.value).first()
        return _to_event(row) if row else None


class DjangoParticipantStore(ParticipantStore):
    def get_participants(
        self, participant_ids: Iterable[ParticipantId]
    ) -> list[Participant]:
        ids = [pid.value for pid in dict.fromkeys(participant_ids)]
        rows = {row.id: row for row in orm.Participant.objects.filter(id__in=ids)}
        return [_to_participant(rows[i]) for i in ids if i in rows]


def _lock_event(event_id: EventId) -> None:
    locked = orm.Event.objects.select_for_update().filter(id=event_id.value)
    if not list(locked.values_list("id", flat=True)):
        raise EventNotFoundError(str(event_id))
