"""Unit tests for the scheduling services over the in-memory store.

These test orchestration and domain error mapping.
Run with: pytest tests/test_services.py -v
"""

import uuid
from datetime import date, time

import pytest

from scheduling.domain import RoomCategory, TimeWindow
from scheduling.domain.errors import (
    CapacityExceededError,
    ConflictError,
    EventNotFoundError,
    InvalidIdError,
    NotificationFailure,
    ParticipantNotFoundError,
    RoomNotFoundError,
)
from scheduling.services import AvailabilityService, RoomCatalogService, SchedulingService
from scheduling.services.notifications import ConvocationNotifier


def at(start: int, end: int, day: date = date(2025, 6, 16)) -> TimeWindow:
    return TimeWindow(day, time(start), time(end))


class RecordingNotifier(ConvocationNotifier):
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls = []
        self.cancellations = []

    def notify(self, event, convocations) -> None:
        self.calls.append((event, list(convocations)))
        if self.fail:
            raise NotificationFailure("smtp down")

    def notify_cancellation(self, event, participants) -> None:
        self.cancellations.append((event, list(participants)))
        if self.fail:
            raise NotificationFailure("smtp down", message="Cancellation notices could not be sent")


class CrashingNotifier(RecordingNotifier):
    def notify(self, event, convocations) -> None:
        raise RuntimeError("template missing")

    def notify_cancellation(self, event, participants) -> None:
        raise RuntimeError("template missing")


@pytest.fixture
def availability(store) -> AvailabilityService:
    return AvailabilityService(store, store)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def scheduling(store, notifier) -> SchedulingService:
    return SchedulingService(
        events=store, rooms=store, participants=store, schedules=store, notifier=notifier
    )


class TestRoomCatalogService:
    def test_filters_by_department_and_category(self, store, make_room):
        info = make_room("S1", 30)
        amphi = make_room("Amphi A", 200, department=None, category=RoomCategory.AMPHITHEATER)
        make_room("M1", 25, department="Mathematiques")
        service = RoomCatalogService(store)

        assert service.list_by_department("Informatique") == [info]
        assert service.list_amphitheaters() == [amphi]
        assert service.list_departments() == ["Informatique", "Mathematiques"]

    def test_get_room_invalid_id_raises_error(self, store):
        with pytest.raises(InvalidIdError):
            RoomCatalogService(store).get_room("42")

    def test_get_room_not_found_raises_error(self, store):
        with pytest.raises(RoomNotFoundError):
            RoomCatalogService(store).get_room(str(uuid.uuid4()))

    def test_get_rooms_names_first_missing_room(self, store, make_room):
        known = make_room("S1", 30)
        missing = str(uuid.uuid4())

        with pytest.raises(RoomNotFoundError) as excinfo:
            RoomCatalogService(store).get_rooms([str(known.id), missing])

        assert excinfo.value.room_id == missing


class TestAvailabilityService:
    def test_touching_intervals_do_not_conflict(self, availability, make_room, make_event):
        room = make_room("S1", 30)
        first, second = make_event(), make_event()
        availability.reserve(str(first.id), [str(room.id)], at(9, 11))

        bookings = availability.reserve(str(second.id), [str(room.id)], at(11, 13))

        assert len(bookings) == 1

    @pytest.mark.parametrize(("start", "end"), [(10, 12), (8, 10), (9, 11), (8, 13), (10, 11)])
    def test_overlapping_reservation_rejected(
        self, availability, make_room, make_event, start, end
    ):
        room = make_room("S1", 30)
        first, second = make_event(), make_event()
        held = availability.reserve(str(first.id), [str(room.id)], at(9, 11))

        with pytest.raises(ConflictError) as excinfo:
            availability.reserve(str(second.id), [str(room.id)], at(start, end))

        assert excinfo.value.room_id == str(room.id)
        assert excinfo.value.conflicting_booking_id == str(held[0].id)

    def test_reservation_is_all_or_nothing(self, availability, store, make_room, make_event):
        free, taken = make_room("S1", 30), make_room("S2", 30)
        first, second = make_event(), make_event()
        availability.reserve(str(first.id), [str(taken.id)], at(9, 11))

        with pytest.raises(ConflictError):
            availability.reserve(str(second.id), [str(free.id), str(taken.id)], at(10, 12))

        assert store.bookings_for_event(second.id) == []

    def test_available_rooms_subtract_occupied(self, availability, make_room, make_event):
        s1, s2 = make_room("S1", 30), make_room("S2", 30)
        make_room("M1", 30, department="Mathematiques")
        make_room("Closed", 30, is_schedulable=False)
        event = make_event()
        availability.reserve(str(event.id), [str(s1.id)], at(9, 11))

        occupied = availability.find_occupied_rooms(at(10, 12), department="Informatique")
        free = availability.find_available_rooms(at(10, 12), department="Informatique")

        assert occupied == [s1.id]
        assert free == [s2]

    def test_event_does_not_block_itself_when_excluded(
        self, availability, make_room, make_event
    ):
        s1 = make_room("S1", 30)
        event = make_event()
        availability.reserve(str(event.id), [str(s1.id)], at(9, 11))

        free = availability.find_available_rooms(
            at(9, 11), department="Informatique", exclude_event_id=str(event.id)
        )

        assert free == [s1]

    def test_available_amphitheaters_ignore_department(
        self, availability, make_room, make_event
    ):
        a1 = make_room("Amphi 1", 200, department=None, category=RoomCategory.AMPHITHEATER)
        a2 = make_room("Amphi 2", 150, department=None, category=RoomCategory.AMPHITHEATER)
        make_room("S1", 30)
        event = make_event()
        availability.reserve(str(event.id), [str(a1.id)], at(9, 11))

        assert availability.find_available_amphitheaters(at(9, 11)) == [a2]

    def test_exclude_rooms_returns_rooms_not_in_list(self, availability, make_room):
        s1, s2, s3 = make_room("S1", 30), make_room("S2", 30), make_room("S3", 30)

        rooms = availability.exclude_rooms([str(s2.id)], department="Informatique")

        assert rooms == [s1, s3]

    def test_check_availability_reports_conflicts(self, availability, make_room, make_event):
        s1, s2 = make_room("S1", 30), make_room("S2", 30)
        event = make_event()
        availability.reserve(str(event.id), [str(s1.id)], at(9, 11))

        report = availability.check_availability(at(10, 12), [str(s1.id), str(s2.id)])
        edit = availability.check_availability(
            at(10, 12), [str(s1.id)], exclude_event_id=str(event.id)
        )

        assert not report.available
        assert [b.room_id for b in report.conflicts] == [s1.id]
        assert edit.available

    def test_release_frees_rooms(self, availability, store, make_room, make_event):
        s1 = make_room("S1", 30)
        first, second = make_event(), make_event()
        availability.reserve(str(first.id), [str(s1.id)], at(9, 11))

        assert availability.release(str(first.id)) == 1
        assert availability.reserve(str(second.id), [str(s1.id)], at(9, 11))

    def test_reserve_unknown_room(self, availability, make_event):
        with pytest.raises(RoomNotFoundError):
            availability.reserve(str(make_event().id), [str(uuid.uuid4())], at(9, 11))

    def test_reserve_invalid_event_id(self, availability, make_room):
        with pytest.raises(InvalidIdError):
            availability.reserve("exam-1", [str(make_room("S1", 30).id)], at(9, 11))


class TestRebook:
    def test_rebook_replaces_own_bookings(self, store, make_room, make_event):
        s1, s2 = make_room("S1", 30), make_room("S2", 30)
        event = make_event()
        store.reserve(event.id, [s1.id], at(9, 11))

        store.rebook(event.id, [s1.id, s2.id], at(10, 12))

        held = store.bookings_for_event(event.id)
        assert sorted(b.room_id for b in held) == sorted([s1.id, s2.id])
        assert all(b.window == at(10, 12) for b in held)

    def test_rebook_conflict_keeps_previous_bookings(self, store, make_room, make_event):
        s1, s2 = make_room("S1", 30), make_room("S2", 30)
        mine, other = make_event(), make_event()
        store.reserve(mine.id, [s1.id], at(9, 11))
        store.reserve(other.id, [s2.id], at(9, 11))

        with pytest.raises(ConflictError):
            store.rebook(mine.id, [s2.id], at(9, 11))

        assert [b.room_id for b in store.bookings_for_event(mine.id)] == [s1.id]


class TestSchedulingService:
    def test_schedule_commits_bookings_and_seats(
        self, scheduling, store, notifier, make_room, make_event, make_participant
    ):
        room_a, room_b = make_room("A", 2), make_room("B", 3)
        p1, p2 = make_participant("100"), make_participant("050")
        p3, p4 = make_participant("200"), make_participant("010")
        event = make_event()

        result = scheduling.schedule(
            str(event.id),
            [str(room_a.id), str(room_b.id)],
            [str(p.id) for p in (p1, p2, p3, p4)],
        )

        assert [(s.room_id, s.assigned, s.capacity) for s in result.repartition.summary] == [
            (room_b.id, 3, 3),
            (room_a.id, 1, 2),
        ]
        assert [a.participant_id for a in result.repartition.assignments] == [
            p4.id,
            p2.id,
            p1.id,
            p3.id,
        ]
        assert len(store.bookings_for_event(event.id)) == 2
        assert store.get_assignments(event.id) == list(result.repartition.assignments)
        assert result.warnings == ()
        _, convocations = notifier.calls[0]
        assert [c.seat_number for c in convocations] == [1, 2, 3, 1]

    def test_capacity_exceeded_writes_nothing(
        self, scheduling, store, notifier, make_room, make_event, make_participant
    ):
        room_a, room_b = make_room("A", 2), make_room("B", 3)
        people = [make_participant(f"{i:03d}") for i in range(6)]
        event = make_event()

        with pytest.raises(CapacityExceededError) as excinfo:
            scheduling.schedule(
                str(event.id), [str(room_a.id), str(room_b.id)], [str(p.id) for p in people]
            )

        assert excinfo.value.shortfall == 1
        assert store.bookings_for_event(event.id) == []
        assert store.get_assignments(event.id) == []
        assert notifier.calls == []

    def test_recompute_with_same_inputs_is_identical(
        self, scheduling, make_room, make_event, make_participant
    ):
        rooms = [str(make_room("A", 2).id), str(make_room("B", 3).id)]
        people = [str(make_participant(f"{i:03d}").id) for i in range(4)]
        event = make_event()

        first = scheduling.schedule(str(event.id), rooms, people)
        second = scheduling.schedule(str(event.id), list(reversed(rooms)), list(reversed(people)))

        assert first.repartition == second.repartition

    def test_edit_replaces_previous_assignments(
        self, scheduling, store, make_room, make_event, make_participant
    ):
        room_a, room_b = make_room("A", 2), make_room("B", 3)
        people = [make_participant(f"{i:03d}") for i in range(4)]
        event = make_event()
        scheduling.schedule(
            str(event.id), [str(room_a.id), str(room_b.id)], [str(p.id) for p in people]
        )

        scheduling.schedule(str(event.id), [str(room_a.id)], [str(p.id) for p in people[2:]])

        stored = store.get_assignments(event.id)
        assert {a.participant_id for a in stored} == {people[2].id, people[3].id}
        assert [a.seat_number for a in stored] == [1, 2]
        assert [b.room_id for b in store.bookings_for_event(event.id)] == [room_a.id]

    def test_conflict_leaves_previous_schedule_untouched(
        self, scheduling, store, make_room, make_event, make_participant
    ):
        room_a, room_b = make_room("A", 2), make_room("B", 3)
        people = [str(make_participant(f"{i:03d}").id) for i in range(2)]
        mine, other = make_event(), make_event()
        scheduling.schedule(str(mine.id), [str(room_a.id)], people)
        scheduling.schedule(str(other.id), [str(room_b.id)], people)
        before = store.get_assignments(mine.id)

        with pytest.raises(ConflictError) as excinfo:
            scheduling.schedule(str(mine.id), [str(room_b.id)], people)

        assert excinfo.value.room_id == str(room_b.id)
        assert store.get_assignments(mine.id) == before
        assert [b.room_id for b in store.bookings_for_event(mine.id)] == [room_a.id]

    def test_notification_failure_is_a_warning(
        self, store, make_room, make_event, make_participant
    ):
        service = SchedulingService(
            events=store,
            rooms=store,
            participants=store,
            schedules=store,
            notifier=RecordingNotifier(fail=True),
        )
        room = make_room("A", 2)
        event = make_event()

        result = service.schedule(str(event.id), [str(room.id)], [str(make_participant("1").id)])

        assert result.warnings == ("Convocations could not be sent",)
        assert len(store.get_assignments(event.id)) == 1

    def test_unexpected_notifier_error_is_a_warning(
        self, store, make_room, make_event, make_participant
    ):
        service = SchedulingService(
            events=store,
            rooms=store,
            participants=store,
            schedules=store,
            notifier=CrashingNotifier(),
        )
        room = make_room("A", 2)
        event = make_event()
        people = [str(make_participant("1").id)]

        result = service.schedule(str(event.id), [str(room.id)], people)

        assert result.warnings == ("Convocations could not be sent",)
        assert len(store.get_assignments(event.id)) == 1
        assert service.cancel(str(event.id)) == ("Cancellation notices could not be sent",)
        assert store.bookings_for_event(event.id) == []

    def test_unknown_event(self, scheduling, make_room):
        with pytest.raises(EventNotFoundError):
            scheduling.schedule(str(uuid.uuid4()), [str(make_room("A", 2).id)], [])

    def test_unknown_participant(self, scheduling, make_room, make_event):
        with pytest.raises(ParticipantNotFoundError):
            scheduling.schedule(
                str(make_event().id), [str(make_room("A", 2).id)], [str(uuid.uuid4())]
            )

    def test_get_repartition_rebuilds_summary(
        self, scheduling, make_room, make_event, make_participant
    ):
        room_a, room_b = make_room("A", 2), make_room("B", 3)
        people = [str(make_participant(f"{i:03d}").id) for i in range(4)]
        event = make_event()
        committed = scheduling.schedule(str(event.id), [str(room_a.id), str(room_b.id)], people)

        assert scheduling.get_repartition(str(event.id)) == committed.repartition

    def test_cancel_releases_rooms_and_seats(
        self, scheduling, store, make_room, make_event, make_participant
    ):
        room = make_room("A", 2)
        event = make_event()
        scheduling.schedule(str(event.id), [str(room.id)], [str(make_participant("1").id)])

        scheduling.cancel(str(event.id))

        assert store.bookings_for_event(event.id) == []
        assert store.get_assignments(event.id) == []

    def test_cancel_notifies_seated_participants(
        self, scheduling, notifier, make_room, make_event, make_participant
    ):
        room = make_room("A", 2)
        event = make_event()
        seated = make_participant("1")
        scheduling.schedule(str(event.id), [str(room.id)], [str(seated.id)])

        warnings = scheduling.cancel(str(event.id))

        assert warnings == ()
        assert notifier.cancellations == [(event, [seated])]

    def test_cancel_notification_failure_is_a_warning(
        self, store, make_room, make_event, make_participant
    ):
        service = SchedulingService(
            events=store,
            rooms=store,
            participants=store,
            schedules=store,
            notifier=RecordingNotifier(fail=True),
        )
        room = make_room("A", 2)
        event = make_event()
        service.schedule(str(event.id), [str(room.id)], [str(make_participant("1").id)])

        assert service.cancel(str(event.id)) == ("Cancellation notices could not be sent",)
        assert store.get_assignments(event.id) == []
