"""Pytest configuration and shared fixtures."""

import uuid
from datetime import date, time

import pytest
from rest_framework.test import APIClient

from scheduling.domain import (
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
from scheduling.stores.memory_store import InMemorySchedulingStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def window() -> TimeWindow:
    return TimeWindow(date(2025, 6, 16), time(9, 0), time(11, 0))


@pytest.fixture
def store() -> InMemorySchedulingStore:
    return InMemorySchedulingStore()


@pytest.fixture
def make_room(store):
    def _make(
        name: str,
        capacity: int,
        department: str | None = "Informatique",
        category: RoomCategory = RoomCategory.CLASSROOM,
        is_schedulable: bool = True,
    ) -> Room:
        return store.add_room(
            Room(
                id=RoomId(uuid.uuid4()),
                name=name,
                department=department,
                capacity=Capacity(capacity),
                category=category,
                is_schedulable=is_schedulable,
            )
        )

    return _make


@pytest.fixture
def make_participant(store):
    def _make(external_ref: str, name: str | None = None, email: str | None = None) -> Participant:
        return store.add_participant(
            Participant(
                id=ParticipantId(uuid.uuid4()),
                display_name=name or f"Candidate {external_ref}",
                external_ref=external_ref,
                email=email,
            )
        )

    return _make


@pytest.fixture
def make_event(store, window):
    def _make(
        title: str = "Algorithmique S3",
        event_window: TimeWindow | None = None,
        kind: EventKind = EventKind.EXAM,
    ) -> ScheduledEvent:
        return store.add_event(
            ScheduledEvent(
                id=EventId(uuid.uuid4()),
                kind=kind,
                title=title,
                window=event_window or window,
                department="Informatique",
            )
        )

    return _make
