"""Builds services over the Django stores for the HTTP handlers."""

from functools import lru_cache

from scheduling.locks import KeyedLocks
from scheduling.services import AvailabilityService, RoomCatalogService, SchedulingService
from scheduling.services.notifications import notifier_from_settings
from scheduling.stores.django_store import (
    DjangoBookingLedger,
    DjangoEventStore,
    DjangoParticipantStore,
    DjangoRoomCatalogStore,
    DjangoScheduleStore,
)


@lru_cache(maxsize=1)
def _event_locks() -> KeyedLocks:
    # Shared by every request in this process.
    return KeyedLocks()


def room_catalog_service() -> RoomCatalogService:
    return RoomCatalogService(DjangoRoomCatalogStore())


def availability_service() -> AvailabilityService:
    return AvailabilityService(DjangoRoomCatalogStore(), DjangoBookingLedger())


def scheduling_service() -> SchedulingService:
    ledger = DjangoBookingLedger()
    return SchedulingService(
        events=DjangoEventStore(),
        rooms=DjangoRoomCatalogStore(),
        participants=DjangoParticipantStore(),
        schedules=DjangoScheduleStore(ledger),
        notifier=notifier_from_settings(),
        locks=_event_locks(),
    )
