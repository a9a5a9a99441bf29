from scheduling.services.availability_service import AvailabilityService
from scheduling.services.room_service import RoomCatalogService
from scheduling.services.scheduling_service import ScheduleResult, SchedulingService
from scheduling.services.seating import assign_seats

__all__ = [
    "AvailabilityService",
    "RoomCatalogService",
    "ScheduleResult",
    "SchedulingService",
    "assign_seats",
]
