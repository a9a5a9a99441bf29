from scheduling.handlers.views import (
    AmphitheaterListView,
    AvailableRoomsView,
    CheckAvailabilityView,
    DepartmentListView,
    EventAssignmentsView,
    OccupiedRoomsView,
    RoomDetailView,
    RoomListView,
)

__all__ = [
    "AmphitheaterListView",
    "AvailableRoomsView",
    "CheckAvailabilityView",
    "DepartmentListView",
    "EventAssignmentsView",
    "OccupiedRoomsView",
    "RoomDetailView",
    "RoomListView",
]
