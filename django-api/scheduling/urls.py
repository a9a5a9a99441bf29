from django.urls import path

from scheduling.handlers import (
    AmphitheaterListView,
    AvailableRoomsView,
    CheckAvailabilityView,
    DepartmentListView,
    EventAssignmentsView,
    OccupiedRoomsView,
    RoomDetailView,
    RoomListView,
)

urlpatterns = [
    path("rooms", RoomListView.as_view(), name="room-list"),
    path("rooms/amphitheaters", AmphitheaterListView.as_view(), name="amphitheater-list"),
    path("rooms/departments", DepartmentListView.as_view(), name="department-list"),
    path("rooms/occupied", OccupiedRoomsView.as_view(), name="rooms-occupied"),
    path("rooms/available", AvailableRoomsView.as_view(), name="rooms-available"),
    path(
        "rooms/check-availability",
        CheckAvailabilityView.as_view(),
        name="rooms-check-availability",
    ),
    path("rooms/<str:room_id>", RoomDetailView.as_view(), name="room-detail"),
    path(
        "events/<str:event_id>/assignments",
        EventAssignmentsView.as_view(),
        name="event-assignments",
    ),
]
