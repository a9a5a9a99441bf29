"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.conf import settings
from django.core.cache import cache
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from scheduling import wiring
from scheduling.cache_keys import (
    AMPHITHEATERS_KEY,
    DEPARTMENTS_KEY,
    ROOM_LIST_KEY,
    room_detail_key,
)
from scheduling.domain import RoomCategory
from scheduling.domain.errors import (
    CapacityExceededError,
    ConflictError,
    DomainError,
    ErrorCode,
)
from scheduling.handlers.serializers import (
    AvailabilityQuerySerializer,
    BookingSerializer,
    CheckAvailabilitySerializer,
    ExcludeRoomsSerializer,
    RepartitionSerializer,
    RoomFilterSerializer,
    RoomSerializer,
    ScheduleRequestSerializer,
)
from scheduling.services.parsing import make_window, parse_room_id

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_TIME_WINDOW: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ROOM_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.EVENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PARTICIPANT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ROOM_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_response(exc: DomainError) -> Response:
    body = {"code": exc.code.value, "message": exc.message}
    if isinstance(exc, ConflictError):
        body["roomId"] = exc.room_id
        body["conflictingBookingId"] = exc.conflicting_booking_id
    elif isinstance(exc, CapacityExceededError):
        body["shortfall"] = exc.shortfall
    return Response(body, status=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST))


def invalid_request(errors) -> Response:
    return Response(
        {"code": "INVALID_REQUEST", "message": "Invalid request parameters", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _cached(key: str, build):
    data = cache.get(key)
    if data is None:
        data = build()
        cache.set(key, data, timeout=settings.CACHE_TTL)
    return data


def _category(value: str | None) -> RoomCategory | None:
    return RoomCategory(value) if value else None


class RoomListView(APIView):
    """Handler for GET /api/rooms"""

    def get(self, request: Request) -> Response:
        params = RoomFilterSerializer(data=request.query_params)
        if not params.is_valid():
            return invalid_request(params.errors)
        department = params.validated_data.get("department")
        category = _category(params.validated_data.get("category"))
        service = wiring.room_catalog_service()
        if department is None and category is None:
            data = _cached(
                ROOM_LIST_KEY,
                lambda: RoomSerializer(service.list_rooms(), many=True).data,
            )
        else:
            rooms = service.list_rooms(department=department, category=category)
            data = RoomSerializer(rooms, many=True).data
        return Response(data)


class AmphitheaterListView(APIView):
    """Handler for GET /api/rooms/amphitheaters"""

    def get(self, request: Request) -> Response:
        service = wiring.room_catalog_service()
        data = _cached(
            AMPHITHEATERS_KEY,
            lambda: RoomSerializer(service.list_amphitheaters(), many=True).data,
        )
        return Response(data)


class DepartmentListView(APIView):
    """Handler for GET /api/rooms/departments"""

    def get(self, request: Request) -> Response:
        service = wiring.room_catalog_service()
        return Response(_cached(DEPARTMENTS_KEY, service.list_departments))


class RoomDetailView(APIView):
    """Handler for GET /api/rooms/{room_id}"""

    def get(self, request: Request, room_id: str) -> Response:
        try:
            parsed = parse_room_id(room_id)
            key = room_detail_key(parsed)
            data = cache.get(key)
            if data is None:
                room = wiring.room_catalog_service().get_room(str(parsed))
                data = RoomSerializer(room).data
                cache.set(key, data, timeout=settings.CACHE_TTL)
        except DomainError as exc:
            return error_response(exc)
        return Response(data)


class OccupiedRoomsView(APIView):
    """Handler for GET /api/rooms/occupied"""

    def get(self, request: Request) -> Response:
        params = AvailabilityQuerySerializer(data=request.query_params)
        if not params.is_valid():
            return invalid_request(params.errors)
        query = params.validated_data
        try:
            window = make_window(query["date"], query["start"], query["end"])
            room_ids = wiring.availability_service().find_occupied_rooms(
                window,
                department=query.get("department"),
                category=_category(query.get("category")),
                exclude_event_id=query.get("exclude_event"),
            )
        except DomainError as exc:
            return error_response(exc)
        return Response([str(room_id) for room_id in room_ids])


class AvailableRoomsView(APIView):
    """Handlers for GET and POST /api/rooms/available

    GET resolves free rooms for a time window in one query. POST is the
    second step of the two-call form: rooms of a department not in a list.
    """

    def get(self, request: Request) -> Response:
        params = AvailabilityQuerySerializer(data=request.query_params)
        if not params.is_valid():
            return invalid_request(params.errors)
        query = params.validated_data
        try:
            window = make_window(query["date"], query["start"], query["end"])
            rooms = wiring.availability_service().find_available_rooms(
                window,
                department=query.get("department"),
                category=_category(query.get("category")),
                exclude_event_id=query.get("exclude_event"),
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(RoomSerializer(rooms, many=True).data)

    def post(self, request: Request) -> Response:
        payload = ExcludeRoomsSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_request(payload.errors)
        try:
            rooms = wiring.availability_service().exclude_rooms(
                payload.validated_data["excludeIds"],
                department=payload.validated_data.get("department"),
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(RoomSerializer(rooms, many=True).data)


class CheckAvailabilityView(APIView):
    """Handler for POST /api/rooms/check-availability"""

    def post(self, request: Request) -> Response:
        payload = CheckAvailabilitySerializer(data=request.data)
        if not payload.is_valid():
            return invalid_request(payload.errors)
        data = payload.validated_data
        try:
            window = make_window(data["date"], data["start"], data["end"])
            report = wiring.availability_service().check_availability(
                window,
                data["roomIds"],
                exclude_event_id=data.get("excludeEventId") or None,
            )
        except DomainError as exc:
            return error_response(exc)
        return Response(
            {
                "available": report.available,
                "conflicts": BookingSerializer(report.conflicts, many=True).data,
            }
        )


class EventAssignmentsView(APIView):
    """Handlers for /api/events/{event_id}/assignments"""

    def get(self, request: Request, event_id: str) -> Response:
        try:
            repartition = wiring.scheduling_service().get_repartition(event_id)
        except DomainError as exc:
            return error_response(exc)
        return Response(RepartitionSerializer(repartition).data)

    def post(self, request: Request, event_id: str) -> Response:
        payload = ScheduleRequestSerializer(data=request.data)
        if not payload.is_valid():
            return invalid_request(payload.errors)
        try:
            result = wiring.scheduling_service().schedule(
                event_id,
                payload.validated_data["roomIds"],
                payload.validated_data["participantIds"],
            )
        except DomainError as exc:
            return error_response(exc)
        body = dict(RepartitionSerializer(result.repartition).data)
        body["warnings"] = list(result.warnings)
        return Response(body, status=status.HTTP_201_CREATED)

    def delete(self, request: Request, event_id: str) -> Response:
        try:
            warnings = wiring.scheduling_service().cancel(event_id)
        except DomainError as exc:
            return error_response(exc)
        if warnings:
            return Response({"warnings": list(warnings)})
        return Response(status=status.HTTP_204_NO_CONTENT)
