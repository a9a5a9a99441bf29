"""Serializers for request parsing and for rendering domain models."""

from rest_framework import serializers

from scheduling.domain import RoomCategory


class RoomSerializer(serializers.Serializer):
    """Serializer for Room domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    department = serializers.CharField(allow_null=True)
    capacity = serializers.IntegerField(source="capacity.value")
    category = serializers.CharField(source="category.value")
    equipment = serializers.ListField(child=serializers.CharField())
    isSchedulable = serializers.BooleanField(source="is_schedulable")


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.CharField()
    roomId = serializers.CharField(source="room_id")
    eventId = serializers.CharField(source="event_id")
    date = serializers.DateField(source="window.day")
    start = serializers.TimeField(source="window.start", format="%H:%M")
    end = serializers.TimeField(source="window.end", format="%H:%M")


class AssignmentSerializer(serializers.Serializer):
    """Serializer for Assignment domain model."""

    eventId = serializers.CharField(source="event_id")
    roomId = serializers.CharField(source="room_id")
    seatNumber = serializers.IntegerField(source="seat_number")
    participantId = serializers.CharField(source="participant_id")


class RoomSummarySerializer(serializers.Serializer):
    """Serializer for one répartition line."""

    roomId = serializers.CharField(source="room_id")
    roomName = serializers.CharField(source="room_name")
    department = serializers.CharField(allow_null=True)
    assigned = serializers.IntegerField()
    capacity = serializers.IntegerField()


class RepartitionSerializer(serializers.Serializer):
    assignments = AssignmentSerializer(many=True)
    summary = RoomSummarySerializer(many=True)


# Request parsing


class RoomFilterSerializer(serializers.Serializer):
    department = serializers.CharField(required=False, allow_blank=False)
    category = serializers.ChoiceField(
        choices=[c.value for c in RoomCategory], required=False
    )


class TimeWindowSerializer(serializers.Serializer):
    date = serializers.DateField()
    start = serializers.TimeField()
    end = serializers.TimeField()


class AvailabilityQuerySerializer(TimeWindowSerializer):
    department = serializers.CharField(required=False, allow_blank=False)
    category = serializers.ChoiceField(
        choices=[c.value for c in RoomCategory], required=False
    )
    exclude_event = serializers.CharField(required=False, allow_blank=False)


class ExcludeRoomsSerializer(serializers.Serializer):
    department = serializers.CharField(required=False, allow_null=True, allow_blank=False)
    excludeIds = serializers.ListField(child=serializers.CharField(), default=list)


class CheckAvailabilitySerializer(TimeWindowSerializer):
    roomIds = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    excludeEventId = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ScheduleRequestSerializer(serializers.Serializer):
    roomIds = serializers.ListField(child=serializers.CharField(), allow_empty=False)
    participantIds = serializers.ListField(child=serializers.CharField(), allow_empty=True)
