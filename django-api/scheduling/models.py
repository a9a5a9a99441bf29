"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models
from django.db.models import F, Q


class Room(models.Model):
    """Persistence model for classrooms and amphitheaters."""

    class Category(models.TextChoices):
        AMPHITHEATER = "amphitheater", "Amphitheater"
        CLASSROOM = "classroom", "Classroom"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    department = models.CharField(max_length=255, blank=True, null=True)
    capacity = models.PositiveIntegerField()
    category = models.CharField(
        max_length=20, choices=Category.choices, default=Category.CLASSROOM
    )
    equipment = models.JSONField(default=list, blank=True)
    is_schedulable = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(
                fields=["department", "category"], name="room_department_category_idx"
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(capacity__gt=0), name="room_capacity_positive"
            ),
        ]

    def __str__(self) -> str:
        return self.name


class Event(models.Model):
    """Persistence model for exams and concours."""

    class Kind(models.TextChoices):
        EXAM = "exam", "Exam"
        CONCOURS = "concours", "Concours"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kind = models.CharField(max_length=20, choices=Kind.choices, default=Kind.EXAM)
    title = models.CharField(max_length=255)
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    department = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["date", "start_time"]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_time__lt=F("end_time")), name="event_window_valid"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.date}"


class Participant(models.Model):
    """Persistence model for students and concours candidates."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    display_name = models.CharField(max_length=255)
    external_ref = models.CharField(max_length=64, db_index=True)
    email = models.EmailField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["external_ref"]

    def __str__(self) -> str:
        return f"{self.display_name} ({self.external_ref})"


class Booking(models.Model):
    """A room held by an event on a date between two times."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="bookings")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="bookings")
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["date", "start_time"]
        indexes = [
            models.Index(fields=["room", "date"], name="booking_room_date_idx"),
            models.Index(fields=["event"], name="booking_event_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_time__lt=F("end_time")), name="booking_window_valid"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.room.name} {self.date} {self.start_time}-{self.end_time}"


class Assignment(models.Model):
    """A participant's seat in a room for an event."""

    id = models.BigAutoField(primary_key=True)
    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="assignments"
    )
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="assignments")
    participant = models.ForeignKey(
        Participant, on_delete=models.CASCADE, related_name="assignments"
    )
    seat_number = models.PositiveIntegerField()
    ordinal = models.PositiveIntegerField()

    class Meta:
        ordering = ["event", "ordinal"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "room", "seat_number"], name="unique_seat_per_room"
            ),
            models.UniqueConstraint(
                fields=["event", "participant"], name="unique_participant_per_event"
            ),
        ]

    def __str__(self) -> str:
        return f"{self.participant} -> {self.room.name} #{self.seat_number}"
