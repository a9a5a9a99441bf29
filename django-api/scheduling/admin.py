from django.contrib import admin

from scheduling.models import Assignment, Booking, Event, Participant, Room


class ReadOnlyBookingMixin:
    """Bookings are written through the ledger only."""

    readonly_fields = ["room", "event", "date", "start_time", "end_time"]

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class BookingInline(ReadOnlyBookingMixin, admin.TabularInline):
    model = Booking
    extra = 0


class AssignmentInline(admin.TabularInline):
    model = Assignment
    extra = 0
    readonly_fields = ["room", "participant", "seat_number", "ordinal"]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ["name", "department", "category", "capacity", "is_schedulable"]
    list_filter = ["category", "department", "is_schedulable"]
    search_fields = ["name", "department"]


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "kind", "date", "start_time", "end_time", "department"]
    list_filter = ["kind", "date"]
    search_fields = ["title"]
    inlines = [BookingInline, AssignmentInline]


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ["display_name", "external_ref", "email"]
    search_fields = ["display_name", "external_ref", "email"]


@admin.register(Booking)
class BookingAdmin(ReadOnlyBookingMixin, admin.ModelAdmin):
    list_display = ["room", "event", "date", "start_time", "end_time"]
    list_filter = ["date", "room__department"]
