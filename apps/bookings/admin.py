"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin, messages

from shared.application.message_bus import message_bus
from shared.domain.exceptions import DomainError

from .application.command_handlers import UpdateBookingStatusCommand
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "date",
        "hall",
        "customer_name",
        "customer_phone",
        "status",
        "total_amount",
        "advance_amount",
        "advance_paid",
        "created_at",
    )
    list_filter = ("status", "event_type", "advance_paid", "hall")
    search_fields = ("customer_name", "customer_phone", "customer_email", "hall__name")
    date_hierarchy = "date"
    actions = ("cancel_selected",)
    readonly_fields = (
        "hall",
        "date",
        "status",
        "total_amount",
        "advance_amount",
        "discount",
        "cancellation_reason",
        "cancelled_at",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):  # type: ignore
        # New bookings must pass the slot conflict check.
        return False

    @admin.action(description="Cancel selected bookings")
    def cancel_selected(self, request, queryset):  # type: ignore
        cancelled = 0
        for booking in queryset:
            try:
                message_bus.handle_command(
                    UpdateBookingStatusCommand(booking_id=booking.pk, status=Booking.Status.CANCELLED)
                )
            except DomainError as exc:
                self.message_user(request, f"{booking}: {exc.message}", level=messages.WARNING)
                continue
            cancelled += 1
        self.message_user(request, f"Cancelled {cancelled} booking(s).")
