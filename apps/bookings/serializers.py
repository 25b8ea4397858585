"""Serializers for the booking domain.

Write serializers only shape the request; the business rules (dates,
amounts, conflicts, transitions) are enforced by the command handlers so
every entry point gets the same checks and messages.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from rest_framework import serializers  # type: ignore

from .application.command_handlers import (
    CreateBookingCommand,
    UpdateBookingFieldsCommand,
    UpdateBookingStatusCommand,
)
from .domain.entities import DEFAULT_CANCELLATION_MESSAGE
from .models import Booking


class BookingSerializer(serializers.ModelSerializer):
    """Read representation of a booking."""

    customer_cancellation_reason = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "hall",
            "hall_name",
            "date",
            "status",
            "customer",
            "customer_name",
            "customer_phone",
            "customer_email",
            "event_type",
            "guest_count",
            "dietary_preference",
            "special_requests",
            "notes",
            "total_amount",
            "advance_amount",
            "advance_paid",
            "discount",
            "currency",
            "cancellation_reason",
            "customer_cancellation_reason",
            "cancelled_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_customer_cancellation_reason(self, obj: Booking) -> str:
        if obj.status != Booking.Status.CANCELLED:
            return ""
        return obj.cancellation_reason or DEFAULT_CANCELLATION_MESSAGE


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from the owner dashboard or the customer app."""

    hall = serializers.UUIDField()
    date = serializers.CharField(help_text="Event day, YYYY-MM-DD.")
    customer_name = serializers.CharField(allow_blank=True, max_length=255)
    customer_phone = serializers.CharField(allow_blank=True, max_length=32)
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")
    customer_user = serializers.PrimaryKeyRelatedField(
        queryset=get_user_model().objects.all(),
        required=False,
        allow_null=True,
        default=None,
    )
    event_type = serializers.CharField(required=False, default=Booking.EventType.OTHER)
    guest_count = serializers.IntegerField(required=False, default=1)
    dietary_preference = serializers.CharField(required=False, default=Booking.DietaryPreference.VEG)
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    advance_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    advance_paid = serializers.BooleanField(required=False, default=False)
    mode = serializers.ChoiceField(choices=["owner", "customer"], required=False, allow_null=True, default=None)

    def to_command(self) -> CreateBookingCommand:
        data = self.validated_data
        mode = data["mode"] or getattr(settings, "BOOKING_ENTRY_MODE", "owner")
        customer_user = data["customer_user"]
        customer_user_id = customer_user.pk if customer_user is not None else None
        if customer_user_id is None and mode == "customer":
            customer_user_id = self.context["request"].user.id
        return CreateBookingCommand(
            hall_id=data["hall"],
            date=data["date"],
            customer_name=data["customer_name"],
            customer_phone=data["customer_phone"],
            customer_email=data["customer_email"],
            customer_user_id=customer_user_id,
            event_type=data["event_type"],
            guest_count=data["guest_count"],
            dietary_preference=data["dietary_preference"],
            special_requests=data["special_requests"],
            notes=data["notes"],
            total_amount=data["total_amount"],
            advance_amount=data["advance_amount"],
            advance_paid=data["advance_paid"],
            mode=mode,
        )


class BookingUpdateSerializer(serializers.Serializer):
    """Partial update of contact and money fields."""

    customer_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    customer_phone = serializers.CharField(required=False, allow_blank=True, max_length=32)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    advance_amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    advance_paid = serializers.BooleanField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)

    def to_command(self, booking_id) -> UpdateBookingFieldsCommand:
        return UpdateBookingFieldsCommand(booking_id=booking_id, **self.validated_data)


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Booking.Status.choices)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255)

    def to_command(self, booking_id) -> UpdateBookingStatusCommand:
        data = self.validated_data
        return UpdateBookingStatusCommand(
            booking_id=booking_id,
            status=data["status"],
            reason=data.get("reason") or None,
        )


class HallQuerySerializer(serializers.Serializer):
    hall = serializers.UUIDField(required=False)


class SummaryQuerySerializer(HallQuerySerializer):
    year = serializers.IntegerField(required=False, min_value=2000, max_value=2100)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)


class BookingSummarySerializer(serializers.Serializer):
    totalBookings = serializers.IntegerField()
    confirmedBookings = serializers.IntegerField()
    cancelledBookings = serializers.IntegerField()
    totalRevenue = serializers.DecimalField(max_digits=14, decimal_places=2)
    advanceAmount = serializers.DecimalField(max_digits=14, decimal_places=2)
    advanceCollected = serializers.DecimalField(max_digits=14, decimal_places=2)
