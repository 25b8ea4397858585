"""Booking models for HallBook."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.halls.models import default_currency


class Booking(models.Model):
    """Reservation of a hall for one whole day."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    class EventType(models.TextChoices):
        WEDDING = "wedding", _("Wedding")
        RECEPTION = "reception", _("Reception")
        BIRTHDAY = "birthday", _("Birthday")
        CORPORATE = "corporate", _("Corporate")
        ENGAGEMENT = "engagement", _("Engagement")
        ANNIVERSARY = "anniversary", _("Anniversary")
        BABY_SHOWER = "babyShower", _("Baby shower")
        OTHER = "other", _("Other")

    class DietaryPreference(models.TextChoices):
        VEG = "veg", _("Vegetarian")
        NON_VEG = "non-veg", _("Non-vegetarian")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    hall = models.ForeignKey(
        "halls.Hall",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    hall_name = models.CharField(max_length=255, blank=True)
    date = models.DateField()
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
    )

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="bookings",
        help_text=_("Account to notify. Walk-in customers have none."),
    )
    customer_name = models.CharField(max_length=255)
    customer_phone = models.CharField(max_length=32)
    customer_email = models.EmailField(blank=True)

    event_type = models.CharField(max_length=20, choices=EventType.choices, default=EventType.OTHER)
    guest_count = models.PositiveIntegerField(default=1)
    dietary_preference = models.CharField(
        max_length=10,
        choices=DietaryPreference.choices,
        default=DietaryPreference.VEG,
    )
    special_requests = models.TextField(blank=True)
    notes = models.TextField(blank=True)

    total_amount = models.DecimalField(max_digits=12, decimal_places=2)
    advance_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    advance_paid = models.BooleanField(default=False)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    currency = models.CharField(max_length=3, default=default_currency)

    cancellation_reason = models.CharField(max_length=255, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField()
    updated_at = models.DateTimeField()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-date", "-created_at"]
        constraints = [
            # At most one pending/confirmed booking per hall and date.
            models.UniqueConstraint(
                fields=["hall", "date"],
                condition=models.Q(status__in=["pending", "confirmed"]),
                name="booking_one_active_per_slot",
            ),
            models.CheckConstraint(
                condition=models.Q(advance_amount__lte=models.F("total_amount")),
                name="booking_advance_within_total",
            ),
        ]
        indexes = [
            models.Index(fields=["hall", "date"], name="booking_hall_date_idx"),
            models.Index(fields=["status", "created_at"], name="booking_status_created_idx"),
            models.Index(fields=["status", "date"], name="booking_status_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.hall_name or self.hall_id} {self.date.isoformat()} ({self.status})"
