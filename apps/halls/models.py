"""Hall models for HallBook.

A hall is a single bookable venue. Its calendar is kept as one
``HallDate`` row per (hall, date) carrying exactly one status, so a date
can never sit in two of the available/booked/blocked sets at once.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def default_currency() -> str:
    return getattr(settings, "BOOKING_CURRENCY", "INR")


class Hall(models.Model):
    """Venue that customers reserve for whole days."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="halls",
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    capacity = models.PositiveIntegerField(
        default=0,
        help_text=_("Maximum number of guests. Zero means no limit is enforced."),
    )
    base_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    currency = models.CharField(max_length=3, default=default_currency)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Hall")
        verbose_name_plural = _("Halls")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def _dates_with(self, status: str) -> list[str]:
        # Iterating .all() reuses prefetch_related("dates") when present.
        return sorted(d.date.isoformat() for d in self.dates.all() if d.status == status)

    @property
    def available_dates(self) -> list[str]:
        return self._dates_with(HallDate.Status.AVAILABLE)

    @property
    def booked_dates(self) -> list[str]:
        return self._dates_with(HallDate.Status.BOOKED)

    @property
    def blocked_dates(self) -> list[str]:
        return self._dates_with(HallDate.Status.BLOCKED)


class HallDate(models.Model):
    """Status of one calendar day of a hall."""

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        BOOKED = "booked", _("Booked")
        BLOCKED = "blocked", _("Blocked")

    hall = models.ForeignKey(Hall, on_delete=models.CASCADE, related_name="dates")
    date = models.DateField()
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.AVAILABLE)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Hall date")
        verbose_name_plural = _("Hall dates")
        ordering = ["hall", "date"]
        constraints = [
            models.UniqueConstraint(fields=["hall", "date"], name="halldate_unique_hall_date"),
        ]
        indexes = [
            models.Index(fields=["hall", "status"], name="halldate_hall_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.hall_id} {self.date.isoformat()} {self.status}"
