"""
Booking read-side queries

Listing helpers and the revenue summary used by the dashboard. These read
straight from the ORM; nothing here writes.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db.models import Count, DecimalField, Q, QuerySet, Sum, Value  # type: ignore
from django.db.models.functions import Coalesce  # type: ignore

from shared.domain.exceptions import ValidationError
from shared.infrastructure.clock import venue_today

from apps.bookings.models import Booking

EARNING_STATUSES = (Booking.Status.CONFIRMED, Booking.Status.COMPLETED)


def _scoped(qs: QuerySet | None, hall_id=None) -> QuerySet:
    qs = Booking.objects.all() if qs is None else qs
    return qs.filter(hall_id=hall_id) if hall_id else qs


def upcoming(hall_id=None, today: date | None = None, qs: QuerySet | None = None) -> QuerySet:
    """Confirmed bookings from today on, soonest first."""
    today = today or venue_today()
    qs = _scoped(qs, hall_id).filter(status=Booking.Status.CONFIRMED, date__gte=today)
    return qs.order_by("date", "created_at")


def completed(hall_id=None, today: date | None = None, qs: QuerySet | None = None) -> QuerySet:
    """Completed bookings, including confirmed ones whose day has passed."""
    today = today or venue_today()
    return _scoped(qs, hall_id).filter(
        Q(status=Booking.Status.COMPLETED)
        | Q(status=Booking.Status.CONFIRMED, date__lt=today)
    ).order_by("-date", "-created_at")


def cancelled(hall_id=None, qs: QuerySet | None = None) -> QuerySet:
    qs = _scoped(qs, hall_id).filter(status=Booking.Status.CANCELLED)
    return qs.order_by("-date", "-created_at")


def _money_sum(expression: str, condition: Q):
    return Coalesce(
        Sum(expression, filter=condition),
        Value(Decimal("0")),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )


def summary(
    hall_id=None,
    year: int | None = None,
    month: int | None = None,
    qs: QuerySet | None = None,
) -> dict:
    """
    Booking counts and revenue figures.

    ``month`` narrows a ``year`` filter and is ignored on its own.
    Revenue covers confirmed and completed bookings.
    """
    if month is not None and not 1 <= int(month) <= 12:
        raise ValidationError.for_field("month", "Month must be between 1 and 12.")

    qs = _scoped(qs, hall_id)
    if year is not None:
        qs = qs.filter(date__year=int(year))
        if month is not None:
            qs = qs.filter(date__month=int(month))

    earning = Q(status__in=EARNING_STATUSES)
    totals = qs.aggregate(
        totalBookings=Count("id"),
        confirmedBookings=Count("id", filter=Q(status=Booking.Status.CONFIRMED)),
        cancelledBookings=Count("id", filter=Q(status=Booking.Status.CANCELLED)),
        totalRevenue=_money_sum("total_amount", earning),
        advanceAmount=_money_sum("advance_amount", earning),
        advanceCollected=_money_sum("advance_amount", earning & Q(advance_paid=True)),
    )
    return totals
