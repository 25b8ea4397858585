"""FilterSet definitions for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Filter bookings by hall, status and date range."""

    hall = django_filters.UUIDFilter(field_name="hall_id")
    status = django_filters.MultipleChoiceFilter(choices=Booking.Status.choices)
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    customer_phone = django_filters.CharFilter(field_name="customer_phone", lookup_expr="icontains")

    class Meta:
        model = Booking
        fields = ["hall", "status", "date_from", "date_to", "customer_phone"]
