"""API views for the booking domain."""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.application.message_bus import message_bus

from .application import queries
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BookingStatusSerializer,
    BookingSummarySerializer,
    BookingUpdateSerializer,
    HallQuerySerializer,
    SummaryQuerySerializer,
)


class BookingViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Create, inspect and move bookings through their lifecycle.

    Every write goes through the message bus so the conflict check, the
    calendar sync and the notifications run the same way for the API, the
    admin and the scheduled jobs.
    """

    queryset = Booking.objects.select_related("hall").all()
    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["date", "created_at", "total_amount"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        user = self.request.user
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return qs
        return qs.filter(Q(hall__owner=user) | Q(customer=user))

    def _read(self, booking_id, http_status=status.HTTP_200_OK) -> Response:
        booking = Booking.objects.select_related("hall").get(pk=booking_id)
        serializer = BookingSerializer(booking, context=self.get_serializer_context())
        return Response(serializer.data, status=http_status)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data, context=self.get_serializer_context())
        serializer.is_valid(raise_exception=True)
        booking = message_bus.handle_command(serializer.to_command())
        return self._read(booking.id, status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):  # type: ignore
        instance = self.get_object()
        serializer = BookingUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message_bus.handle_command(serializer.to_command(instance.pk))
        return self._read(instance.pk)

    @action(detail=True, methods=["post"], url_path="status", url_name="status")
    def change_status(self, request, pk=None):  # type: ignore
        instance = self.get_object()
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message_bus.handle_command(serializer.to_command(instance.pk))
        return self._read(instance.pk)

    def _listing(self, qs) -> Response:
        page = self.paginate_queryset(qs)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        serializer = self.get_serializer(qs, many=True)
        return Response(serializer.data)

    @staticmethod
    def _hall_param(request):  # type: ignore
        params = HallQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        return params.validated_data.get("hall")

    @action(detail=False, methods=["get"])
    def upcoming(self, request):  # type: ignore
        hall_id = self._hall_param(request)
        return self._listing(queries.upcoming(hall_id, qs=self.get_queryset()))

    @action(detail=False, methods=["get"])
    def completed(self, request):  # type: ignore
        hall_id = self._hall_param(request)
        return self._listing(queries.completed(hall_id, qs=self.get_queryset()))

    @action(detail=False, methods=["get"])
    def cancelled(self, request):  # type: ignore
        hall_id = self._hall_param(request)
        return self._listing(queries.cancelled(hall_id, qs=self.get_queryset()))

    @action(detail=False, methods=["get"])
    def summary(self, request):  # type: ignore
        params = SummaryQuerySerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        data = params.validated_data
        totals = queries.summary(
            data.get("hall"),
            year=data.get("year"),
            month=data.get("month"),
            qs=self.get_queryset(),
        )
        return Response(BookingSummarySerializer(totals).data)
