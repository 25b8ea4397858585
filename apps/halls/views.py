"""Hall API views."""

from __future__ import annotations

import calendar
from datetime import date

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.application.command_handlers import (
    BlockDateCommand,
    OpenDatesCommand,
    UnblockDateCommand,
)
from shared.application.message_bus import message_bus
from shared.infrastructure.clock import venue_today

from .availability import month_calendar
from .models import Hall
from .repositories import DjangoHallRepository
from .serializers import (
    CalendarDaySerializer,
    CalendarQuerySerializer,
    HallDateSerializer,
    HallSerializer,
    OpenDatesSerializer,
)


class IsHallOwnerOrStaff(permissions.BasePermission):
    """Calendar changes are reserved to the hall owner and staff."""

    def has_object_permission(self, request, view, obj: Hall):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if getattr(user, "is_staff", False) or getattr(user, "is_superuser", False):
            return True
        return obj.owner_id == user.id


class HallViewSet(viewsets.ReadOnlyModelViewSet):
    """Halls with their available, booked and blocked date sets."""

    queryset = Hall.objects.select_related("owner").prefetch_related("dates")
    serializer_class = HallSerializer
    permission_classes = [permissions.IsAuthenticated, IsHallOwnerOrStaff]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        if self.request.query_params.get("active") in {"1", "true", "True"}:
            qs = qs.filter(is_active=True)
        return qs

    @action(detail=True, methods=["get"])
    def calendar(self, request, pk=None):  # type: ignore
        hall = self.get_object()
        today = venue_today()
        params = CalendarQuerySerializer(
            data={
                "year": request.query_params.get("year", today.year),
                "month": request.query_params.get("month", today.month),
            }
        )
        params.is_valid(raise_exception=True)
        year, month = params.validated_data["year"], params.validated_data["month"]

        _, last_day = calendar.monthrange(year, month)
        statuses = DjangoHallRepository().dates(hall.id, date(year, month, 1), date(year, month, last_day))
        days = month_calendar(statuses, year, month, today)
        return Response(
            {
                "hall": str(hall.id),
                "year": year,
                "month": month,
                "days": CalendarDaySerializer(days, many=True).data,
            }
        )

    @action(detail=True, methods=["post"])
    def block(self, request, pk=None):  # type: ignore
        hall = self.get_object()
        serializer = HallDateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        day = message_bus.handle_command(
            BlockDateCommand(hall_id=hall.id, date=serializer.validated_data["date"])
        )
        return Response({"date": day.isoformat(), "status": "blocked"})

    @action(detail=True, methods=["post"])
    def unblock(self, request, pk=None):  # type: ignore
        hall = self.get_object()
        serializer = HallDateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changed = message_bus.handle_command(
            UnblockDateCommand(hall_id=hall.id, date=serializer.validated_data["date"])
        )
        return Response({"date": serializer.validated_data["date"], "unblocked": changed})

    @action(detail=True, methods=["post"])
    def open(self, request, pk=None):  # type: ignore
        hall = self.get_object()
        serializer = OpenDatesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        opened = message_bus.handle_command(
            OpenDatesCommand(hall_id=hall.id, dates=serializer.validated_data["dates"])
        )
        return Response({"opened": opened}, status=status.HTTP_200_OK)
