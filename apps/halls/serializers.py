"""Serializers for halls and their calendars."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Hall


class HallSerializer(serializers.ModelSerializer):
    available_dates = serializers.ListField(child=serializers.CharField(), read_only=True)
    booked_dates = serializers.ListField(child=serializers.CharField(), read_only=True)
    blocked_dates = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = Hall
        fields = [
            "id",
            "name",
            "description",
            "address",
            "city",
            "phone",
            "capacity",
            "base_price",
            "currency",
            "is_active",
            "owner",
            "available_dates",
            "booked_dates",
            "blocked_dates",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class HallDateSerializer(serializers.Serializer):
    date = serializers.CharField(help_text="Day to change, YYYY-MM-DD.")


class OpenDatesSerializer(serializers.Serializer):
    dates = serializers.ListField(child=serializers.CharField(), allow_empty=False, max_length=400)


class CalendarQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.CharField()
    status = serializers.CharField()
    isPast = serializers.BooleanField()
    isToday = serializers.BooleanField()
