"""Serializers for the users domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import DeviceToken


class DeviceTokenSerializer(serializers.ModelSerializer):
    class Meta:
        model = DeviceToken
        fields = ["id", "token", "platform", "is_active", "created_at"]
        read_only_fields = ["id", "is_active", "created_at"]
        # Re-registering a known token moves it to the current user.
        extra_kwargs = {"token": {"validators": []}}

    def create(self, validated_data):  # type: ignore
        user = self.context["request"].user
        token, _ = DeviceToken.objects.update_or_create(
            token=validated_data["token"],
            defaults={
                "user": user,
                "platform": validated_data.get("platform", DeviceToken.Platform.WEB),
                "is_active": True,
            },
        )
        return token
