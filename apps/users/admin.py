"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin

from .models import DeviceToken


@admin.register(DeviceToken)
class DeviceTokenAdmin(admin.ModelAdmin):
    list_display = ("user", "platform", "is_active", "created_at")
    list_filter = ("platform", "is_active")
    search_fields = ("user__email", "user__username", "token")
    readonly_fields = ("created_at", "updated_at")
