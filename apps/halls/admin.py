"""Admin registrations for halls."""

from __future__ import annotations

from django.contrib import admin

from .models import Hall, HallDate


class HallDateInline(admin.TabularInline):
    model = HallDate
    extra = 0
    fields = ("date", "status", "updated_at")
    readonly_fields = ("updated_at",)
    ordering = ("date",)


@admin.register(Hall)
class HallAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "capacity", "base_price", "currency", "is_active", "owner")
    list_filter = ("is_active", "city")
    search_fields = ("name", "city", "address", "owner__username", "owner__email")
    readonly_fields = ("created_at", "updated_at")
    inlines = (HallDateInline,)
