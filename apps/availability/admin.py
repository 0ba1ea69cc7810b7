"""Admin registrations for availability domain."""

from __future__ import annotations

from django.contrib import admin

from .models import UnitAvailability


@admin.register(UnitAvailability)
class UnitAvailabilityAdmin(admin.ModelAdmin):
    list_display = ("unit_id", "date", "is_available", "price_override", "reason")
    list_filter = ("is_available",)
    search_fields = ("unit_id", "reason")
    date_hierarchy = "date"
    ordering = ("unit_id", "date")
