from django.contrib import admin

from .models import Unit


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "unit_type", "is_active", "created_at")
    list_filter = ("unit_type", "is_active")
    search_fields = ("name", "code")
