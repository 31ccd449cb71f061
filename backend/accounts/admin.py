from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "email", "badge_number", "first_name",
                    "last_name", "user_type", "primary_unit", "is_active")
    search_fields = ("username", "email", "badge_number")
    list_filter = ("is_active", "is_staff", "user_type", "primary_unit")
    filter_horizontal = ("groups", "user_permissions")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Unit & Type", {"fields": ("badge_number", "user_type", "primary_unit")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Unit & Type", {"fields": ("email", "first_name", "last_name",
                                    "badge_number", "user_type", "primary_unit")}),
    )
