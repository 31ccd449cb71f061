from django.contrib import admin

from .models import MalkhanaItem, RedInkHistory, Shelf


class RedInkHistoryInline(admin.TabularInline):
    model = RedInkHistory
    extra = 0
    readonly_fields = ("year", "red_ink_id", "created_at")
    can_delete = False


@admin.register(Shelf)
class ShelfAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "category", "unit", "created_at")
    list_filter = ("unit",)
    search_fields = ("name", "location", "category")


@admin.register(MalkhanaItem)
class MalkhanaItemAdmin(admin.ModelAdmin):
    list_display = ("mother_number", "registry_type", "registry_number",
                    "registry_year", "status", "unit", "category", "date_received")
    list_filter = ("registry_type", "status", "registry_year", "unit")
    search_fields = ("mother_number", "case_number", "description",
                     "category", "received_from")
    readonly_fields = ("mother_number", "registry_number", "registry_type",
                       "registry_year", "created_by", "updated_by",
                       "created_at", "updated_at")
    raw_id_fields = ("shelf",)
    inlines = [RedInkHistoryInline]

    def has_add_permission(self, request):
        # Items are numbered by MalkhanaItemService; create them through the API.
        return False
