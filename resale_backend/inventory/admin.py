# inventory/admin.py

from django.contrib import admin

from inventory.models import InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ("imei", "model", "storage", "color", "client_id", "status", "cost_price_usd", "updated_at")
    list_filter = ("status",)
    search_fields = ("imei", "model")
    readonly_fields = ("version", "created_at", "updated_at")
