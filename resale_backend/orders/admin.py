# orders/admin.py

from django.contrib import admin

from orders.models import LineItem, Order
from payments.models import SettlementRecord


class ReadOnlyInline(admin.TabularInline):
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class LineItemInline(ReadOnlyInline):
    model = LineItem
    fields = ("inventory_item", "imei_snapshot", "sale_price_usd", "created_at")
    readonly_fields = fields


class OrderSettlementRecordInline(ReadOnlyInline):
    model = SettlementRecord
    fk_name = "order"
    fields = (
        "method_code",
        "native_amount",
        "currency",
        "rate_snapshot",
        "usd_equivalent",
        "applied_usd",
        "surplus_usd",
        "created_at",
    )
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "client_id", "customer_ref", "total_usd", "payment_status", "created_at")
    list_filter = ("payment_status", "shipping_type")
    search_fields = ("order_number", "customer_ref", "vendor_ref")
    inlines = [LineItemInline, OrderSettlementRecordInline]

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return ()
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        # Orders are created through the settlement workflow only.
        return False

    def has_delete_permission(self, request, obj=None):
        return False
