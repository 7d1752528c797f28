# debts/admin.py

from django.contrib import admin

from debts.models import Debt
from orders.admin import ReadOnlyInline
from payments.models import SettlementRecord


class DebtSettlementRecordInline(ReadOnlyInline):
    model = SettlementRecord
    fk_name = "debt"
    fields = (
        "method_code",
        "native_amount",
        "currency",
        "rate_snapshot",
        "usd_equivalent",
        "applied_usd",
        "surplus_usd",
        "created_by",
        "created_at",
    )
    readonly_fields = fields


@admin.register(Debt)
class DebtAdmin(admin.ModelAdmin):
    list_display = ("order", "client_id", "customer_ref", "original_usd", "remaining_usd", "status", "due_date")
    list_filter = ("status",)
    search_fields = ("customer_ref", "order__order_number")
    inlines = [DebtSettlementRecordInline]

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
