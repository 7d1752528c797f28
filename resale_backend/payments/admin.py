# payments/admin.py

from django.contrib import admin

from payments.models import SettlementRecord


@admin.register(SettlementRecord)
class SettlementRecordAdmin(admin.ModelAdmin):
    list_display = (
        "created_at",
        "target_type",
        "client_id",
        "method_code",
        "native_amount",
        "currency",
        "rate_snapshot",
        "usd_equivalent",
        "surplus_usd",
    )
    list_filter = ("target_type", "method_code", "currency")
    search_fields = ("order__order_number", "created_by")

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
