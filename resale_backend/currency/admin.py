# currency/admin.py

from django.contrib import admin

from currency.models import ExchangeRate
from currency.services.rate_registry import set_rate


@admin.register(ExchangeRate)
class ExchangeRateAdmin(admin.ModelAdmin):
    list_display = ("client_id", "method_code", "rate", "updated_by", "updated_at")
    list_filter = ("method_code",)
    search_fields = ("client_id",)
    readonly_fields = ("updated_by", "created_at", "updated_at")

    def save_model(self, request, obj, form, change):
        # Route admin edits through the registry (validation + audit log).
        saved = set_rate(
            obj.client_id,
            obj.method_code,
            obj.rate,
            updated_by=getattr(request.user, "get_username", lambda: "")(),
        )
        obj.pk = saved.pk
