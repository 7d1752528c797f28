# currency/models/exchange_rate.py

"""
EXCHANGE RATE (PER CLIENT, PER PAYMENT METHOD)

RULES:
- Exactly one active rate per (client_id, method_code).
- rate > 0 (DB check constraint + service validation).
- Mutated only through currency.services.rate_registry.set_rate().
- Changing a rate NEVER alters rate_snapshot values already recorded on
  settlement records (those are copied, not referenced).
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q

from currency.payment_methods import PaymentMethod, method_spec


class ExchangeRate(models.Model):
    client_id = models.PositiveIntegerField(db_index=True)

    method_code = models.CharField(max_length=32, choices=PaymentMethod.choices)

    rate = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        help_text="Native units per USD for ARS methods; 1 for USD-native methods unless a display rate is used.",
    )

    updated_by = models.CharField(max_length=128, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "exchange_rates"
        ordering = ["client_id", "method_code"]
        constraints = [
            models.UniqueConstraint(
                fields=["client_id", "method_code"],
                name="unique_rate_per_client_method",
            ),
            models.CheckConstraint(
                condition=Q(rate__gt=Decimal("0")),
                name="chk_exchange_rate_gt_zero",
            ),
        ]

    @property
    def currency(self) -> str:
        return method_spec(self.method_code).currency

    def __str__(self):
        return f"client={self.client_id} | {self.method_code} @ {self.rate}"
