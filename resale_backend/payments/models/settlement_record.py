# payments/models/settlement_record.py

"""
SETTLEMENT RECORD (APPEND-ONLY)

One row per payment allocation, for either:
- the initial payment made when an Order is created (target_type=order), or
- a later payment against a Debt (target_type=debt).

RULES:
- Exactly one of order/debt is set (DB check constraint).
- rate_snapshot is COPIED at allocation time; later rate changes never touch it.
- usd_equivalent = applied_usd + surplus_usd (surplus is overpayment, kept explicit).
- Created once. Never updated. Never deleted.
"""

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q

from common.money import Currency
from currency.payment_methods import PaymentMethod


class SettlementRecord(models.Model):
    TARGET_ORDER = "order"
    TARGET_DEBT = "debt"

    TARGET_CHOICES = [
        (TARGET_ORDER, "Order"),
        (TARGET_DEBT, "Debt"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    client_id = models.PositiveIntegerField(db_index=True)

    target_type = models.CharField(max_length=16, choices=TARGET_CHOICES)

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="settlement_records",
    )

    debt = models.ForeignKey(
        "debts.Debt",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="settlement_records",
    )

    method_code = models.CharField(max_length=32, choices=PaymentMethod.choices)

    native_amount = models.DecimalField(max_digits=14, decimal_places=2)
    currency = models.CharField(max_length=8, choices=Currency.choices)

    rate_snapshot = models.DecimalField(
        max_digits=14,
        decimal_places=4,
        help_text="Exchange rate pinned when the allocation was made (immutable).",
    )

    usd_equivalent = models.DecimalField(max_digits=14, decimal_places=2)

    local_amount = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Local-currency bookkeeping figure (informational only).",
    )

    applied_usd = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Portion of usd_equivalent applied to the amount due.",
    )

    surplus_usd = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Overpayment carried by this allocation (never discarded).",
    )

    notes = models.TextField(blank=True, default="")
    created_by = models.CharField(max_length=128, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "settlement_records"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["order", "created_at"], name="settle_order_created_idx"),
            models.Index(fields=["debt", "created_at"], name="settle_debt_created_idx"),
            models.Index(fields=["client_id", "created_at"], name="settle_client_created_idx"),
            models.Index(fields=["method_code"], name="settle_method_code_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(target_type="order", order__isnull=False, debt__isnull=True)
                    | Q(target_type="debt", debt__isnull=False, order__isnull=True)
                ),
                name="chk_settlement_exactly_one_target",
            ),
            models.CheckConstraint(
                condition=Q(native_amount__gt=Decimal("0")),
                name="chk_settlement_native_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(rate_snapshot__gt=Decimal("0")),
                name="chk_settlement_rate_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(applied_usd__gte=Decimal("0")) & Q(surplus_usd__gte=Decimal("0")),
                name="chk_settlement_split_non_negative",
            ),
        ]

    @property
    def target_ref(self):
        return self.order_id if self.target_type == self.TARGET_ORDER else self.debt_id

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("SettlementRecord is append-only and cannot be modified.")
        if Decimal(self.applied_usd) + Decimal(self.surplus_usd) != Decimal(self.usd_equivalent):
            raise ValueError("SettlementRecord split must balance: applied_usd + surplus_usd == usd_equivalent.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("SettlementRecord is append-only and cannot be deleted.")

    def __str__(self):
        return f"{self.target_type}:{self.target_ref} | {self.method_code} {self.native_amount} = USD {self.usd_equivalent}"
