# debts/models/debt.py

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import F, Q


class Debt(models.Model):
    """
    Outstanding balance of an order that was not paid in full.

    GUARANTEES (DB-enforced):
    - 0 <= remaining_usd <= original_usd
    - one debt per order

    LIFECYCLE:
    - active -> active | settled | cancelled
    - settled and cancelled are terminal
    - remaining_usd only moves through debts.services.debt_settlement
    """

    STATUS_ACTIVE = "active"
    STATUS_SETTLED = "settled"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_SETTLED, "Settled"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    TERMINAL_STATUSES = (STATUS_SETTLED, STATUS_CANCELLED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="debt",
    )

    client_id = models.PositiveIntegerField(db_index=True)
    customer_ref = models.CharField(max_length=128)

    original_usd = models.DecimalField(max_digits=14, decimal_places=2)
    remaining_usd = models.DecimalField(max_digits=14, decimal_places=2)

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_ACTIVE,
        db_index=True,
    )

    due_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    settled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "debts"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["client_id", "status"], name="debts_client_status_idx"),
            models.Index(fields=["customer_ref"], name="debts_customer_ref_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(original_usd__gt=Decimal("0")),
                name="chk_debt_original_gt_zero",
            ),
            models.CheckConstraint(
                condition=Q(remaining_usd__gte=Decimal("0")),
                name="chk_debt_remaining_non_negative",
            ),
            models.CheckConstraint(
                condition=Q(remaining_usd__lte=F("original_usd")),
                name="chk_debt_remaining_lte_original",
            ),
        ]

    _IMMUTABLE_FIELDS = (
        "order_id",
        "client_id",
        "customer_ref",
        "original_usd",
        "created_at",
    )

    def _validate_immutable(self, previous: "Debt"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValueError(f"Debt field '{field}' cannot be changed.")

        if previous.status in self.TERMINAL_STATUSES and (
            self.status != previous.status or self.remaining_usd != previous.remaining_usd
        ):
            raise ValueError(f"Debt is {previous.status} and can no longer change.")

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Debt.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Debts cannot be deleted. Cancel them instead.")

    @property
    def is_open(self) -> bool:
        return self.status == self.STATUS_ACTIVE

    @property
    def paid_usd(self) -> Decimal:
        return Decimal(self.original_usd) - Decimal(self.remaining_usd)

    def __str__(self):
        return f"{self.order_id} | USD {self.remaining_usd}/{self.original_usd} | {self.status}"
