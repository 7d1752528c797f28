# orders/models/order.py

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils import timezone


def generate_order_number() -> str:
    prefix = timezone.now().strftime("ORD-%Y%m%d")
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


class Order(models.Model):
    """
    A device sale to a customer, priced in USD.

    GUARANTEES:
    - total_usd == sum(line_items.sale_price_usd) (computed server-side)
    - Financial fields are immutable once created
    - Only payment_status may move afterwards (unpaid -> partial -> paid)

    PAYMENTS:
    - initial payment legs live in payments.SettlementRecord (related_name="settlement_records")
    - any unpaid remainder lives in debts.Debt (related_name="debt")
    """

    PAYMENT_UNPAID = "unpaid"
    PAYMENT_PARTIAL = "partial"
    PAYMENT_PAID = "paid"

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_UNPAID, "Unpaid"),
        (PAYMENT_PARTIAL, "Partially paid"),
        (PAYMENT_PAID, "Paid"),
    ]

    SHIPPING_NONE = ""
    SHIPPING_OFFICE = "office"
    SHIPPING_ADDRESS = "address"

    SHIPPING_CHOICES = [
        (SHIPPING_NONE, "No shipping"),
        (SHIPPING_OFFICE, "Pick up at office"),
        (SHIPPING_ADDRESS, "Deliver to address"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order_number = models.CharField(
        max_length=64,
        unique=True,
        blank=True,
        help_text="System-generated order number (ORD-YYYYMMDD-XXXXXXXX)",
    )

    client_id = models.PositiveIntegerField(db_index=True)

    # Opaque references into the external customer / vendor directory.
    customer_ref = models.CharField(max_length=128)
    vendor_ref = models.CharField(max_length=128, blank=True, default="")

    total_usd = models.DecimalField(max_digits=14, decimal_places=2)

    payment_status = models.CharField(
        max_length=16,
        choices=PAYMENT_STATUS_CHOICES,
        default=PAYMENT_UNPAID,
    )

    shipping_type = models.CharField(
        max_length=16,
        choices=SHIPPING_CHOICES,
        blank=True,
        default=SHIPPING_NONE,
    )
    shipping_address = models.CharField(max_length=255, blank=True, default="")
    observations = models.TextField(blank=True, default="")

    created_by = models.CharField(max_length=128, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["client_id", "created_at"], name="orders_client_created_idx"),
            models.Index(fields=["payment_status"], name="orders_payment_status_idx"),
            models.Index(fields=["customer_ref"], name="orders_customer_ref_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(total_usd__gt=Decimal("0")),
                name="chk_order_total_gt_zero",
            ),
        ]

    _IMMUTABLE_FIELDS = (
        "order_number",
        "client_id",
        "customer_ref",
        "vendor_ref",
        "total_usd",
        "shipping_type",
        "shipping_address",
        "observations",
        "created_by",
        "created_at",
    )

    def _validate_immutable(self, previous: "Order"):
        for field in self._IMMUTABLE_FIELDS:
            if getattr(self, field) != getattr(previous, field):
                raise ValueError(f"Order is immutable. Field '{field}' cannot be changed.")

    def save(self, *args, **kwargs):
        if self.pk and not self._state.adding:
            previous = Order.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        if not self.order_number:
            self.order_number = generate_order_number()

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Orders cannot be deleted.")

    def __str__(self):
        return f"{self.order_number} | USD {self.total_usd} | {self.payment_status}"
