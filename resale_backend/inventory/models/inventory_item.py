# inventory/models/inventory_item.py

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q


class InventoryItem(models.Model):
    """
    A single serialized device (one IMEI = one sellable unit).

    STATUS MODEL:
    - available / reserved  -> sellable
    - sold                  -> terminal for the sale flow
    - internal_repair / external_repair / to_repair / lost -> not sellable

    Status changes for a sale go through inventory.services.gateway only
    (conditional UPDATE + version bump). Never assign `status` directly.
    """

    STATUS_AVAILABLE = "available"
    STATUS_RESERVED = "reserved"
    STATUS_SOLD = "sold"
    STATUS_INTERNAL_REPAIR = "internal_repair"
    STATUS_EXTERNAL_REPAIR = "external_repair"
    STATUS_TO_REPAIR = "to_repair"
    STATUS_LOST = "lost"

    STATUS_CHOICES = [
        (STATUS_AVAILABLE, "Available"),
        (STATUS_RESERVED, "Reserved"),
        (STATUS_SOLD, "Sold"),
        (STATUS_INTERNAL_REPAIR, "Internal repair"),
        (STATUS_EXTERNAL_REPAIR, "External repair"),
        (STATUS_TO_REPAIR, "To repair"),
        (STATUS_LOST, "Lost"),
    ]

    SELLABLE_STATUSES = (STATUS_AVAILABLE, STATUS_RESERVED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    client_id = models.PositiveIntegerField(db_index=True)

    imei = models.CharField(max_length=32, db_index=True)
    model = models.CharField(max_length=128, blank=True, default="")
    storage = models.CharField(max_length=32, blank=True, default="")
    color = models.CharField(max_length=64, blank=True, default="")

    cost_price_usd = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_AVAILABLE,
        db_index=True,
    )

    # Bumped on every gateway transition (compare-and-swap token).
    version = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "inventory_items"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["client_id", "imei"],
                name="unique_imei_per_client",
            ),
            models.CheckConstraint(
                condition=Q(cost_price_usd__gte=Decimal("0")),
                name="chk_inventory_cost_non_negative",
            ),
        ]

    @property
    def is_sellable(self) -> bool:
        return self.status in self.SELLABLE_STATUSES

    def __str__(self):
        return f"{self.imei} | {self.model} {self.storage} | {self.status}"
