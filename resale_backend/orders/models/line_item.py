# orders/models/line_item.py

"""
ORDER LINE ITEM (IMMUTABLE SNAPSHOT)

One sold device per line. imei_snapshot is copied at sale time so the
order stays readable even if the inventory row is edited later.
"""

import uuid
from decimal import Decimal

from django.db import models
from django.db.models import Q

from .order import Order


class LineItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    order = models.ForeignKey(
        Order,
        on_delete=models.PROTECT,
        related_name="line_items",
    )

    inventory_item = models.ForeignKey(
        "inventory.InventoryItem",
        on_delete=models.PROTECT,
        related_name="line_items",
    )

    imei_snapshot = models.CharField(max_length=32)

    sale_price_usd = models.DecimalField(max_digits=14, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "order_line_items"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "inventory_item"],
                name="unique_item_per_order",
            ),
            models.CheckConstraint(
                condition=Q(sale_price_usd__gt=Decimal("0")),
                name="chk_line_item_price_gt_zero",
            ),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("LineItem is immutable once created.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("LineItem cannot be deleted.")

    def __str__(self):
        return f"{self.order_id} | {self.imei_snapshot} | USD {self.sale_price_usd}"
