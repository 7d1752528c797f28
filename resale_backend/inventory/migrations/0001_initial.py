# inventory/migrations/0001_initial.py

import uuid
from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("client_id", models.PositiveIntegerField(db_index=True)),
                ("imei", models.CharField(max_length=32, db_index=True)),
                ("model", models.CharField(max_length=128, blank=True, default="")),
                ("storage", models.CharField(max_length=32, blank=True, default="")),
                ("color", models.CharField(max_length=64, blank=True, default="")),
                (
                    "cost_price_usd",
                    models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00")),
                ),
                (
                    "status",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("available", "Available"),
                            ("reserved", "Reserved"),
                            ("sold", "Sold"),
                            ("internal_repair", "Internal repair"),
                            ("external_repair", "External repair"),
                            ("to_repair", "To repair"),
                            ("lost", "Lost"),
                        ],
                        default="available",
                        db_index=True,
                    ),
                ),
                ("version", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "inventory_items",
                "ordering": ["-created_at"],
            },
        ),
        migrations.AddConstraint(
            model_name="inventoryitem",
            constraint=models.UniqueConstraint(
                fields=["client_id", "imei"],
                name="unique_imei_per_client",
            ),
        ),
        migrations.AddConstraint(
            model_name="inventoryitem",
            constraint=models.CheckConstraint(
                condition=models.Q(cost_price_usd__gte=Decimal("0")),
                name="chk_inventory_cost_non_negative",
            ),
        ),
    ]
