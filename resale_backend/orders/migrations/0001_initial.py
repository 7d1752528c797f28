# orders/migrations/0001_initial.py

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("inventory", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
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
                (
                    "order_number",
                    models.CharField(
                        max_length=64,
                        unique=True,
                        blank=True,
                        help_text="System-generated order number (ORD-YYYYMMDD-XXXXXXXX)",
                    ),
                ),
                ("client_id", models.PositiveIntegerField(db_index=True)),
                ("customer_ref", models.CharField(max_length=128)),
                ("vendor_ref", models.CharField(max_length=128, blank=True, default="")),
                ("total_usd", models.DecimalField(max_digits=14, decimal_places=2)),
                (
                    "payment_status",
                    models.CharField(
                        max_length=16,
                        choices=[
                            ("unpaid", "Unpaid"),
                            ("partial", "Partially paid"),
                            ("paid", "Paid"),
                        ],
                        default="unpaid",
                    ),
                ),
                (
                    "shipping_type",
                    models.CharField(
                        max_length=16,
                        choices=[
                            ("", "No shipping"),
                            ("office", "Pick up at office"),
                            ("address", "Deliver to address"),
                        ],
                        blank=True,
                        default="",
                    ),
                ),
                ("shipping_address", models.CharField(max_length=255, blank=True, default="")),
                ("observations", models.TextField(blank=True, default="")),
                ("created_by", models.CharField(max_length=128, blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "orders",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["client_id", "created_at"], name="orders_client_created_idx"),
                    models.Index(fields=["payment_status"], name="orders_payment_status_idx"),
                    models.Index(fields=["customer_ref"], name="orders_customer_ref_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(total_usd__gt=Decimal("0")),
                        name="chk_order_total_gt_zero",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LineItem",
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
                ("imei_snapshot", models.CharField(max_length=32)),
                ("sale_price_usd", models.DecimalField(max_digits=14, decimal_places=2)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="line_items",
                        to="orders.order",
                    ),
                ),
                (
                    "inventory_item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="line_items",
                        to="inventory.inventoryitem",
                    ),
                ),
            ],
            options={
                "db_table": "order_line_items",
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=["order", "inventory_item"],
                        name="unique_item_per_order",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(sale_price_usd__gt=Decimal("0")),
                        name="chk_line_item_price_gt_zero",
                    ),
                ],
            },
        ),
    ]
