# payments/migrations/0001_initial.py

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("orders", "0001_initial"),
        ("debts", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SettlementRecord",
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
                (
                    "target_type",
                    models.CharField(
                        max_length=16,
                        choices=[("order", "Order"), ("debt", "Debt")],
                    ),
                ),
                (
                    "method_code",
                    models.CharField(
                        max_length=32,
                        choices=[
                            ("cash_ars", "Cash (ARS)"),
                            ("cash_usd", "Cash (USD)"),
                            ("wire_ars", "Wire transfer (ARS)"),
                            ("wire_usd", "Wire transfer (USD)"),
                            ("wire_usdt", "Wire transfer (USDT)"),
                            ("broker_usd_to_ars", "Broker (USD to ARS)"),
                            ("broker_ars_to_usd", "Broker (ARS to USD)"),
                        ],
                    ),
                ),
                ("native_amount", models.DecimalField(max_digits=14, decimal_places=2)),
                (
                    "currency",
                    models.CharField(
                        max_length=8,
                        choices=[
                            ("USD", "US Dollar"),
                            ("ARS", "Argentine Peso"),
                            ("USDT", "Tether (USDT)"),
                        ],
                    ),
                ),
                (
                    "rate_snapshot",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=4,
                        help_text="Exchange rate pinned when the allocation was made (immutable).",
                    ),
                ),
                ("usd_equivalent", models.DecimalField(max_digits=14, decimal_places=2)),
                (
                    "local_amount",
                    models.DecimalField(
                        max_digits=16,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Local-currency bookkeeping figure (informational only).",
                    ),
                ),
                (
                    "applied_usd",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        help_text="Portion of usd_equivalent applied to the amount due.",
                    ),
                ),
                (
                    "surplus_usd",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Overpayment carried by this allocation (never discarded).",
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_by", models.CharField(max_length=128, blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "order",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="settlement_records",
                        to="orders.order",
                    ),
                ),
                (
                    "debt",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="settlement_records",
                        to="debts.debt",
                    ),
                ),
            ],
            options={
                "db_table": "settlement_records",
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["order", "created_at"], name="settle_order_created_idx"),
                    models.Index(fields=["debt", "created_at"], name="settle_debt_created_idx"),
                    models.Index(fields=["client_id", "created_at"], name="settle_client_created_idx"),
                    models.Index(fields=["method_code"], name="settle_method_code_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(target_type="order", order__isnull=False, debt__isnull=True)
                            | models.Q(target_type="debt", debt__isnull=False, order__isnull=True)
                        ),
                        name="chk_settlement_exactly_one_target",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(native_amount__gt=Decimal("0")),
                        name="chk_settlement_native_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(rate_snapshot__gt=Decimal("0")),
                        name="chk_settlement_rate_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(applied_usd__gte=Decimal("0")) & models.Q(surplus_usd__gte=Decimal("0")),
                        name="chk_settlement_split_non_negative",
                    ),
                ],
            },
        ),
    ]
