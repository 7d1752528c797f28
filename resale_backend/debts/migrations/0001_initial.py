# debts/migrations/0001_initial.py

import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Debt",
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
                ("customer_ref", models.CharField(max_length=128)),
                ("original_usd", models.DecimalField(max_digits=14, decimal_places=2)),
                ("remaining_usd", models.DecimalField(max_digits=14, decimal_places=2)),
                (
                    "status",
                    models.CharField(
                        max_length=16,
                        choices=[
                            ("active", "Active"),
                            ("settled", "Settled"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="active",
                        db_index=True,
                    ),
                ),
                ("due_date", models.DateField(null=True, blank=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("settled_at", models.DateTimeField(null=True, blank=True)),
                (
                    "order",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="debt",
                        to="orders.order",
                    ),
                ),
            ],
            options={
                "db_table": "debts",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["client_id", "status"], name="debts_client_status_idx"),
                    models.Index(fields=["customer_ref"], name="debts_customer_ref_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(original_usd__gt=Decimal("0")),
                        name="chk_debt_original_gt_zero",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(remaining_usd__gte=Decimal("0")),
                        name="chk_debt_remaining_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(remaining_usd__lte=models.F("original_usd")),
                        name="chk_debt_remaining_lte_original",
                    ),
                ],
            },
        ),
    ]
