# currency/migrations/0001_initial.py

from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ExchangeRate",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("client_id", models.PositiveIntegerField(db_index=True)),
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
                (
                    "rate",
                    models.DecimalField(
                        max_digits=14,
                        decimal_places=4,
                        help_text="Native units per USD for ARS methods; 1 for USD-native methods unless a display rate is used.",
                    ),
                ),
                ("updated_by", models.CharField(max_length=128, blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "exchange_rates",
                "ordering": ["client_id", "method_code"],
            },
        ),
        migrations.AddConstraint(
            model_name="exchangerate",
            constraint=models.UniqueConstraint(
                fields=["client_id", "method_code"],
                name="unique_rate_per_client_method",
            ),
        ),
        migrations.AddConstraint(
            model_name="exchangerate",
            constraint=models.CheckConstraint(
                condition=models.Q(rate__gt=Decimal("0")),
                name="chk_exchange_rate_gt_zero",
            ),
        ),
    ]
