from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase

from orders.models import Order
from payments.models import SettlementRecord


class SettlementRecordTests(TestCase):
    """
    GUARANTEES:
    - append-only (no update, no delete)
    - exactly one target (order or debt)
    - applied_usd + surplus_usd == usd_equivalent
    """

    def setUp(self):
        self.order = Order.objects.create(
            client_id=1,
            customer_ref="cust-1",
            total_usd=Decimal("500.00"),
            payment_status=Order.PAYMENT_PAID,
        )

    def _record(self, **overrides):
        data = dict(
            client_id=1,
            target_type=SettlementRecord.TARGET_ORDER,
            order=self.order,
            method_code="cash_ars",
            native_amount=Decimal("550000.00"),
            currency="ARS",
            rate_snapshot=Decimal("1100.0000"),
            usd_equivalent=Decimal("500.00"),
            local_amount=Decimal("550000.00"),
            applied_usd=Decimal("500.00"),
            surplus_usd=Decimal("0.00"),
        )
        data.update(overrides)
        return SettlementRecord.objects.create(**data)

    def test_record_cannot_be_updated(self):
        record = self._record()
        record.rate_snapshot = Decimal("2000")
        with self.assertRaises(ValueError):
            record.save()

    def test_record_cannot_be_deleted(self):
        record = self._record()
        with self.assertRaises(ValueError):
            record.delete()
        self.assertTrue(SettlementRecord.objects.filter(pk=record.pk).exists())

    def test_split_must_balance(self):
        with self.assertRaises(ValueError):
            self._record(applied_usd=Decimal("400.00"), surplus_usd=Decimal("0.00"))

    def test_target_must_match_target_type(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                self._record(target_type=SettlementRecord.TARGET_DEBT)

    def test_native_amount_must_be_positive(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                self._record(
                    native_amount=Decimal("0.00"),
                )
