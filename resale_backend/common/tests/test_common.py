from decimal import Decimal

from django.test import SimpleTestCase, TestCase
from rest_framework.test import APIClient

from common.api_errors import http_status_for, settlement_error_response
from common.errors import (
    DebtAlreadySettled,
    DebtNotFound,
    InvalidAmount,
    InventoryConflict,
    SettlementTimeout,
    StorageFailure,
)
from common.money import Money, money, rate, sum_money, to_decimal, usd_equal


class MoneyHelperTests(SimpleTestCase):
    def test_half_up_rounding(self):
        self.assertEqual(money("0.005"), Decimal("0.01"))
        self.assertEqual(money("2.345"), Decimal("2.35"))
        self.assertEqual(rate("1100.00005"), Decimal("1100.0001"))

    def test_to_decimal_rejects_garbage(self):
        for value in (None, "", "abc", True, "NaN", "Infinity", Decimal("NaN")):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    to_decimal(value)

    def test_floats_keep_their_literal_value(self):
        self.assertEqual(to_decimal(0.1), Decimal("0.1"))

    def test_sum_of_rounded_values(self):
        self.assertEqual(sum_money(["0.004", "0.004", "0.004"]), Decimal("0.00"))
        self.assertEqual(sum_money([]), Decimal("0.00"))

    def test_one_cent_tolerance_is_inclusive(self):
        self.assertTrue(usd_equal(Decimal("100.00"), Decimal("99.99")))
        self.assertFalse(usd_equal(Decimal("100.00"), Decimal("99.98")))

    def test_money_value_carries_currency(self):
        self.assertEqual(Money.usd("12.5").as_dict(), {"amount": "12.50", "currency": "USD"})
        with self.assertRaises(ValueError):
            Money(amount=Decimal("1"), currency="EUR")


class ErrorMappingTests(SimpleTestCase):
    def test_status_codes(self):
        self.assertEqual(http_status_for(InvalidAmount("x")), 400)
        self.assertEqual(http_status_for(DebtNotFound("x")), 404)
        self.assertEqual(http_status_for(InventoryConflict("x")), 409)
        self.assertEqual(http_status_for(DebtAlreadySettled("x")), 409)
        self.assertEqual(http_status_for(StorageFailure("x")), 503)
        self.assertEqual(http_status_for(SettlementTimeout("x")), 503)

    def test_error_body(self):
        res = settlement_error_response(InvalidAmount("bad amount", method="cash_usd", index=None))
        self.assertEqual(
            res.data,
            {"error": {"code": "INVALID_AMOUNT", "message": "bad amount", "details": {"method": "cash_usd"}}},
        )


class HealthCheckTests(TestCase):
    def test_health_is_public(self):
        res = APIClient().get("/api/health/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data, {"status": "ok", "db": "ok"})
