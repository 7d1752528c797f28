from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from currency.services.rate_registry import get_rate, set_rate

User = get_user_model()

CLIENT = 3


class ExchangeRateApiTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="admin", password="pass")
        self.client = APIClient()
        self.client.force_authenticate(user=self.user)

    def test_requires_authentication(self):
        anon = APIClient()
        res = anon.get("/api/currency/rates/", {"client_id": CLIENT})
        self.assertEqual(res.status_code, 401)

    def test_put_then_get_rate(self):
        res = self.client.put(
            "/api/currency/rates/cash_ars/",
            {"client_id": CLIENT, "rate": "1100.0000"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["updated_by"], "admin")

        res = self.client.get("/api/currency/rates/cash_ars/", {"client_id": CLIENT})
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["rate"], "1100.0000")

    def test_get_missing_rate_returns_error_body(self):
        res = self.client.get("/api/currency/rates/wire_ars/", {"client_id": CLIENT})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "RATE_NOT_CONFIGURED")
        self.assertEqual(res.data["error"]["details"]["method"], "wire_ars")

    def test_put_rejects_zero_rate(self):
        res = self.client.put(
            "/api/currency/rates/cash_ars/",
            {"client_id": CLIENT, "rate": "0"},
            format="json",
        )
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.data["error"]["code"], "INVALID_RATE")

    def test_seed_defaults_and_list(self):
        res = self.client.post("/api/currency/rates/seed-defaults/", {"client_id": CLIENT}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(len(res.data), 7)

        res = self.client.get("/api/currency/rates/", {"client_id": CLIENT})
        self.assertEqual(len(res.data), 7)
        self.assertEqual(str(get_rate(CLIENT, "broker_usd_to_ars")), "1050.0000")

    def test_quote_uses_configured_rate(self):
        set_rate(CLIENT, "wire_ars", "1100")
        res = self.client.post(
            "/api/currency/quote/",
            {"client_id": CLIENT, "method_code": "wire_ars", "native_amount": "660000"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["usd_equivalent"], {"amount": "600.00", "currency": "USD"})
        self.assertEqual(res.data["native"]["currency"], "ARS")

    def test_put_rate_rounds_extra_decimals(self):
        res = self.client.put(
            "/api/currency/rates/cash_ars/",
            {"client_id": CLIENT, "rate": "1100.00005"},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(get_rate(CLIENT, "cash_ars"), Decimal("1100.0001"))
