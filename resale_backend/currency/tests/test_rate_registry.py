from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.test import TestCase, override_settings

from common.errors import InvalidRate, RateNotConfigured, UnknownPaymentMethod
from currency.models import ExchangeRate
from currency.services import rate_registry
from currency.services.rate_registry import get_rate, list_rates, seed_default_rates, set_rate

CLIENT = 7


class RateRegistryTests(TestCase):
    """
    GUARANTEES:
    - lookups fail fast when a rate is missing (no hard-coded fallback)
    - one active rate per (client, method)
    - rates are always > 0
    """

    def test_missing_rate_raises(self):
        with self.assertRaises(RateNotConfigured) as ctx:
            get_rate(CLIENT, "cash_ars")
        self.assertEqual(ctx.exception.details["method"], "cash_ars")
        self.assertEqual(ctx.exception.details["client_id"], CLIENT)

    def test_set_rate_upserts_single_row(self):
        set_rate(CLIENT, "cash_ars", "1100", updated_by="ana")
        set_rate(CLIENT, "cash_ars", "1150.5", updated_by="ana")

        self.assertEqual(ExchangeRate.objects.filter(client_id=CLIENT, method_code="cash_ars").count(), 1)
        self.assertEqual(get_rate(CLIENT, "cash_ars"), Decimal("1150.5000"))

    def test_rates_are_scoped_per_client(self):
        set_rate(CLIENT, "cash_ars", "1100")
        set_rate(CLIENT + 1, "cash_ars", "1300")

        self.assertEqual(get_rate(CLIENT, "cash_ars"), Decimal("1100"))
        self.assertEqual(get_rate(CLIENT + 1, "cash_ars"), Decimal("1300"))

    def test_set_rate_rejects_non_positive(self):
        for bad in ("0", "-1", "abc"):
            with self.subTest(rate=bad):
                with self.assertRaises(InvalidRate):
                    set_rate(CLIENT, "cash_ars", bad)
        self.assertFalse(ExchangeRate.objects.exists())

    def test_set_rate_rejects_unknown_method(self):
        with self.assertRaises(UnknownPaymentMethod):
            set_rate(CLIENT, "paypal", "1")

    def test_list_rates(self):
        set_rate(CLIENT, "wire_ars", "1100")
        set_rate(CLIENT, "cash_usd", "1")
        self.assertEqual([r.method_code for r in list_rates(CLIENT)], ["cash_usd", "wire_ars"])

    def test_losing_the_first_insert_race_updates_the_winner_row(self):
        # Another writer inserts the row after this call saw "no row yet".
        ExchangeRate.objects.create(client_id=CLIENT, method_code="cash_ars", rate=Decimal("1000"))
        real_lookup = rate_registry._locked_rate_row
        calls = []

        def stale_then_real(client_id, method_code):
            calls.append(method_code)
            if len(calls) == 1:
                return None
            return real_lookup(client_id, method_code)

        with patch.object(rate_registry, "_locked_rate_row", side_effect=stale_then_real):
            row = set_rate(CLIENT, "cash_ars", "1200", updated_by="ops")

        self.assertEqual(len(calls), 2)
        self.assertEqual(row.rate, Decimal("1200.0000"))
        self.assertEqual(ExchangeRate.objects.filter(client_id=CLIENT, method_code="cash_ars").count(), 1)
        self.assertEqual(get_rate(CLIENT, "cash_ars"), Decimal("1200"))


class SeedDefaultRatesTests(TestCase):
    def test_seed_creates_every_method(self):
        touched = seed_default_rates(CLIENT)

        self.assertEqual(len(touched), 7)
        self.assertEqual(get_rate(CLIENT, "cash_usd"), Decimal("1"))
        self.assertEqual(get_rate(CLIENT, "cash_ars"), Decimal("1000"))
        self.assertEqual(get_rate(CLIENT, "broker_ars_to_usd"), Decimal("1050"))

    def test_seed_keeps_configured_rates_unless_overwrite(self):
        set_rate(CLIENT, "cash_ars", "1234")

        touched = seed_default_rates(CLIENT)
        self.assertEqual(len(touched), 6)
        self.assertEqual(get_rate(CLIENT, "cash_ars"), Decimal("1234"))

        touched = seed_default_rates(CLIENT, overwrite=True)
        self.assertEqual(len(touched), 7)
        self.assertEqual(get_rate(CLIENT, "cash_ars"), Decimal("1000"))

    @override_settings(EXCHANGE_RATE_DEFAULTS={"cash_ars": "900"})
    def test_seed_only_uses_configured_defaults(self):
        touched = seed_default_rates(CLIENT)
        self.assertEqual([r.method_code for r in touched], ["cash_ars"])
        with self.assertRaises(RateNotConfigured):
            get_rate(CLIENT, "wire_ars")

    def test_management_command(self):
        out = StringIO()
        call_command("seed_exchange_rates", "--client-id", str(CLIENT), stdout=out)

        self.assertIn("Seeded 7 rate(s)", out.getvalue())
        self.assertEqual(ExchangeRate.objects.filter(client_id=CLIENT).count(), 7)
