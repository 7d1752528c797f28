from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from common.errors import InvalidAmount, NoPaymentMethodSelected, RateNotConfigured, UnknownPaymentMethod
from currency.services.rate_registry import set_rate
from payments.services.allocation_validator import (
    OUTCOME_FULLY_PAID,
    OUTCOME_OVERPAY,
    OUTCOME_SHORTFALL,
    classify,
    distribute,
    validate_allocations,
)

RATES = {
    "cash_usd": Decimal("1"),
    "wire_usd": Decimal("1"),
    "cash_ars": Decimal("1100"),
    "wire_ars": Decimal("1100"),
    "broker_ars_to_usd": Decimal("1050"),
}


def fixed_rates(client_id, method_code):
    if method_code not in RATES:
        raise RateNotConfigured("missing", method=method_code)
    return RATES[method_code]


def validate(entries, due):
    return validate_allocations(client_id=1, entries=entries, amount_due_usd=due, rate_reader=fixed_rates)


class AllocationValidatorTests(SimpleTestCase):
    """
    GUARANTEES:
    - total paid is the sum of already-rounded usd_equivalent values
    - one-cent tolerance decides fully_paid vs shortfall/overpay
    - every rejection names the offending method and index
    """

    def test_single_usd_payment_fully_paid(self):
        result = validate([{"method_code": "cash_usd", "native_amount": "500"}], "500")

        self.assertEqual(result.outcome, OUTCOME_FULLY_PAID)
        self.assertEqual(result.total_paid_usd, Decimal("500.00"))
        self.assertEqual(result.allocations[0].usd_equivalent, Decimal("500.00"))

    def test_ars_payment_converted_with_pinned_rate(self):
        result = validate([{"method_code": "cash_ars", "native_amount": "550000"}], "500")

        self.assertEqual(result.outcome, OUTCOME_FULLY_PAID)
        self.assertEqual(result.allocations[0].rate_snapshot, Decimal("1100"))

    def test_mixed_currencies_sum_to_total(self):
        result = validate(
            [
                {"method_code": "cash_usd", "native_amount": "400"},
                {"method_code": "wire_ars", "native_amount": "660000"},
            ],
            "1000",
        )
        self.assertEqual(result.outcome, OUTCOME_FULLY_PAID)
        self.assertEqual(result.total_paid_usd, Decimal("1000.00"))

    def test_shortfall(self):
        result = validate([{"method_code": "cash_usd", "native_amount": "600"}], "1000")

        self.assertEqual(result.outcome, OUTCOME_SHORTFALL)
        self.assertEqual(result.shortfall_usd, Decimal("400.00"))
        self.assertEqual(result.overpay_usd, Decimal("0.00"))

    def test_overpay(self):
        result = validate([{"method_code": "cash_usd", "native_amount": "520"}], "500")

        self.assertEqual(result.outcome, OUTCOME_OVERPAY)
        self.assertEqual(result.overpay_usd, Decimal("20.00"))

    def test_one_cent_tolerance(self):
        self.assertEqual(classify(Decimal("999.99"), Decimal("1000"))[0], OUTCOME_FULLY_PAID)
        self.assertEqual(classify(Decimal("1000.01"), Decimal("1000"))[0], OUTCOME_FULLY_PAID)
        self.assertEqual(classify(Decimal("999.98"), Decimal("1000"))[0], OUTCOME_SHORTFALL)
        self.assertEqual(classify(Decimal("1000.02"), Decimal("1000"))[0], OUTCOME_OVERPAY)

    def test_empty_allocations(self):
        with self.assertRaises(NoPaymentMethodSelected):
            validate([], "100")

    def test_non_positive_amount_names_method_and_index(self):
        with self.assertRaises(InvalidAmount) as ctx:
            validate(
                [
                    {"method_code": "cash_usd", "native_amount": "100"},
                    {"method_code": "wire_ars", "native_amount": "0"},
                ],
                "100",
            )
        self.assertEqual(ctx.exception.details["method"], "wire_ars")
        self.assertEqual(ctx.exception.details["index"], 1)

    def test_amount_errors_are_raised_before_rate_lookups(self):
        calls = []

        def reader(client_id, method_code):
            calls.append(method_code)
            return Decimal("1")

        with self.assertRaises(InvalidAmount):
            validate_allocations(
                client_id=1,
                entries=[
                    {"method_code": "cash_usd", "native_amount": "10"},
                    {"method_code": "cash_usd", "native_amount": "-10"},
                ],
                amount_due_usd="10",
                rate_reader=reader,
            )
        self.assertEqual(calls, [])

    def test_unknown_method_carries_index(self):
        with self.assertRaises(UnknownPaymentMethod) as ctx:
            validate([{"method_code": "crypto", "native_amount": "1"}], "1")
        self.assertEqual(ctx.exception.details["index"], 0)

    def test_missing_rate_propagates(self):
        with self.assertRaises(RateNotConfigured):
            validate([{"method_code": "wire_usdt", "native_amount": "1"}], "1")

    def test_rate_read_once_per_allocation(self):
        calls = []

        def reader(client_id, method_code):
            calls.append(method_code)
            return Decimal("1100")

        validate_allocations(
            client_id=1,
            entries=[
                {"method_code": "cash_ars", "native_amount": "110000"},
                {"method_code": "cash_ars", "native_amount": "220000"},
            ],
            amount_due_usd="300",
            rate_reader=reader,
        )
        self.assertEqual(calls, ["cash_ars", "cash_ars"])


class DistributeTests(SimpleTestCase):
    def test_surplus_lands_on_the_allocation_that_exceeds_the_due(self):
        result = validate(
            [
                {"method_code": "cash_usd", "native_amount": "300"},
                {"method_code": "wire_usd", "native_amount": "250"},
            ],
            "500",
        )
        split = distribute(result.allocations, result.amount_due_usd)

        self.assertEqual([s.applied_usd for s in split], [Decimal("300.00"), Decimal("200.00")])
        self.assertEqual([s.surplus_usd for s in split], [Decimal("0.00"), Decimal("50.00")])

    def test_shortfall_applies_everything(self):
        result = validate([{"method_code": "cash_usd", "native_amount": "600"}], "1000")
        split = distribute(result.allocations, result.amount_due_usd)

        self.assertEqual(split[0].applied_usd, Decimal("600.00"))
        self.assertEqual(split[0].surplus_usd, Decimal("0.00"))

    def test_split_always_balances(self):
        result = validate(
            [
                {"method_code": "cash_ars", "native_amount": "123456"},
                {"method_code": "broker_ars_to_usd", "native_amount": "98765"},
                {"method_code": "cash_usd", "native_amount": "33.33"},
            ],
            "150",
        )
        for s in distribute(result.allocations, result.amount_due_usd):
            self.assertEqual(s.applied_usd + s.surplus_usd, s.allocation.usd_equivalent)


class RegistryBackedValidationTests(TestCase):
    def test_default_reader_uses_registry(self):
        set_rate(9, "cash_ars", "1100")
        result = validate_allocations(
            client_id=9,
            entries=[{"method_code": "cash_ars", "native_amount": "550000"}],
            amount_due_usd="500",
        )
        self.assertEqual(result.outcome, OUTCOME_FULLY_PAID)

    def test_default_reader_fails_fast_without_rate(self):
        with self.assertRaises(RateNotConfigured):
            validate_allocations(
                client_id=9,
                entries=[{"method_code": "cash_ars", "native_amount": "550000"}],
                amount_due_usd="500",
            )
