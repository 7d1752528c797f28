from decimal import Decimal

from django.test import SimpleTestCase

from common.errors import DebtAlreadySettled, InvalidAmount
from debts.models import Debt
from debts.services.debt_ledger import apply_payment, can_transition, ensure_open


class ApplyPaymentTests(SimpleTestCase):
    def test_exact_payment_settles(self):
        res = apply_payment("400", "400")
        self.assertTrue(res.settles)
        self.assertEqual(res.new_remaining, Decimal("0.00"))
        self.assertEqual(res.applied, Decimal("400.00"))
        self.assertEqual(res.surplus, Decimal("0.00"))

    def test_partial_payment(self):
        res = apply_payment("400", "100")
        self.assertFalse(res.settles)
        self.assertEqual(res.new_remaining, Decimal("300.00"))
        self.assertEqual(res.applied, Decimal("100.00"))

    def test_overpayment_keeps_surplus(self):
        res = apply_payment("400", "450")
        self.assertTrue(res.settles)
        self.assertEqual(res.new_remaining, Decimal("0.00"))
        self.assertEqual(res.applied, Decimal("400.00"))
        self.assertEqual(res.surplus, Decimal("50.00"))

    def test_one_cent_residue_is_written_off(self):
        res = apply_payment("100", "99.99")
        self.assertTrue(res.settles)
        self.assertEqual(res.new_remaining, Decimal("0.00"))
        self.assertEqual(res.written_off, Decimal("0.01"))
        self.assertEqual(res.applied, Decimal("99.99"))
        self.assertEqual(res.surplus, Decimal("0.00"))

    def test_two_cent_residue_stays_open(self):
        res = apply_payment("100", "99.98")
        self.assertFalse(res.settles)
        self.assertEqual(res.new_remaining, Decimal("0.02"))

    def test_payment_must_be_positive(self):
        for paid in ("0", "-5"):
            with self.subTest(paid=paid):
                with self.assertRaises(InvalidAmount):
                    apply_payment("400", paid)

    def test_remaining_never_negative_over_a_sequence(self):
        remaining = Decimal("400.00")
        for paid in ("150", "150", "150"):
            res = apply_payment(remaining, paid)
            remaining = res.new_remaining
            self.assertGreaterEqual(remaining, Decimal("0.00"))
        self.assertEqual(remaining, Decimal("0.00"))
        self.assertEqual(res.surplus, Decimal("50.00"))


class DebtStatusRulesTests(SimpleTestCase):
    def test_transitions(self):
        self.assertTrue(can_transition(from_status=Debt.STATUS_ACTIVE, to_status=Debt.STATUS_SETTLED))
        self.assertTrue(can_transition(from_status=Debt.STATUS_ACTIVE, to_status=Debt.STATUS_CANCELLED))
        self.assertFalse(can_transition(from_status=Debt.STATUS_SETTLED, to_status=Debt.STATUS_ACTIVE))
        self.assertFalse(can_transition(from_status=Debt.STATUS_CANCELLED, to_status=Debt.STATUS_SETTLED))

    def test_ensure_open(self):
        ensure_open(Debt(status=Debt.STATUS_ACTIVE))
        with self.assertRaises(DebtAlreadySettled):
            ensure_open(Debt(status=Debt.STATUS_SETTLED))
