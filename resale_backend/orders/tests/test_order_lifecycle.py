import re
from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from common.errors import InvalidWorkflowTransition
from orders.models import Order
from orders.services import order_lifecycle as lifecycle
from orders.services.order_settlement import create_order
from orders.tests.helpers import CLIENT, line, make_item, pay, seed_rates


class SettlementRunTests(SimpleTestCase):
    def test_happy_path(self):
        run = lifecycle.SettlementRun()
        for state in (
            lifecycle.VALIDATING,
            lifecycle.RESERVING_INVENTORY,
            lifecycle.PERSISTING,
            lifecycle.COMMITTED,
        ):
            run.advance(state)

        self.assertTrue(run.is_terminal)
        self.assertEqual(run.history[0], lifecycle.DRAFTING)
        self.assertEqual(run.history[-1], lifecycle.COMMITTED)

    def test_cannot_skip_reservation(self):
        run = lifecycle.SettlementRun()
        run.advance(lifecycle.VALIDATING)
        with self.assertRaises(InvalidWorkflowTransition):
            run.advance(lifecycle.PERSISTING)

    def test_abort_from_any_non_terminal_state(self):
        run = lifecycle.SettlementRun()
        run.advance(lifecycle.VALIDATING)
        run.advance(lifecycle.RESERVING_INVENTORY)
        run.abort()
        self.assertEqual(run.state, lifecycle.ABORTED)

    def test_terminal_states_are_final(self):
        run = lifecycle.SettlementRun()
        run.abort()
        run.abort()
        self.assertEqual(run.history, [lifecycle.DRAFTING, lifecycle.ABORTED])
        with self.assertRaises(InvalidWorkflowTransition):
            run.advance(lifecycle.VALIDATING)


class PaymentStatusTransitionTests(SimpleTestCase):
    def _order(self, status):
        return Order(order_number="ORD-TEST", payment_status=status)

    def test_allowed(self):
        lifecycle.validate_payment_status_transition(
            order=self._order(Order.PAYMENT_UNPAID), target_status=Order.PAYMENT_PARTIAL
        )
        lifecycle.validate_payment_status_transition(
            order=self._order(Order.PAYMENT_PARTIAL), target_status=Order.PAYMENT_PAID
        )

    def test_paid_is_terminal(self):
        with self.assertRaises(InvalidWorkflowTransition) as ctx:
            lifecycle.validate_payment_status_transition(
                order=self._order(Order.PAYMENT_PAID), target_status=Order.PAYMENT_PARTIAL
            )
        self.assertEqual(ctx.exception.details["from_state"], Order.PAYMENT_PAID)

    def test_cannot_go_back_to_unpaid(self):
        with self.assertRaises(InvalidWorkflowTransition):
            lifecycle.validate_payment_status_transition(
                order=self._order(Order.PAYMENT_PARTIAL), target_status=Order.PAYMENT_UNPAID
            )


class OrderModelTests(TestCase):
    def setUp(self):
        seed_rates()
        item = make_item("350000000000041")
        self.order = create_order(
            client_id=CLIENT,
            customer_ref="cust-1",
            line_items=[line(item, "500")],
            allocations=[pay("cash_usd", "500")],
            actor_id="seller-1",
        ).order

    def test_order_number_format(self):
        self.assertRegex(self.order.order_number, re.compile(r"^ORD-\d{8}-[0-9A-F]{8}$"))

    def test_financial_fields_are_immutable(self):
        self.order.total_usd = Decimal("1.00")
        with self.assertRaises(ValueError):
            self.order.save()

    def test_payment_status_may_change(self):
        self.order.payment_status = Order.PAYMENT_PARTIAL
        self.order.save(update_fields=["payment_status"])
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PARTIAL)

    def test_orders_cannot_be_deleted(self):
        with self.assertRaises(ValueError):
            self.order.delete()
