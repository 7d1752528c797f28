# orders/services/order_lifecycle.py

"""
ORDER LIFECYCLE DOMAIN RULES

Two small state machines, no database writes, no side effects:

1) Settlement workflow (one create_order run):
     drafting -> validating -> reserving_inventory -> persisting -> committed
     any non-terminal state -> aborted

2) Order payment status (persisted on Order):
     unpaid  -> partial | paid
     partial -> partial | paid
     paid    -> (terminal)
"""

from __future__ import annotations

from common.errors import InvalidWorkflowTransition
from orders.models import Order

# ============================================================
# SETTLEMENT WORKFLOW
# ============================================================

DRAFTING = "drafting"
VALIDATING = "validating"
RESERVING_INVENTORY = "reserving_inventory"
PERSISTING = "persisting"
COMMITTED = "committed"
ABORTED = "aborted"

TERMINAL_STATES = {COMMITTED, ABORTED}

ALLOWED_TRANSITIONS = {
    DRAFTING: {VALIDATING, ABORTED},
    VALIDATING: {RESERVING_INVENTORY, ABORTED},
    RESERVING_INVENTORY: {PERSISTING, ABORTED},
    PERSISTING: {COMMITTED, ABORTED},
}


def can_transition(*, from_state: str, to_state: str) -> bool:
    if from_state in TERMINAL_STATES:
        return False
    return to_state in ALLOWED_TRANSITIONS.get(from_state, set())


class SettlementRun:
    """Tracks the state of a single create_order attempt."""

    def __init__(self):
        self.state = DRAFTING
        self.history = [DRAFTING]

    def advance(self, to_state: str):
        if not can_transition(from_state=self.state, to_state=to_state):
            raise InvalidWorkflowTransition(
                f"Settlement cannot move from '{self.state}' to '{to_state}'.",
                from_state=self.state,
                to_state=to_state,
            )
        self.state = to_state
        self.history.append(to_state)

    def abort(self):
        if self.state not in TERMINAL_STATES:
            self.advance(ABORTED)

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES


# ============================================================
# PAYMENT STATUS
# ============================================================

PAYMENT_TRANSITIONS = {
    Order.PAYMENT_UNPAID: {Order.PAYMENT_PARTIAL, Order.PAYMENT_PAID},
    Order.PAYMENT_PARTIAL: {Order.PAYMENT_PARTIAL, Order.PAYMENT_PAID},
    Order.PAYMENT_PAID: set(),
}


def validate_payment_status_transition(*, order: Order, target_status: str):
    if target_status not in PAYMENT_TRANSITIONS.get(order.payment_status, set()):
        raise InvalidWorkflowTransition(
            f"Order {order.order_number} cannot move from "
            f"'{order.payment_status}' to '{target_status}'.",
            order_id=str(order.pk),
            from_state=order.payment_status,
            to_state=target_status,
        )
