# debts/services/debt_ledger.py

"""
DEBT LEDGER RULES (PURE)

apply_payment(remaining, paid):
- new_remaining = max(0, remaining - paid)
- applied       = remaining - new_remaining   (never more than what was owed)
- surplus       = paid - applied              (overpayment, kept explicit)
- a residue within one cent settles the debt and is written off to 0.00

Lifecycle:
- active -> active | settled | cancelled
- settled / cancelled are terminal

No database access here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from common.errors import DebtAlreadySettled, InvalidAmount
from common.money import MONEY_EPSILON, ZERO, money
from debts.models import Debt


@dataclass(frozen=True)
class LedgerApplication:
    previous_remaining: Decimal
    new_remaining: Decimal
    applied: Decimal
    surplus: Decimal
    settles: bool
    written_off: Decimal = ZERO


def apply_payment(remaining, paid) -> LedgerApplication:
    remaining = money(remaining)
    paid = money(paid)

    if remaining < ZERO:
        raise InvalidAmount("Remaining balance cannot be negative.", remaining=str(remaining))
    if paid <= ZERO:
        raise InvalidAmount("Payment must be greater than zero.", amount=str(paid))

    new_remaining = max(ZERO, money(remaining - paid))
    written_off = ZERO

    settles = new_remaining <= MONEY_EPSILON
    if settles and new_remaining > ZERO:
        written_off = new_remaining
        new_remaining = ZERO

    applied = money(remaining - new_remaining - written_off)
    surplus = money(paid - applied) if paid > applied else ZERO

    return LedgerApplication(
        previous_remaining=remaining,
        new_remaining=new_remaining,
        applied=applied,
        surplus=surplus,
        settles=settles,
        written_off=written_off,
    )


ALLOWED_TRANSITIONS = {
    Debt.STATUS_ACTIVE: {Debt.STATUS_ACTIVE, Debt.STATUS_SETTLED, Debt.STATUS_CANCELLED},
    Debt.STATUS_SETTLED: set(),
    Debt.STATUS_CANCELLED: set(),
}


def can_transition(*, from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def ensure_open(debt: Debt):
    if not debt.is_open:
        raise DebtAlreadySettled(
            f"Debt {debt.pk} is {debt.status} and cannot take payments.",
            debt_id=str(debt.pk),
            status=debt.status,
        )
