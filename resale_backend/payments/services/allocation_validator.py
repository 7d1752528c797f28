# payments/services/allocation_validator.py

"""
PAYMENT ALLOCATION VALIDATOR

Input:
- client_id (whose rate registry to read)
- entries: [{"method_code": ..., "native_amount": ..., "notes"?: ...}, ...]
- amount_due_usd

Steps:
1) empty list                    -> NoPaymentMethodSelected
2) any native_amount <= 0        -> InvalidAmount (names method + index)
3) per entry: read rate ONCE, convert, pin rate_snapshot
4) total_paid_usd = sum(usd_equivalent)   (already-rounded values)
5) compare to amount due with a one-cent tolerance:
     equal   -> fully_paid
     less    -> shortfall
     greater -> overpay

The validator never writes and never blocks on a mismatch.
Whether a mismatch is acceptable is the calling workflow's decision.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Iterable

from common.errors import InvalidAmount, NoPaymentMethodSelected, SettlementError
from common.money import ZERO, money, sum_money, to_decimal, usd_equal
from currency.payment_methods import method_spec
from currency.services.conversion import PaymentAllocation, build_allocation
from currency.services.rate_registry import get_rate

OUTCOME_FULLY_PAID = "fully_paid"
OUTCOME_SHORTFALL = "shortfall"
OUTCOME_OVERPAY = "overpay"


@dataclass(frozen=True)
class AllocationResult:
    allocations: list[PaymentAllocation]
    amount_due_usd: Decimal
    total_paid_usd: Decimal
    outcome: str
    shortfall_usd: Decimal = ZERO
    overpay_usd: Decimal = ZERO
    notes: list[str] = field(default_factory=list)

    @property
    def is_fully_paid(self) -> bool:
        return self.outcome == OUTCOME_FULLY_PAID


@dataclass(frozen=True)
class AppliedAllocation:
    allocation: PaymentAllocation
    applied_usd: Decimal
    surplus_usd: Decimal
    notes: str = ""


def _entry_value(entry, key):
    if isinstance(entry, dict):
        return entry.get(key)
    return getattr(entry, key, None)


def classify(total_paid_usd: Decimal, amount_due_usd: Decimal) -> tuple[str, Decimal, Decimal]:
    """
    Returns (outcome, shortfall_usd, overpay_usd).
    """
    paid = money(total_paid_usd)
    due = money(amount_due_usd)
    if usd_equal(paid, due):
        return OUTCOME_FULLY_PAID, ZERO, ZERO
    if paid < due:
        return OUTCOME_SHORTFALL, money(due - paid), ZERO
    return OUTCOME_OVERPAY, ZERO, money(paid - due)


def validate_allocations(
    *,
    client_id,
    entries: Iterable,
    amount_due_usd,
    rate_reader: Callable = get_rate,
) -> AllocationResult:
    entries = list(entries or [])
    if not entries:
        raise NoPaymentMethodSelected("Select at least one payment method.")

    # Pass 1: shape + amount checks before any rate lookups.
    normalized = []
    for idx, entry in enumerate(entries):
        try:
            spec = method_spec(_entry_value(entry, "method_code"))
        except SettlementError as exc:
            exc.details.setdefault("index", idx)
            raise
        raw_amount = _entry_value(entry, "native_amount")
        try:
            amount = to_decimal(raw_amount)
        except ValueError as exc:
            raise InvalidAmount(
                f"Invalid amount for payment #{idx + 1} ({spec.code}): {raw_amount!r}",
                method=spec.code,
                index=idx,
            ) from exc
        if money(amount) <= ZERO:
            raise InvalidAmount(
                f"Amount for payment #{idx + 1} ({spec.code}) must be greater than zero.",
                method=spec.code,
                index=idx,
                amount=str(amount),
            )
        normalized.append((idx, spec.code, amount, str(_entry_value(entry, "notes") or "").strip()))

    # Pass 2: pin one rate per allocation and convert.
    allocations = []
    notes = []
    for idx, code, amount, note in normalized:
        pinned_rate = rate_reader(client_id, code)
        try:
            allocations.append(build_allocation(code, amount, pinned_rate))
        except SettlementError as exc:
            exc.details.setdefault("index", idx)
            raise
        notes.append(note)

    total_paid = sum_money(a.usd_equivalent for a in allocations)
    due = money(amount_due_usd)
    outcome, shortfall, overpay = classify(total_paid, due)

    return AllocationResult(
        allocations=allocations,
        amount_due_usd=due,
        total_paid_usd=total_paid,
        outcome=outcome,
        shortfall_usd=shortfall,
        overpay_usd=overpay,
        notes=notes,
    )


def distribute(allocations, amount_due_usd, notes=None) -> list[AppliedAllocation]:
    """
    Split each allocation's USD into the part applied to the amount due and
    the surplus beyond it, in allocation order.
    """
    allocations = list(allocations)
    notes = list(notes or [])
    remaining = money(amount_due_usd)

    out = []
    for idx, alloc in enumerate(allocations):
        applied = min(alloc.usd_equivalent, max(remaining, ZERO))
        remaining = money(remaining - applied)
        out.append(
            AppliedAllocation(
                allocation=alloc,
                applied_usd=money(applied),
                surplus_usd=money(alloc.usd_equivalent - applied),
                notes=notes[idx] if idx < len(notes) else "",
            )
        )
    return out


def distribute_result(result: AllocationResult) -> list[AppliedAllocation]:
    return distribute(result.allocations, result.amount_due_usd, result.notes)
