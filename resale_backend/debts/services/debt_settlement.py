# debts/services/debt_settlement.py

"""
DEBT SETTLEMENT WORKFLOW (APPLICATION SERVICE)

settle_debt():
1) lock the Debt row (select_for_update): concurrent settlements serialize
2) DebtNotFound / DebtAlreadySettled (cancelled debts included)
3) validate allocations against remaining_usd
4) one SettlementRecord per allocation, linked to the Debt, with
   applied_usd / surplus_usd split explicitly (overpay is never discarded)
5) remaining_usd = max(0, remaining_usd - total_paid_usd); a residue within
   one cent is written off and the debt becomes settled
6) owning Order payment_status -> paid when settled, partial otherwise

All of it is ONE transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import Count, Sum
from django.utils import timezone

from common.errors import DebtAlreadySettled, DebtNotFound, StorageFailure
from common.money import ZERO, money
from debts.models import Debt
from debts.services.debt_ledger import LedgerApplication, apply_payment, can_transition, ensure_open
from orders.models import Order
from orders.services.order_lifecycle import validate_payment_status_transition
from payments.models import SettlementRecord
from payments.services.allocation_validator import AllocationResult, distribute_result, validate_allocations
from payments.services.settlement_records import record_settlements

logger = logging.getLogger("settlements")


@dataclass
class DebtSettlement:
    debt: Debt
    records: list[SettlementRecord]
    validation: AllocationResult
    ledger: LedgerApplication

    @property
    def surplus_usd(self) -> Decimal:
        return self.ledger.surplus


# ============================================================
# QUERIES
# ============================================================


def get_debt(debt_id) -> Debt:
    try:
        return Debt.objects.select_related("order").get(pk=debt_id)
    except (Debt.DoesNotExist, ValidationError, ValueError, TypeError) as exc:
        raise DebtNotFound(f"Debt {debt_id} does not exist.", debt_id=str(debt_id)) from exc


def list_debts(*, client_id, status=None):
    qs = Debt.objects.filter(client_id=client_id).select_related("order")
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("-created_at")


def debt_summary(*, client_id) -> dict:
    agg = Debt.objects.filter(client_id=client_id, status=Debt.STATUS_ACTIVE).aggregate(
        count=Count("id"),
        total=Sum("remaining_usd"),
    )
    return {
        "client_id": client_id,
        "active_count": int(agg["count"] or 0),
        "outstanding_usd": money(agg["total"] or ZERO),
        "currency": "USD",
    }


def _lock_debt(debt_id) -> Debt:
    try:
        return Debt.objects.select_for_update().get(pk=debt_id)
    except (Debt.DoesNotExist, ValidationError, ValueError, TypeError) as exc:
        logger.warning("Debt settlement failed: debt not found", extra={"debt_id": str(debt_id)})
        raise DebtNotFound(f"Debt {debt_id} does not exist.", debt_id=str(debt_id)) from exc


# ============================================================
# COMMANDS
# ============================================================


def _settle_locked(debt: Debt, *, allocations, actor_id, notes) -> DebtSettlement:
    ensure_open(debt)

    validation = validate_allocations(
        client_id=debt.client_id,
        entries=allocations,
        amount_due_usd=debt.remaining_usd,
    )
    ledger = apply_payment(debt.remaining_usd, validation.total_paid_usd)

    applied = distribute_result(validation)
    if notes:
        applied = [replace(a, notes=a.notes or notes) for a in applied]

    records = record_settlements(
        client_id=debt.client_id,
        applied_allocations=applied,
        actor_id=actor_id,
        debt=debt,
    )

    target_status = Debt.STATUS_SETTLED if ledger.settles else Debt.STATUS_ACTIVE
    if not can_transition(from_status=debt.status, to_status=target_status):
        raise DebtAlreadySettled(
            f"Debt {debt.pk} cannot move from {debt.status} to {target_status}.",
            debt_id=str(debt.pk),
            status=debt.status,
        )

    debt.remaining_usd = ledger.new_remaining
    debt.status = target_status
    update_fields = ["remaining_usd", "status", "updated_at"]
    if ledger.settles:
        debt.settled_at = timezone.now()
        update_fields.append("settled_at")
    debt.save(update_fields=update_fields)

    order = Order.objects.select_for_update().get(pk=debt.order_id)
    order_status = Order.PAYMENT_PAID if ledger.settles else Order.PAYMENT_PARTIAL
    if order.payment_status != order_status:
        validate_payment_status_transition(order=order, target_status=order_status)
        order.payment_status = order_status
        order.save(update_fields=["payment_status"])

    return DebtSettlement(debt=debt, records=records, validation=validation, ledger=ledger)


def settle_debt(*, debt_id, allocations, actor_id, notes="") -> DebtSettlement:
    logger.info(
        "Debt settlement started",
        extra={"debt_id": str(debt_id), "allocations": len(allocations or []), "actor_id": actor_id},
    )

    try:
        with transaction.atomic():
            debt = _lock_debt(debt_id)
            result = _settle_locked(debt, allocations=allocations, actor_id=actor_id, notes=notes)
    except DatabaseError as exc:
        logger.exception("Debt settlement failed: storage error", extra={"debt_id": str(debt_id)})
        raise StorageFailure("Persisting the debt payment failed.", debt_id=str(debt_id)) from exc

    logger.info(
        "Debt settlement committed",
        extra={
            "debt_id": str(result.debt.pk),
            "paid_usd": str(result.validation.total_paid_usd),
            "remaining_usd": str(result.debt.remaining_usd),
            "surplus_usd": str(result.ledger.surplus),
            "status": result.debt.status,
        },
    )
    return result


def settle_order_debt(*, order_id, allocations, actor_id, notes="") -> DebtSettlement:
    try:
        debt_id = Debt.objects.filter(order_id=order_id).values_list("id", flat=True).first()
    except (ValidationError, ValueError, TypeError) as exc:
        raise DebtNotFound(f"Order {order_id} has no debt.", order_id=str(order_id)) from exc
    if debt_id is None:
        raise DebtNotFound(f"Order {order_id} has no debt.", order_id=str(order_id))
    return settle_debt(debt_id=debt_id, allocations=allocations, actor_id=actor_id, notes=notes)


@transaction.atomic
def cancel_debt(*, debt_id, actor_id, reason="") -> Debt:
    """
    Administrative active -> cancelled. remaining_usd is kept for audit.
    """
    debt = _lock_debt(debt_id)
    ensure_open(debt)

    reason = str(reason or "").strip()
    stamp = f"Cancelled by {actor_id or 'system'}" + (f": {reason}" if reason else "")

    debt.status = Debt.STATUS_CANCELLED
    debt.notes = f"{debt.notes}\n{stamp}".strip() if debt.notes else stamp
    debt.save(update_fields=["status", "notes", "updated_at"])

    logger.info(
        "Debt cancelled",
        extra={"debt_id": str(debt.pk), "remaining_usd": str(debt.remaining_usd), "actor_id": actor_id},
    )
    return debt
