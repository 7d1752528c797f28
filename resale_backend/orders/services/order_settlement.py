# orders/services/order_settlement.py

"""
ORDER SETTLEMENT WORKFLOW (APPLICATION SERVICE)

Purpose:
- Turn a draft (line items + proposed payment allocations) into a committed
  Order, its SettlementRecords and, when not fully paid, a Debt.

Flow:
  drafting -> validating -> reserving_inventory -> persisting -> committed
  (aborted from any non-terminal state; see orders.services.order_lifecycle)

Hard rules:
- total_usd is computed server-side: sum(line_items.sale_price_usd).
- All conversion/validation goes through payments.services.allocation_validator.
- Inventory is reserved BEFORE anything is written (reserve-then-commit).
  Any abort releases every ticket acquired in this run (TicketArena).
- Order + LineItems + SettlementRecords + Debt are written in ONE transaction.
- A storage error is fatal for the attempt: tickets released, StorageFailure
  raised, never retried here (a retry could double-write settlement records).

MISMATCH POLICY (settings.ORDER_PAYMENT_MISMATCH_POLICY):
- "open_debt" (default): shortfall opens a Debt, overpay is accepted and the
  surplus recorded on the settlement records.
- "reject": any mismatch raises PaymentMismatch, unless on_credit=True was
  passed for a shortfall.

REQUEST DEADLINE:
- settings.SETTLEMENT_REQUEST_TIMEOUT_SECONDS (default 10). Checked after each
  reservation and before persisting; exceeding it compensates like any error.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from common.errors import (
    DuplicateLineItem,
    EmptyOrder,
    InvalidAmount,
    InventoryConflict,
    PaymentMismatch,
    SettlementTimeout,
    StorageFailure,
)
from common.money import ZERO, money, sum_money
from debts.models import Debt
from inventory.services.gateway import DatabaseInventoryGateway, TicketArena
from orders.models import LineItem, Order
from orders.services import order_lifecycle as lifecycle
from payments.models import SettlementRecord
from payments.services.allocation_validator import (
    OUTCOME_FULLY_PAID,
    OUTCOME_OVERPAY,
    OUTCOME_SHORTFALL,
    AllocationResult,
    distribute_result,
    validate_allocations,
)
from payments.services.settlement_records import record_settlements

logger = logging.getLogger("settlements")

POLICY_OPEN_DEBT = "open_debt"
POLICY_REJECT = "reject"

OUTCOME_UNPAID = "unpaid"


@dataclass(frozen=True)
class DraftLineItem:
    item_id: str
    sale_price_usd: object


@dataclass
class OrderSettlement:
    order: Order
    debt: Debt | None
    records: list[SettlementRecord]
    outcome: str
    line_items: list[LineItem] = field(default_factory=list)
    total_paid_usd: object = ZERO
    surplus_usd: object = ZERO


# ============================================================
# HELPERS
# ============================================================


def _mismatch_policy() -> str:
    policy = str(getattr(settings, "ORDER_PAYMENT_MISMATCH_POLICY", POLICY_OPEN_DEBT) or "").strip().lower()
    if policy not in (POLICY_OPEN_DEBT, POLICY_REJECT):
        raise ValueError(f"Invalid ORDER_PAYMENT_MISMATCH_POLICY: {policy!r}")
    return policy


def _timeout_seconds(timeout_seconds) -> float:
    if timeout_seconds is None:
        timeout_seconds = getattr(settings, "SETTLEMENT_REQUEST_TIMEOUT_SECONDS", 10)
    return float(timeout_seconds)


def _debt_term_days() -> int:
    return int(getattr(settings, "DEBT_DEFAULT_TERM_DAYS", 30))


def _value(entry, key):
    if isinstance(entry, dict):
        return entry.get(key)
    return getattr(entry, key, None)


def _normalize_line_items(line_items) -> list[DraftLineItem]:
    """
    Drafting: normalize ids, reject the same device twice in one order.
    Prices are checked while validating.
    """
    out = []
    seen = set()
    for idx, raw in enumerate(line_items or []):
        item_id = str(_value(raw, "item_id") or "").strip()
        try:
            item_id = str(uuid.UUID(item_id))
        except ValueError:
            pass
        if item_id in seen:
            raise DuplicateLineItem(
                f"Inventory item {item_id} appears more than once in this order.",
                item_id=item_id,
                index=idx,
            )
        seen.add(item_id)
        out.append(DraftLineItem(item_id=item_id, sale_price_usd=_value(raw, "sale_price_usd")))
    return out


def _validate_prices(draft_items: list[DraftLineItem]) -> list[DraftLineItem]:
    priced = []
    for idx, li in enumerate(draft_items):
        try:
            price = money(li.sale_price_usd)
        except ValueError as exc:
            raise InvalidAmount(
                f"Invalid sale price for line #{idx + 1}: {li.sale_price_usd!r}",
                item_id=li.item_id,
                index=idx,
            ) from exc
        if price <= ZERO:
            raise InvalidAmount(
                f"Sale price for line #{idx + 1} must be greater than zero.",
                item_id=li.item_id,
                index=idx,
                amount=str(price),
            )
        priced.append(DraftLineItem(item_id=li.item_id, sale_price_usd=price))
    return priced


def _apply_mismatch_policy(result: AllocationResult, *, on_credit: bool):
    if result.outcome == OUTCOME_FULLY_PAID:
        return
    if _mismatch_policy() != POLICY_REJECT:
        return
    if result.outcome == OUTCOME_SHORTFALL and on_credit:
        return

    raise PaymentMismatch(
        f"Payments ({result.total_paid_usd} USD) do not match the order total ({result.amount_due_usd} USD).",
        outcome=result.outcome,
        total_paid_usd=str(result.total_paid_usd),
        amount_due_usd=str(result.amount_due_usd),
        shortfall_usd=str(result.shortfall_usd) if result.shortfall_usd else None,
        overpay_usd=str(result.overpay_usd) if result.overpay_usd else None,
    )


def payment_status_for(result: AllocationResult | None) -> str:
    if result is None or result.total_paid_usd <= ZERO:
        return Order.PAYMENT_UNPAID
    if result.outcome in (OUTCOME_FULLY_PAID, OUTCOME_OVERPAY):
        return Order.PAYMENT_PAID
    return Order.PAYMENT_PARTIAL


class _Deadline:
    def __init__(self, seconds: float):
        self.seconds = seconds
        self.expires_at = time.monotonic() + seconds

    def check(self, stage: str):
        if time.monotonic() > self.expires_at:
            raise SettlementTimeout(
                f"Order settlement exceeded {self.seconds:g}s while {stage}.",
                stage=stage,
            )


def _describe_conflicts(
    gateway, draft_items, first_conflict: InventoryConflict, held=(), client_id=None
) -> list[dict]:
    """
    Report every unsellable item in the draft, not only the first one hit.
    Read-only: uses get_item, never try_sell.
    """
    conflicts = [dict(first_conflict.details)]
    reported = {first_conflict.details.get("item_id")} | {str(t.item_id) for t in held}
    for li in draft_items:
        if li.item_id in reported:
            continue
        try:
            item = gateway.get_item(li.item_id, client_id=client_id)
        except InventoryConflict as exc:
            conflicts.append(dict(exc.details))
            continue
        if not item.is_sellable:
            conflicts.append({"item_id": str(item.pk), "imei": item.imei, "status": item.status})
    return conflicts


# ============================================================
# PERSISTENCE
# ============================================================


def _persist(
    *,
    client_id,
    customer_ref,
    vendor_ref,
    draft_items,
    tickets,
    total_usd,
    result,
    payment_status,
    actor_id,
    shipping_type,
    shipping_address,
    observations,
):
    with transaction.atomic():
        order = Order.objects.create(
            client_id=client_id,
            customer_ref=customer_ref,
            vendor_ref=vendor_ref,
            total_usd=total_usd,
            payment_status=payment_status,
            shipping_type=shipping_type,
            shipping_address=shipping_address,
            observations=observations,
            created_by=str(actor_id or ""),
        )

        line_rows = [
            LineItem.objects.create(
                order=order,
                inventory_item_id=ticket.item_id,
                imei_snapshot=ticket.imei,
                sale_price_usd=li.sale_price_usd,
            )
            for li, ticket in zip(draft_items, tickets)
        ]

        records = []
        if result is not None:
            records = record_settlements(
                client_id=client_id,
                applied_allocations=distribute_result(result),
                actor_id=actor_id,
                order=order,
            )

        debt = None
        if payment_status != Order.PAYMENT_PAID:
            remaining = result.shortfall_usd if result is not None else total_usd
            debt = Debt.objects.create(
                order=order,
                client_id=client_id,
                customer_ref=customer_ref,
                original_usd=total_usd,
                remaining_usd=remaining,
                status=Debt.STATUS_ACTIVE,
                due_date=timezone.localdate() + timedelta(days=_debt_term_days()),
                notes=f"Opened for order {order.order_number}",
            )

    return order, line_rows, records, debt


# ============================================================
# WORKFLOW
# ============================================================


def create_order(
    *,
    client_id,
    customer_ref,
    vendor_ref="",
    line_items,
    allocations,
    actor_id,
    shipping_type="",
    shipping_address="",
    observations="",
    on_credit=False,
    gateway=None,
    timeout_seconds=None,
) -> OrderSettlement:
    run = lifecycle.SettlementRun()
    gateway = gateway or DatabaseInventoryGateway()
    arena = TicketArena(gateway)
    deadline = _Deadline(_timeout_seconds(timeout_seconds))

    logger.info(
        "Order settlement started",
        extra={
            "client_id": client_id,
            "customer_ref": customer_ref,
            "line_items": len(line_items or []),
            "allocations": len(allocations or []),
            "actor_id": actor_id,
        },
    )

    try:
        # Drafting
        draft_items = _normalize_line_items(line_items)

        # Validating
        run.advance(lifecycle.VALIDATING)
        if not draft_items:
            raise EmptyOrder("An order needs at least one line item.")

        draft_items = _validate_prices(draft_items)
        total_usd = sum_money(li.sale_price_usd for li in draft_items)

        result = None
        if allocations or not on_credit:
            result = validate_allocations(
                client_id=client_id,
                entries=allocations,
                amount_due_usd=total_usd,
            )
            _apply_mismatch_policy(result, on_credit=on_credit)

        payment_status = payment_status_for(result)
        outcome = result.outcome if result is not None else OUTCOME_UNPAID

        # Reserving inventory
        run.advance(lifecycle.RESERVING_INVENTORY)
        for li in draft_items:
            try:
                arena.acquire(li.item_id, actor_id, client_id=client_id)
            except InventoryConflict as exc:
                conflicts = _describe_conflicts(
                    gateway, draft_items, exc, held=arena.tickets, client_id=client_id
                )
                raise InventoryConflict(
                    exc.message,
                    items=conflicts,
                    **exc.details,
                ) from exc
            deadline.check(lifecycle.RESERVING_INVENTORY)

        # Persisting
        run.advance(lifecycle.PERSISTING)
        deadline.check(lifecycle.PERSISTING)
        try:
            order, line_rows, records, debt = _persist(
                client_id=client_id,
                customer_ref=customer_ref,
                vendor_ref=vendor_ref or "",
                draft_items=draft_items,
                tickets=list(arena.tickets),
                total_usd=total_usd,
                result=result,
                payment_status=payment_status,
                actor_id=actor_id,
                shipping_type=shipping_type or "",
                shipping_address=shipping_address or "",
                observations=observations or "",
            )
        except DatabaseError as exc:
            raise StorageFailure(
                "Persisting the order failed; inventory reservations were released.",
                stage=lifecycle.PERSISTING,
            ) from exc

        arena.commit()
        run.advance(lifecycle.COMMITTED)

    except Exception as exc:
        run.abort()
        released = arena.release_all()
        logger.warning(
            "Order settlement aborted",
            extra={
                "client_id": client_id,
                "error_code": getattr(exc, "code", type(exc).__name__),
                "tickets_released": released,
                "stage": run.history[-2] if len(run.history) > 1 else run.state,
            },
        )
        raise

    surplus = sum_money(r.surplus_usd for r in records)

    logger.info(
        "Order settlement committed",
        extra={
            "order_id": str(order.pk),
            "order_number": order.order_number,
            "total_usd": str(total_usd),
            "payment_status": order.payment_status,
            "outcome": outcome,
            "debt_id": str(debt.pk) if debt else None,
            "surplus_usd": str(surplus),
        },
    )

    return OrderSettlement(
        order=order,
        debt=debt,
        records=records,
        outcome=outcome,
        line_items=line_rows,
        total_paid_usd=result.total_paid_usd if result is not None else ZERO,
        surplus_usd=surplus,
    )
