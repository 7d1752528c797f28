# payments/services/settlement_records.py

"""
SETTLEMENT RECORD WRITER

Writes one append-only SettlementRecord per distributed allocation,
linked to exactly one target (Order or Debt).

Caller owns the transaction.
"""

from __future__ import annotations

from payments.models import SettlementRecord


def record_settlements(*, client_id, applied_allocations, actor_id="", order=None, debt=None) -> list[SettlementRecord]:
    if (order is None) == (debt is None):
        raise ValueError("record_settlements requires exactly one of order or debt.")

    target_type = SettlementRecord.TARGET_ORDER if order is not None else SettlementRecord.TARGET_DEBT

    records = []
    for item in applied_allocations:
        alloc = item.allocation
        records.append(
            SettlementRecord.objects.create(
                client_id=client_id,
                target_type=target_type,
                order=order,
                debt=debt,
                method_code=alloc.method_code,
                native_amount=alloc.native_amount,
                currency=alloc.currency,
                rate_snapshot=alloc.rate_snapshot,
                usd_equivalent=alloc.usd_equivalent,
                local_amount=alloc.local_amount,
                applied_usd=item.applied_usd,
                surplus_usd=item.surplus_usd,
                notes=item.notes,
                created_by=str(actor_id or ""),
            )
        )
    return records
