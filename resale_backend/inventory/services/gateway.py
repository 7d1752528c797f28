# inventory/services/gateway.py

"""
INVENTORY TRANSITION GATEWAY

Answers ONE question: "can this device be sold right now, and if so, mark it sold".

Rules:
- try_sell() is a compare-and-swap: a single conditional UPDATE guarded by the
  status + version the caller observed. Zero rows updated => InventoryConflict.
  At most one concurrent caller can win for the same item.
- Every successful transition bumps `version`; the SaleTicket remembers it.
- Scoped by client_id when given: a device owned by another client is
  "missing" for this caller and is never touched.
- release_sale() restores the previous status ONLY if the item is still sold
  at the ticket's version. Releasing twice is a no-op.
- Each call commits on its own (the gateway behaves like an external
  collaborator; it never joins the caller's persistence transaction).

TicketArena:
- collects tickets acquired during one workflow run
- releases all of them (reverse order) when the run aborts
- release failures are logged, never raised over the original error
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F
from django.utils import timezone

from common.errors import InventoryConflict, StorageFailure
from inventory.models import InventoryItem

logger = logging.getLogger("inventory")

# A concurrent non-sale edit can move an item between sellable statuses;
# re-read and retry a bounded number of times before calling it a conflict.
MAX_CAS_ATTEMPTS = 3


@dataclass(frozen=True)
class SaleTicket:
    item_id: object
    imei: str
    previous_status: str
    version: int
    actor_id: str = ""
    issued_at: datetime = field(default_factory=timezone.now)


class InventoryGateway(Protocol):
    def get_item(self, item_id, *, client_id=None) -> InventoryItem: ...

    def try_sell(self, item_id, actor_id, *, client_id=None) -> SaleTicket: ...

    def release_sale(self, ticket: SaleTicket) -> bool: ...


class DatabaseInventoryGateway:
    """InventoryGateway backed by the inventory_items table."""

    def get_item(self, item_id, *, client_id=None) -> InventoryItem:
        """
        With client_id, another client's device is reported exactly like a
        missing one.
        """
        qs = InventoryItem.objects.all()
        if client_id is not None:
            qs = qs.filter(client_id=client_id)
        try:
            return qs.get(pk=item_id)
        except (InventoryItem.DoesNotExist, ValidationError, ValueError, TypeError) as exc:
            raise InventoryConflict(
                f"Inventory item {item_id} does not exist.",
                item_id=str(item_id),
                status="missing",
            ) from exc

    def try_sell(self, item_id, actor_id, *, client_id=None) -> SaleTicket:
        for _ in range(MAX_CAS_ATTEMPTS):
            item = self.get_item(item_id, client_id=client_id)

            if not item.is_sellable:
                logger.info(
                    "Inventory sale rejected: item not sellable",
                    extra={"item_id": str(item.pk), "imei": item.imei, "status": item.status},
                )
                raise InventoryConflict(
                    f"Item {item.imei} is not available for sale (status: {item.status}).",
                    item_id=str(item.pk),
                    imei=item.imei,
                    status=item.status,
                )

            try:
                with transaction.atomic():
                    updated = InventoryItem.objects.filter(
                        pk=item.pk,
                        client_id=item.client_id,
                        status=item.status,
                        version=item.version,
                    ).update(
                        status=InventoryItem.STATUS_SOLD,
                        version=F("version") + 1,
                        updated_at=timezone.now(),
                    )
            except DatabaseError as exc:
                raise StorageFailure(
                    f"Inventory update failed for item {item.imei}.",
                    item_id=str(item.pk),
                ) from exc

            if updated == 1:
                ticket = SaleTicket(
                    item_id=item.pk,
                    imei=item.imei,
                    previous_status=item.status,
                    version=item.version + 1,
                    actor_id=str(actor_id or ""),
                )
                logger.info(
                    "Inventory item marked sold",
                    extra={"item_id": str(item.pk), "imei": item.imei, "version": ticket.version},
                )
                return ticket

        current = self.get_item(item_id, client_id=client_id)
        raise InventoryConflict(
            f"Item {current.imei} changed concurrently (status: {current.status}).",
            item_id=str(current.pk),
            imei=current.imei,
            status=current.status,
        )

    def release_sale(self, ticket: SaleTicket) -> bool:
        with transaction.atomic():
            updated = InventoryItem.objects.filter(
                pk=ticket.item_id,
                status=InventoryItem.STATUS_SOLD,
                version=ticket.version,
            ).update(
                status=ticket.previous_status,
                version=F("version") + 1,
                updated_at=timezone.now(),
            )

        if updated:
            logger.info(
                "Inventory sale released",
                extra={"item_id": str(ticket.item_id), "imei": ticket.imei, "restored": ticket.previous_status},
            )
        return bool(updated)


class TicketArena:
    """Tickets held by one workflow run."""

    def __init__(self, gateway: InventoryGateway):
        self.gateway = gateway
        self.tickets: list[SaleTicket] = []

    def acquire(self, item_id, actor_id, *, client_id=None) -> SaleTicket:
        ticket = self.gateway.try_sell(item_id, actor_id, client_id=client_id)
        self.tickets.append(ticket)
        return ticket

    def release_all(self) -> int:
        released = 0
        while self.tickets:
            ticket = self.tickets.pop()
            try:
                if self.gateway.release_sale(ticket):
                    released += 1
            except Exception:
                logger.exception(
                    "Failed to release inventory ticket",
                    extra={"item_id": str(ticket.item_id), "imei": ticket.imei},
                )
        return released

    def commit(self) -> list[SaleTicket]:
        """Hand the tickets over to the committed order; nothing left to release."""
        kept, self.tickets = self.tickets, []
        return kept

    def __len__(self):
        return len(self.tickets)
