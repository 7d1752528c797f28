import uuid
from unittest.mock import Mock

from django.db.models import F
from django.test import TestCase

from common.errors import InventoryConflict
from inventory.models import InventoryItem
from inventory.services.gateway import MAX_CAS_ATTEMPTS, DatabaseInventoryGateway, SaleTicket, TicketArena


class _ConcurrentEditGateway(DatabaseInventoryGateway):
    """Moves the item between sellable statuses right after each of the first `edits` reads."""

    def __init__(self, edits):
        self.edits = edits
        self.reads = 0

    def get_item(self, item_id, *, client_id=None):
        item = super().get_item(item_id, client_id=client_id)
        self.reads += 1
        if self.reads <= self.edits:
            next_status = (
                InventoryItem.STATUS_RESERVED
                if item.status == InventoryItem.STATUS_AVAILABLE
                else InventoryItem.STATUS_AVAILABLE
            )
            InventoryItem.objects.filter(pk=item.pk).update(status=next_status, version=F("version") + 1)
        return item


class DatabaseInventoryGatewayTests(TestCase):
    """
    GUARANTEES:
    - try_sell is a compare-and-swap: at most one caller wins per item
    - release_sale restores the previous status once, and only for its own sale
    """

    def setUp(self):
        self.gateway = DatabaseInventoryGateway()
        self.item = InventoryItem.objects.create(
            client_id=1,
            imei="350000000000001",
            model="iPhone 13",
            storage="128GB",
            color="Black",
            cost_price_usd="300.00",
        )

    def test_try_sell_marks_item_sold_and_bumps_version(self):
        ticket = self.gateway.try_sell(self.item.pk, "seller-1")

        self.item.refresh_from_db()
        self.assertEqual(self.item.status, InventoryItem.STATUS_SOLD)
        self.assertEqual(self.item.version, 1)
        self.assertEqual(ticket.previous_status, InventoryItem.STATUS_AVAILABLE)
        self.assertEqual(ticket.version, 1)
        self.assertEqual(ticket.imei, "350000000000001")

    def test_second_sale_of_same_item_conflicts(self):
        self.gateway.try_sell(self.item.pk, "seller-1")

        with self.assertRaises(InventoryConflict) as ctx:
            self.gateway.try_sell(self.item.pk, "seller-2")
        self.assertEqual(ctx.exception.details["status"], InventoryItem.STATUS_SOLD)
        self.assertEqual(ctx.exception.details["imei"], "350000000000001")

    def test_reserved_item_is_sellable_and_restored_on_release(self):
        InventoryItem.objects.filter(pk=self.item.pk).update(status=InventoryItem.STATUS_RESERVED)

        ticket = self.gateway.try_sell(self.item.pk, "seller-1")
        self.assertTrue(self.gateway.release_sale(ticket))

        self.item.refresh_from_db()
        self.assertEqual(self.item.status, InventoryItem.STATUS_RESERVED)

    def test_non_sellable_statuses_conflict(self):
        for status in (
            InventoryItem.STATUS_INTERNAL_REPAIR,
            InventoryItem.STATUS_EXTERNAL_REPAIR,
            InventoryItem.STATUS_TO_REPAIR,
            InventoryItem.STATUS_LOST,
        ):
            with self.subTest(status=status):
                InventoryItem.objects.filter(pk=self.item.pk).update(status=status)
                with self.assertRaises(InventoryConflict):
                    self.gateway.try_sell(self.item.pk, "seller-1")

    def test_missing_item_conflicts(self):
        with self.assertRaises(InventoryConflict) as ctx:
            self.gateway.try_sell(uuid.uuid4(), "seller-1")
        self.assertEqual(ctx.exception.details["status"], "missing")

    def test_item_of_another_client_is_reported_missing(self):
        with self.assertRaises(InventoryConflict) as ctx:
            self.gateway.try_sell(self.item.pk, "seller-1", client_id=2)

        self.assertEqual(ctx.exception.details["status"], "missing")
        self.item.refresh_from_db()
        self.assertEqual(self.item.status, InventoryItem.STATUS_AVAILABLE)
        self.assertEqual(self.item.version, 0)

    def test_owning_client_can_sell(self):
        ticket = self.gateway.try_sell(self.item.pk, "seller-1", client_id=1)
        self.assertEqual(ticket.version, 1)

    def test_retries_when_item_changes_between_read_and_update(self):
        gateway = _ConcurrentEditGateway(edits=1)

        ticket = gateway.try_sell(self.item.pk, "seller-1")

        # first compare-and-swap loses to the edit, the second one wins
        self.assertEqual(gateway.reads, 2)
        self.assertEqual(ticket.previous_status, InventoryItem.STATUS_RESERVED)
        self.assertEqual(ticket.version, 2)
        self.item.refresh_from_db()
        self.assertEqual(self.item.status, InventoryItem.STATUS_SOLD)

    def test_gives_up_after_max_attempts(self):
        gateway = _ConcurrentEditGateway(edits=MAX_CAS_ATTEMPTS)

        with self.assertRaises(InventoryConflict) as ctx:
            gateway.try_sell(self.item.pk, "seller-1")

        self.assertEqual(gateway.reads, MAX_CAS_ATTEMPTS + 1)
        self.assertEqual(ctx.exception.details["imei"], "350000000000001")
        self.item.refresh_from_db()
        self.assertNotEqual(self.item.status, InventoryItem.STATUS_SOLD)

    def test_release_is_idempotent(self):
        ticket = self.gateway.try_sell(self.item.pk, "seller-1")

        self.assertTrue(self.gateway.release_sale(ticket))
        self.assertFalse(self.gateway.release_sale(ticket))

        self.item.refresh_from_db()
        self.assertEqual(self.item.status, InventoryItem.STATUS_AVAILABLE)

    def test_stale_ticket_does_not_undo_a_later_sale(self):
        stale = self.gateway.try_sell(self.item.pk, "seller-1")
        self.gateway.release_sale(stale)
        self.gateway.try_sell(self.item.pk, "seller-2")

        self.assertFalse(self.gateway.release_sale(stale))
        self.item.refresh_from_db()
        self.assertEqual(self.item.status, InventoryItem.STATUS_SOLD)


class TicketArenaTests(TestCase):
    def setUp(self):
        self.gateway = DatabaseInventoryGateway()
        self.items = [
            InventoryItem.objects.create(client_id=1, imei=f"35000000000010{i}", model="Pixel 7")
            for i in range(3)
        ]

    def test_release_all_restores_every_ticket(self):
        arena = TicketArena(self.gateway)
        for item in self.items:
            arena.acquire(item.pk, "seller-1")

        self.assertEqual(arena.release_all(), 3)
        self.assertEqual(len(arena), 0)
        self.assertEqual(
            InventoryItem.objects.filter(status=InventoryItem.STATUS_AVAILABLE).count(),
            3,
        )

    def test_commit_hands_over_tickets(self):
        arena = TicketArena(self.gateway)
        arena.acquire(self.items[0].pk, "seller-1")

        kept = arena.commit()
        self.assertEqual(len(kept), 1)
        self.assertEqual(arena.release_all(), 0)

        self.items[0].refresh_from_db()
        self.assertEqual(self.items[0].status, InventoryItem.STATUS_SOLD)

    def test_release_failure_does_not_stop_other_releases(self):
        gateway = Mock()
        gateway.release_sale.side_effect = [RuntimeError("network"), True]
        arena = TicketArena(gateway)
        arena.tickets = [
            SaleTicket(item_id="a", imei="1", previous_status="available", version=1),
            SaleTicket(item_id="b", imei="2", previous_status="available", version=1),
        ]

        with self.assertLogs("inventory", level="ERROR"):
            released = arena.release_all()

        self.assertEqual(released, 1)
        self.assertEqual(gateway.release_sale.call_count, 2)
