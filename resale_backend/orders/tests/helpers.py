from decimal import Decimal

from currency.services.rate_registry import set_rate
from inventory.models import InventoryItem

CLIENT = 1


def seed_rates(client_id=CLIENT):
    set_rate(client_id, "cash_usd", "1")
    set_rate(client_id, "wire_usd", "1")
    set_rate(client_id, "cash_ars", "1100")
    set_rate(client_id, "wire_ars", "1100")
    set_rate(client_id, "broker_ars_to_usd", "1050")
    set_rate(client_id, "broker_usd_to_ars", "1050")


def make_item(imei, *, client_id=CLIENT, status=InventoryItem.STATUS_AVAILABLE, model="iPhone 13"):
    return InventoryItem.objects.create(
        client_id=client_id,
        imei=imei,
        model=model,
        storage="128GB",
        color="Midnight",
        cost_price_usd=Decimal("300.00"),
        status=status,
    )


def line(item, price):
    return {"item_id": str(item.pk), "sale_price_usd": price}


def pay(method_code, amount):
    return {"method_code": method_code, "native_amount": amount}
