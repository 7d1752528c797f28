# inventory/models/__init__.py

from .inventory_item import InventoryItem

__all__ = ["InventoryItem"]
