# orders/models/__init__.py

from .order import Order
from .line_item import LineItem

__all__ = ["Order", "LineItem"]
