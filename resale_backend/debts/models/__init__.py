# debts/models/__init__.py

from .debt import Debt

__all__ = ["Debt"]
