# payments/models/__init__.py

from .settlement_record import SettlementRecord

__all__ = ["SettlementRecord"]
