from .allocation import PaymentAllocationInputSerializer
from .settlement_record import SettlementRecordSerializer

__all__ = [
    "PaymentAllocationInputSerializer",
    "SettlementRecordSerializer",
]
