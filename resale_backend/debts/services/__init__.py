from .debt_ledger import LedgerApplication, apply_payment
from .debt_settlement import (
    DebtSettlement,
    cancel_debt,
    debt_summary,
    get_debt,
    list_debts,
    settle_debt,
    settle_order_debt,
)

__all__ = [
    "LedgerApplication",
    "apply_payment",
    "DebtSettlement",
    "cancel_debt",
    "debt_summary",
    "get_debt",
    "list_debts",
    "settle_debt",
    "settle_order_debt",
]
