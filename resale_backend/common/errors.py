# common/errors.py

"""
SETTLEMENT ERROR TAXONOMY

Every rejected operation carries:
- code:    machine-readable error kind (stable, used by API clients)
- message: human readable explanation
- details: the offending method / item / index, never empty when known

Recoverable by correcting input (never partially mutate state):
- InvalidAmount, InvalidRate, RateNotConfigured, NoPaymentMethodSelected,
  EmptyOrder, UnknownPaymentMethod, DuplicateLineItem, PaymentMismatch

Recoverable at workflow level (compensation already ran):
- InventoryConflict

Fatal to the attempt (tickets released, surfaced verbatim, not retried):
- StorageFailure, SettlementTimeout
"""

from __future__ import annotations


class SettlementError(Exception):
    """Base exception for all settlement engine failures."""

    code = "SETTLEMENT_ERROR"

    def __init__(self, message: str = "", **details):
        self.message = message or self.__class__.__doc__ or self.code
        self.details = {k: v for k, v in details.items() if v is not None}
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class InvalidAmount(SettlementError):
    """Amount must be greater than zero."""

    code = "INVALID_AMOUNT"


class InvalidRate(SettlementError):
    """Exchange rate must be greater than zero."""

    code = "INVALID_RATE"


class RateNotConfigured(SettlementError):
    """No exchange rate configured for this client and payment method."""

    code = "RATE_NOT_CONFIGURED"


class UnknownPaymentMethod(SettlementError):
    """Payment method code is not supported."""

    code = "UNKNOWN_PAYMENT_METHOD"


class NoPaymentMethodSelected(SettlementError):
    """At least one payment allocation is required."""

    code = "NO_PAYMENT_METHOD_SELECTED"


class EmptyOrder(SettlementError):
    """An order needs at least one line item."""

    code = "EMPTY_ORDER"


class DuplicateLineItem(SettlementError):
    """The same inventory item appears more than once in an order."""

    code = "DUPLICATE_LINE_ITEM"


class PaymentMismatch(SettlementError):
    """Payments do not match the amount due."""

    code = "PAYMENT_MISMATCH"


class InventoryConflict(SettlementError):
    """Inventory item is not available for sale."""

    code = "INVENTORY_CONFLICT"


class DebtNotFound(SettlementError):
    """Debt does not exist."""

    code = "DEBT_NOT_FOUND"


class DebtAlreadySettled(SettlementError):
    """Debt is no longer open for payments."""

    code = "DEBT_ALREADY_SETTLED"


class StorageFailure(SettlementError):
    """Persisting the settlement failed."""

    code = "STORAGE_FAILURE"


class SettlementTimeout(StorageFailure):
    """Settlement exceeded the request deadline."""

    code = "SETTLEMENT_TIMEOUT"


class InvalidWorkflowTransition(SettlementError):
    """Workflow state transition is not allowed."""

    code = "INVALID_WORKFLOW_TRANSITION"
