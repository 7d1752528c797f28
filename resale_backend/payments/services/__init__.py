from payments.services.allocation_validator import (
    OUTCOME_FULLY_PAID,
    OUTCOME_OVERPAY,
    OUTCOME_SHORTFALL,
    AllocationResult,
    AppliedAllocation,
    classify,
    distribute,
    distribute_result,
    validate_allocations,
)

__all__ = [
    "OUTCOME_FULLY_PAID",
    "OUTCOME_OVERPAY",
    "OUTCOME_SHORTFALL",
    "AllocationResult",
    "AppliedAllocation",
    "classify",
    "distribute",
    "distribute_result",
    "validate_allocations",
]
