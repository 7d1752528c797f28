from .conversion import (
    PaymentAllocation,
    build_allocation,
    convert_from_usd,
    convert_to_usd,
    local_amount,
)
from .rate_registry import get_rate, list_rates, seed_default_rates, set_rate

__all__ = [
    "PaymentAllocation",
    "build_allocation",
    "convert_from_usd",
    "convert_to_usd",
    "local_amount",
    "get_rate",
    "list_rates",
    "seed_default_rates",
    "set_rate",
]
