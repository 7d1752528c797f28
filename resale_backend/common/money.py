# common/money.py

"""
MONEY PRIMITIVES

Rules:
- Decimal arithmetic only (never float).
- Stored money is 2dp, ROUND_HALF_UP.
- Rates are 4dp.
- USD totals are compared with a one-cent tolerance (MONEY_EPSILON),
  never with exact equality.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import models

TWOPLACES = Decimal("0.01")
FOURPLACES = Decimal("0.0001")
ZERO = Decimal("0.00")

MONEY_EPSILON = Decimal("0.01")


class Currency(models.TextChoices):
    USD = "USD", "US Dollar"
    ARS = "ARS", "Argentine Peso"
    USDT = "USDT", "Tether (USDT)"


def to_decimal(value) -> Decimal:
    """
    Strict Decimal coercion.
    Floats go through str() so 0.1 stays 0.1.
    Raises ValueError for anything that is not a number.
    """
    if isinstance(value, Decimal):
        d = value
    elif value is None or value == "" or isinstance(value, bool):
        raise ValueError(f"not a decimal value: {value!r}")
    else:
        try:
            d = Decimal(str(value).strip())
        except (InvalidOperation, TypeError) as exc:
            raise ValueError(f"not a decimal value: {value!r}") from exc
    if not d.is_finite():
        raise ValueError(f"not a finite decimal value: {value!r}")
    return d


def money(value) -> Decimal:
    return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def rate(value) -> Decimal:
    return to_decimal(value).quantize(FOURPLACES, rounding=ROUND_HALF_UP)


def usd_equal(a: Decimal, b: Decimal) -> bool:
    return abs(money(a) - money(b)) <= MONEY_EPSILON


def sum_money(values) -> Decimal:
    total = ZERO
    for v in values:
        total += money(v)
    return money(total)


@dataclass(frozen=True)
class Money:
    """Amount tagged with an explicit currency."""

    amount: Decimal
    currency: str

    def __post_init__(self):
        object.__setattr__(self, "amount", money(self.amount))
        if self.currency not in Currency.values:
            raise ValueError(f"unsupported currency: {self.currency!r}")

    @classmethod
    def usd(cls, value) -> "Money":
        return cls(amount=money(value), currency=Currency.USD)

    def as_dict(self) -> dict:
        return {"amount": str(self.amount), "currency": str(self.currency)}

    def __str__(self):
        return f"{self.currency} {self.amount}"
