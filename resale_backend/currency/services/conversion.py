# currency/services/conversion.py

"""
CURRENCY CONVERSION ENGINE (PURE)

Converts a payment method's native amount into its USD ledger equivalent
using the per-method ConversionRule (see currency/payment_methods.py).

Hard rules:
- Pure functions. No DB, no registry lookups: the caller passes the rate it pinned.
- usd_equivalent is rounded ONCE here (2dp, ROUND_HALF_UP) and is the single
  source of truth. Totals are sums of these rounded values.
- local_amount is bookkeeping/display only and never feeds back into USD totals.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from common.errors import InvalidAmount, InvalidRate
from common.money import ZERO, money, rate as to_rate, to_decimal
from currency.payment_methods import ConversionRule, method_spec


@dataclass(frozen=True)
class PaymentAllocation:
    """
    One payment leg with its rate pinned at allocation time.
    rate_snapshot never changes after this object is built.
    """

    method_code: str
    native_amount: Decimal
    currency: str
    rate_snapshot: Decimal
    usd_equivalent: Decimal
    local_amount: Decimal


def _require_rate(value, *, method_code=None) -> Decimal:
    try:
        r = to_rate(value)
    except ValueError as exc:
        raise InvalidRate(f"Invalid exchange rate: {value!r}", method=method_code) from exc
    if r <= ZERO:
        raise InvalidRate(
            f"Exchange rate must be greater than zero (got {r}).",
            method=method_code,
            rate=str(r),
        )
    return r


def _require_amount(value, *, method_code=None) -> Decimal:
    try:
        amt = to_decimal(value)
    except ValueError as exc:
        raise InvalidAmount(f"Invalid amount: {value!r}", method=method_code) from exc
    if amt <= ZERO:
        raise InvalidAmount(
            f"Amount must be greater than zero (got {amt}).",
            method=method_code,
            amount=str(amt),
        )
    return amt


def convert_to_usd(method_code, native_amount, rate) -> Decimal:
    spec = method_spec(method_code)
    r = _require_rate(rate, method_code=spec.code)
    amt = _require_amount(native_amount, method_code=spec.code)

    if spec.rule == ConversionRule.DIVIDE:
        return money(amt / r)
    return money(amt)


def local_amount(method_code, native_amount, rate) -> Decimal:
    spec = method_spec(method_code)
    r = _require_rate(rate, method_code=spec.code)
    amt = _require_amount(native_amount, method_code=spec.code)

    if spec.rule == ConversionRule.DIVIDE:
        return money(amt)
    return money(amt * r)


def convert_from_usd(method_code, usd_amount, rate) -> Decimal:
    """
    Native amount that covers `usd_amount` under the method's rule.
    Used to quote balances (e.g. remaining debt in ARS).
    """
    spec = method_spec(method_code)
    r = _require_rate(rate, method_code=spec.code)
    usd = _require_amount(usd_amount, method_code=spec.code)

    if spec.rule == ConversionRule.DIVIDE:
        return money(usd * r)
    return money(usd)


def build_allocation(method_code, native_amount, rate) -> PaymentAllocation:
    spec = method_spec(method_code)
    r = _require_rate(rate, method_code=spec.code)
    amt = money(_require_amount(native_amount, method_code=spec.code))

    return PaymentAllocation(
        method_code=spec.code,
        native_amount=amt,
        currency=spec.currency,
        rate_snapshot=r,
        usd_equivalent=convert_to_usd(spec.code, amt, r),
        local_amount=local_amount(spec.code, amt, r),
    )
