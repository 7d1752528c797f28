# currency/payment_methods.py

"""
PAYMENT METHOD CATALOGUE (CLOSED SET)

Each payment method has:
- a native currency (what the customer actually hands over)
- a conversion rule (how the native amount maps to the USD ledger)

Rules:
- DIRECT:               usd = native,        local display = native * rate
- DIVIDE:               usd = native / rate, local display = native
- DIRECT_WITH_DISPLAY:  usd = native,        local display = native * rate

The table below is the ONLY place this mapping lives.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.db import models

from common.errors import UnknownPaymentMethod
from common.money import Currency


class PaymentMethod(models.TextChoices):
    CASH_ARS = "cash_ars", "Cash (ARS)"
    CASH_USD = "cash_usd", "Cash (USD)"
    WIRE_ARS = "wire_ars", "Wire transfer (ARS)"
    WIRE_USD = "wire_usd", "Wire transfer (USD)"
    WIRE_USDT = "wire_usdt", "Wire transfer (USDT)"
    BROKER_USD_TO_ARS = "broker_usd_to_ars", "Broker (USD to ARS)"
    BROKER_ARS_TO_USD = "broker_ars_to_usd", "Broker (ARS to USD)"


class ConversionRule(models.TextChoices):
    DIRECT = "direct", "Direct"
    DIVIDE = "divide", "Divide"
    DIRECT_WITH_DISPLAY = "direct_with_display", "Direct with local display"


@dataclass(frozen=True)
class MethodSpec:
    code: str
    currency: str
    rule: str


METHOD_SPECS = {
    spec.code: spec
    for spec in (
        MethodSpec(PaymentMethod.CASH_USD.value, Currency.USD.value, ConversionRule.DIRECT.value),
        MethodSpec(PaymentMethod.WIRE_USD.value, Currency.USD.value, ConversionRule.DIRECT.value),
        MethodSpec(PaymentMethod.WIRE_USDT.value, Currency.USDT.value, ConversionRule.DIRECT.value),
        MethodSpec(PaymentMethod.CASH_ARS.value, Currency.ARS.value, ConversionRule.DIVIDE.value),
        MethodSpec(PaymentMethod.WIRE_ARS.value, Currency.ARS.value, ConversionRule.DIVIDE.value),
        MethodSpec(PaymentMethod.BROKER_ARS_TO_USD.value, Currency.ARS.value, ConversionRule.DIVIDE.value),
        MethodSpec(
            PaymentMethod.BROKER_USD_TO_ARS.value,
            Currency.USD.value,
            ConversionRule.DIRECT_WITH_DISPLAY.value,
        ),
    )
}


def method_spec(method_code) -> MethodSpec:
    code = str(method_code or "").strip().lower()
    spec = METHOD_SPECS.get(code)
    if spec is None:
        raise UnknownPaymentMethod(
            f"Unknown payment method: {method_code!r}",
            method=str(method_code),
        )
    return spec


def native_currency(method_code) -> str:
    return method_spec(method_code).currency


def conversion_rule(method_code) -> str:
    return method_spec(method_code).rule
