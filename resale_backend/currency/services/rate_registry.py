# currency/services/rate_registry.py

"""
EXCHANGE RATE REGISTRY (SERVER-OWNED)

Answers ONE question: "what rate does client X use for payment method M right now?"

Rules:
- get_rate() fails fast with RateNotConfigured. Callers never substitute a
  hard-coded fallback mid-transaction.
- set_rate() is the only mutation path. It upserts under a row lock.
- seed_default_rates() is the explicit administrative seeding step that
  populates missing rows from settings.EXCHANGE_RATE_DEFAULTS.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction

from common.errors import InvalidRate, RateNotConfigured
from common.money import ZERO, rate as to_rate
from currency.models import ExchangeRate
from currency.payment_methods import METHOD_SPECS, method_spec

logger = logging.getLogger("currency")


def _require_client_id(client_id) -> int:
    try:
        cid = int(client_id)
    except (TypeError, ValueError):
        raise ValueError(f"client_id must be an integer (got {client_id!r})")
    if cid <= 0:
        raise ValueError("client_id must be positive")
    return cid


def get_rate(client_id, method_code) -> Decimal:
    cid = _require_client_id(client_id)
    spec = method_spec(method_code)

    value = (
        ExchangeRate.objects.filter(client_id=cid, method_code=spec.code)
        .values_list("rate", flat=True)
        .first()
    )
    if value is None:
        logger.warning(
            "Exchange rate lookup failed: not configured",
            extra={"client_id": cid, "method_code": spec.code},
        )
        raise RateNotConfigured(
            f"No exchange rate configured for method '{spec.code}' (client {cid}).",
            method=spec.code,
            client_id=cid,
        )
    return to_rate(value)


def _locked_rate_row(client_id: int, method_code: str) -> ExchangeRate | None:
    return (
        ExchangeRate.objects.select_for_update()
        .filter(client_id=client_id, method_code=method_code)
        .first()
    )


@transaction.atomic
def set_rate(client_id, method_code, rate, *, updated_by: str = "") -> ExchangeRate:
    cid = _require_client_id(client_id)
    spec = method_spec(method_code)

    try:
        new_rate = to_rate(rate)
    except ValueError as exc:
        raise InvalidRate(f"Invalid exchange rate: {rate!r}", method=spec.code) from exc
    if new_rate <= ZERO:
        raise InvalidRate(
            f"Exchange rate must be greater than zero (got {new_rate}).",
            method=spec.code,
            rate=str(new_rate),
        )

    previous = None
    created = False
    row = _locked_rate_row(cid, spec.code)
    if row is None:
        try:
            with transaction.atomic():
                row = ExchangeRate.objects.create(
                    client_id=cid,
                    method_code=spec.code,
                    rate=new_rate,
                    updated_by=updated_by or "",
                )
            created = True
        except IntegrityError:
            # A concurrent first write created the row: update it under the lock.
            row = _locked_rate_row(cid, spec.code)
            if row is None:
                raise

    if not created:
        previous = row.rate
        row.rate = new_rate
        row.updated_by = updated_by or ""
        row.save(update_fields=["rate", "updated_by", "updated_at"])

    logger.info(
        "Exchange rate updated",
        extra={
            "client_id": cid,
            "method_code": spec.code,
            "previous_rate": str(previous) if previous is not None else None,
            "rate": str(new_rate),
            "updated_by": updated_by,
        },
    )
    return row


def list_rates(client_id) -> list[ExchangeRate]:
    cid = _require_client_id(client_id)
    return list(ExchangeRate.objects.filter(client_id=cid).order_by("method_code"))


def _default_rates() -> dict:
    configured = getattr(settings, "EXCHANGE_RATE_DEFAULTS", None) or {}
    out = {}
    for code in METHOD_SPECS:
        if code in configured:
            out[code] = to_rate(configured[code])
    return out


@transaction.atomic
def seed_default_rates(client_id, *, overwrite: bool = False, updated_by: str = "seed") -> list[ExchangeRate]:
    """
    Populate a client's registry from EXCHANGE_RATE_DEFAULTS.

    - Missing rows are created.
    - Existing rows are left alone unless overwrite=True.
    Returns the rows that were created or overwritten.
    """
    cid = _require_client_id(client_id)
    existing = set(
        ExchangeRate.objects.filter(client_id=cid).values_list("method_code", flat=True)
    )

    touched = []
    for code, default_rate in _default_rates().items():
        if code in existing and not overwrite:
            continue
        touched.append(set_rate(cid, code, default_rate, updated_by=updated_by))

    logger.info(
        "Exchange rate defaults seeded",
        extra={
            "client_id": cid,
            "overwrite": overwrite,
            "methods": [r.method_code for r in touched],
        },
    )
    return touched
