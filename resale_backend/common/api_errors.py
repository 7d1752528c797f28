# common/api_errors.py

"""
API ERROR NORMALIZATION

Canonical error body:
    {"error": {"code": "...", "message": "...", "details": {...}}}

Views catch SettlementError at the edge and hand it to settlement_error_response().
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from common.errors import (
    DebtAlreadySettled,
    DebtNotFound,
    InventoryConflict,
    SettlementError,
    StorageFailure,
)


def error_response(*, code: str, message: str, http_status: int, details: dict | None = None):
    return Response(
        {"error": {"code": code, "message": message, "details": details or {}}},
        status=http_status,
    )


def http_status_for(exc: SettlementError) -> int:
    if isinstance(exc, DebtNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (InventoryConflict, DebtAlreadySettled)):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, StorageFailure):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_400_BAD_REQUEST


def settlement_error_response(exc: SettlementError):
    return error_response(
        code=exc.code,
        message=exc.message,
        http_status=http_status_for(exc),
        details=exc.details,
    )
