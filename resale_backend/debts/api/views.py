# debts/api/views.py

"""
DEBTS API

- GET  /api/debts/                  list (?client_id=&status=&customer_ref=&due_before=)
- GET  /api/debts/summary/?client_id=
- GET  /api/debts/<uuid>/           retrieve (with settlement records)
- POST /api/debts/<uuid>/settle/    {allocations: [...], notes?}
- POST /api/debts/<uuid>/cancel/    {reason?}
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api_errors import settlement_error_response
from common.errors import SettlementError
from common.money import Money
from debts.api.filters import DebtFilter
from debts.api.serializers import (
    CancelDebtInputSerializer,
    DebtDetailSerializer,
    DebtSerializer,
    DebtSummaryQuerySerializer,
    SettleDebtInputSerializer,
)
from debts.models import Debt
from debts.services.debt_settlement import cancel_debt, debt_summary, get_debt, settle_debt
from payments.serializers import SettlementRecordSerializer


class DebtViewSet(viewsets.ReadOnlyModelViewSet):
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = DebtFilter

    def get_queryset(self):
        return Debt.objects.all().select_related("order").order_by("-created_at")

    def get_serializer_class(self):
        if self.action == "retrieve":
            return DebtDetailSerializer
        return DebtSerializer

    def retrieve(self, request, *args, **kwargs):
        try:
            debt = get_debt(kwargs.get("pk"))
        except SettlementError as exc:
            return settlement_error_response(exc)
        return Response(DebtDetailSerializer(debt).data)

    @extend_schema(parameters=[DebtSummaryQuerySerializer])
    @action(detail=False, methods=["get"], url_path="summary")
    def summary(self, request):
        query = DebtSummaryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        data = debt_summary(client_id=query.validated_data["client_id"])
        return Response(
            {
                "client_id": data["client_id"],
                "active_count": data["active_count"],
                "outstanding": Money.usd(data["outstanding_usd"]).as_dict(),
            }
        )

    @extend_schema(request=SettleDebtInputSerializer, responses={200: DebtDetailSerializer})
    @action(detail=True, methods=["post"], url_path="settle")
    def settle(self, request, pk=None):
        ser = SettleDebtInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            result = settle_debt(
                debt_id=pk,
                allocations=[dict(a) for a in ser.validated_data["allocations"]],
                actor_id=request.user.get_username(),
                notes=ser.validated_data.get("notes", ""),
            )
        except SettlementError as exc:
            return settlement_error_response(exc)

        return Response(
            {
                "debt": DebtSerializer(result.debt).data,
                "records": SettlementRecordSerializer(result.records, many=True).data,
                "paid": Money.usd(result.validation.total_paid_usd).as_dict(),
                "surplus": Money.usd(result.surplus_usd).as_dict(),
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(request=CancelDebtInputSerializer, responses={200: DebtSerializer})
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        ser = CancelDebtInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        try:
            debt = cancel_debt(
                debt_id=pk,
                actor_id=request.user.get_username(),
                reason=ser.validated_data.get("reason", ""),
            )
        except SettlementError as exc:
            return settlement_error_response(exc)

        return Response(DebtSerializer(debt).data, status=status.HTTP_200_OK)
