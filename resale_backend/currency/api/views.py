# currency/api/views.py

"""
EXCHANGE RATE REGISTRY API

- GET  /api/currency/rates/?client_id=
- GET  /api/currency/rates/<method_code>/?client_id=
- PUT  /api/currency/rates/<method_code>/          {client_id, rate}
- POST /api/currency/rates/seed-defaults/          {client_id, overwrite?}
- POST /api/currency/quote/                        {client_id, method_code, native_amount, rate?}
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from common.api_errors import settlement_error_response
from common.errors import SettlementError
from common.money import Currency
from currency.api.serializers import (
    ClientQuerySerializer,
    ExchangeRateSerializer,
    QuoteInputSerializer,
    SeedDefaultsInputSerializer,
    SetRateInputSerializer,
)
from currency.services.conversion import build_allocation
from currency.services.rate_registry import get_rate, list_rates, seed_default_rates, set_rate


class ExchangeRateListView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(parameters=[ClientQuerySerializer], responses={200: ExchangeRateSerializer(many=True)})
    def get(self, request):
        query = ClientQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        rows = list_rates(query.validated_data["client_id"])
        return Response(ExchangeRateSerializer(rows, many=True).data)


class ExchangeRateDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(parameters=[ClientQuerySerializer])
    def get(self, request, method_code: str):
        query = ClientQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        client_id = query.validated_data["client_id"]

        try:
            value = get_rate(client_id, method_code)
        except SettlementError as exc:
            return settlement_error_response(exc)

        return Response(
            {"client_id": client_id, "method_code": method_code, "rate": str(value)}
        )

    @extend_schema(request=SetRateInputSerializer, responses={200: ExchangeRateSerializer})
    def put(self, request, method_code: str):
        serializer = SetRateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            row = set_rate(
                serializer.validated_data["client_id"],
                method_code,
                serializer.validated_data["rate"],
                updated_by=request.user.get_username(),
            )
        except SettlementError as exc:
            return settlement_error_response(exc)

        return Response(ExchangeRateSerializer(row).data, status=status.HTTP_200_OK)


class SeedDefaultRatesView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=SeedDefaultsInputSerializer, responses={200: ExchangeRateSerializer(many=True)})
    def post(self, request):
        serializer = SeedDefaultsInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client_id = serializer.validated_data["client_id"]

        seed_default_rates(
            client_id,
            overwrite=serializer.validated_data["overwrite"],
            updated_by=request.user.get_username(),
        )
        return Response(ExchangeRateSerializer(list_rates(client_id), many=True).data)


class ConversionQuoteView(APIView):
    """
    Preview a conversion without persisting anything.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(request=QuoteInputSerializer)
    def post(self, request):
        serializer = QuoteInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            pinned = data.get("rate")
            if pinned is None:
                pinned = get_rate(data["client_id"], data["method_code"])
            allocation = build_allocation(data["method_code"], data["native_amount"], pinned)
        except SettlementError as exc:
            return settlement_error_response(exc)

        return Response(
            {
                "method_code": allocation.method_code,
                "native": {"amount": str(allocation.native_amount), "currency": allocation.currency},
                "rate_snapshot": str(allocation.rate_snapshot),
                "usd_equivalent": {"amount": str(allocation.usd_equivalent), "currency": Currency.USD.value},
                "local_amount": {"amount": str(allocation.local_amount), "currency": Currency.ARS.value},
            }
        )
