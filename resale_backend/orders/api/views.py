# orders/api/views.py

"""
ORDERS API

- POST /api/orders/            create_order (reserve-then-commit settlement)
- GET  /api/orders/            list (?client_id=&payment_status=&customer_ref=&created_from=&created_to=)
- GET  /api/orders/<uuid>/     retrieve

Errors use the canonical {"error": {...}} body (common.api_errors).
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api_errors import settlement_error_response
from common.errors import SettlementError
from orders.api.filters import OrderFilter
from orders.api.serializers import CreateOrderInputSerializer, OrderSerializer
from orders.models import Order
from orders.services.order_settlement import create_order


class OrderViewSet(mixins.CreateModelMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = OrderFilter

    def get_queryset(self):
        return Order.objects.all().prefetch_related("line_items", "settlement_records").order_by("-created_at")

    @extend_schema(request=CreateOrderInputSerializer, responses={201: OrderSerializer})
    def create(self, request, *args, **kwargs):
        ser = CreateOrderInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data

        try:
            result = create_order(
                client_id=data["client_id"],
                customer_ref=data["customer_ref"],
                vendor_ref=data.get("vendor_ref", ""),
                line_items=[
                    {"item_id": str(li["item_id"]), "sale_price_usd": li["sale_price_usd"]}
                    for li in data["line_items"]
                ],
                allocations=[dict(a) for a in data.get("allocations") or []],
                actor_id=request.user.get_username(),
                shipping_type=data.get("shipping_type", ""),
                shipping_address=data.get("shipping_address", ""),
                observations=data.get("observations", ""),
                on_credit=data.get("on_credit", False),
            )
        except SettlementError as exc:
            return settlement_error_response(exc)

        payload = OrderSerializer(result.order).data
        payload["outcome"] = result.outcome
        payload["total_paid_usd"] = str(result.total_paid_usd)
        payload["surplus_usd"] = str(result.surplus_usd)
        return Response(payload, status=status.HTTP_201_CREATED)
