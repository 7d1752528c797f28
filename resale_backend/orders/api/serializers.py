# orders/api/serializers.py

from rest_framework import serializers

from debts.models import Debt
from orders.models import LineItem, Order
from payments.serializers import PaymentAllocationInputSerializer, SettlementRecordSerializer


# ==========================================================
# INPUT
# ==========================================================


class LineItemInputSerializer(serializers.Serializer):
    item_id = serializers.UUIDField()
    sale_price_usd = serializers.DecimalField(max_digits=None, decimal_places=None)


class CreateOrderInputSerializer(serializers.Serializer):
    client_id = serializers.IntegerField(min_value=1)
    customer_ref = serializers.CharField(max_length=128)
    vendor_ref = serializers.CharField(max_length=128, required=False, allow_blank=True, default="")

    line_items = LineItemInputSerializer(many=True, allow_empty=True)
    allocations = PaymentAllocationInputSerializer(many=True, required=False, default=list)

    shipping_type = serializers.ChoiceField(
        choices=Order.SHIPPING_CHOICES,
        required=False,
        allow_blank=True,
        default="",
    )
    shipping_address = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    observations = serializers.CharField(required=False, allow_blank=True, default="")

    on_credit = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        if attrs.get("shipping_type") == Order.SHIPPING_ADDRESS and not attrs.get("shipping_address", "").strip():
            raise serializers.ValidationError({"shipping_address": "Required when shipping_type is 'address'."})
        return attrs


# ==========================================================
# READ
# ==========================================================


class LineItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = LineItem
        fields = [
            "id",
            "inventory_item",
            "imei_snapshot",
            "sale_price_usd",
            "created_at",
        ]
        read_only_fields = fields


class OrderDebtSerializer(serializers.ModelSerializer):
    class Meta:
        model = Debt
        fields = [
            "id",
            "original_usd",
            "remaining_usd",
            "status",
            "due_date",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """
    Order with its line items, initial settlement records and open debt.
    All *_usd figures are USD; settlement records carry their native currency.
    """

    currency = serializers.SerializerMethodField()
    line_items = LineItemSerializer(many=True, read_only=True)
    settlement_records = SettlementRecordSerializer(many=True, read_only=True)
    debt = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "client_id",
            "customer_ref",
            "vendor_ref",
            "total_usd",
            "currency",
            "payment_status",
            "shipping_type",
            "shipping_address",
            "observations",
            "created_by",
            "created_at",
            "line_items",
            "settlement_records",
            "debt",
        ]
        read_only_fields = fields

    def get_currency(self, obj):
        return "USD"

    def get_debt(self, obj):
        debt = Debt.objects.filter(order_id=obj.pk).first()
        return OrderDebtSerializer(debt).data if debt else None
