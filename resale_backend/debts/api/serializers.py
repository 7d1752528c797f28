# debts/api/serializers.py

from rest_framework import serializers

from debts.models import Debt
from payments.serializers import PaymentAllocationInputSerializer, SettlementRecordSerializer


class DebtSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source="order.order_number", read_only=True)
    paid_usd = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    currency = serializers.SerializerMethodField()

    class Meta:
        model = Debt
        fields = [
            "id",
            "order",
            "order_number",
            "client_id",
            "customer_ref",
            "original_usd",
            "remaining_usd",
            "paid_usd",
            "currency",
            "status",
            "due_date",
            "notes",
            "created_at",
            "updated_at",
            "settled_at",
        ]
        read_only_fields = fields

    def get_currency(self, obj):
        return "USD"


class DebtDetailSerializer(DebtSerializer):
    settlement_records = SettlementRecordSerializer(many=True, read_only=True)

    class Meta(DebtSerializer.Meta):
        fields = DebtSerializer.Meta.fields + ["settlement_records"]
        read_only_fields = fields


class SettleDebtInputSerializer(serializers.Serializer):
    allocations = PaymentAllocationInputSerializer(many=True, allow_empty=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)


class CancelDebtInputSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)


class DebtSummaryQuerySerializer(serializers.Serializer):
    client_id = serializers.IntegerField(min_value=1)
