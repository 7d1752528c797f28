# payments/serializers/settlement_record.py

from rest_framework import serializers

from payments.models import SettlementRecord


class SettlementRecordSerializer(serializers.ModelSerializer):
    usd_currency = serializers.SerializerMethodField()

    class Meta:
        model = SettlementRecord
        fields = [
            "id",
            "target_type",
            "order",
            "debt",
            "method_code",
            "native_amount",
            "currency",
            "rate_snapshot",
            "usd_equivalent",
            "applied_usd",
            "surplus_usd",
            "usd_currency",
            "local_amount",
            "notes",
            "created_by",
            "created_at",
        ]
        read_only_fields = fields

    def get_usd_currency(self, obj):
        return "USD"
