# currency/api/serializers.py

from rest_framework import serializers

from currency.models import ExchangeRate
from currency.payment_methods import PaymentMethod


class ExchangeRateSerializer(serializers.ModelSerializer):
    currency = serializers.CharField(read_only=True)

    class Meta:
        model = ExchangeRate
        fields = [
            "client_id",
            "method_code",
            "currency",
            "rate",
            "updated_by",
            "updated_at",
        ]
        read_only_fields = fields


class ClientQuerySerializer(serializers.Serializer):
    client_id = serializers.IntegerField(min_value=1)


class SetRateInputSerializer(serializers.Serializer):
    client_id = serializers.IntegerField(min_value=1)
    rate = serializers.DecimalField(max_digits=None, decimal_places=None)


class SeedDefaultsInputSerializer(serializers.Serializer):
    client_id = serializers.IntegerField(min_value=1)
    overwrite = serializers.BooleanField(required=False, default=False)


class QuoteInputSerializer(serializers.Serializer):
    """
    Conversion quote. If rate is omitted, the client's configured rate is used.
    """

    client_id = serializers.IntegerField(min_value=1)
    method_code = serializers.ChoiceField(choices=PaymentMethod.choices)
    native_amount = serializers.DecimalField(max_digits=None, decimal_places=None)
    rate = serializers.DecimalField(max_digits=None, decimal_places=None, required=False)
