# payments/serializers/allocation.py

from rest_framework import serializers


class PaymentAllocationInputSerializer(serializers.Serializer):
    """
    One payment leg as submitted by the client.

    method_code is validated by the domain (UNKNOWN_PAYMENT_METHOD),
    and native_amount > 0 likewise (INVALID_AMOUNT with method + index).
    Any precision is accepted here: amounts are rounded to cents (HALF_UP)
    by the conversion engine, never rejected for extra decimals.
    """

    method_code = serializers.CharField(max_length=32)
    native_amount = serializers.DecimalField(max_digits=None, decimal_places=None)
    notes = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
