# orders/api/filters.py

import django_filters

from orders.models import Order


class OrderFilter(django_filters.FilterSet):
    client_id = django_filters.NumberFilter(field_name="client_id")
    payment_status = django_filters.ChoiceFilter(choices=Order.PAYMENT_STATUS_CHOICES)
    customer_ref = django_filters.CharFilter(field_name="customer_ref")
    created_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    created_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = ["client_id", "payment_status", "customer_ref"]
