# debts/api/filters.py

import django_filters

from debts.models import Debt


class DebtFilter(django_filters.FilterSet):
    client_id = django_filters.NumberFilter(field_name="client_id")
    status = django_filters.ChoiceFilter(choices=Debt.STATUS_CHOICES)
    customer_ref = django_filters.CharFilter(field_name="customer_ref")
    due_before = django_filters.DateFilter(field_name="due_date", lookup_expr="lte")

    class Meta:
        model = Debt
        fields = ["client_id", "status", "customer_ref"]
