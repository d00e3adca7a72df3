# apps/sales/filters.py

from django_filters import rest_framework as filters

from core.constants import SalePaymentModes
from .models import Sale


class SaleFilter(filters.FilterSet):
    """Filter for sales; the gym filter is applied by the scoping mixin"""

    start_date = filters.DateFilter(field_name='sale_date', lookup_expr='date__gte')
    end_date = filters.DateFilter(field_name='sale_date', lookup_expr='date__lte')
    payment_method = filters.ChoiceFilter(choices=SalePaymentModes.choices)
    customer = filters.NumberFilter(field_name='customer_id')

    class Meta:
        model = Sale
        fields = ['start_date', 'end_date', 'payment_method', 'customer']
