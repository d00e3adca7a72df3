# apps/payments/filters.py

from django_filters import rest_framework as filters

from core.constants import MembershipType, PaymentModes
from .models import Payment


class PaymentFilter(filters.FilterSet):
    """Filter for payments; the gym filter is applied by the scoping mixin"""

    start_date = filters.DateFilter(field_name='payment_date', lookup_expr='date__gte')
    end_date = filters.DateFilter(field_name='payment_date', lookup_expr='date__lte')
    payment_type = filters.ChoiceFilter(choices=MembershipType.choices)
    payment_method = filters.ChoiceFilter(choices=PaymentModes.choices)
    student = filters.NumberFilter(field_name='student_id')

    class Meta:
        model = Payment
        fields = ['start_date', 'end_date', 'payment_type', 'payment_method', 'student']
