# apps/inventory/filters.py

from django_filters import rest_framework as filters

from core.constants import ProductType
from .models import Product


class ProductFilter(filters.FilterSet):
    search = filters.CharFilter(field_name='name', lookup_expr='icontains')
    type = filters.ChoiceFilter(choices=ProductType.choices)
    allow_installments = filters.BooleanFilter()

    class Meta:
        model = Product
        fields = ['search', 'type', 'allow_installments']
