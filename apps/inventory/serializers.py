# apps/inventory/serializers.py
from decimal import Decimal

from rest_framework import serializers

from core.constants import GymLocation
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Catalog entry with its per-gym stock counters"""

    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    stock = serializers.SerializerMethodField()
    total_stock = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id',
            'name',
            'type',
            'price',
            'description',
            'allow_installments',
            'stock',
            'total_stock',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_stock(self, obj):
        return obj.stock_map()

    def get_total_stock(self, obj):
        return obj.total_stock

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required.")
        return value


class StockAdjustmentSerializer(serializers.Serializer):
    gym = serializers.ChoiceField(choices=GymLocation.choices)
    delta = serializers.IntegerField()
