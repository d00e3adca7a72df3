from decimal import Decimal

from rest_framework import serializers

from core.constants import GymLocation, SalePaymentModes
from apps.accounts.serializers import MinimalUserSerializer
from apps.students.serializers import MinimalStudentSerializer
from .models import Sale, SaleItem, Installment


# ===========================================
# READ SERIALIZERS
# ===========================================
class SaleItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = SaleItem
        fields = ['id', 'product', 'product_name', 'location', 'quantity', 'unit_price', 'line_total']
        read_only_fields = fields


class InstallmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Installment
        fields = ['id', 'sequence', 'amount', 'due_date', 'paid', 'paid_date']
        read_only_fields = fields


class SaleSerializer(serializers.ModelSerializer):
    """Read view of a sale with lines, installments and people embedded"""

    items = SaleItemSerializer(many=True, read_only=True)
    installments = InstallmentSerializer(many=True, read_only=True)
    customer = MinimalStudentSerializer(read_only=True)
    processed_by = MinimalUserSerializer(read_only=True)
    outstanding_balance = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Sale
        fields = [
            'id', 'gym', 'payment_method', 'total', 'sale_date',
            'customer', 'processed_by', 'items', 'installments',
            'outstanding_balance', 'created_at',
        ]
        read_only_fields = fields


# ===========================================
# INPUT SERIALIZERS
# ===========================================
class SaleLineInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1)
    location = serializers.ChoiceField(choices=GymLocation.choices, required=False, allow_null=True)


class InstallmentInputSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    due_date = serializers.DateField()


class SaleCreateSerializer(serializers.Serializer):
    items = SaleLineInputSerializer(many=True, allow_empty=False)
    payment_method = serializers.ChoiceField(choices=SalePaymentModes.choices)
    gym = serializers.ChoiceField(choices=GymLocation.choices, required=False, allow_null=True)
    customer_id = serializers.IntegerField(required=False, allow_null=True)
    installments = InstallmentInputSerializer(many=True, required=False)


class InstallmentUpdateSerializer(serializers.Serializer):
    paid = serializers.BooleanField()
    paid_date = serializers.DateTimeField(required=False, allow_null=True)


class SaleSummarySerializer(serializers.Serializer):
    category = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()
