from decimal import Decimal

from rest_framework import serializers

from core.constants import MembershipType, PaymentModes
from apps.accounts.serializers import MinimalUserSerializer
from apps.students.serializers import MinimalStudentSerializer
from .models import Payment


# ===========================================
# PAYMENT SERIALIZERS
# ===========================================
class PaymentSerializer(serializers.ModelSerializer):
    """Read view of a payment with student and cashier embedded"""

    student = MinimalStudentSerializer(read_only=True)
    processed_by = MinimalUserSerializer(read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'student', 'amount', 'payment_type', 'payment_method',
            'gym', 'processed_by', 'payment_date', 'comments',
            'created_at',
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    """Input for recording a payment"""

    student_id = serializers.IntegerField()
    amount = serializers.DecimalField(
        max_digits=12, decimal_places=2,
        min_value=Decimal('0.01')
    )
    payment_type = serializers.ChoiceField(choices=MembershipType.choices)
    payment_method = serializers.ChoiceField(choices=PaymentModes.choices)
    payment_date = serializers.DateTimeField(required=False, allow_null=True)
    comments = serializers.CharField(required=False, allow_blank=True, default='')


class PaymentSummarySerializer(serializers.Serializer):
    category = serializers.CharField()
    total = serializers.DecimalField(max_digits=14, decimal_places=2)
    count = serializers.IntegerField()
