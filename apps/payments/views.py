import logging

from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from core.mixins.gym_scope import GymQuerysetMixin
from core.permissions import IsAuthenticatedAndActive, HasObjectGymAccess
from apps.reports.services import ReportService
from .filters import PaymentFilter
from .models import Payment
from .serializers import (
    PaymentSerializer, PaymentCreateSerializer, PaymentSummarySerializer
)
from . import services

logger = logging.getLogger(__name__)


# ===========================================
# PAYMENT VIEWSET
# ===========================================
class PaymentViewSet(GymQuerysetMixin,
                     mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     viewsets.GenericViewSet):
    """
    Membership payment ledger.
    Payments are immutable: there is no update endpoint, only record and delete.
    """

    queryset = Payment.objects.select_related('student', 'processed_by')
    serializer_class = PaymentSerializer
    permission_classes = [IsAuthenticatedAndActive, HasObjectGymAccess]
    filter_backends = [DjangoFilterBackend]
    filterset_class = PaymentFilter

    def create(self, request, *args, **kwargs):
        """Record a payment and roll the student's membership cycle forward"""
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = services.record_payment(user=request.user, **serializer.validated_data)

        return Response(
            PaymentSerializer(payment, context={'request': request}).data,
            status=status.HTTP_201_CREATED
        )

    def destroy(self, request, *args, **kwargs):
        """Delete a payment and recompute the student's cycle from what remains"""
        student = services.delete_payment(user=request.user, payment_id=kwargs['pk'])
        return Response({
            'id': int(kwargs['pk']),
            'student': {
                'id': student.pk,
                'last_payment_date': student.last_payment_date,
                'next_payment_date': student.next_payment_date,
            },
        }, status=status.HTTP_200_OK)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Totals grouped by payment type (default) or payment method"""
        params = request.query_params
        rows = ReportService.payment_summary(
            request.user,
            gym=params.get('gym'),
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            group_by=params.get('group_by', 'payment_type'),
        )
        return Response(PaymentSummarySerializer(rows, many=True).data)
