import logging

from rest_framework import viewsets, mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from core.mixins.gym_scope import GymQuerysetMixin
from core.permissions import IsAuthenticatedAndActive, HasObjectGymAccess
from apps.reports.services import ReportService
from .filters import SaleFilter
from .models import Sale
from .serializers import (
    SaleSerializer, SaleCreateSerializer, SaleSummarySerializer,
    InstallmentSerializer, InstallmentUpdateSerializer,
)
from . import services

logger = logging.getLogger(__name__)


# ===========================================
# SALE VIEWSET
# ===========================================
class SaleViewSet(GymQuerysetMixin,
                  mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  viewsets.GenericViewSet):
    """
    Point-of-sale ledger. Sales are recorded and read; only their
    installments change afterwards.
    """

    queryset = (
        Sale.objects
        .select_related('customer', 'processed_by')
        .prefetch_related('items__product', 'installments')
    )
    serializer_class = SaleSerializer
    permission_classes = [IsAuthenticatedAndActive, HasObjectGymAccess]
    filter_backends = [DjangoFilterBackend]
    filterset_class = SaleFilter

    def create(self, request, *args, **kwargs):
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        sale = services.record_sale(user=request.user, **serializer.validated_data)

        return Response(
            SaleSerializer(sale, context={'request': request}).data,
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Totals grouped by payment method"""
        params = request.query_params
        rows = ReportService.sale_summary(
            request.user,
            gym=params.get('gym'),
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            group_by=params.get('group_by', 'payment_method'),
        )
        return Response(SaleSummarySerializer(rows, many=True).data)

    @action(detail=True, methods=['patch'], url_path=r'installments/(?P<installment_id>[^/.]+)')
    def installment(self, request, pk=None, installment_id=None):
        """Mark an installment as paid or unpaid"""
        serializer = InstallmentUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        installment = services.update_installment(
            user=request.user,
            sale_id=pk,
            installment_id=installment_id,
            **serializer.validated_data
        )
        return Response(InstallmentSerializer(installment).data)
