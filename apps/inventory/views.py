# apps/inventory/views.py
import logging

from django.db.models import ProtectedError
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend

from core.permissions import IsAuthenticatedAndActive, IsAdminOrReadOnly
from .filters import ProductFilter
from .models import Product
from .serializers import ProductSerializer, StockAdjustmentSerializer
from . import services

logger = logging.getLogger(__name__)


class ProductViewSet(viewsets.ModelViewSet):
    """
    Product catalog. Catalog edits are admin-only; stock adjustments are
    allowed for staff of the target gym.
    """
    queryset = Product.objects.prefetch_related('stock_levels')
    serializer_class = ProductSerializer
    permission_classes = [IsAuthenticatedAndActive, IsAdminOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter

    def get_permissions(self):
        if self.action == 'adjust_stock':
            return [IsAuthenticatedAndActive()]
        return super().get_permissions()

    def perform_update(self, serializer):
        product = serializer.save()
        logger.info("Product updated: id=%s by user=%s", product.pk, self.request.user.pk)

    def perform_destroy(self, instance):
        product_id = instance.pk
        try:
            instance.delete()
        except ProtectedError:
            raise ValidationError({'detail': 'Product has recorded sales and cannot be deleted.'})
        logger.info("Product deleted: id=%s by user=%s", product_id, self.request.user.pk)

    @action(detail=True, methods=['post'], url_path='adjust-stock')
    def adjust_stock(self, request, pk=None):
        """Add (positive delta) or remove (negative delta) units at one gym"""
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = services.adjust_stock(user=request.user, product_id=pk, **serializer.validated_data)
        return Response(ProductSerializer(product, context={'request': request}).data)
