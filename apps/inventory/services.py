# apps/inventory/services.py
import logging

from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import NotFound, ValidationError

from core.constants import GymLocation
from core.exceptions import NegativeStock
from core.mixins.gym_scope import validate_gym
from core.permissions import enforce_gym_access
from .models import Product, ProductStock

logger = logging.getLogger(__name__)


def ensure_stock_rows(product):
    """Create the zero counters for any gym the product has no row for yet"""
    ProductStock.objects.bulk_create(
        [ProductStock(product=product, gym=gym, quantity=0) for gym in GymLocation.values],
        ignore_conflicts=True,
    )


def get_product(product_id):
    try:
        return Product.objects.prefetch_related('stock_levels').get(pk=product_id)
    except (Product.DoesNotExist, ValueError, TypeError):
        raise NotFound('Product not found.')


def available_stock(product, gym):
    row = ProductStock.objects.filter(product=product, gym=gym).only('quantity').first()
    return row.quantity if row else 0


def try_decrement(product, gym, quantity):
    """
    Atomic conditional decrement. The row is only touched when it still
    holds at least `quantity`, so two concurrent sales cannot both take the
    last units. Returns False when the guard fails.
    """
    updated = (
        ProductStock.objects
        .filter(product=product, gym=gym, quantity__gte=quantity)
        .update(quantity=F('quantity') - quantity)
    )
    return updated == 1


def adjust_stock(*, user, product_id, gym, delta):
    """
    Administrative top-up or correction of one (product, gym) counter.
    Raises NegativeStock when the result would drop below zero.
    """
    validate_gym(gym)
    try:
        delta = int(delta)
    except (TypeError, ValueError):
        raise ValidationError({'delta': 'Delta must be an integer.'})

    product = get_product(product_id)
    enforce_gym_access(user, gym, action='adjust stock of')

    with transaction.atomic():
        ensure_stock_rows(product)
        updated = (
            ProductStock.objects
            .filter(product=product, gym=gym, quantity__gte=-delta)
            .update(quantity=F('quantity') + delta)
        )
        if not updated:
            current = available_stock(product, gym)
            logger.warning(
                "Stock adjustment rejected: product=%s gym=%s current=%s delta=%s user=%s",
                product.pk, gym, current, delta, user.pk,
            )
            raise NegativeStock(
                f'Adjusting "{product.name}" at {gym} by {delta} would leave {current + delta} units.'
            )

    logger.info("Stock adjusted: product=%s gym=%s delta=%s by user=%s", product.pk, gym, delta, user.pk)
    return get_product(product.pk)
