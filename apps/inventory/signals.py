# apps/inventory/signals.py

from django.db.models.signals import post_save
from django.dispatch import receiver
import logging

from .models import Product
from .services import ensure_stock_rows

logger = logging.getLogger(__name__)


# ===========================================
# PRODUCT SIGNALS
# ===========================================

@receiver(post_save, sender=Product)
def product_post_save(sender, instance, created, **kwargs):
    """
    Every product starts with a zero counter at every gym
    """
    if created:
        ensure_stock_rows(instance)
        logger.info("Product created: id=%s name=%s", instance.pk, instance.name)
