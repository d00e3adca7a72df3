# apps/inventory/models.py
from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator

from core.constants import GymLocation, ProductType
from core.mixins.audit_fields import AuditFieldsMixin


class Product(AuditFieldsMixin, models.Model):
    """Sellable catalog item shared by every gym"""

    name = models.CharField(max_length=150)
    type = models.CharField(max_length=20, choices=ProductType.choices)
    price = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    description = models.TextField(blank=True)
    allow_installments = models.BooleanField(default=False)

    class Meta:
        db_table = 'products'
        ordering = ['name']
        indexes = [
            models.Index(fields=['type']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name='product_price_positive',
            ),
        ]

    def __str__(self):
        return self.name

    def stock_map(self):
        """{gym: count} for every known gym, in GymLocation order"""
        counts = {level.gym: level.quantity for level in self.stock_levels.all()}
        return {gym: counts.get(gym, 0) for gym in GymLocation.values}

    @property
    def total_stock(self):
        return sum(self.stock_map().values())


class ProductStock(models.Model):
    """
    One stock counter per (product, gym). Gym keys come from the fixed
    GymLocation set, so a typo cannot create a phantom location.
    """

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name='stock_levels'
    )
    gym = models.CharField(max_length=50, choices=GymLocation.choices)
    quantity = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'product_stock'
        ordering = ['product', 'gym']
        constraints = [
            models.UniqueConstraint(fields=['product', 'gym'], name='unique_stock_per_gym'),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name='stock_quantity_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.product} @ {self.gym}: {self.quantity}"
