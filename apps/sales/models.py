# apps/sales/models.py
from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone

from core.constants import GymLocation, SalePaymentModes
from core.mixins.audit_fields import AuditFieldsMixin


class Sale(AuditFieldsMixin, models.Model):
    """Point-of-sale transaction. Total is computed from catalog prices."""

    gym = models.CharField(max_length=50, choices=GymLocation.choices)
    payment_method = models.CharField(max_length=20, choices=SalePaymentModes.choices)

    customer = models.ForeignKey(
        'students.Student',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='purchases'
    )
    processed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='processed_sales'
    )

    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    sale_date = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'sales'
        ordering = ['-sale_date', '-created_at']
        indexes = [
            models.Index(fields=['gym', 'sale_date']),
            models.Index(fields=['payment_method']),
        ]

    def __str__(self):
        return f"Sale #{self.pk} - {self.gym} - {self.total}"

    @property
    def outstanding_balance(self):
        return sum(
            (inst.amount for inst in self.installments.all() if not inst.paid),
            Decimal('0.00')
        )


class SaleItem(models.Model):
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(
        'inventory.Product',
        on_delete=models.PROTECT,
        related_name='sale_items'
    )
    # Gym whose stock counter was decremented for this line
    location = models.CharField(max_length=50, choices=GymLocation.choices)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        db_table = 'sale_items'
        ordering = ['id']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name='sale_item_quantity_positive',
            ),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.product_id} @ {self.unit_price}"

    @property
    def line_total(self):
        return self.unit_price * self.quantity


class Installment(models.Model):
    """Scheduled partial receivable of an installment sale"""

    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='installments')
    sequence = models.PositiveSmallIntegerField()
    amount = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    due_date = models.DateField()
    paid = models.BooleanField(default=False)
    paid_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'sale_installments'
        ordering = ['sale', 'sequence']
        constraints = [
            models.UniqueConstraint(fields=['sale', 'sequence'], name='unique_installment_sequence'),
        ]

    def __str__(self):
        return f"Installment {self.sequence} of sale #{self.sale_id}"
