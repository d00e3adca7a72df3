# apps/payments/models.py
from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone

from core.constants import GymLocation, MembershipType, PaymentModes
from core.mixins.audit_fields import AuditFieldsMixin


class Payment(AuditFieldsMixin, models.Model):
    """
    Membership payment. Immutable once recorded: the only mutation is
    deletion, which re-derives the owning student's membership cycle.
    """

    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        related_name='payments'
    )

    amount = models.DecimalField(
        max_digits=12, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    payment_type = models.CharField(max_length=20, choices=MembershipType.choices)
    payment_method = models.CharField(max_length=20, choices=PaymentModes.choices)

    # Snapshot of the student's gym at the time of payment
    gym = models.CharField(max_length=50, choices=GymLocation.choices)

    processed_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='processed_payments'
    )
    payment_date = models.DateTimeField(default=timezone.now)
    comments = models.TextField(blank=True)

    class Meta:
        db_table = 'payments'
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        ordering = ['-payment_date', '-created_at']
        indexes = [
            models.Index(fields=['student', 'payment_date']),
            models.Index(fields=['gym', 'payment_date']),
            models.Index(fields=['payment_type']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name='payment_amount_positive',
            ),
        ]

    def __str__(self):
        return f"Payment #{self.pk} - {self.student_id} - {self.amount}"
