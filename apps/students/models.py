# gym/Backend/apps/students/models.py
from django.db import models
from django.utils import timezone

from core.constants import GymLocation, MembershipType, StudentStatus
from core.mixins.audit_fields import AuditFieldsMixin


class Student(AuditFieldsMixin, models.Model):
    """
    Enrolled gym member.

    `last_payment_date` and `next_payment_date` belong to the membership cycle
    and are only written by the payment ledger (see apps.payments.services).
    """

    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=30, unique=True)
    photo_url = models.URLField(blank=True)

    gym = models.CharField(max_length=50, choices=GymLocation.choices)
    membership_type = models.CharField(max_length=20, choices=MembershipType.choices)
    status = models.CharField(
        max_length=20,
        choices=StudentStatus.choices,
        default=StudentStatus.ACTIVE
    )

    enrollment_date = models.DateTimeField(default=timezone.now)

    # Membership cycle
    last_payment_date = models.DateTimeField(null=True, blank=True)
    next_payment_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'students'
        ordering = ['name']
        indexes = [
            models.Index(fields=['gym', 'status']),
            models.Index(fields=['phone']),
            models.Index(fields=['next_payment_date']),
        ]

    def __str__(self):
        return f"{self.name} ({self.gym})"

    def is_overdue(self, now=None):
        now = now or timezone.now()
        return bool(self.next_payment_date and self.next_payment_date < now)
