# apps/payments/services.py
import logging
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from core.constants import MembershipType, PaymentModes, StudentStatus
from core.permissions import enforce_gym_access
from core.utils import ensure_aware
from apps.students.models import Student
from .cycle import next_due_date
from .models import Payment

logger = logging.getLogger(__name__)


def _clean_amount(amount):
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({'amount': 'Amount must be a number.'})
    if not value.is_finite() or value <= 0:
        raise ValidationError({'amount': 'Amount must be greater than zero.'})
    return value


def latest_payment(student):
    """Most recent payment by payment date; ties go to the last one recorded"""
    return (
        Payment.objects
        .filter(student=student)
        .order_by('-payment_date', '-created_at', '-pk')
        .first()
    )


def sync_membership_cycle(student, *, activate=False):
    """
    Re-derive last/next payment dates from the student's payment history.
    Returns True when the student row changed.
    """
    latest = latest_payment(student)
    if latest is not None:
        last_date = latest.payment_date
        next_date = next_due_date(latest.payment_date, latest.payment_type)
    else:
        last_date = next_date = None

    update_fields = []
    if student.last_payment_date != last_date:
        student.last_payment_date = last_date
        update_fields.append('last_payment_date')
    if student.next_payment_date != next_date:
        student.next_payment_date = next_date
        update_fields.append('next_payment_date')
    if activate and student.status != StudentStatus.ACTIVE:
        student.status = StudentStatus.ACTIVE
        update_fields.append('status')

    if update_fields:
        student.save(update_fields=update_fields + ['updated_at'])
    return bool(update_fields)


def record_payment(*, user, student_id, amount, payment_type, payment_method,
                   payment_date=None, comments='', now=None):
    """
    Record a membership payment and roll the student's cycle forward.
    Raises NotFound for an unknown student and PermissionDenied when the
    student belongs to a gym outside the caller's scope.
    """
    amount = _clean_amount(amount)
    if payment_type not in MembershipType.values:
        raise ValidationError({'payment_type': f'Invalid payment type "{payment_type}".'})
    if payment_method not in PaymentModes.values:
        raise ValidationError({'payment_method': f'Invalid payment method "{payment_method}".'})

    try:
        student = Student.objects.get(pk=student_id)
    except (Student.DoesNotExist, ValueError, TypeError):
        raise NotFound('Student not found.')

    enforce_gym_access(user, student.gym, action='process payments for')

    payment_date = ensure_aware(payment_date) or now or timezone.now()

    with transaction.atomic():
        payment = Payment.objects.create(
            student=student,
            amount=amount,
            payment_type=payment_type,
            payment_method=payment_method,
            gym=student.gym,
            processed_by=user,
            payment_date=payment_date,
            comments=comments or '',
        )
        sync_membership_cycle(student, activate=True)

    logger.info(
        "Payment recorded: id=%s student=%s amount=%s type=%s gym=%s by user=%s",
        payment.pk, student.pk, amount, payment_type, student.gym, user.pk,
    )
    return payment


def delete_payment(*, user, payment_id):
    """
    Delete a payment and recompute the owning student's cycle from the
    remaining history. Out-of-order deletions are fine: the cycle is always
    re-derived, never rolled back.
    """
    try:
        payment = Payment.objects.select_related('student').get(pk=payment_id)
    except (Payment.DoesNotExist, ValueError, TypeError):
        raise NotFound('Payment not found.')

    enforce_gym_access(user, payment.gym, action='delete payments of')

    student = payment.student
    with transaction.atomic():
        payment.delete()
        sync_membership_cycle(student)

    logger.info(
        "Payment deleted: id=%s student=%s by user=%s; cycle now last=%s next=%s",
        payment_id, student.pk, user.pk, student.last_payment_date, student.next_payment_date,
    )
    return student
