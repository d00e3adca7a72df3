# apps/sales/services.py
import logging
from collections import OrderedDict
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from core.constants import SalePaymentModes
from core.exceptions import InsufficientStock, InstallmentMismatch
from core.mixins.gym_scope import validate_gym
from core.permissions import enforce_gym_access, is_admin
from core.utils import ensure_aware
from apps.inventory.models import Product
from apps.inventory.services import available_stock, try_decrement
from apps.students.models import Student
from .models import Sale, SaleItem, Installment

logger = logging.getLogger(__name__)


def _resolve_sale_gym(user, gym):
    if not gym:
        if is_admin(user):
            raise ValidationError({'gym': 'Administrators must choose the gym the sale belongs to.'})
        gym = user.assigned_gym
    validate_gym(gym)
    enforce_gym_access(user, gym, action='record sales for')
    return gym


def _resolve_lines(user, items, sale_gym):
    """
    Validate every line and resolve its product and stock location.
    Nothing is written here; a single bad line rejects the whole sale.
    """
    if not items:
        raise ValidationError({'items': 'A sale needs at least one item.'})

    products = {}
    lines = []
    for index, item in enumerate(items):
        product_id = item.get('product_id')
        if product_id not in products:
            try:
                products[product_id] = Product.objects.get(pk=product_id)
            except (Product.DoesNotExist, ValueError, TypeError):
                raise NotFound(f'Product {product_id} not found.')

        try:
            quantity = int(item.get('quantity'))
        except (TypeError, ValueError):
            raise ValidationError({'items': f'Line {index + 1}: quantity must be an integer.'})
        if quantity < 1:
            raise ValidationError({'items': f'Line {index + 1}: quantity must be at least 1.'})

        location = item.get('location') or sale_gym
        validate_gym(location)
        enforce_gym_access(user, location, action='sell stock of')

        lines.append((products[product_id], location, quantity))
    return lines


def _check_stock(lines):
    """Requested quantity per (product, location), checked against current stock"""
    requested = OrderedDict()
    for product, location, quantity in lines:
        key = (product, location)
        requested[key] = requested.get(key, 0) + quantity

    for (product, location), quantity in requested.items():
        current = available_stock(product, location)
        if current < quantity:
            logger.warning(
                "Sale rejected: product=%s location=%s requested=%s available=%s",
                product.pk, location, quantity, current,
            )
            raise InsufficientStock(
                f'Only {current} units of "{product.name}" left at {location}; {quantity} requested.'
            )
    return requested


def _clean_installments(installments, payment_method, lines, total):
    if payment_method != SalePaymentModes.INSTALLMENTS:
        if installments:
            raise ValidationError({
                'installments': 'Installments are only accepted when the payment method is "installments".'
            })
        return []

    blocked = sorted({product.name for product, _, _ in lines if not product.allow_installments})
    if blocked:
        raise ValidationError({
            'installments': f'These products cannot be sold in installments: {", ".join(blocked)}.'
        })
    if not installments:
        raise ValidationError({'installments': 'At least one installment is required.'})

    cleaned = []
    for index, inst in enumerate(installments):
        try:
            amount = Decimal(str(inst.get('amount')))
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError({'installments': f'Installment {index + 1}: amount must be a number.'})
        if not amount.is_finite() or amount <= 0:
            raise ValidationError({'installments': f'Installment {index + 1}: amount must be greater than zero.'})
        due_date = inst.get('due_date')
        if not due_date:
            raise ValidationError({'installments': f'Installment {index + 1}: due_date is required.'})
        cleaned.append((amount, due_date))

    scheduled = sum((amount for amount, _ in cleaned), Decimal('0'))
    if scheduled != total:
        raise InstallmentMismatch(
            f'Installments add up to {scheduled} but the sale total is {total}.'
        )
    return cleaned


def _resolve_customer(customer_id, gym):
    if customer_id in (None, ''):
        return None
    try:
        customer = Student.objects.get(pk=customer_id)
    except (Student.DoesNotExist, ValueError, TypeError):
        raise NotFound('Customer not found.')
    if customer.gym != gym:
        raise ValidationError({'customer_id': f'Customer is not a student of {gym}.'})
    return customer


def record_sale(*, user, items, payment_method, gym=None, customer_id=None,
                installments=None, now=None):
    """
    Record a point-of-sale transaction.

    Every line is validated and every (product, location) pair checked for
    stock before anything is written. Prices come from the catalog. Stock is
    then taken with conditional decrements inside one transaction, so a
    concurrent sale that drained a counter first makes this one fail with
    InsufficientStock and leaves no trace.
    """
    if payment_method not in SalePaymentModes.values:
        raise ValidationError({'payment_method': f'Invalid payment method "{payment_method}".'})

    gym = _resolve_sale_gym(user, gym)
    lines = _resolve_lines(user, items, gym)
    requested = _check_stock(lines)

    total = sum((product.price * quantity for product, _, quantity in lines), Decimal('0.00'))
    schedule = _clean_installments(installments, payment_method, lines, total)
    customer = _resolve_customer(customer_id, gym)

    with transaction.atomic():
        sale = Sale.objects.create(
            gym=gym,
            payment_method=payment_method,
            customer=customer,
            processed_by=user,
            total=total,
            sale_date=now or timezone.now(),
        )
        SaleItem.objects.bulk_create([
            SaleItem(sale=sale, product=product, location=location,
                     quantity=quantity, unit_price=product.price)
            for product, location, quantity in lines
        ])
        Installment.objects.bulk_create([
            Installment(sale=sale, sequence=seq, amount=amount, due_date=due_date)
            for seq, (amount, due_date) in enumerate(schedule, start=1)
        ])

        for (product, location), quantity in requested.items():
            if not try_decrement(product, location, quantity):
                logger.warning(
                    "Sale rolled back, stock taken concurrently: product=%s location=%s requested=%s",
                    product.pk, location, quantity,
                )
                raise InsufficientStock(
                    f'Stock of "{product.name}" at {location} changed while the sale was processed.'
                )

    logger.info(
        "Sale recorded: id=%s gym=%s total=%s method=%s lines=%s by user=%s",
        sale.pk, gym, total, payment_method, len(lines), user.pk,
    )
    return get_sale(user=user, sale_id=sale.pk)


def get_sale(*, user, sale_id):
    try:
        sale = (
            Sale.objects
            .select_related('customer', 'processed_by')
            .prefetch_related('items__product', 'installments')
            .get(pk=sale_id)
        )
    except (Sale.DoesNotExist, ValueError, TypeError):
        raise NotFound('Sale not found.')
    enforce_gym_access(user, sale.gym, action='view sales of')
    return sale


def update_installment(*, user, sale_id, installment_id, paid, paid_date=None, now=None):
    """Mark one installment paid (stamping paid_date) or unpaid (clearing it)"""
    sale = get_sale(user=user, sale_id=sale_id)
    try:
        installment = sale.installments.get(pk=installment_id)
    except (Installment.DoesNotExist, ValueError, TypeError):
        raise NotFound('Installment not found.')

    if paid:
        installment.paid = True
        installment.paid_date = ensure_aware(paid_date) or now or timezone.now()
    else:
        installment.paid = False
        installment.paid_date = None
    installment.save(update_fields=['paid', 'paid_date'])

    logger.info(
        "Installment updated: sale=%s installment=%s paid=%s by user=%s",
        sale.pk, installment.pk, installment.paid, user.pk,
    )
    return installment
