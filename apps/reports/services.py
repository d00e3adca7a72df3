# apps/reports/services.py
from decimal import Decimal

from django.db.models import Sum, Count
from rest_framework.exceptions import ValidationError

from core.mixins.gym_scope import scope_queryset
from core.utils import filter_date_window
from apps.payments.models import Payment
from apps.sales.models import Sale


class ReportService:
    """
    Read-side aggregation over the payment and sale ledgers.
    Every summary is scoped to the caller's gyms first, then bounded by the
    optional date window, then bucketed by one categorical field.
    """

    PAYMENT_GROUP_FIELDS = ('payment_type', 'payment_method')
    SALE_GROUP_FIELDS = ('payment_method',)

    @staticmethod
    def summarize(queryset, group_field, amount_field):
        """Group rows by `group_field` into [{category, total, count}] ordered by category"""
        rows = (
            queryset
            .order_by()
            .values(group_field)
            .annotate(total=Sum(amount_field), count=Count('id'))
            .order_by(group_field)
        )
        return [
            {
                'category': row[group_field],
                'total': row['total'] or Decimal('0'),
                'count': row['count'],
            }
            for row in rows
        ]

    @staticmethod
    def _check_group_field(group_by, allowed):
        if group_by not in allowed:
            raise ValidationError({
                'group_by': f'Cannot group by "{group_by}". Choose one of: {", ".join(allowed)}.'
            })
        return group_by

    @staticmethod
    def payment_summary(user, gym=None, start_date=None, end_date=None, group_by='payment_type'):
        """Totals of membership payments by payment type or payment method"""
        group_by = ReportService._check_group_field(group_by, ReportService.PAYMENT_GROUP_FIELDS)
        queryset = scope_queryset(Payment.objects.all(), user, gym)
        queryset = filter_date_window(queryset, 'payment_date', start_date, end_date)
        return ReportService.summarize(queryset, group_by, 'amount')

    @staticmethod
    def sale_summary(user, gym=None, start_date=None, end_date=None, group_by='payment_method'):
        """Totals of point-of-sale transactions by payment method"""
        group_by = ReportService._check_group_field(group_by, ReportService.SALE_GROUP_FIELDS)
        queryset = scope_queryset(Sale.objects.all(), user, gym)
        queryset = filter_date_window(queryset, 'sale_date', start_date, end_date)
        return ReportService.summarize(queryset, group_by, 'total')
