from datetime import datetime, date

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework.exceptions import ValidationError


def parse_date_param(value, name):
    """Parse a YYYY-MM-DD (or full ISO datetime) query parameter into a date"""
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(value)
    if parsed is None:
        dt = parse_datetime(value)
        if dt is None:
            raise ValidationError({name: f'Invalid date "{value}". Use YYYY-MM-DD.'})
        parsed = dt.date()
    return parsed


def filter_date_window(queryset, field, start=None, end=None):
    """Inclusive [start, end] window on the calendar date of a datetime field"""
    start_date = parse_date_param(start, 'start_date')
    end_date = parse_date_param(end, 'end_date')
    if start_date and end_date and start_date > end_date:
        raise ValidationError({'end_date': 'end_date must not be before start_date.'})
    if start_date:
        queryset = queryset.filter(**{f'{field}__date__gte': start_date})
    if end_date:
        queryset = queryset.filter(**{f'{field}__date__lte': end_date})
    return queryset


def ensure_aware(value):
    """Naive datetimes from clients are interpreted in the project time zone"""
    if value is not None and timezone.is_naive(value):
        return timezone.make_aware(value)
    return value
