# apps/payments/cycle.py
"""
Membership cycle arithmetic.

`next_due_date` is a pure function of the reference date and the membership
type. Monthly cycles keep the day of month and let it overflow into the
following month when the target month is shorter (Jan 31 -> Mar 2/3), the
same normalisation calendar libraries apply to an out-of-range day.

Aware datetimes are stepped on the wall clock of the current time zone, so
an evening payment keeps its local day and hour across month ends and DST
changes, whatever zone the value was loaded in.
"""
from datetime import datetime, timedelta

from django.utils import timezone

from core.constants import MembershipType


def add_calendar_month(value):
    """Advance a date/datetime by one calendar month, overflowing short months"""
    # value.month is 1-based, so it is already the zero-based index of next month
    year = value.year + value.month // 12
    month = value.month % 12 + 1
    first_of_month = value.replace(year=year, month=month, day=1)
    return first_of_month + timedelta(days=value.day - 1)


def next_due_date(reference_date, membership_type):
    """
    monthly -> one calendar month later
    weekly  -> seven days later
    class   -> the same date (single-session passes do not roll forward)
    other   -> None
    """
    if reference_date is None:
        return None

    aware = isinstance(reference_date, datetime) and timezone.is_aware(reference_date)
    local = timezone.make_naive(reference_date) if aware else reference_date

    if membership_type == MembershipType.MONTHLY:
        due = add_calendar_month(local)
    elif membership_type == MembershipType.WEEKLY:
        due = local + timedelta(days=7)
    elif membership_type == MembershipType.CLASS:
        due = local
    else:
        return None

    return timezone.make_aware(due) if aware else due
