"""
Recompute every student's membership cycle from the payment ledger.

Usage:
    python manage.py reconcile_memberships
    python manage.py reconcile_memberships --gym UAN --dry-run
"""

import logging

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from core.constants import GymLocation, StudentStatus
from apps.payments.services import sync_membership_cycle
from apps.students.models import Student

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    """Recovery path for payments whose student update never landed."""

    help = "Re-derive last/next payment dates from payments and refresh overdue status"

    def add_arguments(self, parser):
        parser.add_argument(
            "--gym",
            type=str,
            choices=GymLocation.values,
            help="Only reconcile students of this gym",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would change without saving",
        )

    def handle(self, *args, **options):
        gym = options.get("gym")
        dry_run = options["dry_run"]
        now = timezone.now()

        students = Student.objects.all().order_by("pk")
        if gym:
            students = students.filter(gym=gym)

        resynced = []
        overdue = []
        reactivated = []
        with transaction.atomic():
            for student in students.iterator():
                if sync_membership_cycle(student):
                    resynced.append(student)
                if student.status == StudentStatus.ACTIVE and student.is_overdue(now):
                    student.status = StudentStatus.OVERDUE
                    student.save(update_fields=["status", "updated_at"])
                    overdue.append(student)
                elif (student.status == StudentStatus.OVERDUE
                      and student.next_payment_date and not student.is_overdue(now)):
                    student.status = StudentStatus.ACTIVE
                    student.save(update_fields=["status", "updated_at"])
                    reactivated.append(student)
            if dry_run:
                transaction.set_rollback(True)

        prefix = "[dry run] " if dry_run else ""
        for student in resynced:
            self.stdout.write(
                f"{prefix}cycle fixed: #{student.pk} {student.name} "
                f"last={student.last_payment_date} next={student.next_payment_date}"
            )
        for student in overdue:
            self.stdout.write(f"{prefix}overdue: #{student.pk} {student.name} due {student.next_payment_date}")
        for student in reactivated:
            self.stdout.write(f"{prefix}reactivated: #{student.pk} {student.name} due {student.next_payment_date}")

        summary = (
            f"{prefix}{len(resynced)} cycles fixed, {len(overdue)} students flagged overdue, "
            f"{len(reactivated)} reactivated"
        )
        logger.info("Membership reconciliation: %s gym=%s", summary, gym or "all")
        self.stdout.write(self.style.SUCCESS(summary))
