"""
Tests for the membership payment ledger.
"""

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from django.test import override_settings
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from apps.payments import services
from apps.payments.models import Payment
from core.constants import GymLocation, MembershipType, PaymentModes, StudentStatus


def at(year, month, day):
    return datetime(year, month, day, 10, 0, tzinfo=dt_timezone.utc)


@pytest.mark.django_db
class TestRecordPayment:
    def test_rolls_cycle_forward(self, staff_user, villas_student):
        payment = services.record_payment(
            user=staff_user,
            student_id=villas_student.pk,
            amount="500",
            payment_type=MembershipType.MONTHLY,
            payment_method=PaymentModes.CASH,
            payment_date=at(2024, 1, 31),
        )

        villas_student.refresh_from_db()
        assert payment.amount == Decimal("500")
        assert payment.gym == GymLocation.VILLAS_DEL_PARQUE
        assert payment.processed_by == staff_user
        assert villas_student.last_payment_date == at(2024, 1, 31)
        assert villas_student.next_payment_date == at(2024, 3, 2)

    def test_second_payment_on_due_date_moves_cycle_again(self, staff_user, villas_student):
        for paid_on in (at(2024, 1, 31), at(2024, 3, 2)):
            services.record_payment(
                user=staff_user,
                student_id=villas_student.pk,
                amount="500",
                payment_type=MembershipType.MONTHLY,
                payment_method=PaymentModes.CARD,
                payment_date=paid_on,
            )

        villas_student.refresh_from_db()
        assert villas_student.last_payment_date == at(2024, 3, 2)
        assert villas_student.next_payment_date == at(2024, 4, 2)
        assert villas_student.payments.count() == 2

    def test_defaults_payment_date_to_now(self, staff_user, villas_student):
        now = at(2024, 6, 1)
        payment = services.record_payment(
            user=staff_user,
            student_id=villas_student.pk,
            amount="120",
            payment_type=MembershipType.WEEKLY,
            payment_method=PaymentModes.TRANSFER,
            now=now,
        )

        villas_student.refresh_from_db()
        assert payment.payment_date == now
        assert villas_student.next_payment_date == at(2024, 6, 8)

    def test_reactivates_overdue_student(self, staff_user, make_student):
        student = make_student(status=StudentStatus.OVERDUE)
        services.record_payment(
            user=staff_user,
            student_id=student.pk,
            amount="500",
            payment_type=MembershipType.MONTHLY,
            payment_method=PaymentModes.CASH,
        )

        student.refresh_from_db()
        assert student.status == StudentStatus.ACTIVE

    def test_backdated_payment_does_not_rewind_cycle(self, staff_user, villas_student):
        services.record_payment(
            user=staff_user, student_id=villas_student.pk, amount="500",
            payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
            payment_date=at(2024, 5, 10),
        )
        services.record_payment(
            user=staff_user, student_id=villas_student.pk, amount="500",
            payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
            payment_date=at(2024, 4, 10),
        )

        villas_student.refresh_from_db()
        assert villas_student.last_payment_date == at(2024, 5, 10)
        assert villas_student.next_payment_date == at(2024, 6, 10)

    def test_unknown_student(self, staff_user):
        with pytest.raises(NotFound):
            services.record_payment(
                user=staff_user, student_id=9999, amount="10",
                payment_type=MembershipType.CLASS, payment_method=PaymentModes.CASH,
            )

    def test_foreign_gym_student_is_forbidden(self, staff_user, uan_student):
        with pytest.raises(PermissionDenied):
            services.record_payment(
                user=staff_user, student_id=uan_student.pk, amount="10",
                payment_type=MembershipType.CLASS, payment_method=PaymentModes.CASH,
            )
        assert not Payment.objects.exists()

    def test_admin_can_pay_for_any_gym(self, admin_user, uan_student):
        payment = services.record_payment(
            user=admin_user, student_id=uan_student.pk, amount="10",
            payment_type=MembershipType.CLASS, payment_method=PaymentModes.CASH,
        )
        assert payment.gym == GymLocation.UAN

    @pytest.mark.parametrize("amount", ["0", "-5", "abc"])
    def test_rejects_non_positive_amount(self, staff_user, villas_student, amount):
        with pytest.raises(ValidationError):
            services.record_payment(
                user=staff_user, student_id=villas_student.pk, amount=amount,
                payment_type=MembershipType.CLASS, payment_method=PaymentModes.CASH,
            )


@pytest.mark.django_db
class TestDeletePayment:
    def _pay(self, user, student, when):
        return services.record_payment(
            user=user, student_id=student.pk, amount="500",
            payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
            payment_date=when,
        )

    def test_deleting_only_payment_resets_cycle(self, staff_user, villas_student):
        payment = self._pay(staff_user, villas_student, at(2024, 1, 15))

        student = services.delete_payment(user=staff_user, payment_id=payment.pk)

        student.refresh_from_db()
        assert student.last_payment_date is None
        assert student.next_payment_date is None

    def test_deleting_latest_falls_back_to_previous(self, staff_user, villas_student):
        self._pay(staff_user, villas_student, at(2024, 1, 15))
        self._pay(staff_user, villas_student, at(2024, 2, 15))
        latest = self._pay(staff_user, villas_student, at(2024, 3, 15))

        services.delete_payment(user=staff_user, payment_id=latest.pk)

        villas_student.refresh_from_db()
        assert villas_student.last_payment_date == at(2024, 2, 15)
        assert villas_student.next_payment_date == at(2024, 3, 15)

    def test_deleting_older_payment_keeps_latest(self, staff_user, villas_student):
        oldest = self._pay(staff_user, villas_student, at(2024, 1, 15))
        self._pay(staff_user, villas_student, at(2024, 3, 15))
        self._pay(staff_user, villas_student, at(2024, 2, 15))

        services.delete_payment(user=staff_user, payment_id=oldest.pk)

        villas_student.refresh_from_db()
        assert villas_student.last_payment_date == at(2024, 3, 15)
        assert villas_student.next_payment_date == at(2024, 4, 15)

    def test_foreign_gym_payment_is_forbidden(self, admin_user, uan_staff, villas_student):
        payment = self._pay(admin_user, villas_student, at(2024, 1, 15))

        with pytest.raises(PermissionDenied):
            services.delete_payment(user=uan_staff, payment_id=payment.pk)
        assert Payment.objects.filter(pk=payment.pk).exists()

    def test_unknown_payment(self, staff_user):
        with pytest.raises(NotFound):
            services.delete_payment(user=staff_user, payment_id=12345)


@pytest.mark.django_db
class TestPaymentEndpoints:
    def test_create_payment(self, staff_client, villas_student):
        response = staff_client.post("/api/payments/", {
            "student_id": villas_student.pk,
            "amount": "500.00",
            "payment_type": "monthly",
            "payment_method": "cash",
            "payment_date": "2024-01-31T10:00:00Z",
        }, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["student"]["name"] == "Ana Villas"
        assert response.data["gym"] == GymLocation.VILLAS_DEL_PARQUE

        villas_student.refresh_from_db()
        assert villas_student.next_payment_date == at(2024, 3, 2)

    def test_create_payment_missing_fields(self, staff_client, villas_student):
        response = staff_client.post("/api/payments/", {"student_id": villas_student.pk}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "amount" in response.data
        assert "payment_type" in response.data

    def test_create_payment_for_foreign_student(self, staff_client, uan_student):
        response = staff_client.post("/api/payments/", {
            "student_id": uan_student.pk,
            "amount": "100",
            "payment_type": "class",
            "payment_method": "cash",
        }, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_is_newest_first(self, staff_client, staff_user, villas_student):
        for when in (at(2024, 1, 1), at(2024, 3, 1), at(2024, 2, 1)):
            services.record_payment(
                user=staff_user, student_id=villas_student.pk, amount="100",
                payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
                payment_date=when,
            )

        response = staff_client.get("/api/payments/")

        assert response.status_code == status.HTTP_200_OK
        dates = [row["payment_date"][:10] for row in response.data["results"]]
        assert dates == ["2024-03-01", "2024-02-01", "2024-01-01"]

    def test_list_filters_by_date_window_and_type(self, staff_client, staff_user, villas_student):
        services.record_payment(
            user=staff_user, student_id=villas_student.pk, amount="100",
            payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
            payment_date=at(2024, 1, 10),
        )
        services.record_payment(
            user=staff_user, student_id=villas_student.pk, amount="20",
            payment_type=MembershipType.CLASS, payment_method=PaymentModes.CASH,
            payment_date=at(2024, 2, 10),
        )

        response = staff_client.get(
            "/api/payments/", {"start_date": "2024-02-01", "end_date": "2024-02-29", "payment_type": "class"}
        )

        assert response.data["count"] == 1
        assert response.data["results"][0]["amount"] == "20.00"

    def test_delete_returns_recomputed_cycle(self, staff_client, staff_user, villas_student):
        payment = services.record_payment(
            user=staff_user, student_id=villas_student.pk, amount="100",
            payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
        )

        response = staff_client.delete(f"/api/payments/{payment.pk}/")

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == payment.pk
        assert response.data["student"]["next_payment_date"] is None

    def test_payments_cannot_be_edited(self, staff_client, staff_user, villas_student):
        payment = services.record_payment(
            user=staff_user, student_id=villas_student.pk, amount="100",
            payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
        )

        response = staff_client.patch(f"/api/payments/{payment.pk}/", {"amount": "1"}, format="json")

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED


@pytest.mark.django_db
class TestLocalTimeZoneCycle:
    """Due dates follow the gym's local calendar, not the UTC one"""

    def test_evening_payment_keeps_local_day(self, staff_user, villas_student):
        mexico = ZoneInfo("America/Mexico_City")

        with override_settings(TIME_ZONE="America/Mexico_City"):
            services.record_payment(
                user=staff_user, student_id=villas_student.pk, amount="500",
                payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
                payment_date=datetime(2024, 4, 30, 20, 0, tzinfo=mexico),
            )

        villas_student.refresh_from_db()
        assert villas_student.next_payment_date == datetime(2024, 5, 30, 20, 0, tzinfo=mexico)

    def test_naive_api_date_is_local_and_overflows(self, staff_client, villas_student):
        mexico = ZoneInfo("America/Mexico_City")

        with override_settings(TIME_ZONE="America/Mexico_City"):
            response = staff_client.post("/api/payments/", {
                "student_id": villas_student.pk,
                "amount": "500.00",
                "payment_type": "monthly",
                "payment_method": "cash",
                "payment_date": "2024-01-31T20:00:00",
            }, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        villas_student.refresh_from_db()
        assert villas_student.last_payment_date == datetime(2024, 1, 31, 20, 0, tzinfo=mexico)
        assert villas_student.next_payment_date == datetime(2024, 3, 2, 20, 0, tzinfo=mexico)

    def test_delete_recomputes_on_local_calendar(self, staff_user, villas_student):
        mexico = ZoneInfo("America/Mexico_City")

        with override_settings(TIME_ZONE="America/Mexico_City"):
            services.record_payment(
                user=staff_user, student_id=villas_student.pk, amount="500",
                payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
                payment_date=datetime(2024, 1, 31, 21, 30, tzinfo=mexico),
            )
            latest = services.record_payment(
                user=staff_user, student_id=villas_student.pk, amount="500",
                payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
                payment_date=datetime(2024, 3, 2, 21, 30, tzinfo=mexico),
            )
            services.delete_payment(user=staff_user, payment_id=latest.pk)

        villas_student.refresh_from_db()
        assert villas_student.next_payment_date == datetime(2024, 3, 2, 21, 30, tzinfo=mexico)
