"""
Tests for the student registry.
"""

from datetime import datetime, timezone as dt_timezone

import pytest
from rest_framework import status

from apps.payments import services as payment_services
from apps.payments.models import Payment
from apps.sales import services as sale_services
from apps.sales.models import Sale
from apps.students.models import Student
from core.constants import GymLocation, MembershipType, PaymentModes, StudentStatus

VILLAS = GymLocation.VILLAS_DEL_PARQUE
UAN = GymLocation.UAN


@pytest.mark.django_db
class TestStudentCRUD:
    def test_create_student(self, staff_client):
        response = staff_client.post("/api/students/", {
            "name": "Carla",
            "phone": "555-1234",
            "gym": VILLAS,
            "membership_type": "weekly",
        }, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["status"] == StudentStatus.ACTIVE
        assert response.data["next_payment_date"] is None
        assert response.data["enrollment_date"] is not None

    def test_duplicate_phone(self, staff_client, villas_student):
        response = staff_client.post("/api/students/", {
            "name": "Copy",
            "phone": villas_student.phone,
            "gym": VILLAS,
            "membership_type": "monthly",
        }, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "phone" in response.data

    def test_missing_required_fields(self, staff_client):
        response = staff_client.post("/api/students/", {"name": "Nobody"}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert {"phone", "gym", "membership_type"} <= set(response.data)

    def test_staff_cannot_enroll_in_other_gym(self, staff_client):
        response = staff_client.post("/api/students/", {
            "name": "Diego",
            "phone": "555-9876",
            "gym": UAN,
            "membership_type": "monthly",
        }, format="json")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Student.objects.filter(phone="555-9876").exists()

    def test_staff_cannot_move_student_to_other_gym(self, staff_client, villas_student):
        response = staff_client.patch(
            f"/api/students/{villas_student.pk}/", {"gym": UAN}, format="json"
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        villas_student.refresh_from_db()
        assert villas_student.gym == VILLAS

    def test_cycle_dates_are_read_only(self, staff_client, villas_student):
        response = staff_client.patch(
            f"/api/students/{villas_student.pk}/",
            {"next_payment_date": "2030-01-01T00:00:00Z", "status": "inactive"},
            format="json",
        )

        assert response.status_code == status.HTTP_200_OK
        villas_student.refresh_from_db()
        assert villas_student.next_payment_date is None
        assert villas_student.status == StudentStatus.INACTIVE

    def test_search_and_status_filters(self, staff_client, make_student):
        make_student(name="Laura Gómez")
        make_student(name="Luis Pérez", status=StudentStatus.OVERDUE)
        make_student(name="Marta Ruiz")

        response = staff_client.get("/api/students/", {"search": "lu"})
        assert [row["name"] for row in response.data["results"]] == ["Luis Pérez"]

        response = staff_client.get("/api/students/", {"status": "overdue"})
        assert [row["name"] for row in response.data["results"]] == ["Luis Pérez"]

    def test_list_ordered_by_name(self, staff_client, make_student):
        for name in ("Zoe", "Ana", "Marco"):
            make_student(name=name)

        response = staff_client.get("/api/students/")

        assert [row["name"] for row in response.data["results"]] == ["Ana", "Marco", "Zoe"]

    def test_delete_cascades_payments_and_keeps_sales(self, staff_client, staff_user, villas_student, gloves):
        payment_services.record_payment(
            user=staff_user, student_id=villas_student.pk, amount="500",
            payment_type=MembershipType.MONTHLY, payment_method=PaymentModes.CASH,
        )
        sale = sale_services.record_sale(
            user=staff_user,
            items=[{"product_id": gloves.pk, "quantity": 1}],
            payment_method="cash",
            customer_id=villas_student.pk,
        )

        response = staff_client.delete(f"/api/students/{villas_student.pk}/")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Payment.objects.exists()
        assert Sale.objects.get(pk=sale.pk).customer is None


class TestIsOverdue:
    def test_overdue_when_due_date_passed(self):
        now = datetime(2024, 5, 1, tzinfo=dt_timezone.utc)
        student = Student(next_payment_date=datetime(2024, 4, 30, tzinfo=dt_timezone.utc))

        assert student.is_overdue(now) is True

    def test_not_overdue_without_due_date(self):
        assert Student().is_overdue() is False
