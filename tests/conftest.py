"""
Pytest configuration and fixtures for the gym backend.
"""

from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from core.constants import GymLocation, MembershipType, ProductType, UserRoles

VILLAS = GymLocation.VILLAS_DEL_PARQUE
UAN = GymLocation.UAN
PLATINUM = GymLocation.PLATINUM


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    return APIClient()


@pytest.fixture
def make_user(django_user_model):
    def _make_user(email, role=UserRoles.STAFF, gym=VILLAS, **extra):
        return django_user_model.objects.create_user(
            email=email,
            password="testpass123",
            full_name=email.split("@")[0].title(),
            role=role,
            assigned_gym=gym,
            **extra,
        )

    return _make_user


@pytest.fixture
def admin_user(make_user):
    return make_user("admin@gym.test", role=UserRoles.ADMIN, gym=VILLAS)


@pytest.fixture
def staff_user(make_user):
    """Staff member of Villas del Parque"""
    return make_user("staff@gym.test", role=UserRoles.STAFF, gym=VILLAS)


@pytest.fixture
def uan_staff(make_user):
    return make_user("uan@gym.test", role=UserRoles.STAFF, gym=UAN)


@pytest.fixture
def instructor(make_user):
    return make_user("coach@gym.test", role=UserRoles.INSTRUCTOR, gym=UAN)


@pytest.fixture
def client_for():
    """APIClient authenticated as the given user"""

    def _client_for(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client_for


@pytest.fixture
def admin_client(client_for, admin_user):
    return client_for(admin_user)


@pytest.fixture
def staff_client(client_for, staff_user):
    return client_for(staff_user)


@pytest.fixture
def make_student(db):
    from apps.students.models import Student

    counter = {"n": 0}

    def _make_student(name="Ana", gym=VILLAS, membership_type=MembershipType.MONTHLY, **extra):
        counter["n"] += 1
        extra.setdefault("phone", f"555-000{counter['n']}")
        return Student.objects.create(
            name=name,
            gym=gym,
            membership_type=membership_type,
            **extra,
        )

    return _make_student


@pytest.fixture
def villas_student(make_student):
    return make_student(name="Ana Villas", gym=VILLAS)


@pytest.fixture
def uan_student(make_student):
    return make_student(name="Bruno Uan", gym=UAN)


@pytest.fixture
def make_product(db):
    from apps.inventory.models import Product, ProductStock

    def _make_product(name="Gloves", price="250.00", stock=None,
                      type=ProductType.EQUIPMENT, allow_installments=False):
        product = Product.objects.create(
            name=name,
            type=type,
            price=Decimal(price),
            allow_installments=allow_installments,
        )
        for gym, quantity in (stock or {}).items():
            ProductStock.objects.filter(product=product, gym=gym).update(quantity=quantity)
        return product

    return _make_product


@pytest.fixture
def gloves(make_product):
    """Gloves with stock {Villas: 2, UAN: 0, Platinum: 0}"""
    return make_product(name="Gloves", price="250.00", stock={VILLAS: 2})
