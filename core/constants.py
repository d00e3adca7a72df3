# core/constants.py

from django.db import models


class UserRoles(models.TextChoices):
    """User role constants for RBAC"""
    ADMIN = 'admin', 'Administrator'
    INSTRUCTOR = 'instructor', 'Instructor'
    STAFF = 'staff', 'Staff'


class GymLocation(models.TextChoices):
    """
    Fixed set of physical gym locations.
    Every stock counter, student, payment and sale belongs to exactly one.
    Iteration order is the declaration order below.
    """
    VILLAS_DEL_PARQUE = 'Villas del Parque', 'Villas del Parque'
    UAN = 'UAN', 'UAN'
    PLATINUM = 'Platinum', 'Platinum'


class MembershipType(models.TextChoices):
    CLASS = 'class', 'Single Class'
    WEEKLY = 'weekly', 'Weekly'
    MONTHLY = 'monthly', 'Monthly'


class StudentStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'
    OVERDUE = 'overdue', 'Overdue'


class PaymentModes(models.TextChoices):
    """Membership payment methods"""
    CASH = 'cash', 'Cash'
    CARD = 'card', 'Card'
    TRANSFER = 'transfer', 'Bank Transfer'


class SalePaymentModes(models.TextChoices):
    """Point-of-sale payment methods"""
    CASH = 'cash', 'Cash'
    CARD = 'card', 'Card'
    INSTALLMENTS = 'installments', 'Installments'


class ProductType(models.TextChoices):
    CONSUMABLE = 'consumable', 'Consumable'
    EQUIPMENT = 'equipment', 'Equipment'
    CLOTHING = 'clothing', 'Clothing'
