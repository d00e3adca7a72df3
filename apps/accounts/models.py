# apps/accounts/models.py

from django.db import models
from django.contrib.auth.models import (
    AbstractBaseUser,
    PermissionsMixin,
    BaseUserManager
)
from core.constants import UserRoles, GymLocation
from core.mixins.audit_fields import AuditFieldsMixin


class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        if not extra_fields.get("assigned_gym"):
            raise ValueError("Assigned gym is required")

        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", UserRoles.ADMIN)
        extra_fields.setdefault("assigned_gym", GymLocation.VILLAS_DEL_PARQUE)

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin, AuditFieldsMixin):
    """
    Gym staff account. `role` and `assigned_gym` form the tenant context
    every ledger operation is evaluated against.
    """
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=150)

    role = models.CharField(max_length=20, choices=UserRoles.choices, default=UserRoles.STAFF)
    assigned_gym = models.CharField(max_length=50, choices=GymLocation.choices)

    # Status
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["full_name"]

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["email"]),
            models.Index(fields=["role", "assigned_gym"]),
        ]

    def __str__(self):
        return self.email

    @property
    def is_admin(self):
        return self.role == UserRoles.ADMIN or self.is_superuser
